from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class ConfigError(Exception):
    """Raised when configuration cannot be loaded or validated."""


class PairlistConfig(BaseModel):
    """Filter chain definition consumed by ``PairListManager.load_from_config``."""

    model_config = ConfigDict(extra="ignore")

    # Entries stay raw so one bad filter entry does not reject the whole chain.
    pairlist_filters: list[Any] = Field(default_factory=list)
    refresh_period: int | None = Field(default=None, gt=0)


class ObsConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    log_jsonl: bool = Field(default=True)
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized = value.upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {value}")
        return normalized


class ProducerConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    base_url: str
    path: str = Field(default="/api/v1/pairlist")
    timeout_s: float = Field(default=10, gt=0)
    max_retries: int = Field(default=3, ge=0)
    backoff_base_s: float = Field(default=0.5, ge=0)
    backoff_max_s: float = Field(default=8, ge=0)
    max_rps: float = Field(default=2.0, gt=0)


class AppConfig(PairlistConfig):
    model_config = ConfigDict(extra="forbid")

    obs: ObsConfig = Field(default_factory=ObsConfig)
    producer: ProducerConfig | None = Field(default=None)


@dataclass(frozen=True)
class LoadedConfig:
    config: AppConfig
    raw: dict[str, Any]


def load_config(path: Path) -> LoadedConfig:
    if not path.exists():
        raise ConfigError(f"Config not found: {path}")

    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML: {exc}") from exc

    if not isinstance(payload, dict):
        raise ConfigError("Config root must be a mapping")

    try:
        config = AppConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc

    return LoadedConfig(config=config, raw=payload)
