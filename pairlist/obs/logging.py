"""
Structured JSON Lines logging for pairlist refreshes.

Every component logs through ``log_event`` so that records carry a
machine-readable event name next to the human message. With the
``JsonLineFormatter`` attached each record becomes one JSON object:

    {"ts": "2024-01-15T10:30:00Z", "level": "INFO", "run_id": "abc123",
     "event": "filter_applied", "module": "volume", "msg": "VolumePairList applied",
     "extra": {"pairs_in": 150, "pairs_out": 20}}
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class LogSettings:
    """
    Configuration for logger initialization.

    Attributes:
        level: Log level string (DEBUG, INFO, WARNING, ERROR).
        run_id: Identifier attached to every record for correlation.
        log_file: Optional path to log file (None for console only).
        jsonl: If True, use JSON Lines format; otherwise plain text.
    """
    level: str
    run_id: str
    log_file: Path | None
    jsonl: bool


class JsonLineFormatter(logging.Formatter):
    """Format each record as a single JSON object per line."""

    def __init__(self, run_id: str):
        super().__init__()
        self._run_id = run_id

    def format(self, record: logging.LogRecord) -> str:
        event = getattr(record, "event", "log")
        extra = getattr(record, "extra", {})
        if not isinstance(extra, dict):
            extra = {"value": extra}

        payload = {
            "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "run_id": self._run_id,
            "event": event,
            "module": record.module,
            "msg": record.getMessage(),
            "extra": extra,
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def build_logger(settings: LogSettings) -> logging.Logger:
    """
    Create an isolated (non-propagating) logger for a pairlist process.

    Records go to stderr and, when ``settings.log_file`` is set, to that
    file as well. JSON Lines formatting is used when ``settings.jsonl``.
    """
    logger = logging.getLogger(f"pairlist.{settings.run_id}")
    logger.setLevel(settings.level)
    logger.handlers.clear()
    logger.propagate = False

    formatter = JsonLineFormatter(settings.run_id) if settings.jsonl else None

    stream_handler = logging.StreamHandler()
    if formatter:
        stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if settings.log_file:
        file_handler = logging.FileHandler(settings.log_file, encoding="utf-8")
        if formatter:
            file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    message: str,
    *,
    exc_info: logging._ExcInfoType | None = None,
    **extra: Any,
) -> None:
    """
    Log a structured event with typed metadata.

    Args:
        logger: Logger instance to use.
        level: Log level (logging.DEBUG, INFO, WARNING, ERROR).
        event: Event type identifier (e.g., "filter_applied").
        message: Human-readable log message.
        exc_info: Optional exception info for error logging.
        **extra: Additional key-value pairs to include in log entry.

    Example:
        >>> log_event(logger, logging.INFO, "pairlist_refreshed",
        ...           "Pair list refreshed", pair_count=20, duration_ms=12.5)
    """
    logger.log(level, message, extra={"event": event, "extra": extra}, exc_info=exc_info)
