"""
Common contract for pair list filters.

A filter consumes the current candidate list plus the ticker snapshot and
returns a new candidate list. Filters are chained by ``PairListManager``;
each filter's output becomes the next filter's input.

Options are declared per filter as a pydantic model. ``configure`` only
applies keys that are present, so calling it repeatedly with partial
option sets is safe and unknown keys (including ``method``) are ignored.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, ValidationError

from pairlist.models import MarketInfo, TickerInfo
from pairlist.obs.logging import log_event

MarketProvider = Callable[[], Sequence[MarketInfo]]
TickerProvider = Callable[[], Mapping[str, TickerInfo]]
PerformanceProvider = Callable[[], Mapping[str, float]]
RemotePairProvider = Callable[[], Sequence[str]]


class FilterConfigError(ValueError):
    """Raised when filter options fail validation."""


@dataclass(frozen=True)
class FilterProviders:
    """
    Collaborators that some filters call during ``filter``.

    Attributes:
        market_provider: Instrument metadata source (age and market-cap filters).
        performance_provider: Realized performance by symbol (performance filter).
        remote_provider: Pair list published by a producer instance.
    """
    market_provider: MarketProvider | None = None
    performance_provider: PerformanceProvider | None = None
    remote_provider: RemotePairProvider | None = None

    def merged(self, fallback: "FilterProviders") -> "FilterProviders":
        """Fill providers missing here from ``fallback``."""
        return FilterProviders(
            market_provider=self.market_provider or fallback.market_provider,
            performance_provider=self.performance_provider or fallback.performance_provider,
            remote_provider=self.remote_provider or fallback.remote_provider,
        )


class FilterOptions(BaseModel):
    model_config = ConfigDict(extra="ignore")


class PairFilter(ABC):
    method: ClassVar[str]
    options_model: ClassVar[type[FilterOptions]] = FilterOptions

    def __init__(
        self,
        *,
        providers: FilterProviders | None = None,
        logger: logging.Logger | None = None,
        **options: Any,
    ) -> None:
        self._logger = logger or logging.getLogger(type(self).__module__)
        self._own_providers = providers or FilterProviders()
        self._bound_providers = FilterProviders()
        self.options = self.options_model()
        if options:
            self.configure(options)

    def name(self) -> str:
        return self.method

    def configure(self, options: Mapping[str, Any]) -> None:
        try:
            parsed = self.options_model.model_validate(dict(options))
        except ValidationError as exc:
            raise FilterConfigError(f"{self.name()}: {exc}") from exc
        update = {field: getattr(parsed, field) for field in parsed.model_fields_set}
        if update:
            self.options = self.options.model_copy(update=update)

    def bind_providers(self, providers: FilterProviders) -> None:
        """Attach fallback collaborators; providers passed to the constructor win."""
        self._bound_providers = providers

    @property
    def providers(self) -> FilterProviders:
        return self._own_providers.merged(self._bound_providers)

    @abstractmethod
    def filter(self, pairs: Sequence[str], tickers: Mapping[str, TickerInfo]) -> list[str]:
        raise NotImplementedError

    def _log_applied(self, pairs_in: int, pairs_out: int, **extra: Any) -> None:
        log_event(
            self._logger,
            logging.INFO,
            "filter_applied",
            f"{self.name()} applied",
            filter=self.name(),
            pairs_in=pairs_in,
            pairs_out=pairs_out,
            **extra,
        )

    def _log_removed(self, symbol: str, reason: str, **extra: Any) -> None:
        log_event(
            self._logger,
            logging.DEBUG,
            "filter_pair_removed",
            f"{self.name()} removed {symbol}",
            filter=self.name(),
            symbol=symbol,
            reason=reason,
            **extra,
        )

    def _log_missing_provider(self, provider: str, fallback: str) -> None:
        log_event(
            self._logger,
            logging.WARNING if fallback == "passthrough" else logging.ERROR,
            "filter_provider_missing",
            f"{self.name()}: no {provider} attached",
            filter=self.name(),
            provider=provider,
            fallback=fallback,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.options!r})"
