"""
Filters that depend on collaborators beyond the ticker snapshot.

Age and market-cap filters read instrument metadata from the market
provider, the performance filter reads realized returns and the producer
filter takes its list from another pairlist instance. Providers are
called on every ``filter`` invocation. Without a provider the age,
market-cap and performance filters pass their input through; the
producer filter has nothing to pass through and returns an empty list.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Sequence

from pydantic import Field

from pairlist.filters.base import FilterOptions, FilterProviders, PairFilter
from pairlist.models import MarketInfo, TickerInfo

_SECONDS_PER_DAY = 86_400


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _market_map(markets: Sequence[MarketInfo]) -> dict[str, MarketInfo]:
    return {market.symbol: market for market in markets}


class AgeOptions(FilterOptions):
    min_days_listed: int = Field(default=10, ge=0)


class AgeFilter(PairFilter):
    method = "AgeFilter"
    options_model = AgeOptions
    options: AgeOptions

    def __init__(
        self,
        *,
        providers: FilterProviders | None = None,
        logger: logging.Logger | None = None,
        clock: Callable[[], datetime] | None = None,
        **options: Any,
    ) -> None:
        super().__init__(providers=providers, logger=logger, **options)
        self._clock = clock or _utc_now

    def filter(self, pairs: Sequence[str], tickers: Mapping[str, TickerInfo]) -> list[str]:
        provider = self.providers.market_provider
        if provider is None:
            self._log_missing_provider("market_provider", "passthrough")
            return list(pairs)

        markets = _market_map(provider())
        now = self._clock()
        result: list[str] = []
        for pair in pairs:
            market = markets.get(pair)
            if market is None:
                self._log_removed(pair, "no_market")
                continue
            # An unknown listing date counts as listed since the epoch.
            if market.listed_date is None:
                result.append(pair)
                continue
            days_listed = int((now - market.listed_date).total_seconds() // _SECONDS_PER_DAY)
            if days_listed < self.options.min_days_listed:
                self._log_removed(pair, "too_young", days_listed=days_listed)
                continue
            result.append(pair)

        self._log_applied(len(pairs), len(result), min_days_listed=self.options.min_days_listed)
        return result


class PerformanceOptions(FilterOptions):
    min_profit: float = Field(default=0.0)


class PerformanceFilter(PairFilter):
    """Drop pairs whose realized return is below ``min_profit``; pairs without history are kept."""

    method = "PerformanceFilter"
    options_model = PerformanceOptions
    options: PerformanceOptions

    def filter(self, pairs: Sequence[str], tickers: Mapping[str, TickerInfo]) -> list[str]:
        provider = self.providers.performance_provider
        if provider is None:
            self._log_missing_provider("performance_provider", "passthrough")
            return list(pairs)

        performance = provider()
        result: list[str] = []
        for pair in pairs:
            profit = performance.get(pair)
            if profit is not None and profit < self.options.min_profit:
                self._log_removed(pair, "low_profit", profit=profit)
                continue
            result.append(pair)

        self._log_applied(len(pairs), len(result), min_profit=self.options.min_profit)
        return result


class ProducerOptions(FilterOptions):
    producer_name: str = Field(default="default")


class ProducerPairList(PairFilter):
    """Replace the candidate list with the list published by a producer."""

    method = "ProducerPairList"
    options_model = ProducerOptions
    options: ProducerOptions

    def filter(self, pairs: Sequence[str], tickers: Mapping[str, TickerInfo]) -> list[str]:
        provider = self.providers.remote_provider
        if provider is None:
            self._log_missing_provider("remote_provider", "empty")
            return []

        result = list(provider())
        self._log_applied(len(pairs), len(result), producer_name=self.options.producer_name)
        return result


class MarketCapOptions(FilterOptions):
    number_assets: int = Field(default=20, ge=0)
    max_rank: int = Field(default=100, ge=0)


class MarketCapPairList(PairFilter):
    """Keep pairs ranked within ``max_rank`` and return the ``number_assets`` largest by market cap."""

    method = "MarketCapPairList"
    options_model = MarketCapOptions
    options: MarketCapOptions

    def filter(self, pairs: Sequence[str], tickers: Mapping[str, TickerInfo]) -> list[str]:
        provider = self.providers.market_provider
        if provider is None:
            self._log_missing_provider("market_provider", "passthrough")
            return list(pairs)

        markets = _market_map(provider())
        ranked: list[tuple[str, float]] = []
        for pair in pairs:
            market = markets.get(pair)
            if market is None:
                self._log_removed(pair, "no_market")
                continue
            if not 1 <= market.market_cap_rank <= self.options.max_rank:
                self._log_removed(pair, "rank_out_of_range", rank=market.market_cap_rank)
                continue
            ranked.append((pair, market.market_cap))

        ranked.sort(key=lambda item: item[1], reverse=True)
        result = [pair for pair, _ in ranked[: self.options.number_assets]]

        self._log_applied(
            len(pairs),
            len(result),
            number_assets=self.options.number_assets,
            max_rank=self.options.max_rank,
        )
        return result
