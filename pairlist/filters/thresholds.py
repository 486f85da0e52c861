"""
Filters that keep pairs whose ticker metric lies within bounds.

All of them drop pairs that have no ticker in the current snapshot and
otherwise preserve input order.
"""

from __future__ import annotations

import math
from abc import abstractmethod
from typing import Any, Mapping, Sequence

from pydantic import Field

from pairlist.filters.base import FilterOptions, PairFilter
from pairlist.models import TickerInfo


class TickerThresholdFilter(PairFilter):
    @abstractmethod
    def _metric(self, ticker: TickerInfo) -> float:
        raise NotImplementedError

    @abstractmethod
    def _accepts(self, value: float) -> bool:
        raise NotImplementedError

    def _bounds(self) -> dict[str, Any]:
        return self.options.model_dump()

    def filter(self, pairs: Sequence[str], tickers: Mapping[str, TickerInfo]) -> list[str]:
        result: list[str] = []
        for pair in pairs:
            ticker = tickers.get(pair)
            if ticker is None:
                self._log_removed(pair, "no_ticker")
                continue
            value = self._metric(ticker)
            if not self._accepts(value):
                self._log_removed(pair, "out_of_range", value=value)
                continue
            result.append(pair)

        self._log_applied(len(pairs), len(result), **self._bounds())
        return result


class SpreadOptions(FilterOptions):
    max_spread_ratio: float = Field(default=0.005, ge=0)


class SpreadFilter(TickerThresholdFilter):
    method = "SpreadFilter"
    options_model = SpreadOptions
    options: SpreadOptions

    def _metric(self, ticker: TickerInfo) -> float:
        return ticker.spread_ratio

    def _accepts(self, value: float) -> bool:
        return value <= self.options.max_spread_ratio


class PriceOptions(FilterOptions):
    min_price: float = Field(default=0.0)
    max_price: float = Field(default=math.inf)


class PriceFilter(TickerThresholdFilter):
    method = "PriceFilter"
    options_model = PriceOptions
    options: PriceOptions

    def _metric(self, ticker: TickerInfo) -> float:
        return ticker.last_price

    def _accepts(self, value: float) -> bool:
        return self.options.min_price <= value <= self.options.max_price


class VolatilityOptions(FilterOptions):
    min_volatility: float = Field(default=0.0)
    max_volatility: float = Field(default=math.inf)


class VolatilityFilter(TickerThresholdFilter):
    method = "VolatilityFilter"
    options_model = VolatilityOptions
    options: VolatilityOptions

    def _metric(self, ticker: TickerInfo) -> float:
        return ticker.volatility

    def _accepts(self, value: float) -> bool:
        return self.options.min_volatility <= value <= self.options.max_volatility
