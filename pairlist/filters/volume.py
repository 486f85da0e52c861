from __future__ import annotations

from typing import Mapping, Sequence

from pydantic import Field

from pairlist.filters.base import FilterOptions, PairFilter
from pairlist.models import SortKey, TickerInfo


class VolumePairListOptions(FilterOptions):
    number_assets: int = Field(default=20, ge=0)
    sort_key: SortKey = Field(default=SortKey.QUOTE_VOLUME)
    min_value: float = Field(default=0.0)
    # Reported for compatibility with shared filter configs; scheduling is owned by the manager.
    refresh_period: int = Field(default=1800, gt=0)


class VolumePairListFilter(PairFilter):
    """
    Rank pairs by a ticker field and keep the top ``number_assets``.

    Pairs without a ticker, or whose ranking value is below ``min_value``,
    are dropped before ranking. Ties keep their input order.
    """

    method = "VolumePairList"
    options_model = VolumePairListOptions
    options: VolumePairListOptions

    def filter(self, pairs: Sequence[str], tickers: Mapping[str, TickerInfo]) -> list[str]:
        sort_key = self.options.sort_key
        ranked: list[tuple[str, float]] = []
        for pair in pairs:
            ticker = tickers.get(pair)
            if ticker is None:
                self._log_removed(pair, "no_ticker")
                continue
            value = sort_key.value_of(ticker)
            if value < self.options.min_value:
                self._log_removed(pair, "below_min_value", value=value)
                continue
            ranked.append((pair, value))

        ranked.sort(key=lambda item: item[1], reverse=True)
        result = [pair for pair, _ in ranked[: self.options.number_assets]]

        self._log_applied(
            len(pairs),
            len(result),
            sort_key=sort_key.value,
            number_assets=self.options.number_assets,
            min_value=self.options.min_value,
        )
        return result
