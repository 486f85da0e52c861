from __future__ import annotations

import random
from typing import Mapping, Sequence

from pydantic import Field

from pairlist.filters.base import FilterOptions, PairFilter
from pairlist.models import TickerInfo


class OffsetOptions(FilterOptions):
    offset: int = Field(default=0, ge=0)
    number_assets: int = Field(default=0, ge=0)


class OffsetFilter(PairFilter):
    """Return the window ``[offset, offset + number_assets)``; ``number_assets=0`` means to the end."""

    method = "OffsetFilter"
    options_model = OffsetOptions
    options: OffsetOptions

    def filter(self, pairs: Sequence[str], tickers: Mapping[str, TickerInfo]) -> list[str]:
        start = min(self.options.offset, len(pairs))
        end = len(pairs)
        if self.options.number_assets > 0:
            end = min(start + self.options.number_assets, len(pairs))
        result = list(pairs[start:end])

        self._log_applied(
            len(pairs),
            len(result),
            offset=self.options.offset,
            number_assets=self.options.number_assets,
        )
        return result


class ShuffleOptions(FilterOptions):
    seed: int = Field(default=0, ge=0)


class ShuffleFilter(PairFilter):
    """Randomly permute pairs. A non-zero seed gives the same order on every call."""

    method = "ShuffleFilter"
    options_model = ShuffleOptions
    options: ShuffleOptions

    def filter(self, pairs: Sequence[str], tickers: Mapping[str, TickerInfo]) -> list[str]:
        result = list(pairs)
        rng = random.Random(self.options.seed or None)
        rng.shuffle(result)

        self._log_applied(len(pairs), len(result), seed=self.options.seed)
        return result
