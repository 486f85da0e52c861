from __future__ import annotations

from typing import Mapping, Sequence

from pydantic import Field

from pairlist.filters.base import FilterOptions, PairFilter
from pairlist.models import TickerInfo


class StaticPairListOptions(FilterOptions):
    whitelist: list[str] = Field(default_factory=list)


class StaticPairListFilter(PairFilter):
    """Keep only whitelisted pairs, preserving input order. An empty whitelist keeps everything."""

    method = "StaticPairList"
    options_model = StaticPairListOptions
    options: StaticPairListOptions

    def set_whitelist(self, whitelist: Sequence[str]) -> None:
        self.configure({"whitelist": list(whitelist)})

    def filter(self, pairs: Sequence[str], tickers: Mapping[str, TickerInfo]) -> list[str]:
        if not self.options.whitelist:
            return list(pairs)

        whitelist = set(self.options.whitelist)
        result = [pair for pair in pairs if pair in whitelist]
        self._log_applied(len(pairs), len(result), whitelist_size=len(whitelist))
        return result


class BlacklistOptions(FilterOptions):
    blacklist: list[str] = Field(default_factory=list)


class BlacklistFilter(PairFilter):
    method = "BlacklistFilter"
    options_model = BlacklistOptions
    options: BlacklistOptions

    def set_blacklist(self, blacklist: Sequence[str]) -> None:
        self.configure({"blacklist": list(blacklist)})

    def add_to_blacklist(self, pair: str) -> None:
        self.configure({"blacklist": [*self.options.blacklist, pair]})

    def filter(self, pairs: Sequence[str], tickers: Mapping[str, TickerInfo]) -> list[str]:
        if not self.options.blacklist:
            return list(pairs)

        blacklist = set(self.options.blacklist)
        result: list[str] = []
        for pair in pairs:
            if pair in blacklist:
                self._log_removed(pair, "blacklisted")
                continue
            result.append(pair)

        self._log_applied(len(pairs), len(result), removed=len(pairs) - len(result))
        return result
