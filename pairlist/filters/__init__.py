from pairlist.filters.base import (
    FilterConfigError,
    FilterProviders,
    MarketProvider,
    PairFilter,
    PerformanceProvider,
    RemotePairProvider,
    TickerProvider,
)
from pairlist.filters.external import AgeFilter, MarketCapPairList, PerformanceFilter, ProducerPairList
from pairlist.filters.factory import FILTER_METHODS, create_filter, create_filter_from_config, register_filter
from pairlist.filters.lists import BlacklistFilter, StaticPairListFilter
from pairlist.filters.ordering import OffsetFilter, ShuffleFilter
from pairlist.filters.thresholds import PriceFilter, SpreadFilter, VolatilityFilter
from pairlist.filters.volume import VolumePairListFilter

__all__ = [
    "AgeFilter",
    "BlacklistFilter",
    "FILTER_METHODS",
    "FilterConfigError",
    "FilterProviders",
    "MarketCapPairList",
    "MarketProvider",
    "OffsetFilter",
    "PairFilter",
    "PerformanceFilter",
    "PerformanceProvider",
    "PriceFilter",
    "ProducerPairList",
    "RemotePairProvider",
    "ShuffleFilter",
    "SpreadFilter",
    "StaticPairListFilter",
    "TickerProvider",
    "VolatilityFilter",
    "VolumePairListFilter",
    "create_filter",
    "create_filter_from_config",
    "register_filter",
]
