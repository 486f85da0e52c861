"""
Filter factory: method name -> configured filter instance.

``FILTER_METHODS`` is the single registry of known filters; new filters
are added with ``register_filter``. Factory failures are reported through
the log and a ``None`` result so one bad entry never prevents the rest
of a chain from loading.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from pairlist.filters.base import FilterConfigError, FilterProviders, PairFilter
from pairlist.filters.external import AgeFilter, MarketCapPairList, PerformanceFilter, ProducerPairList
from pairlist.filters.lists import BlacklistFilter, StaticPairListFilter
from pairlist.filters.ordering import OffsetFilter, ShuffleFilter
from pairlist.filters.thresholds import PriceFilter, SpreadFilter, VolatilityFilter
from pairlist.filters.volume import VolumePairListFilter
from pairlist.obs.logging import log_event

FILTER_METHODS: dict[str, type[PairFilter]] = {
    cls.method: cls
    for cls in (
        StaticPairListFilter,
        VolumePairListFilter,
        SpreadFilter,
        BlacklistFilter,
        PriceFilter,
        VolatilityFilter,
        AgeFilter,
        OffsetFilter,
        ShuffleFilter,
        PerformanceFilter,
        ProducerPairList,
        MarketCapPairList,
    )
}


def register_filter(method: str, filter_cls: type[PairFilter]) -> None:
    if method in FILTER_METHODS and FILTER_METHODS[method] is not filter_cls:
        raise ValueError(f"Filter method already registered: {method}")
    FILTER_METHODS[method] = filter_cls


def create_filter(
    method: str,
    *,
    providers: FilterProviders | None = None,
    logger: logging.Logger | None = None,
) -> PairFilter | None:
    logger = logger or logging.getLogger(__name__)
    filter_cls = FILTER_METHODS.get(method)
    if filter_cls is None:
        log_event(
            logger,
            logging.ERROR,
            "filter_unknown_method",
            f"Unknown pair filter method: {method}",
            method=method,
            known_methods=sorted(FILTER_METHODS),
        )
        return None
    return filter_cls(providers=providers, logger=logger)


def create_filter_from_config(
    config: Any,
    *,
    providers: FilterProviders | None = None,
    logger: logging.Logger | None = None,
) -> PairFilter | None:
    logger = logger or logging.getLogger(__name__)
    if not isinstance(config, Mapping):
        log_event(
            logger,
            logging.ERROR,
            "filter_config_invalid",
            "Filter config must be a mapping",
            config=repr(config),
        )
        return None

    method = config.get("method")
    if not isinstance(method, str) or not method:
        log_event(
            logger,
            logging.ERROR,
            "filter_config_invalid",
            "Filter config missing 'method' field",
            keys=sorted(str(key) for key in config),
        )
        return None

    pair_filter = create_filter(method, providers=providers, logger=logger)
    if pair_filter is None:
        return None

    try:
        pair_filter.configure(config)
    except FilterConfigError as exc:
        log_event(
            logger,
            logging.ERROR,
            "filter_config_invalid",
            "Filter options rejected",
            method=method,
            error=str(exc),
        )
        return None
    return pair_filter
