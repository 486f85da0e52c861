import logging

import pytest

from pairlist.filters import (
    FILTER_METHODS,
    FilterProviders,
    PairFilter,
    ProducerPairList,
    VolumePairListFilter,
    create_filter,
    create_filter_from_config,
    register_filter,
)
from pairlist.models import SortKey


def test_every_registered_method_builds_matching_filter() -> None:
    for method in FILTER_METHODS:
        pair_filter = create_filter(method)
        assert pair_filter is not None
        assert pair_filter.name() == method


def test_unknown_method_is_reported(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR):
        assert create_filter("MoonPairList") is None

    assert "Unknown pair filter method: MoonPairList" in caplog.text


def test_create_from_config_configures_filter() -> None:
    pair_filter = create_filter_from_config(
        {"method": "VolumePairList", "number_assets": 7, "sort_key": "volume", "min_value": 2}
    )

    assert isinstance(pair_filter, VolumePairListFilter)
    assert pair_filter.options.number_assets == 7
    assert pair_filter.options.sort_key is SortKey.VOLUME
    assert pair_filter.options.min_value == 2.0


def test_create_from_config_missing_method(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR):
        assert create_filter_from_config({"number_assets": 3}) is None

    assert "missing 'method'" in caplog.text


def test_create_from_config_invalid_options(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR):
        assert create_filter_from_config({"method": "OffsetFilter", "offset": -1}) is None

    assert "Filter options rejected" in caplog.text


def test_create_passes_providers() -> None:
    pair_filter = create_filter("ProducerPairList", providers=FilterProviders(remote_provider=lambda: ["R/USDT"]))

    assert isinstance(pair_filter, ProducerPairList)
    assert pair_filter.filter(["L/USDT"], {}) == ["R/USDT"]


def test_register_custom_filter() -> None:
    class ReversePairList(PairFilter):
        method = "ReversePairList"

        def filter(self, pairs, tickers):
            return list(reversed(pairs))

    register_filter("ReversePairList", ReversePairList)
    try:
        pair_filter = create_filter_from_config({"method": "ReversePairList"})
        assert pair_filter is not None
        assert pair_filter.filter(["A", "B"], {}) == ["B", "A"]
        with pytest.raises(ValueError):
            register_filter("ReversePairList", VolumePairListFilter)
    finally:
        FILTER_METHODS.pop("ReversePairList", None)
