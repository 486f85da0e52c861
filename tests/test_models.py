import math
from datetime import datetime, timezone

import pytest

from pairlist.models import MarketInfo, PairType, SnapshotParseError, SortKey, TickerInfo


def test_spread_ratio_and_volatility() -> None:
    ticker = TickerInfo(symbol="BTC/USDT", last_price=100.0, bid=99.0, ask=100.0, high_24h=110.0, low_24h=90.0)

    assert ticker.spread == pytest.approx(1.0)
    assert ticker.spread_ratio == pytest.approx(0.01)
    assert ticker.volatility == pytest.approx(0.2)


def test_degenerate_quotes() -> None:
    ticker = TickerInfo(symbol="DEAD/USDT", last_price=0.0, bid=0.0, ask=0.0, high_24h=1.0, low_24h=0.5)

    assert math.isinf(ticker.spread_ratio)
    assert ticker.volatility == 0.0


def test_sort_key_values() -> None:
    ticker = TickerInfo(
        symbol="ETH/USDT",
        last_price=10.0,
        high_24h=12.0,
        low_24h=8.0,
        volume_24h=5.0,
        quote_volume_24h=50.0,
        price_change_percent_24h=-7.5,
    )

    assert SortKey.QUOTE_VOLUME.value_of(ticker) == 50.0
    assert SortKey.VOLUME.value_of(ticker) == 5.0
    assert SortKey.PRICE_CHANGE.value_of(ticker) == 7.5
    assert SortKey.VOLATILITY.value_of(ticker) == pytest.approx(0.4)


def test_sort_key_accepts_snake_case() -> None:
    assert SortKey("quoteVolume") is SortKey.QUOTE_VOLUME
    assert SortKey("quote_volume") is SortKey.QUOTE_VOLUME
    assert SortKey("price-change") is SortKey.PRICE_CHANGE
    with pytest.raises(ValueError):
        SortKey("marketCap")


def test_market_from_payload() -> None:
    market = MarketInfo.from_payload(
        {
            "symbol": "SOL/USDT:USDT",
            "type": "swap",
            "active": "true",
            "min_amount": "0.1",
            "maker_fee": 0.0002,
            "listed_date": "2021-03-01T00:00:00Z",
            "market_cap": "1000000",
            "market_cap_rank": "5",
        }
    )

    assert market.base == "SOL"
    assert market.quote == "USDT"
    assert market.type is PairType.FUTURES
    assert market.active is True
    assert market.min_amount == pytest.approx(0.1)
    assert market.listed_date == datetime(2021, 3, 1, tzinfo=timezone.utc)
    assert market.market_cap_rank == 5


def test_market_listed_date_epoch_ms() -> None:
    market = MarketInfo.from_payload({"symbol": "BTCUSDT", "listed_date": 1_600_000_000_000})

    assert market.listed_date == datetime.fromtimestamp(1_600_000_000, tz=timezone.utc)
    assert market.base == "BTCUSDT"
    assert market.quote == ""


def test_ticker_from_payload_bad_values_default_to_zero() -> None:
    ticker = TickerInfo.from_payload({"symbol": "XRP/USDT", "last": "0.5", "bid": "oops", "quoteVolume": None})

    assert ticker.last_price == pytest.approx(0.5)
    assert ticker.bid == 0.0
    assert ticker.quote_volume_24h == 0.0


def test_payload_without_symbol_rejected() -> None:
    with pytest.raises(SnapshotParseError):
        TickerInfo.from_payload({"last": "1"})
