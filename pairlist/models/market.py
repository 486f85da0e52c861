"""
Instrument metadata records.

A ``MarketInfo`` describes one tradable symbol as the exchange lists it:
trading limits, precision, fees, listing date and market-capitalization
data. Records are produced fresh by the market provider on every call
and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pairlist.models.fields import parse_bool, parse_float, parse_int, parse_timestamp, require_symbol


class PairType(str, Enum):
    SPOT = "spot"
    FUTURES = "futures"
    MARGIN = "margin"

    @classmethod
    def parse(cls, value: object) -> "PairType":
        if isinstance(value, PairType):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in {"future", "swap", "perpetual"}:
                return cls.FUTURES
            for member in cls:
                if member.value == lowered:
                    return member
        return cls.SPOT


@dataclass(frozen=True)
class MarketInfo:
    """
    Market metadata for one instrument.

    Attributes:
        symbol: Unique symbol (e.g., "BTC/USDT" or "BTCUSDT").
        base: Base asset code (e.g., "BTC").
        quote: Quote asset code (e.g., "USDT").
        type: Spot, futures or margin instrument.
        active: Whether the exchange currently lists the market as tradable.
        min_amount: Minimum order amount in base units.
        max_amount: Maximum order amount in base units.
        min_price: Minimum order price.
        max_price: Maximum order price.
        min_cost: Minimum order notional (price x amount).
        amount_precision: Decimal places allowed for amounts.
        price_precision: Decimal places allowed for prices.
        maker_fee: Maker fee rate (0.001 = 0.1%).
        taker_fee: Taker fee rate.
        listed_date: Listing time (UTC) or None when unknown.
        market_cap: Market capitalization in quote currency.
        market_cap_rank: Market-cap rank, 1 is largest; 0 means unranked.
    """
    symbol: str
    base: str = ""
    quote: str = ""
    type: PairType = PairType.SPOT
    active: bool = True
    min_amount: float = 0.0
    max_amount: float = 0.0
    min_price: float = 0.0
    max_price: float = 0.0
    min_cost: float = 0.0
    amount_precision: int = 8
    price_precision: int = 8
    maker_fee: float = 0.0
    taker_fee: float = 0.0
    listed_date: datetime | None = None
    market_cap: float = 0.0
    market_cap_rank: int = 0

    @classmethod
    def from_payload(cls, entry: dict[str, object]) -> "MarketInfo":
        symbol = require_symbol(entry)
        base = entry.get("base")
        quote = entry.get("quote")
        if not isinstance(base, str) or not isinstance(quote, str):
            base, quote = _split_symbol(symbol)
        return cls(
            symbol=symbol,
            base=base,
            quote=quote,
            type=PairType.parse(entry.get("type")),
            active=parse_bool(entry.get("active"), default=True),
            min_amount=parse_float(entry.get("min_amount")),
            max_amount=parse_float(entry.get("max_amount")),
            min_price=parse_float(entry.get("min_price")),
            max_price=parse_float(entry.get("max_price")),
            min_cost=parse_float(entry.get("min_cost")),
            amount_precision=parse_int(entry.get("amount_precision"), default=8),
            price_precision=parse_int(entry.get("price_precision"), default=8),
            maker_fee=parse_float(entry.get("maker_fee")),
            taker_fee=parse_float(entry.get("taker_fee")),
            listed_date=parse_timestamp(entry.get("listed_date")),
            market_cap=parse_float(entry.get("market_cap")),
            market_cap_rank=parse_int(entry.get("market_cap_rank")),
        )


def _split_symbol(symbol: str) -> tuple[str, str]:
    for separator in ("/", "-", "_"):
        if separator in symbol:
            base, _, quote = symbol.partition(separator)
            # "BTC/USDT:USDT" style futures symbols carry the settle asset after ':'
            return base, quote.split(":", 1)[0]
    return symbol, ""
