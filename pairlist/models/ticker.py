"""
Point-in-time quote records and ranking keys.

``TickerInfo`` carries the 24h snapshot the filters consult. Two derived
metrics are exposed as properties:

    spread_ratio = (ask - bid) / ask
    volatility   = (high_24h - low_24h) / last_price
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pairlist.models.fields import parse_float, parse_timestamp, require_symbol


@dataclass(frozen=True)
class TickerInfo:
    """
    24h ticker snapshot for one symbol.

    Attributes:
        symbol: Symbol the quote belongs to.
        last_price: Last traded price.
        bid: Best bid.
        ask: Best ask.
        high_24h: Highest traded price over 24h.
        low_24h: Lowest traded price over 24h.
        volume_24h: 24h volume in base asset units.
        quote_volume_24h: 24h volume in quote asset units.
        price_change_percent_24h: 24h price change in percent (signed).
        timestamp: Capture time, None when the provider did not report one.
    """
    symbol: str
    last_price: float = 0.0
    bid: float = 0.0
    ask: float = 0.0
    high_24h: float = 0.0
    low_24h: float = 0.0
    volume_24h: float = 0.0
    quote_volume_24h: float = 0.0
    price_change_percent_24h: float = 0.0
    timestamp: datetime | None = None

    @property
    def spread(self) -> float:
        return self.ask - self.bid

    @property
    def spread_ratio(self) -> float:
        """Bid-ask spread relative to the ask; ``inf`` when there is no ask."""
        if self.ask <= 0:
            return math.inf
        return (self.ask - self.bid) / self.ask

    @property
    def volatility(self) -> float:
        """24h range relative to the last price; 0.0 without a last price."""
        if self.last_price <= 0:
            return 0.0
        return (self.high_24h - self.low_24h) / self.last_price

    @classmethod
    def from_payload(cls, entry: dict[str, object]) -> "TickerInfo":
        symbol = require_symbol(entry)
        return cls(
            symbol=symbol,
            last_price=parse_float(entry.get("last_price", entry.get("last"))),
            bid=parse_float(entry.get("bid")),
            ask=parse_float(entry.get("ask")),
            high_24h=parse_float(entry.get("high_24h", entry.get("high"))),
            low_24h=parse_float(entry.get("low_24h", entry.get("low"))),
            volume_24h=parse_float(entry.get("volume_24h", entry.get("baseVolume"))),
            quote_volume_24h=parse_float(entry.get("quote_volume_24h", entry.get("quoteVolume"))),
            price_change_percent_24h=parse_float(
                entry.get("price_change_percent_24h", entry.get("percentage"))
            ),
            timestamp=parse_timestamp(entry.get("timestamp")),
        )


class SortKey(str, Enum):
    """Numeric ticker field a ranking filter sorts by."""

    QUOTE_VOLUME = "quoteVolume"
    VOLUME = "volume"
    PRICE_CHANGE = "priceChange"
    VOLATILITY = "volatility"

    @classmethod
    def _missing_(cls, value: object) -> "SortKey | None":
        if isinstance(value, str):
            normalized = value.replace("_", "").replace("-", "").lower()
            for member in cls:
                if member.value.lower() == normalized:
                    return member
        return None

    def value_of(self, ticker: TickerInfo) -> float:
        if self is SortKey.QUOTE_VOLUME:
            return ticker.quote_volume_24h
        if self is SortKey.VOLUME:
            return ticker.volume_24h
        if self is SortKey.PRICE_CHANGE:
            return abs(ticker.price_change_percent_24h)
        return ticker.volatility
