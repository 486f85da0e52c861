"""
Lenient field parsing for market and ticker payloads.

Exchange payloads mix numbers, numeric strings, nulls and the odd
garbage value. These helpers turn one raw field into a Python value or
a caller-supplied default, never raising on bad input.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone


class SnapshotParseError(ValueError):
    """Raised when a market or ticker row cannot be interpreted at all."""


def parse_float(value: object, default: float = 0.0) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(parsed):
        return default
    return parsed


def parse_int(value: object, default: int = 0) -> int:
    parsed = parse_float(value, default=math.nan)
    if not math.isfinite(parsed):
        return default
    return int(parsed)


def parse_bool(value: object, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "1", "yes", "trading"}:
            return True
        if lowered in {"false", "0", "no", "halt", "break"}:
            return False
    return default


def parse_timestamp(value: object) -> datetime | None:
    """
    Parse an ISO-8601 string or epoch milliseconds into an aware UTC datetime.

    Naive ISO strings are treated as UTC. Returns None when the value is
    missing or cannot be parsed.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return None


def require_symbol(entry: dict[str, object]) -> str:
    symbol = entry.get("symbol")
    if not isinstance(symbol, str) or not symbol:
        raise SnapshotParseError(f"Row without symbol: {entry!r}")
    return symbol
