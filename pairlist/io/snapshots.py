"""
File-backed market, ticker and performance snapshots.

These loaders back the CLI's providers: each call re-reads the file so a
long-running ``watch`` picks up snapshots rewritten by another process.
Files hold either a bare JSON list/object or an envelope keyed by
``markets``/``tickers``/``symbols``/``pairs``/``performance``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Iterable, TypeVar

from pairlist.models import MarketInfo, TickerInfo
from pairlist.models.fields import SnapshotParseError, parse_float
from pairlist.obs.logging import log_event

T = TypeVar("T")

__all__ = [
    "SnapshotParseError",
    "load_markets",
    "load_pair_list",
    "load_performance",
    "load_tickers",
]


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SnapshotParseError(f"Invalid JSON in {path}: {exc}") from exc


def _unwrap(payload: Any, keys: Iterable[str]) -> Any:
    if isinstance(payload, dict):
        for key in keys:
            if key in payload:
                return payload[key]
    return payload


def _rows(payload: Any, path: Path) -> list[object]:
    # Keyed objects ({"BTC/USDT": {...}}) carry the symbol in the key.
    if isinstance(payload, dict):
        rows: list[object] = []
        for symbol, entry in payload.items():
            if isinstance(entry, dict):
                rows.append({"symbol": symbol, **entry})
            else:
                rows.append(entry)
        return rows
    if isinstance(payload, list):
        return payload
    raise SnapshotParseError(f"{path} must contain a JSON list or object")


def _parse_rows(
    rows: list[object],
    parse: Callable[[dict[str, object]], T],
    *,
    kind: str,
    path: Path,
    logger: logging.Logger,
) -> list[T]:
    parsed: list[T] = []
    parse_errors = 0
    for entry in rows:
        if not isinstance(entry, dict):
            parse_errors += 1
            continue
        try:
            parsed.append(parse(entry))
        except SnapshotParseError:
            parse_errors += 1

    log_event(
        logger,
        logging.DEBUG,
        "snapshot_parsed",
        f"Parsed {kind} snapshot",
        path=str(path),
        total_rows=len(rows),
        parse_errors=parse_errors,
    )
    return parsed


def load_markets(path: Path, *, logger: logging.Logger | None = None) -> list[MarketInfo]:
    logger = logger or logging.getLogger(__name__)
    rows = _rows(_unwrap(_read_json(path), ("markets", "symbols")), path)
    return _parse_rows(rows, MarketInfo.from_payload, kind="markets", path=path, logger=logger)


def load_tickers(path: Path, *, logger: logging.Logger | None = None) -> dict[str, TickerInfo]:
    logger = logger or logging.getLogger(__name__)
    rows = _rows(_unwrap(_read_json(path), ("tickers",)), path)
    tickers = _parse_rows(rows, TickerInfo.from_payload, kind="tickers", path=path, logger=logger)
    return {ticker.symbol: ticker for ticker in tickers}


def load_performance(path: Path) -> dict[str, float]:
    payload = _unwrap(_read_json(path), ("performance",))
    performance: dict[str, float] = {}
    if isinstance(payload, dict):
        for symbol, value in payload.items():
            performance[str(symbol)] = parse_float(value)
        return performance
    if isinstance(payload, list):
        for entry in payload:
            if isinstance(entry, dict) and isinstance(entry.get("symbol"), str):
                performance[entry["symbol"]] = parse_float(entry.get("profit"))
        return performance
    raise SnapshotParseError(f"{path} must contain a JSON list or object")


def load_pair_list(path: Path) -> list[str]:
    payload = _unwrap(_read_json(path), ("pairs", "pairlist", "symbols"))
    if not isinstance(payload, list):
        raise SnapshotParseError(f"{path} must contain a list of pairs")
    return [item for item in payload if isinstance(item, str)]
