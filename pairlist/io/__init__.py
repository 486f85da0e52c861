from pairlist.io.export_pairlist import PairlistExportPaths, export_pairlist
from pairlist.io.snapshots import (
    SnapshotParseError,
    load_markets,
    load_pair_list,
    load_performance,
    load_tickers,
)

__all__ = [
    "PairlistExportPaths",
    "SnapshotParseError",
    "export_pairlist",
    "load_markets",
    "load_pair_list",
    "load_performance",
    "load_tickers",
]
