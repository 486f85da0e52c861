from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from pairlist.manager import PairListStatistics


@dataclass(frozen=True)
class PairlistExportPaths:
    pairlist_path: Path


def export_pairlist(
    output_dir: Path,
    pairs: Sequence[str],
    statistics: PairListStatistics,
) -> PairlistExportPaths:
    output_dir.mkdir(parents=True, exist_ok=True)

    pairlist_path = output_dir / "pairlist.json"
    payload = {
        "pairs": list(pairs),
        "statistics": statistics.to_payload(),
        "generated_at": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }
    pairlist_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")

    return PairlistExportPaths(pairlist_path=pairlist_path)
