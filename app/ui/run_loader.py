"""Load and list runs from disk (data/runs) for UI."""

import json
from pathlib import Path
from typing import Any, Optional

from microbench.metrics import fastest
from microbench.runner import load_result


def run_rows_from_disk(data_dir: str) -> list[dict[str, Any]]:
    """Read manifests from data/runs/runs/*/manifest.json and return one row per run."""
    rows = []
    runs_dir = Path(data_dir) / "runs"
    if not runs_dir.exists():
        return rows
    for d in sorted(runs_dir.iterdir()):
        m_path = d / "manifest.json"
        if not d.is_dir() or not m_path.exists():
            continue
        with open(m_path) as fp:
            man = json.load(fp)
        rows.append({
            "run_id": man.get("run_id", d.name),
            "set": man.get("name") or "-",
            "candidates": len(man.get("labels", [])),
            "times": (man.get("settings") or {}).get("times"),
            "order": (man.get("settings") or {}).get("order"),
            "fastest": fastest(man.get("median_ns") or {}),
            "started_at": man.get("started_at"),
        })
    return rows


def list_run_ids_from_disk(data_dir: str) -> list[str]:
    """Run ids that have a full result JSON (data_dir/run_<id>.json)."""
    return sorted(f.stem.replace("run_", "", 1) for f in Path(data_dir).glob("run_*.json"))


def load_result_from_disk(data_dir: str, run_id: str):
    """Load BenchmarkResult from data_dir/run_<run_id>.json. Returns None if file missing."""
    path = Path(data_dir) / f"run_{run_id}.json"
    if not path.exists():
        return None
    return load_result(str(path))
