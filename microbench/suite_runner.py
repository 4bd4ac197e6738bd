"""Suite runner: several catalog sets with shared settings, aggregated outputs."""

import hashlib
import json
import os
import uuid
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd

from microbench.artifacts import write_run_artifacts
from microbench.catalog import get_candidates, same_values
from microbench.experiment_config import RunSettings
from microbench.logging_utils import clear_run_log_path, run_log, set_run_log_path
from microbench.reporting import summary_to_dataframe
from microbench.runner import run_benchmark, save_result
from microbench.schemas import BenchmarkResult, SuiteRunResult


def run_suite(
    names: Sequence[str],
    settings: Optional[RunSettings] = None,
    out_dir: str = "data/runs",
    size: int = 1000,
    check: bool = True,
) -> SuiteRunResult:
    """Run each named catalog set; write run JSON + artifacts, aggregated CSV and suite manifest."""
    settings = settings or RunSettings()
    Path(out_dir).mkdir(parents=True, exist_ok=True)
    run_id = str(uuid.uuid4())[:8]
    results: list[BenchmarkResult] = []
    for name in names:
        candidates = get_candidates(name, size=size)
        single_id = str(uuid.uuid4())[:8]
        run_dir = Path(out_dir) / "runs" / single_id
        set_run_log_path(str(run_dir / "run.log"))
        try:
            result = run_benchmark(
                candidates, settings, check=same_values if check else None, name=name, run_id=single_id,
            )
        finally:
            clear_run_log_path()
        save_result(result, out_dir)
        write_run_artifacts(result, str(run_dir))
        results.append(result)

    config_hash = hashlib.sha256(json.dumps({
        "names": list(names),
        "size": size,
        "settings": settings.model_dump(),
    }, sort_keys=True).encode()).hexdigest()[:16]

    frames = []
    for r in results:
        df = summary_to_dataframe(r, settings.unit)
        df.insert(0, "set", r.name)
        df.insert(1, "run_id", r.run_id)
        df.insert(2, "unit", df.attrs["unit"])
        frames.append(df)
    agg = pd.concat(frames, ignore_index=True) if frames else pd.DataFrame()
    csv_path = os.path.join(out_dir, f"suite_{run_id}_aggregated.csv")
    agg.to_csv(csv_path, index=False)

    manifest = {
        "suite_run_id": run_id,
        "config_hash": config_hash,
        "n_runs": len(results),
        "names": list(names),
        "size": size,
        "settings": settings.model_dump(),
        "run_ids": [r.run_id for r in results],
        "aggregated_csv": csv_path,
    }
    manifest_path = os.path.join(out_dir, f"suite_{run_id}_manifest.json")
    with open(manifest_path, "w") as f:
        json.dump(manifest, f, indent=2)
    run_log("suite_end", run_id=run_id, n_runs=len(results))

    return SuiteRunResult(
        run_id=run_id,
        config_hash=config_hash,
        results=results,
        aggregated_csv_path=csv_path,
        manifest_path=manifest_path,
    )


def load_suite_results(out_dir: str = "data/runs") -> list[dict]:
    """Load all suite manifests from out_dir."""
    p = Path(out_dir)
    if not p.exists():
        return []
    out = []
    for f in sorted(p.glob("suite_*_manifest.json")):
        with open(f) as fp:
            out.append(json.load(fp))
    return out
