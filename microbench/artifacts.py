"""Write per-run artifacts: manifest.json, samples.csv, summary.csv/parquet."""

import logging
import os
from pathlib import Path

from microbench.experiment_config import RunManifest, stable_config_hash
from microbench.metrics import medians_ns
from microbench.reporting import result_to_dataframe, summary_to_dataframe
from microbench.schemas import BenchmarkResult

logger = logging.getLogger(__name__)


def write_run_artifacts(result: BenchmarkResult, run_dir: str) -> dict:
    """Write manifest.json, samples.csv, summary.csv and summary.parquet under run_dir. Returns artifact paths."""
    Path(run_dir).mkdir(parents=True, exist_ok=True)
    run_id = result.run_id or "unknown"
    settings = result.settings.model_dump()

    manifest = RunManifest(
        run_id=run_id,
        config_hash=stable_config_hash({"name": result.name, "labels": result.labels, **settings}),
        name=result.name,
        settings=settings,
        labels=list(result.labels),
        neval=result.counts(),
        median_ns=medians_ns(result),
        started_at=result.started_at,
        artifacts={},
    )
    manifest_path = os.path.join(run_dir, "manifest.json")
    manifest.artifacts["manifest"] = manifest_path

    samples_csv = os.path.join(run_dir, "samples.csv")
    result_to_dataframe(result).to_csv(samples_csv, index=False)
    manifest.artifacts["samples_csv"] = samples_csv

    # Summary in the run's display unit.
    df = summary_to_dataframe(result, result.settings.unit)
    df.insert(1, "unit", df.attrs["unit"])
    summary_csv = os.path.join(run_dir, "summary.csv")
    df.to_csv(summary_csv, index=False)
    manifest.artifacts["summary_csv"] = summary_csv
    summary_parquet = os.path.join(run_dir, "summary.parquet")
    try:
        df.to_parquet(summary_parquet, index=False)
        manifest.artifacts["summary_parquet"] = summary_parquet
    except ImportError as exc:
        logger.info("skipping parquet summary: %s", exc)

    run_log_path = os.path.join(run_dir, "run.log")
    if os.path.exists(run_log_path):
        manifest.artifacts["run_log"] = run_log_path

    with open(manifest_path, "w") as f:
        f.write(manifest.model_dump_json(indent=2))
    return dict(manifest.artifacts)
