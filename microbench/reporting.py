"""Summary reporter: DataFrames and a console table."""

from typing import Optional

import pandas as pd

from microbench.metrics import UNIT_NAMES, resolve_unit, summarize
from microbench.schemas import BenchmarkResult

SUMMARY_COLUMNS = ["label", "min", "lq", "mean", "median", "uq", "max", "neval"]


def summary_to_dataframe(result: BenchmarkResult, unit: str = "auto") -> pd.DataFrame:
    rows = summarize(result, unit)
    df = pd.DataFrame(
        [[getattr(r, c) for c in SUMMARY_COLUMNS] for r in rows],
        columns=SUMMARY_COLUMNS,
    )
    df.attrs["unit"] = resolve_unit(result, unit)
    return df


def result_to_dataframe(result: BenchmarkResult) -> pd.DataFrame:
    """One row per timing sample (long form)."""
    rows = [
        {"run_id": result.run_id, "label": s.label, "order": s.order, "time_ns": s.time_ns}
        for s in result.samples
    ]
    return pd.DataFrame(rows, columns=["run_id", "label", "order", "time_ns"])


def format_summary(result: BenchmarkResult, unit: Optional[str] = None, digits: int = 4) -> str:
    """Render 'Unit: <name>' followed by the summary table."""
    unit = unit or result.settings.unit
    df = summary_to_dataframe(result, unit)
    resolved = df.attrs["unit"]
    body = df.to_string(
        index=False,
        float_format=lambda x: f"{x:.{digits}g}",
    )
    return f"Unit: {UNIT_NAMES[resolved]}\n{body}"
