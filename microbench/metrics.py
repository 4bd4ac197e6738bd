"""Summary statistics: quartiles per candidate, unit conversion."""

from typing import Optional

import numpy as np

from microbench.errors import ConfigurationError
from microbench.experiment_config import UNITS
from microbench.schemas import BenchmarkResult, SummaryRow

# Divisor from nanoseconds to each time unit.
TIME_UNITS = {"ns": 1.0, "us": 1e3, "ms": 1e6, "s": 1e9}

UNIT_NAMES = {
    "ns": "nanoseconds",
    "us": "microseconds",
    "ms": "milliseconds",
    "s": "seconds",
    "eps": "evaluations per second",
    "relative": "relative",
}


def five_number_summary(values) -> tuple[float, float, float, float, float]:
    """(min, lq, median, uq, max) with linear interpolation between order statistics."""
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        raise ValueError("cannot summarize an empty sample")
    q = np.quantile(arr, [0.0, 0.25, 0.5, 0.75, 1.0])
    return tuple(float(x) for x in q)


def medians_ns(result: BenchmarkResult) -> dict[str, float]:
    out = {}
    for label in result.labels:
        times = result.times_for(label)
        if times:
            out[label] = float(np.median(times))
    return out


def resolve_unit(result: BenchmarkResult, unit: str = "auto") -> str:
    """Turn `auto` into the largest time unit in which the smallest median is >= 1."""
    if unit not in UNITS:
        raise ConfigurationError(f"unknown unit {unit!r}; expected one of {', '.join(UNITS)}")
    if unit != "auto":
        return unit
    meds = [m for m in medians_ns(result).values()]
    smallest = min(meds) if meds else 0.0
    chosen = "ns"
    for name, div in TIME_UNITS.items():
        if smallest / div >= 1:
            chosen = name
    return chosen


def unit_scale(result: BenchmarkResult, unit: str) -> Optional[float]:
    """Divisor applied to nanosecond values for `unit`; None for eps, which is not a linear rescale."""
    if unit in TIME_UNITS:
        return TIME_UNITS[unit]
    if unit == "relative":
        positive = [m for m in medians_ns(result).values() if m > 0]
        return min(positive) if positive else 1.0
    if unit == "eps":
        return None
    raise ConfigurationError(f"unit {unit!r} must be resolved first")


def convert_times(times_ns, unit: str, scale: Optional[float]) -> np.ndarray:
    arr = np.asarray(times_ns, dtype=float)
    if unit == "eps":
        # A zero reading means the clock did not tick; count it as 1 ns.
        return 1e9 / np.maximum(arr, 1.0)
    return arr / scale


def summarize(result: BenchmarkResult, unit: str = "auto") -> list[SummaryRow]:
    """Per-candidate min, lq, mean, median, uq, max and neval in the display unit, declaration order."""
    unit = resolve_unit(result, unit)
    scale = unit_scale(result, unit)
    rows: list[SummaryRow] = []
    for label in result.labels:
        times = result.times_for(label)
        if not times:
            rows.append(SummaryRow(label, *([float("nan")] * 6), neval=0))
            continue
        values = convert_times(times, unit, scale)
        mn, lq, med, uq, mx = five_number_summary(values)
        rows.append(SummaryRow(
            label=label, min=mn, lq=lq, mean=float(values.mean()), median=med, uq=uq, max=mx,
            neval=len(times),
        ))
    return rows


def fastest(medians: dict[str, float]) -> Optional[str]:
    """Label with the smallest median, given label -> median (see medians_ns)."""
    if not medians:
        return None
    return min(medians, key=medians.get)
