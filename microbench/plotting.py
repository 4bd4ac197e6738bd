"""Box plot of per-candidate timing distributions."""

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from microbench.metrics import UNIT_NAMES, convert_times, resolve_unit, unit_scale
from microbench.schemas import BenchmarkResult


def boxplot_result(result: BenchmarkResult, unit: str = "auto", log_scale: bool = True):
    """Horizontal box per candidate, first-declared candidate on top. Returns the Figure."""
    unit = resolve_unit(result, unit)
    scale = unit_scale(result, unit)
    labels = [label for label in result.labels if result.times_for(label)]
    data = [convert_times(result.times_for(label), unit, scale) for label in labels]

    fig, ax = plt.subplots(figsize=(7, 0.6 * max(len(labels), 1) + 1.5))
    ax.boxplot(data[::-1], orientation="horizontal")
    ax.set_yticks(range(1, len(labels) + 1))
    ax.set_yticklabels(labels[::-1])
    if log_scale:
        ax.set_xscale("log")
    ax.set_xlabel(UNIT_NAMES[unit])
    title = result.name or "benchmark"
    ax.set_title(f"{title} ({result.settings.times} runs per candidate)")
    fig.tight_layout()
    return fig
