"""Schemas for candidates, timing samples and results."""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from microbench.experiment_config import RunSettings


@dataclass
class Candidate:
    label: str
    fn: Callable[[], Any]


@dataclass
class TimingSample:
    label: str
    time_ns: int
    order: int  # global execution position within the run


@dataclass
class BenchmarkResult:
    labels: list[str]
    samples: list[TimingSample]
    settings: RunSettings = field(default_factory=RunSettings)
    run_id: Optional[str] = None
    started_at: Optional[str] = None
    name: Optional[str] = None  # catalog set name, when run from the catalog

    def times_for(self, label: str) -> list[int]:
        return [s.time_ns for s in self.samples if s.label == label]

    def counts(self) -> dict[str, int]:
        out = {label: 0 for label in self.labels}
        for s in self.samples:
            out[s.label] = out.get(s.label, 0) + 1
        return out


@dataclass
class SummaryRow:
    label: str
    min: float
    lq: float
    mean: float
    median: float
    uq: float
    max: float
    neval: int


@dataclass
class SuiteRunResult:
    run_id: str
    config_hash: str
    results: list[BenchmarkResult]
    aggregated_csv_path: Optional[str] = None
    manifest_path: Optional[str] = None
