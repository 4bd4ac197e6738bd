"""Microbenchmark harness: time candidate implementations and compare summary statistics."""

from microbench.errors import CandidateError, CheckFailedError, ConfigurationError, MicrobenchError
from microbench.experiment_config import RunSettings
from microbench.schemas import BenchmarkResult, Candidate, SummaryRow, TimingSample
from microbench.runner import run_benchmark
from microbench.metrics import summarize
from microbench.reporting import format_summary

__all__ = [
    "BenchmarkResult",
    "Candidate",
    "CandidateError",
    "CheckFailedError",
    "ConfigurationError",
    "MicrobenchError",
    "RunSettings",
    "SummaryRow",
    "TimingSample",
    "format_summary",
    "run_benchmark",
    "summarize",
]
