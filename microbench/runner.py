"""Candidate runner: time units of work, interleaved, and save/load results as JSON."""

import json
import os
import random
import threading
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Sequence, Union

from microbench.errors import CandidateError, CheckFailedError, ConfigurationError
from microbench.experiment_config import RunSettings
from microbench.logging_utils import run_log
from microbench.schemas import BenchmarkResult, Candidate, TimingSample

Candidates = Union[Mapping[str, Callable[[], Any]], Sequence[Candidate]]

# Held for a whole run so measurements never overlap across threads.
_RUN_LOCK = threading.RLock()


def as_candidates(candidates: Candidates) -> list[Candidate]:
    """Normalize a label->callable mapping or a Candidate sequence; validate labels."""
    if isinstance(candidates, Mapping):
        items = [Candidate(label=str(k), fn=v) for k, v in candidates.items()]
    else:
        items = list(candidates)
    if not items:
        raise ConfigurationError("at least one candidate is required")
    seen: set[str] = set()
    for c in items:
        if not isinstance(c, Candidate):
            raise ConfigurationError(f"expected Candidate, got {type(c).__name__}")
        if not c.label or not c.label.strip():
            raise ConfigurationError("candidate labels must be non-empty")
        if c.label in seen:
            raise ConfigurationError(f"duplicate candidate label {c.label!r}")
        if not callable(c.fn):
            raise ConfigurationError(f"candidate {c.label!r} is not callable")
        seen.add(c.label)
    return items


def execution_order(n_candidates: int, times: int, order: str, seed: Optional[int] = None) -> list[int]:
    """Candidate indices in the order they are executed. Each index appears exactly `times` times."""
    if order == "block":
        return [i for i in range(n_candidates) for _ in range(times)]
    schedule = [i for _ in range(times) for i in range(n_candidates)]
    if order == "inorder":
        return schedule
    if order == "random":
        random.Random(seed).shuffle(schedule)
        return schedule
    raise ConfigurationError(f"unknown order {order!r}")


def _call(c: Candidate, run_id: str) -> Any:
    try:
        return c.fn()
    except Exception as exc:
        run_log("candidate_failed", level="error", run_id=run_id, label=c.label, error=repr(exc))
        raise CandidateError(c.label, f"candidate {c.label!r} failed: {exc!r}") from exc


def run_benchmark(
    candidates: Candidates,
    settings: Optional[RunSettings] = None,
    *,
    setup: Optional[Callable[[], Any]] = None,
    check: Optional[Callable[[list[Any]], Any]] = None,
    name: Optional[str] = None,
    run_id: Optional[str] = None,
) -> BenchmarkResult:
    """Run every candidate `settings.times` times and record per-execution nanosecond timings.

    Warmup calls and the optional check call are untimed. `setup` runs before each
    timed call, outside the timed region. Any exception from a candidate aborts the
    run as CandidateError. Concurrent callers are serialized.
    """
    with _RUN_LOCK:
        return _run_locked(candidates, settings, setup=setup, check=check, name=name, run_id=run_id)


def _run_locked(
    candidates: Candidates,
    settings: Optional[RunSettings],
    *,
    setup: Optional[Callable[[], Any]],
    check: Optional[Callable[[list[Any]], Any]],
    name: Optional[str],
    run_id: Optional[str],
) -> BenchmarkResult:
    settings = settings or RunSettings()
    items = as_candidates(candidates)
    run_id = run_id or str(uuid.uuid4())[:8]
    started_at = datetime.now(tz=timezone.utc).isoformat()
    labels = [c.label for c in items]
    run_log("run_start", run_id=run_id, name=name, labels=labels, times=settings.times,
            order=settings.order, warmup=settings.warmup, seed=settings.seed)

    if check is not None:
        values = [_call(c, run_id) for c in items]
        if not check(values):
            run_log("check_failed", level="error", run_id=run_id, labels=labels)
            raise CheckFailedError(f"check rejected candidate outputs for {labels}")

    for c in items:
        for _ in range(settings.warmup):
            _call(c, run_id)

    schedule = execution_order(len(items), settings.times, settings.order, settings.seed)
    clock = time.perf_counter_ns
    samples: list[TimingSample] = []
    for pos, idx in enumerate(schedule):
        c = items[idx]
        if setup is not None:
            setup()
        t0 = clock()
        try:
            c.fn()
        except Exception as exc:
            run_log("candidate_failed", level="error", run_id=run_id, label=c.label,
                    step_index=pos, error=repr(exc))
            raise CandidateError(c.label, f"candidate {c.label!r} failed: {exc!r}") from exc
        t1 = clock()
        samples.append(TimingSample(label=c.label, time_ns=t1 - t0, order=pos))

    result = BenchmarkResult(
        labels=labels,
        samples=samples,
        settings=settings,
        run_id=run_id,
        started_at=started_at,
        name=name,
    )
    run_log("run_end", run_id=run_id, n_samples=len(samples))
    return result


def result_to_dict(result: BenchmarkResult) -> dict:
    return {
        "run_id": result.run_id,
        "name": result.name,
        "started_at": result.started_at,
        "settings": result.settings.model_dump(),
        "labels": list(result.labels),
        "samples": [
            {"label": s.label, "time_ns": s.time_ns, "order": s.order}
            for s in result.samples
        ],
    }


def result_from_dict(data: dict) -> BenchmarkResult:
    samples = [
        TimingSample(label=s["label"], time_ns=int(s["time_ns"]), order=int(s.get("order", i)))
        for i, s in enumerate(data.get("samples", []))
    ]
    return BenchmarkResult(
        labels=list(data["labels"]),
        samples=samples,
        settings=RunSettings(**data.get("settings", {})),
        run_id=data.get("run_id"),
        started_at=data.get("started_at"),
        name=data.get("name"),
    )


def save_result(result: BenchmarkResult, out_dir: str = "data/runs") -> str:
    Path(out_dir).mkdir(parents=True, exist_ok=True)
    path = os.path.join(out_dir, f"run_{result.run_id}.json")
    with open(path, "w") as f:
        json.dump(result_to_dict(result), f, indent=2)
    return path


def load_result(path: str) -> BenchmarkResult:
    """Load a BenchmarkResult from JSON file."""
    with open(path) as f:
        data = json.load(f)
    return result_from_dict(data)
