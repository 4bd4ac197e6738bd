"""Tests for the candidate runner and result JSON round trip."""

import pytest
import sys
import threading
import time
from collections import Counter
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from microbench.errors import CandidateError, CheckFailedError, ConfigurationError
from microbench.experiment_config import RunSettings
from microbench.runner import execution_order, load_result, run_benchmark, save_result
from microbench.schemas import Candidate


def _candidates():
    return {"a": lambda: sum(range(10)), "b": lambda: sum(range(20)), "c": lambda: None}


@pytest.mark.parametrize("order", ["random", "inorder", "block"])
def test_sample_counts_per_candidate(order):
    result = run_benchmark(_candidates(), RunSettings(times=25, order=order, seed=1))
    assert result.labels == ["a", "b", "c"]
    assert result.counts() == {"a": 25, "b": 25, "c": 25}
    assert len(result.samples) == 75
    assert all(s.time_ns >= 0 for s in result.samples)
    assert [s.order for s in result.samples] == list(range(75))


def test_execution_order_modes():
    assert execution_order(2, 3, "block") == [0, 0, 0, 1, 1, 1]
    assert execution_order(2, 3, "inorder") == [0, 1, 0, 1, 0, 1]
    shuffled = execution_order(3, 50, "random", seed=7)
    assert Counter(shuffled) == {0: 50, 1: 50, 2: 50}
    assert shuffled == execution_order(3, 50, "random", seed=7)
    assert shuffled != execution_order(3, 50, "inorder")
    with pytest.raises(ConfigurationError):
        execution_order(2, 3, "sideways")


def test_seeded_random_order_is_reproducible():
    s = RunSettings(times=20, order="random", seed=3)
    r1 = run_benchmark(_candidates(), s)
    r2 = run_benchmark(_candidates(), s)
    assert [x.label for x in r1.samples] == [x.label for x in r2.samples]


def test_candidate_sequence_accepted():
    result = run_benchmark([Candidate("x", lambda: 1), Candidate("y", lambda: 2)], RunSettings(times=3))
    assert result.labels == ["x", "y"]


def test_bad_candidates_rejected():
    with pytest.raises(ConfigurationError):
        run_benchmark({})
    with pytest.raises(ConfigurationError):
        run_benchmark({"": lambda: 1})
    with pytest.raises(ConfigurationError):
        run_benchmark([Candidate("x", lambda: 1), Candidate("x", lambda: 2)])
    with pytest.raises(ConfigurationError):
        run_benchmark({"x": 42})


def test_failing_candidate_aborts_run():
    calls = {"n": 0}

    def flaky():
        calls["n"] += 1
        if calls["n"] > 3:
            raise ZeroDivisionError("boom")

    with pytest.raises(CandidateError) as info:
        run_benchmark({"ok": lambda: 1, "flaky": flaky}, RunSettings(times=10, warmup=0, order="block"))
    assert info.value.label == "flaky"
    assert isinstance(info.value.__cause__, ZeroDivisionError)


def test_warmup_and_setup_calls():
    calls = {"fn": 0, "setup": 0}

    def fn():
        calls["fn"] += 1

    def setup():
        calls["setup"] += 1

    run_benchmark({"fn": fn}, RunSettings(times=5, warmup=3), setup=setup)
    assert calls["fn"] == 8
    assert calls["setup"] == 5


def test_check_rejects_disagreeing_outputs():
    with pytest.raises(CheckFailedError):
        run_benchmark({"one": lambda: 1, "two": lambda: 2}, RunSettings(times=2),
                      check=lambda values: len(set(values)) == 1)
    result = run_benchmark({"one": lambda: 1, "also_one": lambda: 1}, RunSettings(times=2),
                           check=lambda values: len(set(values)) == 1)
    assert result.counts() == {"one": 2, "also_one": 2}


def test_save_and_load_result(tmp_path):
    result = run_benchmark(_candidates(), RunSettings(times=4, seed=9, unit="us"), name="demo")
    path = save_result(result, str(tmp_path))
    loaded = load_result(path)
    assert loaded.run_id == result.run_id
    assert loaded.name == "demo"
    assert loaded.labels == result.labels
    assert loaded.settings == result.settings
    assert [(s.label, s.time_ns) for s in loaded.samples] == [(s.label, s.time_ns) for s in result.samples]


def test_threaded_runs_are_serialized():
    state = {"active": 0, "peak": 0}
    guard = threading.Lock()

    def busy():
        with guard:
            state["active"] += 1
            state["peak"] = max(state["peak"], state["active"])
        time.sleep(0.005)
        with guard:
            state["active"] -= 1

    threads = [
        threading.Thread(target=run_benchmark, args=({"busy": busy}, RunSettings(times=4, warmup=0)))
        for _ in range(3)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert state["peak"] == 1
