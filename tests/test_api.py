"""Tests for the HTTP API."""

import sys
import threading
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from fastapi.testclient import TestClient

import app.api.main as api_main
from app.api.main import app

client = TestClient(app)


def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_catalog():
    names = [s["name"] for s in client.get("/catalog").json()["sets"]]
    assert "vector_sum" in names


def test_run():
    resp = client.post("/run", json={"name": "vector_sum", "size": 50, "times": 5, "unit": "us", "seed": 1})
    assert resp.status_code == 200
    body = resp.json()
    assert body["unit"] == "us"
    labels = [row["label"] for row in body["summary"]]
    assert labels == ["loop", "builtin_sum", "numpy_sum"]
    for row in body["summary"]:
        assert row["min"] <= row["lq"] <= row["median"] <= row["uq"] <= row["max"]
        assert row["neval"] == 5


def test_run_rejects_bad_input():
    assert client.post("/run", json={"name": "nope"}).status_code == 400
    assert client.post("/run", json={"order": "sideways"}).status_code == 400


def test_run_reports_fastest(monkeypatch):
    monkeypatch.setattr(api_main, "get_candidates", lambda name, size: {"nothing": lambda: None, "sleep": lambda: time.sleep(0.002)})
    body = client.post("/run", json={"times": 3, "warmup": 0, "check": False, "unit": "ms"}).json()
    assert body["fastest"] == "nothing"


def test_run_request_bounds():
    assert client.post("/run", json={"size": 10**9}).status_code == 422
    assert client.post("/run", json={"times": 0}).status_code == 422


def test_failing_candidate_is_client_error(monkeypatch):
    monkeypatch.setattr(api_main, "get_candidates", lambda name, size: {"ok": lambda: 1, "bad": lambda: 1 / 0})
    resp = client.post("/run", json={"times": 2, "check": False})
    assert resp.status_code == 400
    assert "bad" in resp.json()["detail"]


def test_disagreeing_outputs_are_client_error(monkeypatch):
    monkeypatch.setattr(api_main, "get_candidates", lambda name, size: {"one": lambda: 1, "two": lambda: 2})
    resp = client.post("/run", json={"times": 2, "check": True})
    assert resp.status_code == 400
    assert "check" in resp.json()["detail"]


def test_unexpected_error_is_server_error(monkeypatch):
    def explode(name, size):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(api_main, "get_candidates", explode)
    resp = client.post("/run", json={})
    assert resp.status_code == 500
    assert "disk on fire" in resp.json()["detail"]


def test_parallel_runs_never_overlap(monkeypatch):
    state = {"active": 0, "peak": 0}
    guard = threading.Lock()

    def slow():
        with guard:
            state["active"] += 1
            state["peak"] = max(state["peak"], state["active"])
        time.sleep(0.01)
        with guard:
            state["active"] -= 1

    monkeypatch.setattr(api_main, "get_candidates", lambda name, size: {"a": slow, "b": slow})
    statuses = []

    def post():
        statuses.append(TestClient(app).post("/run", json={"times": 3, "warmup": 0, "check": False}).status_code)

    threads = [threading.Thread(target=post) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert statuses == [200] * 4
    assert state["peak"] == 1
