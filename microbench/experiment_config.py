"""Run settings (pydantic) and RunManifest with stable hashing."""

import hashlib
import json
import os
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

ORDERS = ("random", "inorder", "block")
UNITS = ("auto", "ns", "us", "ms", "s", "eps", "relative")


class RunSettings(BaseModel):
    """How a benchmark run is executed and displayed. Same settings + seed => same execution order."""

    times: int = Field(default=100, ge=1, le=10_000_000, description="Timed executions per candidate")
    warmup: int = Field(default=2, ge=0, le=10_000, description="Untimed executions per candidate before measuring")
    order: Literal["random", "inorder", "block"] = Field(default="random")
    unit: Literal["auto", "ns", "us", "ms", "s", "eps", "relative"] = Field(default="auto")
    seed: Optional[int] = Field(default=None, description="Seed for the random execution order")

    @classmethod
    def from_env(cls, **overrides: Any) -> "RunSettings":
        """Build settings from MICROBENCH_* environment variables, then apply overrides."""
        values: dict[str, Any] = {}
        for key in ("times", "warmup", "seed", "order", "unit"):
            raw = os.environ.get(f"MICROBENCH_{key.upper()}", "").strip()
            if raw:
                values[key] = raw.lower() if key in ("order", "unit") else raw
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


class RunManifest(BaseModel):
    """Manifest for a single run: config hash, run_id, paths, per-candidate medians."""

    run_id: str
    config_hash: str
    name: Optional[str] = None
    settings: dict = Field(default_factory=dict)
    labels: list[str] = Field(default_factory=list)
    neval: dict[str, int] = Field(default_factory=dict)
    median_ns: dict[str, float] = Field(default_factory=dict)
    started_at: Optional[str] = None
    artifacts: dict = Field(default_factory=dict, description="Paths: manifest, samples_csv, summary_csv, summary_parquet, run_log")


def stable_config_hash(config: Any) -> str:
    """Stable hash from config (sorted keys). Same config => same hash."""
    if hasattr(config, "model_dump"):
        d = config.model_dump()
    elif hasattr(config, "items"):
        d = dict(config)
    else:
        d = {k: v for k, v in vars(config).items() if not k.startswith("_")}

    def norm(o):
        if isinstance(o, dict):
            return {str(k): norm(v) for k, v in sorted(o.items())}
        if isinstance(o, (list, tuple)):
            return [norm(x) for x in o]
        return o

    payload = json.dumps(norm(d), sort_keys=True, default=str)
    return hashlib.sha256(payload.encode()).hexdigest()[:16]
