"""FastAPI: /health, /catalog, /run."""

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field, ValidationError
from typing import Optional

from microbench.catalog import get_candidates, list_catalog, same_values
from microbench.errors import MicrobenchError
from microbench.experiment_config import RunSettings
from microbench.logging_utils import configure_root_logging
from microbench.metrics import fastest, medians_ns, resolve_unit, summarize
from microbench.runner import run_benchmark, save_result


configure_root_logging()
app = FastAPI(title="Microbench API", version="0.1.0")


class RunParams(BaseModel):
    name: str = "vector_sum"
    size: int = Field(default=1000, ge=1, le=1_000_000)
    times: int = Field(default=100, ge=1, le=100_000)
    warmup: int = Field(default=2, ge=0, le=1000)
    order: str = "random"
    unit: str = "auto"
    seed: Optional[int] = None
    check: bool = True
    save: bool = False


@app.get("/health")
def health():
    return {"status": "ok", "message": "Microbench API"}


@app.get("/catalog")
def catalog():
    return {"sets": list_catalog()}


@app.post("/run")
def api_run(params: RunParams):
    try:
        settings = RunSettings(
            times=params.times, warmup=params.warmup, order=params.order, unit=params.unit, seed=params.seed,
        )
        candidates = get_candidates(params.name, size=params.size)
        result = run_benchmark(candidates, settings, check=same_values if params.check else None, name=params.name)
        unit = resolve_unit(result, settings.unit)
        rows = summarize(result, unit)
    except (MicrobenchError, ValidationError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
    body = {
        "run_id": result.run_id,
        "name": result.name,
        "unit": unit,
        "fastest": fastest(medians_ns(result)),
        "summary": [vars(r) for r in rows],
    }
    if params.save:
        body["path"] = save_result(result, str(ROOT / "data" / "runs"))
    return body
