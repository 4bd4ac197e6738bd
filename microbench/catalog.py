"""Built-in candidate sets: interpreter overheads that vectorized or builtin code avoids.

Each builder returns label -> zero-argument callable. Data is built once, outside
the timed callables, so only the operation itself is measured.
"""

import functools
from dataclasses import dataclass
from typing import Any, Callable

import numpy as np

from microbench.errors import ConfigurationError

CandidateMap = dict[str, Callable[[], Any]]


@dataclass
class CatalogEntry:
    name: str
    description: str
    build: Callable[[int], CandidateMap]


def _vector_sum(size: int) -> CandidateMap:
    data = list(range(size))
    arr = np.arange(size)

    def loop():
        total = 0
        for x in data:
            total += x
        return total

    return {
        "loop": loop,
        "builtin_sum": lambda: sum(data),
        "numpy_sum": lambda: int(arr.sum()),
    }


def _add(a, b):
    return a + b


class _Adder:
    def add(self, a, b):
        return a + b


def _function_call(size: int) -> CandidateMap:
    adder = _Adder()
    lam = lambda a, b: a + b  # noqa: E731
    n = max(size // 10, 1)

    def inline():
        x = 0
        for i in range(n):
            x = x + i
        return x

    def function():
        x = 0
        for i in range(n):
            x = _add(x, i)
        return x

    def lambda_():
        x = 0
        for i in range(n):
            x = lam(x, i)
        return x

    def method():
        x = 0
        for i in range(n):
            x = adder.add(x, i)
        return x

    return {"inline": inline, "function": function, "lambda": lambda_, "method": method}


_GLOBAL_VALUE = 3


class _Holder:
    value = 3


def _name_lookup(size: int) -> CandidateMap:
    holder = _Holder()
    n = max(size // 10, 1)

    def local():
        v = 3
        x = 0
        for _ in range(n):
            x += v
        return x

    def global_():
        x = 0
        for _ in range(n):
            x += _GLOBAL_VALUE
        return x

    def attribute():
        x = 0
        for _ in range(n):
            x += holder.value
        return x

    return {"local": local, "global": global_, "attribute": attribute}


@functools.singledispatch
def _area(shape):
    raise TypeError(type(shape).__name__)


@_area.register
def _(shape: float):
    return shape * shape


def _square(side):
    return side * side


def _dispatch(size: int) -> CandidateMap:
    n = max(size // 10, 1)
    side = 2.0

    def direct():
        return [_square(side) for _ in range(n)]

    def single_dispatch():
        return [_area(side) for _ in range(n)]

    return {"direct": direct, "singledispatch": single_dispatch}


CATALOG: dict[str, CatalogEntry] = {
    e.name: e
    for e in (
        CatalogEntry("vector_sum", "Sum a sequence: explicit loop vs builtin sum vs numpy", _vector_sum),
        CatalogEntry("function_call", "Add in a loop: inline vs function vs lambda vs method call", _function_call),
        CatalogEntry("name_lookup", "Read a value in a loop: local vs global vs attribute", _name_lookup),
        CatalogEntry("dispatch", "Direct call vs functools.singledispatch", _dispatch),
    )
}


def list_catalog() -> list[dict[str, str]]:
    return [{"name": e.name, "description": e.description} for e in CATALOG.values()]


def get_candidates(name: str, size: int = 1000) -> CandidateMap:
    if name not in CATALOG:
        raise ConfigurationError(f"unknown catalog set {name!r}; expected one of {', '.join(CATALOG)}")
    if size < 1:
        raise ConfigurationError("size must be >= 1")
    return CATALOG[name].build(size)


def same_values(values: list[Any]) -> bool:
    """Check function: every candidate returned the same value."""
    return all(v == values[0] for v in values[1:])
