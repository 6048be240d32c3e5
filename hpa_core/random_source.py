# Copyright (c) 2025 HPA Maintainers
# License: MIT
"""
Seedable random source and hyperedge-size distributions.

Provides:
- NumpyRandomSource: RandomSource over a numpy Generator (PCG64 bit generator)
- ConstantSize, ShiftedPoisson, Categorical: EdgeSizeDistribution implementations
- as_edge_size: coerce an int (or distribution) into an EdgeSizeDistribution
- parse_edge_size: parse CLI strings such as "3", "poisson:2.0", "categorical:2,3:0.5,0.5"

Determinism
- A source built from the same SeedSequence (or integer seed) yields the same
  sequence of events, sizes, and endpoint draws on every platform numpy supports.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

import numpy as np

from hpa_core.errors import ConfigurationError
from hpa_core.interfaces import EdgeSizeDistribution, EventKind


# -------------------------
# Edge-size distributions
# -------------------------


@dataclass(frozen=True)
class ConstantSize:
    """Y_t = m for every step."""
    m: int

    def __post_init__(self) -> None:
        if isinstance(self.m, bool) or int(self.m) != self.m or int(self.m) < 1:
            raise ConfigurationError(f"Expected `m` to be a positive integer, got {self.m!r}")

    def draw(self, rng: np.random.Generator, step_index: int) -> int:
        return int(self.m)

    def describe(self) -> Any:
        return int(self.m)


@dataclass(frozen=True)
class ShiftedPoisson:
    """Y_t = 1 + Poisson(lam)."""
    lam: float

    def __post_init__(self) -> None:
        if not (float(self.lam) >= 0.0):
            raise ConfigurationError(f"Expected `lam` to be non-negative, got {self.lam!r}")

    def draw(self, rng: np.random.Generator, step_index: int) -> int:
        return 1 + int(rng.poisson(float(self.lam)))

    def describe(self) -> Any:
        return {"kind": "poisson", "lam": float(self.lam), "shift": 1}


@dataclass(frozen=True)
class Categorical:
    """Y_t takes sizes[i] with probability weights[i] / sum(weights)."""
    sizes: Tuple[int, ...]
    weights: Tuple[float, ...]

    def __post_init__(self) -> None:
        if len(self.sizes) == 0 or len(self.sizes) != len(self.weights):
            raise ConfigurationError("Expected non-empty `sizes` and `weights` of equal length")
        if any(int(s) != s or int(s) < 1 for s in self.sizes):
            raise ConfigurationError(f"Expected every size to be a positive integer, got {list(self.sizes)}")
        if any(float(w) < 0.0 for w in self.weights) or sum(float(w) for w in self.weights) <= 0.0:
            raise ConfigurationError("Expected non-negative weights with a positive sum")

    def _probabilities(self) -> np.ndarray:
        w = np.asarray(self.weights, dtype=float)
        return w / w.sum()

    def draw(self, rng: np.random.Generator, step_index: int) -> int:
        i = int(rng.choice(len(self.sizes), p=self._probabilities()))
        return int(self.sizes[i])

    def describe(self) -> Any:
        return {"kind": "categorical", "sizes": [int(s) for s in self.sizes], "weights": [float(w) for w in self.weights]}


def as_edge_size(value: Union[int, EdgeSizeDistribution]) -> EdgeSizeDistribution:
    """Coerce an int into ConstantSize; pass distributions through."""
    if isinstance(value, bool):
        raise ConfigurationError(f"Expected an edge size, got {value!r}")
    if isinstance(value, (int, np.integer)):
        return ConstantSize(int(value))
    if isinstance(value, EdgeSizeDistribution):
        return value
    raise ConfigurationError(f"Unsupported edge size distribution: {value!r}")


def parse_edge_size(text: str) -> EdgeSizeDistribution:
    """
    Parse an edge-size specification.

    Accepted forms:
      "3"                              -> ConstantSize(3)
      "poisson:2.0"                    -> ShiftedPoisson(2.0)
      "categorical:2,3,4:0.5,0.3,0.2"  -> Categorical((2, 3, 4), (0.5, 0.3, 0.2))
    """
    s = str(text).strip()
    kind, _, rest = s.partition(":")
    try:
        if not rest:
            return ConstantSize(int(kind))
        if kind == "poisson":
            return ShiftedPoisson(float(rest))
        if kind == "categorical":
            sizes_s, _, weights_s = rest.partition(":")
            sizes = tuple(int(x) for x in sizes_s.split(","))
            weights = tuple(float(x) for x in weights_s.split(",")) if weights_s else tuple(1.0 for _ in sizes)
            return Categorical(sizes, weights)
    except ConfigurationError:
        raise
    except ValueError as e:
        raise ConfigurationError(f"Invalid edge size specification {text!r}: {e}") from e
    raise ConfigurationError(f"Unknown edge size distribution {kind!r} in {text!r}")


def edge_size_from_jsonable(obj: Any) -> EdgeSizeDistribution:
    """Inverse of `describe()`; accepts an int or a {"kind": ...} mapping."""
    if isinstance(obj, dict):
        kind = obj.get("kind")
        if kind == "poisson":
            return ShiftedPoisson(float(obj["lam"]))
        if kind == "categorical":
            return Categorical(tuple(int(s) for s in obj["sizes"]), tuple(float(w) for w in obj["weights"]))
        raise ConfigurationError(f"Unknown edge size distribution kind {kind!r}")
    if isinstance(obj, str):
        return parse_edge_size(obj)
    return as_edge_size(obj)


# -------------------------
# Random source
# -------------------------


class NumpyRandomSource:
    """
    RandomSource backed by numpy's Generator(PCG64).

    Parameters
    ----------
    seed : int | numpy.random.SeedSequence | None
        None draws fresh OS entropy; an int or SeedSequence makes the stream reproducible.
    edge_size : EdgeSizeDistribution
        Distribution of Y; defaults to ConstantSize(1).
    """

    def __init__(
        self,
        seed: Union[int, np.random.SeedSequence, None] = None,
        edge_size: Optional[EdgeSizeDistribution] = None,
    ) -> None:
        ss = seed if isinstance(seed, np.random.SeedSequence) else np.random.SeedSequence(seed)
        self.seed_sequence = ss
        self.generator = np.random.Generator(np.random.PCG64(ss))
        self.edge_size: EdgeSizeDistribution = edge_size if edge_size is not None else ConstantSize(1)

    def uniform(self) -> float:
        return float(self.generator.random())

    def integers(self, low: int, high: int) -> int:
        return int(self.generator.integers(low, high))

    def draw_event(self, pv: float, pe: float, pd: float) -> EventKind:
        # pv + pe + pd == 1 is validated once by the model configuration
        u = self.uniform()
        if u < pv:
            return EventKind.VERTEX_ARRIVAL
        if u < pv + pe:
            return EventKind.EDGE_ARRIVAL
        if pd > 0.0:
            return EventKind.DEACTIVATION
        # rounding of pv + pe slightly below 1.0 with pd == 0
        return EventKind.EDGE_ARRIVAL if pe > 0.0 else EventKind.VERTEX_ARRIVAL

    def draw_edge_size(self, step_index: int) -> int:
        y = int(self.edge_size.draw(self.generator, step_index))
        if y < 1:
            raise ConfigurationError(f"Edge size distribution produced non-positive size {y}")
        return y


__all__ = [
    "ConstantSize",
    "ShiftedPoisson",
    "Categorical",
    "as_edge_size",
    "parse_edge_size",
    "edge_size_from_jsonable",
    "NumpyRandomSource",
]
