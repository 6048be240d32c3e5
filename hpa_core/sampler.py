# Copyright (c) 2025 HPA Maintainers
# License: MIT
"""
Weighted active-set sampler (preferential selection among active vertices).

Provides:
- WeightSnapshot: immutable view of the active population taken once per step
- ActiveSetSampler: degree-weighted index over active vertices with O(log n)
  point updates and O(log n) draws

Selection rule
- Every draw of a step uses the snapshot taken at the start of that step. The
  sampler bumps a generation counter on every committed update; drawing with a
  snapshot from an older generation is a programming error and raises RuntimeError.
  Endpoints drawn for a hyperedge under construction therefore never change the
  weights used for the remaining endpoints of that hyperedge.

Invariants
- weight(v) == degree(v) while v is active, 0 after deactivation
- total_weight == sum of active degrees
- sum_squares == sum of squared active degrees
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from hpa_core.fenwick import FenwickTree
from hpa_core.interfaces import RandomSource, VertexId


@dataclass(frozen=True)
class WeightSnapshot:
    generation: int
    total_weight: int
    sum_squares: int
    active_count: int

    @property
    def empty(self) -> bool:
        return self.active_count == 0 or self.total_weight == 0

    @property
    def theta(self) -> float:
        """Expected degree of a preferentially selected active vertex."""
        if self.total_weight == 0:
            raise ZeroDivisionError("theta is undefined for an empty active set")
        return self.sum_squares / self.total_weight

    @property
    def mean_degree(self) -> float:
        if self.active_count == 0:
            raise ZeroDivisionError("mean degree is undefined for an empty active set")
        return self.total_weight / self.active_count


class ActiveSetSampler:
    """
    Degree-weighted index over active vertices, keyed by vertex id.

    Data structures
    - _index: FenwickTree of current weights (0 for inactive vertices)
    - _active: per-vertex activity flags; deactivated slots stay in place with zero weight
    - _generation: bumped on every committed update
    """

    def __init__(self, capacity: int = 16) -> None:
        self._index = FenwickTree(capacity)
        self._active: List[bool] = []
        self._active_count = 0
        self._sum_squares = 0
        self._generation = 0

    # ---- Update hooks ----

    def register(self, v: VertexId, weight: int = 0) -> None:
        """Add a new active slot for vertex v (ids are dense and registered in order)."""
        if v != len(self._active):
            raise ValueError(f"vertex ids must be registered densely; expected {len(self._active)}, got {v}")
        self._active.append(True)
        self._active_count += 1
        self._index.ensure_capacity(v + 1)
        if weight:
            self._index.add(v, int(weight))
            self._sum_squares += int(weight) * int(weight)
        self._generation += 1

    def increment(self, v: VertexId, by: int = 1) -> None:
        """Add `by` to the weight of active vertex v."""
        if not self._active[v]:
            raise ValueError(f"vertex {v} is not active")
        d = self._index.get(v)
        self._index.add(v, by)
        self._sum_squares += (d + by) * (d + by) - d * d
        self._generation += 1

    def deactivate(self, v: VertexId) -> None:
        """Exclude v from all future snapshots; its slot keeps zero weight."""
        if not self._active[v]:
            raise ValueError(f"vertex {v} is already inactive")
        d = self._index.get(v)
        self._index.set(v, 0)
        self._sum_squares -= d * d
        self._active[v] = False
        self._active_count -= 1
        self._generation += 1

    # ---- Queries ----

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def active_count(self) -> int:
        return self._active_count

    def is_active(self, v: VertexId) -> bool:
        return self._active[v]

    def weight(self, v: VertexId) -> int:
        return self._index.get(v)

    def snapshot(self) -> WeightSnapshot:
        return WeightSnapshot(
            generation=self._generation,
            total_weight=self._index.total,
            sum_squares=self._sum_squares,
            active_count=self._active_count,
        )

    # ---- Draws ----

    def _check(self, snap: WeightSnapshot) -> None:
        if snap.generation != self._generation:
            raise RuntimeError(
                f"stale snapshot: taken at generation {snap.generation}, sampler is at {self._generation}"
            )
        if snap.empty:
            raise ValueError("cannot draw from an empty active set")

    def draw_one(self, snap: WeightSnapshot, rng: RandomSource) -> VertexId:
        self._check(snap)
        x = rng.integers(1, snap.total_weight + 1)
        return self._index.find(x)

    def draw_k(self, snap: WeightSnapshot, k: int, rng: RandomSource) -> List[VertexId]:
        """k independent draws with replacement, all from the same snapshot."""
        if k < 0:
            raise ValueError(f"k must be non-negative, got {k}")
        if k == 0:
            return []
        self._check(snap)
        return [self._index.find(rng.integers(1, snap.total_weight + 1)) for _ in range(k)]

    def active_weights(self) -> List[int]:
        """Weights of active vertices in id order (O(n); diagnostics and tests)."""
        return [self._index.get(v) for v, a in enumerate(self._active) if a]

    def check_consistency(self, degree: Sequence[int]) -> None:
        """Raise AssertionError if the index disagrees with the given degree array."""
        total = 0
        squares = 0
        for v, a in enumerate(self._active):
            w = self._index.get(v)
            if a:
                assert w == degree[v], f"weight {w} != degree {degree[v]} for active vertex {v}"
                total += w
                squares += w * w
            else:
                assert w == 0, f"inactive vertex {v} has weight {w}"
        assert total == self._index.total, "total weight mismatch"
        assert squares == self._sum_squares, "sum of squares mismatch"


__all__ = ["WeightSnapshot", "ActiveSetSampler"]
