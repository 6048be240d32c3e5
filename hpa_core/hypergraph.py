# Copyright (c) 2025 HPA Maintainers
# License: MIT
"""
Growing hypergraph state for the preferential attachment model with vertex deactivation.

Provides:
- HypergraphState: vertices (dense ids), degrees, activity flags, append-only hyperedges,
  and the degree-weighted ActiveSetSampler kept in lockstep with them.

Notes
- A hyperedge is an ordered tuple of vertex ids; an id may repeat, and each occurrence
  adds one to that vertex's degree.
- Deactivation never deletes anything; it only removes the vertex from selection.
- Hyperedges may only reference vertices that are active when they are added.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Dict, Iterable, List, Sequence

from hpa_core.interfaces import Edge, VertexId
from hpa_core.sampler import ActiveSetSampler


class HypergraphState:
    """
    In-memory hypergraph owned by one run attempt.

    Data structures
    - degree: VertexId -> int
    - active: VertexId -> bool (true -> false only)
    - edges: list of Edge tuples in creation order
    - sampler: ActiveSetSampler with weight(v) == degree(v) for active v
    """

    def __init__(self, capacity: int = 16) -> None:
        self.degree: List[int] = []
        self.active: List[bool] = []
        self.edges: List[Edge] = []
        self.sampler = ActiveSetSampler(capacity)

    @classmethod
    def initial(cls, capacity: int = 16) -> "HypergraphState":
        """H_0: one vertex with a single hyperedge [0] of size 1."""
        h = cls(capacity)
        v = h.add_vertex()
        h.add_edge((v,))
        return h

    # ---- Mutations ----

    def add_vertex(self) -> VertexId:
        v = len(self.degree)
        self.degree.append(0)
        self.active.append(True)
        self.sampler.register(v)
        return v

    def add_edge(self, vertices: Iterable[VertexId]) -> Edge:
        """Append a hyperedge; every listed occurrence increments that vertex's degree."""
        e: Edge = tuple(int(v) for v in vertices)
        if not e:
            raise ValueError("a hyperedge must contain at least one vertex")
        n = len(self.degree)
        for v in e:
            if v < 0 or v >= n:
                raise ValueError(f"hyperedge references unknown vertex {v}")
            if not self.active[v]:
                raise ValueError(f"hyperedge references inactive vertex {v}")
        for v, c in Counter(e).items():
            self.degree[v] += c
            self.sampler.increment(v, c)
        self.edges.append(e)
        return e

    def deactivate(self, v: VertexId) -> None:
        if v < 0 or v >= len(self.active):
            raise ValueError(f"unknown vertex {v}")
        if not self.active[v]:
            raise ValueError(f"vertex {v} is already inactive")
        self.active[v] = False
        self.sampler.deactivate(v)

    # ---- Queries ----

    @property
    def num_vertices(self) -> int:
        return len(self.degree)

    @property
    def num_edges(self) -> int:
        return len(self.edges)

    @property
    def active_count(self) -> int:
        return self.sampler.active_count

    def active_vertices(self) -> List[VertexId]:
        return [v for v, a in enumerate(self.active) if a]

    def degree_distribution(self) -> Dict[int, float]:
        """Fraction of vertices (active or not) per degree value."""
        n = len(self.degree)
        if n == 0:
            return {}
        counts = Counter(self.degree)
        return {d: c / n for d, c in sorted(counts.items())}

    def check_invariants(self) -> None:
        """Raise AssertionError if the degree/edge/sampler bookkeeping disagrees."""
        assert sum(self.degree) == sum(len(e) for e in self.edges), "degree sum != total edge length"
        recount = Counter(v for e in self.edges for v in e)
        for v, d in enumerate(self.degree):
            assert recount.get(v, 0) == d, f"degree of {v} is {d}, edges give {recount.get(v, 0)}"
        assert self.sampler.active_count == sum(self.active), "active count mismatch"
        self.sampler.check_consistency(self.degree)

    def to_jsonable(self) -> Dict[str, Any]:
        return {
            "nodes": self.num_vertices,
            "edges": [list(e) for e in self.edges],
            "degree": list(self.degree),
        }

    def __repr__(self) -> str:
        return (
            f"HypergraphState(nodes={self.num_vertices}, edges={self.num_edges}, "
            f"active={self.active_count})"
        )


def degree_sequence(edges: Sequence[Sequence[VertexId]], nodes: int) -> List[int]:
    """Recompute degrees from a list of hyperedges (counting repeats)."""
    deg = [0] * int(nodes)
    for e in edges:
        for v in e:
            deg[int(v)] += 1
    return deg


__all__ = ["HypergraphState", "degree_sequence"]
