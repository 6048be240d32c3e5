# Copyright (c) 2025 HPA Maintainers
# License: MIT
"""
Hypergraph Preferential Attachment (HPA) — Core typed interfaces and data models.

This module defines:
- Type aliases for vertex identifiers and hyperedges
- EventKind: the three stochastic events of one growth step
- Data models: StateDelta (a committed-step description), Infeasible (a failed step)
- Protocols (interfaces) for pluggable collaborators:
    * EdgeSizeDistribution (the hyperedge-size random variable Y)
    * RandomSource (uniform draws, event selection, edge sizes)

References:
- hpa_core.engine (producer of StateDelta / Infeasible)
- hpa_pipeline.pipeline (consumer; retry loop)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Protocol, Tuple, Union, runtime_checkable

# ---------- Type aliases and identifiers ----------

VertexId = int  # dense id in [0, n)
Edge = Tuple[VertexId, ...]  # ordered, repeats allowed, len >= 1
Weight = int  # degree used as preferential weight


class EventKind(str, Enum):
    VERTEX_ARRIVAL = "vertex_arrival"
    EDGE_ARRIVAL = "edge_arrival"
    DEACTIVATION = "deactivation"


# ---------- Step results ----------


@dataclass(frozen=True)
class StateDelta:
    """
    Everything one feasible step changes, computed against the pre-step state.

    - new_vertex: id the vertex-arrival event creates (None for other events)
    - edge: hyperedge to append (vertex arrival puts the new vertex first)
    - deactivated: vertex to deactivate (deactivation only)
    - theta: second moment over first moment of active degrees, recorded
      before the deactivation is applied (deactivation only)
    """
    event: EventKind
    step_index: int
    edge_size: Optional[int] = None
    new_vertex: Optional[VertexId] = None
    edge: Optional[Edge] = None
    deactivated: Optional[VertexId] = None
    theta: Optional[float] = None

    def to_jsonable(self) -> Dict[str, Any]:
        return {
            "event": self.event.value,
            "step": self.step_index,
            "edge_size": self.edge_size,
            "new_vertex": self.new_vertex,
            "edge": None if self.edge is None else list(self.edge),
            "deactivated": self.deactivated,
            "theta": self.theta,
        }


@dataclass(frozen=True)
class Infeasible:
    """A step that cannot be performed because no active vertex is available to draw from."""
    event: EventKind
    step_index: int
    reason: str


StepOutcome = Union[StateDelta, Infeasible]


# ---------- Protocols (interfaces) ----------


@runtime_checkable
class EdgeSizeDistribution(Protocol):
    """Distribution of hyperedge sizes Y; every draw is a positive integer."""

    def draw(self, rng: Any, step_index: int) -> int:
        """Draw Y_t for step `step_index` using the numpy Generator `rng`."""
        ...

    def describe(self) -> Any:
        """JSON-compatible description used for the artifact "m" parameter."""
        ...


@runtime_checkable
class RandomSource(Protocol):
    """Per-run random stream threaded explicitly through the step engine."""

    def uniform(self) -> float:
        ...

    def integers(self, low: int, high: int) -> int:
        """Uniform integer in [low, high)."""
        ...

    def draw_event(self, pv: float, pe: float, pd: float) -> EventKind:
        ...

    def draw_edge_size(self, step_index: int) -> int:
        ...


__all__ = [
    "VertexId",
    "Edge",
    "Weight",
    "EventKind",
    "StateDelta",
    "Infeasible",
    "StepOutcome",
    "EdgeSizeDistribution",
    "RandomSource",
]
