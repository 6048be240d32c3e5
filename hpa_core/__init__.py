# Hypergraph Preferential Attachment (HPA) — Core package
# License: MIT

"""
Core package for generating random hypergraphs under preferential attachment with
vertex deactivation.

Primary modules
- interfaces: typed data models and Protocols (events, step results, random source)
- random_source: numpy-backed seedable random source and edge-size distributions
- fenwick: cumulative-weight index
- sampler: degree-weighted active-set sampler with per-step snapshots
- hypergraph: the growing hypergraph state
- engine: the per-step transition (step / commit)

This __init__ consolidates common exports for convenience:
    from hpa_core import (
        EventKind, StateDelta, Infeasible, HypergraphState, ActiveSetSampler,
        NumpyRandomSource, ConstantSize, step, commit,
    )
"""

from __future__ import annotations

__all__ = [
    # Entities
    "EventKind",
    "StateDelta",
    "Infeasible",
    "WeightSnapshot",
    # Protocols
    "EdgeSizeDistribution",
    "RandomSource",
    # Errors
    "HPAError",
    "ConfigurationError",
    "RetriesExhausted",
    "OutputError",
    # Implementations
    "FenwickTree",
    "ActiveSetSampler",
    "HypergraphState",
    "NumpyRandomSource",
    "ConstantSize",
    "ShiftedPoisson",
    "Categorical",
    "as_edge_size",
    "parse_edge_size",
    "step",
    "commit",
    "advance",
    # Version
    "__version__",
]

__version__ = "0.1.0"

from .interfaces import (
    EventKind,
    StateDelta,
    Infeasible,
    EdgeSizeDistribution,
    RandomSource,
)
from .errors import HPAError, ConfigurationError, RetriesExhausted, OutputError
from .fenwick import FenwickTree
from .sampler import ActiveSetSampler, WeightSnapshot
from .hypergraph import HypergraphState
from .random_source import (
    NumpyRandomSource,
    ConstantSize,
    ShiftedPoisson,
    Categorical,
    as_edge_size,
    parse_edge_size,
)
from .engine import step, commit, advance
