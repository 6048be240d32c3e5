# Copyright (c) 2025 HPA Maintainers
# License: MIT
"""
HPA Pipeline — configuration and the per-run controller.

This module provides:
- Config dataclasses: ModelConfig (pv, pe, pd, edge size), RunConfig (t, retries, runs,
  parallelism, seed), GenerationConfig (both, plus the artifact "parameters" block)
- RunResult: finished hypergraph, theta series, attempt and event counts
- RunController: drives the step engine for t steps and retries failed attempts

Typical flow in one run()
1) attempt k: fresh H_0, fresh random sub-stream derived from (run sequence, k)
2) for s in 1..t: outcome = step(...)
   - StateDelta: commit, append theta on deactivation
   - Infeasible: discard the attempt and move to attempt k+1
3) after 1 + retries failed attempts: raise RetriesExhausted

References
- Step engine: hpa_core/engine.py
- Sub-streams: hpa_pipeline/seeding.py
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

import numpy as np

from hpa_core.engine import commit, step
from hpa_core.errors import ConfigurationError, RetriesExhausted
from hpa_core.hypergraph import HypergraphState
from hpa_core.interfaces import EdgeSizeDistribution, EventKind, Infeasible
from hpa_core.random_source import as_edge_size, edge_size_from_jsonable
from hpa_pipeline.seeding import attempt_sequence, make_source, master_sequence

logger = logging.getLogger(__name__)

PROBABILITY_TOLERANCE = 1e-9


# -------------------------
# Config dataclasses
# -------------------------


@dataclass(frozen=True)
class ModelConfig:
    pv: float = 0.30
    pe: float = 0.49
    pd: float = 0.21
    # int -> ConstantSize(int)
    edge_size: Union[int, EdgeSizeDistribution] = 3

    def __post_init__(self) -> None:
        for name in ("pv", "pe", "pd"):
            p = getattr(self, name)
            if isinstance(p, bool) or not isinstance(p, (int, float)):
                raise ConfigurationError(f"Expected `{name}` to be a number, got {p!r}")
            if not (0.0 <= float(p) <= 1.0):
                raise ConfigurationError(f"Expected `{name}` to lie in [0, 1], got {p}")
            object.__setattr__(self, name, float(p))
        if abs(self.pv + self.pe + self.pd - 1.0) > PROBABILITY_TOLERANCE:
            raise ConfigurationError(
                f"Expected `pv`, `pe` and `pd` to sum up to 1, got {self.pv + self.pe + self.pd}"
            )
        object.__setattr__(self, "edge_size", as_edge_size(self.edge_size))

    def describe_edge_size(self) -> Any:
        return self.edge_size.describe()  # type: ignore[union-attr]


@dataclass(frozen=True)
class RunConfig:
    t: int = 1000
    retries: int = 100
    runs: int = 5
    parallel: bool = False
    # None -> os.cpu_count()
    workers: Optional[int] = None
    # None -> fresh OS entropy (runs are not reproducible)
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        for name, lo in (("t", 1), ("retries", 0), ("runs", 1)):
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, (int, np.integer)) or int(v) < lo:
                raise ConfigurationError(f"Expected `{name}` to be an integer >= {lo}, got {v!r}")
            object.__setattr__(self, name, int(v))
        for name, lo in (("workers", 1), ("seed", 0)):
            v = getattr(self, name)
            if v is None:
                continue
            if isinstance(v, bool) or not isinstance(v, (int, np.integer)) or int(v) < lo:
                raise ConfigurationError(f"Expected `{name}` to be an integer >= {lo}, got {v!r}")
            object.__setattr__(self, name, int(v))
        if not isinstance(self.parallel, (bool, np.bool_)):
            raise ConfigurationError(f"Expected `parallel` to be a boolean, got {self.parallel!r}")
        object.__setattr__(self, "parallel", bool(self.parallel))


@dataclass(frozen=True)
class GenerationConfig:
    model: ModelConfig = field(default_factory=ModelConfig)
    run: RunConfig = field(default_factory=RunConfig)

    def parameters(self) -> Dict[str, Any]:
        """The "parameters" block of an output artifact."""
        return {
            "pv": self.model.pv,
            "pe": self.model.pe,
            "pd": self.model.pd,
            "m": self.model.describe_edge_size(),
            "t": self.run.t,
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GenerationConfig":
        """
        Build from a nested mapping {"model": {...}, "run": {...}} (e.g. a YAML document).
        Missing keys fall back to dataclass defaults; "m" is accepted as an alias of "edge_size".
        """
        model_map = dict(data.get("model", {}) or {})
        run_map = dict(data.get("run", {}) or {})
        if "m" in model_map:
            model_map.setdefault("edge_size", model_map.pop("m"))
        if "edge_size" in model_map:
            model_map["edge_size"] = edge_size_from_jsonable(model_map["edge_size"])
        unknown = (set(model_map) - {"pv", "pe", "pd", "edge_size"}) | (
            set(run_map) - {"t", "retries", "runs", "parallel", "workers", "seed"}
        )
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {sorted(unknown)}")
        return cls(model=ModelConfig(**model_map), run=RunConfig(**run_map))


# -------------------------
# Run results
# -------------------------


@dataclass
class RunResult:
    hypergraph: HypergraphState
    theta: List[float]
    attempts: int
    events: Dict[str, int]
    run_index: int = 0

    def to_jsonable(self, parameters: Mapping[str, Any]) -> Dict[str, Any]:
        """Artifact document: parameters, nodes, edges, degree, theta."""
        return {
            "parameters": dict(parameters),
            "nodes": self.hypergraph.num_vertices,
            "edges": [list(e) for e in self.hypergraph.edges],
            "degree": list(self.hypergraph.degree),
            "theta": list(self.theta),
        }


StepObserver = Callable[[int, HypergraphState, Any], None]


# -------------------------
# Run controller
# -------------------------


class RunController:
    """
    Drives one run: up to 1 + retries attempts of t steps each.

    Args:
        config: GenerationConfig
        seed_sequence: the run's SeedSequence; attempt k draws from its k-th child.
            None derives one from config.run.seed.
        run_index: tag used in logs and errors
        observer: optional callback(step_index, state, outcome) invoked after each step is
            drawn and before it is committed; the state is the pre-step state.
    """

    def __init__(
        self,
        config: GenerationConfig,
        seed_sequence: Optional[np.random.SeedSequence] = None,
        run_index: int = 0,
        observer: Optional[StepObserver] = None,
    ) -> None:
        self.config = config
        self.seed_sequence = seed_sequence if seed_sequence is not None else master_sequence(config.run.seed)
        self.run_index = int(run_index)
        self.observer = observer

    def attempt(self, attempt_index: int) -> Union[RunResult, Infeasible]:
        """One attempt from H_0; returns the first Infeasible outcome on failure."""
        model = self.config.model
        steps = self.config.run.t
        rng = make_source(attempt_sequence(self.seed_sequence, attempt_index), model.edge_size)  # type: ignore[arg-type]
        # every step adds at most one vertex
        state = HypergraphState.initial(capacity=min(steps + 1, 1 << 20))
        theta: List[float] = []
        events = {k.value: 0 for k in EventKind}

        for s in range(1, steps + 1):
            outcome = step(state, rng, model, s)
            if self.observer is not None:
                self.observer(s, state, outcome)
            if isinstance(outcome, Infeasible):
                return outcome
            commit(state, outcome)
            events[outcome.event.value] += 1
            if outcome.theta is not None:
                theta.append(outcome.theta)

        return RunResult(hypergraph=state, theta=theta, attempts=attempt_index + 1, events=events, run_index=self.run_index)

    def run(self) -> RunResult:
        max_attempts = 1 + self.config.run.retries
        last: Optional[Infeasible] = None
        for k in range(max_attempts):
            result = self.attempt(k)
            if isinstance(result, RunResult):
                if k > 0:
                    logger.info("[%d]: succeeded on attempt %d", self.run_index, k + 1)
                return result
            last = result
            logger.debug(
                "[%d]: attempt %d infeasible at step %d (%s): %s",
                self.run_index, k + 1, result.step_index, result.event.value, result.reason,
            )
        reason = None
        if last is not None:
            reason = f"step {last.step_index} ({last.event.value}): {last.reason}"
        logger.warning("[%d]: failed after %d attempt(s)", self.run_index, max_attempts)
        raise RetriesExhausted(self.run_index, max_attempts, reason)


def generate(config: GenerationConfig, seed_sequence: Optional[np.random.SeedSequence] = None, run_index: int = 0) -> RunResult:
    """Convenience wrapper: one run with retries."""
    return RunController(config, seed_sequence=seed_sequence, run_index=run_index).run()


__all__ = [
    "PROBABILITY_TOLERANCE",
    "ModelConfig",
    "RunConfig",
    "GenerationConfig",
    "RunResult",
    "RunController",
    "generate",
]
