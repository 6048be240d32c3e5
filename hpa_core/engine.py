# Copyright (c) 2025 HPA Maintainers
# License: MIT
"""
Step engine for the random preferential attachment hypergraph model with vertex deactivation.

Given H_{t-1}, one step builds H_t as follows:
- wp pv, add a vertex and a preferentially selected hyperedge of size Y_t containing it,
- wp pe, add a preferentially selected hyperedge of size Y_t,
- wp pd, deactivate a preferentially selected vertex.

Preferential selection picks an active vertex with probability proportional to its
degree, using the weights of H_{t-1} for every endpoint of the step.

Provides:
- step(state, rng, model, step_index) -> StateDelta | Infeasible   (no mutation)
- commit(state, delta)                                              (all-or-nothing)
- advance(state, rng, model, step_index)                            (step + commit)

`model` is any object exposing float attributes pv, pe, pd (see
hpa_pipeline.pipeline.ModelConfig); the edge-size distribution lives on the random source.
"""

from __future__ import annotations

from typing import Any

from hpa_core.hypergraph import HypergraphState
from hpa_core.interfaces import EventKind, Infeasible, RandomSource, StateDelta, StepOutcome

_NO_ACTIVE = "all vertices have been deactivated"


def step(state: HypergraphState, rng: RandomSource, model: Any, step_index: int) -> StepOutcome:
    """Draw one event and compute its effect against the current (pre-step) state."""
    event = rng.draw_event(model.pv, model.pe, model.pd)

    if event is EventKind.VERTEX_ARRIVAL:
        y = rng.draw_edge_size(step_index)
        v = state.num_vertices
        if y == 1:
            return StateDelta(event=event, step_index=step_index, edge_size=1, new_vertex=v, edge=(v,))
        snap = state.sampler.snapshot()
        if snap.empty:
            return Infeasible(event=event, step_index=step_index, reason=_NO_ACTIVE)
        drawn = state.sampler.draw_k(snap, y - 1, rng)
        return StateDelta(event=event, step_index=step_index, edge_size=y, new_vertex=v, edge=(v, *drawn))

    if event is EventKind.EDGE_ARRIVAL:
        y = rng.draw_edge_size(step_index)
        snap = state.sampler.snapshot()
        if snap.empty:
            return Infeasible(event=event, step_index=step_index, reason=_NO_ACTIVE)
        drawn = state.sampler.draw_k(snap, y, rng)
        return StateDelta(event=event, step_index=step_index, edge_size=y, edge=tuple(drawn))

    snap = state.sampler.snapshot()
    if snap.empty:
        return Infeasible(event=event, step_index=step_index, reason=_NO_ACTIVE)
    u = state.sampler.draw_one(snap, rng)
    return StateDelta(event=event, step_index=step_index, deactivated=u, theta=snap.theta)


def _validate(state: HypergraphState, delta: StateDelta) -> None:
    n = state.num_vertices
    if delta.new_vertex is not None and delta.new_vertex != n:
        raise ValueError(f"delta creates vertex {delta.new_vertex}, next id is {n}")
    if delta.edge is not None:
        if not delta.edge:
            raise ValueError("a hyperedge must contain at least one vertex")
        for v in delta.edge:
            if v == delta.new_vertex:
                continue
            if v < 0 or v >= n or not state.active[v]:
                raise ValueError(f"hyperedge endpoint {v} is not an active vertex of the pre-step state")
    if delta.deactivated is not None:
        u = delta.deactivated
        if u < 0 or u >= n or not state.active[u]:
            raise ValueError(f"cannot deactivate vertex {u}: not active")


def commit(state: HypergraphState, delta: StateDelta) -> None:
    """Apply a StateDelta produced by `step` for this exact state."""
    _validate(state, delta)
    if delta.new_vertex is not None:
        state.add_vertex()
    if delta.edge is not None:
        state.add_edge(delta.edge)
    if delta.deactivated is not None:
        state.deactivate(delta.deactivated)


def advance(state: HypergraphState, rng: RandomSource, model: Any, step_index: int) -> StepOutcome:
    outcome = step(state, rng, model, step_index)
    if isinstance(outcome, StateDelta):
        commit(state, outcome)
    return outcome


__all__ = ["step", "commit", "advance"]
