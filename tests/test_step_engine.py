from __future__ import annotations

from types import SimpleNamespace

import pytest

from hpa_core.engine import advance, commit, step
from hpa_core.hypergraph import HypergraphState
from hpa_core.interfaces import EventKind, Infeasible, StateDelta

MODEL = SimpleNamespace(pv=0.3, pe=0.49, pd=0.21)

VA = EventKind.VERTEX_ARRIVAL
EA = EventKind.EDGE_ARRIVAL
DE = EventKind.DEACTIVATION


def test_vertex_arrival_with_singleton_edge(scripted):
    h = HypergraphState.initial()
    rng = scripted([VA], sizes=[1])
    out = step(h, rng, MODEL, 1)
    assert out == StateDelta(event=VA, step_index=1, edge_size=1, new_vertex=1, edge=(1,))
    assert rng.integer_calls == []
    commit(h, out)
    assert h.degree == [1, 1]
    h.check_invariants()


def test_vertex_arrival_draws_remaining_endpoints_from_pre_step_weights(scripted):
    h = HypergraphState.initial()
    rng = scripted([VA], sizes=[3])
    out = step(h, rng, MODEL, 1)
    assert out.edge == (1, 0, 0)
    # both draws use the total weight of H_0 (the new vertex contributes nothing)
    assert rng.integer_calls == [(1, 2), (1, 2)]
    commit(h, out)
    assert h.edges[-1] == (1, 0, 0)
    assert h.degree == [3, 1]


def test_edge_arrival(scripted):
    h = HypergraphState.initial()
    h.add_vertex()
    h.add_edge((1, 1, 1))
    # weights [1, 3]: x=1 -> 0, x in 2..4 -> 1
    rng = scripted([EA], sizes=[2], integers=[4, 1])
    out = advance(h, rng, MODEL, 2)
    assert out.edge == (1, 0)
    assert out.new_vertex is None
    assert h.degree == [2, 4]
    h.check_invariants()


def test_deactivation_records_pre_step_theta(scripted):
    h = HypergraphState.initial()
    h.add_vertex()
    h.add_edge((1, 1, 1))
    rng = scripted([DE], integers=[2])
    out = advance(h, rng, MODEL, 3)
    assert out.deactivated == 1
    assert out.theta == pytest.approx((1 + 9) / 4)
    assert h.active_vertices() == [0]
    assert h.degree == [1, 3]


def test_deactivation_of_initial_vertex_has_unit_theta(scripted):
    h = HypergraphState.initial()
    out = advance(h, scripted([DE]), MODEL, 1)
    assert out.theta == 1.0
    assert h.active_count == 0


@pytest.mark.parametrize(
    "event,sizes",
    [(VA, [2]), (EA, [1]), (DE, [])],
)
def test_infeasible_when_no_vertex_is_active(scripted, event, sizes):
    h = HypergraphState.initial()
    h.deactivate(0)
    out = step(h, scripted([event], sizes=sizes), MODEL, 4)
    assert isinstance(out, Infeasible)
    assert out.event is event
    assert out.step_index == 4


def test_singleton_arrival_is_feasible_without_active_vertices(scripted):
    h = HypergraphState.initial()
    h.deactivate(0)
    out = advance(h, scripted([VA], sizes=[1]), MODEL, 2)
    assert isinstance(out, StateDelta)
    assert h.active_vertices() == [1]


def test_step_does_not_mutate_state(scripted):
    h = HypergraphState.initial()
    gen = h.sampler.generation
    for event, sizes in ((VA, [3]), (EA, [2]), (DE, [])):
        step(h, scripted([event], sizes=sizes), MODEL, 1)
    assert h.sampler.generation == gen
    assert h.degree == [1]
    assert h.edges == [(0,)]


def test_commit_rejects_foreign_delta():
    h = HypergraphState.initial()
    with pytest.raises(ValueError):
        commit(h, StateDelta(event=VA, step_index=1, edge_size=1, new_vertex=5, edge=(5,)))
    with pytest.raises(ValueError):
        commit(h, StateDelta(event=EA, step_index=1, edge_size=2, edge=(0, 3)))
    h.deactivate(0)
    with pytest.raises(ValueError):
        commit(h, StateDelta(event=DE, step_index=1, deactivated=0, theta=1.0))
    assert h.num_vertices == 1
    assert h.num_edges == 1


def test_delta_jsonable(scripted):
    h = HypergraphState.initial()
    out = step(h, scripted([VA], sizes=[2]), MODEL, 7)
    assert out.to_jsonable() == {
        "event": "vertex_arrival",
        "step": 7,
        "edge_size": 2,
        "new_vertex": 1,
        "edge": [1, 0],
        "deactivated": None,
        "theta": None,
    }
