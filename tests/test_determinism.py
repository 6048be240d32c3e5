from __future__ import annotations

from hpa_pipeline.determinism import compare_artifacts, make_manifest
from hpa_pipeline.export import HypergraphWriter, load_artifact
from hpa_pipeline.orchestrator import RunOrchestrator
from hpa_pipeline.pipeline import GenerationConfig, ModelConfig, RunConfig

DOC = {
    "parameters": {"pv": 0.3, "pe": 0.49, "pd": 0.21, "m": 2, "t": 3},
    "nodes": 2,
    "edges": [[0], [1, 0], [0, 0]],
    "degree": [4, 1],
    "theta": [2.5, 1.0],
}


def test_identical_artifacts_are_equal():
    assert compare_artifacts(DOC, dict(DOC)) == {"equal": True, "diff": {}}


def test_first_mismatch_is_reported():
    other = dict(DOC, edges=[[0], [1, 1], [0, 0]], theta=[2.5, 1.1], parameters=dict(DOC["parameters"], t=4))
    res = compare_artifacts(DOC, other)
    assert not res["equal"]
    assert res["diff"]["edges"] == {"index": 1, "a": [1, 0], "b": [1, 1]}
    assert res["diff"]["theta"]["index"] == 1
    assert res["diff"]["parameters"] == {"t": {"a": 3, "b": 4}}
    assert "degree" not in res["diff"]


def test_theta_tolerance_and_length():
    close = dict(DOC, theta=[2.5 + 1e-12, 1.0])
    assert compare_artifacts(DOC, close, tol=1e-9)["equal"]
    assert not compare_artifacts(DOC, close)["equal"]
    shorter = dict(DOC, theta=[2.5])
    assert compare_artifacts(DOC, shorter)["diff"]["theta"] == {"index": 1, "a": 1.0, "b": None}


def test_manifest_counts():
    records = [
        {"run": 0, "ok": True, "path": "h-0.json", "seed": {"spawn_key": [0]}},
        {"run": 1, "ok": False, "path": None, "seed": {"spawn_key": [1]}},
    ]
    m = make_manifest(records, label="h")
    assert m["n"] == 2 and m["succeeded"] == 1
    assert m["failed"] == [1]
    assert m["paths"] == ["h-0.json"]
    assert len(m["seeds"]) == 2


def test_seeded_batches_write_identical_artifacts(tmp_path):
    cfg = GenerationConfig(
        model=ModelConfig(edge_size=3),
        run=RunConfig(t=200, runs=2, seed=31),
    )
    a = RunOrchestrator(cfg, writer=HypergraphWriter(tmp_path / "a")).run_all()
    b = RunOrchestrator(cfg, writer=HypergraphWriter(tmp_path / "b")).run_all()
    for ra, rb in zip(a, b):
        res = compare_artifacts(load_artifact(ra.path), load_artifact(rb.path))
        assert res["equal"], res["diff"]
