from __future__ import annotations

import numpy as np
import pytest

from hpa_core.errors import ConfigurationError
from hpa_core.random_source import ShiftedPoisson
from hpa_pipeline.pipeline import GenerationConfig, ModelConfig, RunConfig
from hpa_pipeline.seeding import attempt_sequence, master_sequence, run_sequence, seed_fingerprint, spawn_run_sequences


def test_defaults():
    cfg = GenerationConfig()
    assert cfg.parameters() == {"pv": 0.30, "pe": 0.49, "pd": 0.21, "m": 3, "t": 1000}
    assert (cfg.run.runs, cfg.run.retries, cfg.run.parallel) == (5, 100, False)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"pv": 0.5, "pe": 0.5, "pd": 0.5},
        {"pv": -0.1, "pe": 0.9, "pd": 0.2},
        {"pv": 1.2, "pe": -0.2, "pd": 0.0},
        {"pv": "a", "pe": 0.5, "pd": 0.5},
        {"pv": True, "pe": 0.0, "pd": 0.0},
        {"edge_size": 0},
    ],
)
def test_invalid_model(kwargs):
    with pytest.raises(ConfigurationError):
        ModelConfig(**kwargs)


def test_sum_tolerance():
    ModelConfig(pv=0.1, pe=0.2, pd=0.7)
    ModelConfig(pv=1 / 3, pe=1 / 3, pd=1 / 3)
    with pytest.raises(ConfigurationError):
        ModelConfig(pv=0.3, pe=0.49, pd=0.2100001)


def test_degenerate_probabilities_are_allowed():
    ModelConfig(pv=0.0, pe=0.0, pd=1.0)
    ModelConfig(pv=0.0, pe=1.0, pd=0.0)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"t": 0},
        {"retries": -1},
        {"runs": 0},
        {"t": 2.5},
        {"workers": 0},
        {"workers": "x"},
        {"workers": True},
        {"seed": -3},
        {"seed": 1.5},
        {"seed": "abc"},
        {"seed": True},
        {"parallel": "yes"},
    ],
)
def test_invalid_run(kwargs):
    with pytest.raises(ConfigurationError):
        RunConfig(**kwargs)


def test_from_mapping():
    cfg = GenerationConfig.from_mapping(
        {"model": {"pv": 0.2, "pe": 0.7, "pd": 0.1, "m": {"kind": "poisson", "lam": 2.0}}, "run": {"t": 10, "seed": 4}}
    )
    assert cfg.model.edge_size == ShiftedPoisson(2.0)
    assert cfg.run.t == 10 and cfg.run.seed == 4
    with pytest.raises(ConfigurationError):
        GenerationConfig.from_mapping({"run": {"steps": 3}})


def test_run_sequences_match_numpy_spawn():
    master = master_sequence(12)
    spawned = np.random.SeedSequence(12).spawn(4)
    for i, ss in enumerate(spawn_run_sequences(12, 4)):
        assert ss.generate_state(4).tolist() == spawned[i].generate_state(4).tolist()
    assert run_sequence(master, 2).spawn_key == (2,)
    assert attempt_sequence(run_sequence(master, 2), 5).spawn_key == (2, 5)


def test_seed_fingerprint_is_json_friendly():
    fp = seed_fingerprint(run_sequence(master_sequence(8), 1))
    assert fp == {"entropy": "8", "spawn_key": [1]}
