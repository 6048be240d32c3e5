# Copyright (c) 2025 HPA Maintainers
# License: MIT
"""
Random sub-stream derivation for reproducible, independent runs.

Provides:
- master_sequence: SeedSequence for a master seed (None -> fresh OS entropy)
- spawn_run_sequences: one child SeedSequence per run index
- attempt_sequence: deterministic child of a run's sequence for a given attempt
- make_source: NumpyRandomSource over a sequence with the configured edge-size distribution
- seed_fingerprint: JSON-compatible identity of a sequence (for run logs)

Determinism guarantees
- With an integer master seed, run i always receives the same stream regardless of
  how many runs are launched, whether they run in parallel, or the completion order.
- Attempt k of a run is derived from (run sequence, k) only, so re-running a single
  run index reproduces its retries exactly.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import numpy as np

from hpa_core.interfaces import EdgeSizeDistribution
from hpa_core.random_source import NumpyRandomSource


def master_sequence(seed: Optional[int] = None) -> np.random.SeedSequence:
    return np.random.SeedSequence(seed)


def run_sequence(master: np.random.SeedSequence, run_index: int) -> np.random.SeedSequence:
    """Child `run_index` of `master`, identical to master.spawn(n)[run_index] for any n > run_index."""
    return np.random.SeedSequence(
        entropy=master.entropy,
        spawn_key=tuple(master.spawn_key) + (int(run_index),),
        pool_size=master.pool_size,
    )


def spawn_run_sequences(seed: Optional[int], runs: int) -> List[np.random.SeedSequence]:
    master = master_sequence(seed)
    return [run_sequence(master, i) for i in range(int(runs))]


def attempt_sequence(run_ss: np.random.SeedSequence, attempt: int) -> np.random.SeedSequence:
    return run_sequence(run_ss, attempt)


def make_source(ss: np.random.SeedSequence, edge_size: EdgeSizeDistribution) -> NumpyRandomSource:
    return NumpyRandomSource(ss, edge_size=edge_size)


def seed_fingerprint(ss: np.random.SeedSequence) -> Dict[str, Any]:
    return {"entropy": str(ss.entropy), "spawn_key": [int(k) for k in ss.spawn_key]}


__all__ = [
    "master_sequence",
    "run_sequence",
    "spawn_run_sequences",
    "attempt_sequence",
    "make_source",
    "seed_fingerprint",
]
