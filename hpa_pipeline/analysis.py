# Copyright (c) 2025 HPA Maintainers
# License: MIT
"""
Descriptive summaries of generated hypergraphs (NumPy only).

Implements:
- degree_distribution: fraction of vertices per degree (active and inactive vertices alike)
- degree_histogram: sorted distinct degrees and their counts
- log_binned_distribution: density over logarithmic degree bins, for heavy-tailed data
- edge_size_counts: number of hyperedges per size
- theta_summary: count/mean/min/max/last of the theta series
- summarize_artifact: all of the above for one artifact document

No model fitting is performed here.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Sequence, Tuple

import numpy as np


def _degrees(degree: Sequence[int] | np.ndarray) -> np.ndarray:
    a = np.asarray(degree, dtype=np.int64)
    if a.ndim != 1:
        raise ValueError("degree must be 1-D")
    return a


def degree_histogram(degree: Sequence[int] | np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    a = _degrees(degree)
    return np.unique(a, return_counts=True)


def degree_distribution(degree: Sequence[int] | np.ndarray) -> Dict[int, float]:
    a = _degrees(degree)
    if a.size == 0:
        return {}
    values, counts = np.unique(a, return_counts=True)
    return {int(v): float(c) / a.size for v, c in zip(values, counts)}


def log_binned_distribution(
    degree: Sequence[int] | np.ndarray,
    bins_per_decade: int = 5,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Return (bin centers, density) over logarithmic bins covering [1, max degree].
    Zero-degree vertices are excluded. Density is normalized by bin width and vertex count.
    """
    a = _degrees(degree)
    a = a[a > 0]
    if a.size == 0:
        return np.empty(0), np.empty(0)
    hi = float(a.max()) + 1.0
    n_bins = max(1, int(np.ceil(np.log10(hi) * bins_per_decade)))
    edges = np.unique(np.floor(np.logspace(0.0, np.log10(hi), n_bins + 1)))
    if edges.size < 2:
        edges = np.array([1.0, hi])
    counts, edges = np.histogram(a, bins=edges)
    widths = np.diff(edges)
    centers = np.sqrt(edges[:-1] * edges[1:])
    density = counts / (widths * a.size)
    mask = counts > 0
    return centers[mask], density[mask]


def edge_size_counts(edges: Sequence[Sequence[int]]) -> Dict[int, int]:
    sizes = np.fromiter((len(e) for e in edges), dtype=np.int64, count=len(edges))
    values, counts = np.unique(sizes, return_counts=True)
    return {int(v): int(c) for v, c in zip(values, counts)}


def theta_summary(theta: Sequence[float] | np.ndarray) -> Dict[str, Any]:
    a = np.asarray(theta, dtype=float)
    if a.size == 0:
        return {"count": 0, "mean": None, "min": None, "max": None, "last": None}
    return {
        "count": int(a.size),
        "mean": float(a.mean()),
        "min": float(a.min()),
        "max": float(a.max()),
        "last": float(a[-1]),
    }


def summarize_artifact(doc: Mapping[str, Any]) -> Dict[str, Any]:
    degree = doc.get("degree") or []
    a = _degrees(degree)
    return {
        "parameters": dict(doc.get("parameters") or {}),
        "nodes": int(doc.get("nodes", a.size)),
        "edges": len(doc.get("edges") or []),
        "mean_degree": float(a.mean()) if a.size else None,
        "max_degree": int(a.max()) if a.size else None,
        "degree_distribution": {str(k): v for k, v in degree_distribution(a).items()},
        "edge_sizes": {str(k): v for k, v in edge_size_counts(doc.get("edges") or []).items()},
        "theta": theta_summary(doc.get("theta") or []),
    }


__all__ = [
    "degree_distribution",
    "degree_histogram",
    "log_binned_distribution",
    "edge_size_counts",
    "theta_summary",
    "summarize_artifact",
]
