"""Determinism utilities.

Provides:
- _float_equal(a, b, tol): Absolute tolerance comparison.
- compare_artifacts(a, b, tol=0.0): Compare two hypergraph artifacts for deterministic equality.
- make_manifest(records, comparisons=None, label=None): Produce a concise manifest for a batch of runs.

Notes
- Artifacts follow the schema in hpa_pipeline.export:
    {"parameters": dict, "nodes": int, "edges": [[int]], "degree": [int], "theta": [float]}
- parameters, nodes, edges, and degree must match exactly; theta entries within tol.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence


def _float_equal(a: float, b: float, tol: float) -> bool:
    """Return True iff absolute difference <= tol."""
    try:
        return abs(float(a) - float(b)) <= float(tol)
    except (TypeError, ValueError):
        return False


def _first_mismatch(a: Sequence[Any], b: Sequence[Any]) -> Optional[int]:
    for i, (x, y) in enumerate(zip(a, b)):
        if x != y:
            return i
    if len(a) != len(b):
        return min(len(a), len(b))
    return None


def compare_artifacts(a: Mapping[str, Any], b: Mapping[str, Any], *, tol: float = 0.0) -> dict:
    """
    Compare two artifact dictionaries.

    Returns:
        {
          "equal": bool,
          "diff": {
            "parameters": {key: {"a": v1, "b": v2}},   # only keys that differ
            "nodes": {"a": n1, "b": n2},               # present only if differ
            "edges": {"index": i, "a": e1, "b": e2},   # first differing hyperedge
            "degree": {"index": i, "a": d1, "b": d2},  # first differing degree
            "theta": {"index": i, "a": x1, "b": x2}    # first theta outside tol
          }
        }
    """
    diff: Dict[str, Any] = {}

    pa = a.get("parameters") or {}
    pb = b.get("parameters") or {}
    pdiff = {k: {"a": pa.get(k), "b": pb.get(k)} for k in sorted(set(pa) | set(pb)) if pa.get(k) != pb.get(k)}
    if pdiff:
        diff["parameters"] = pdiff

    if a.get("nodes") != b.get("nodes"):
        diff["nodes"] = {"a": a.get("nodes"), "b": b.get("nodes")}

    for key in ("edges", "degree"):
        sa = [list(x) if isinstance(x, (list, tuple)) else x for x in (a.get(key) or [])]
        sb = [list(x) if isinstance(x, (list, tuple)) else x for x in (b.get(key) or [])]
        i = _first_mismatch(sa, sb)
        if i is not None:
            diff[key] = {
                "index": i,
                "a": sa[i] if i < len(sa) else None,
                "b": sb[i] if i < len(sb) else None,
            }

    ta = list(a.get("theta") or [])
    tb = list(b.get("theta") or [])
    for i in range(max(len(ta), len(tb))):
        if i >= len(ta) or i >= len(tb) or not _float_equal(ta[i], tb[i], tol):
            diff["theta"] = {
                "index": i,
                "a": ta[i] if i < len(ta) else None,
                "b": tb[i] if i < len(tb) else None,
            }
            break

    return {"equal": not diff, "diff": diff}


def make_manifest(
    records: Sequence[Mapping[str, Any]],
    *,
    comparisons: Sequence[dict] | None = None,
    label: str | None = None,
) -> dict:
    """
    Build a concise manifest for a batch of runs from their run-log records.
    """
    ok = [r for r in records if r.get("ok")]
    manifest = {
        "label": label or "hypergraphs",
        "n": len(records),
        "succeeded": len(ok),
        "failed": [r.get("run") for r in records if not r.get("ok")],
        "paths": [r.get("path") for r in ok if r.get("path")],
        "seeds": [r.get("seed") for r in records if r.get("seed") is not None],
        "comparisons": list(comparisons or []),
    }
    return manifest


__all__ = ["compare_artifacts", "make_manifest"]
