#!/usr/bin/env python3
# Copyright (c) 2025 HPA Maintainers
# License: MIT
"""
Summarize generated hypergraph artifacts.

Reads one or more "<save>-<i>.json" artifacts and prints one JSON line per artifact with
node/edge counts, the empirical degree distribution, hyperedge sizes, and theta statistics.
With --compare, the first two artifacts are also checked for identical edges, degrees,
and theta series.

Usage:
  python -m scripts.summarize data/hypergraph-0.json
  python -m scripts.summarize data/a-0.json data/b-0.json --compare
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional, Sequence

from hpa_pipeline.analysis import summarize_artifact
from hpa_pipeline.determinism import compare_artifacts
from hpa_pipeline.export import load_artifact


def run_main(paths: Sequence[str], compare: bool = False, tol: float = 0.0) -> dict:
    """
    Load and summarize artifacts.

    Returns:
        {"summaries": [{"path": ..., **summary}], "comparison": {...} | None}

    Raises:
        FileNotFoundError / ValueError: if an artifact is missing or malformed.
    """
    docs = [load_artifact(p) for p in paths]
    summaries: List[dict] = [{"path": str(p), **summarize_artifact(d)} for p, d in zip(paths, docs)]
    comparison = None
    if compare:
        if len(docs) < 2:
            raise ValueError("--compare needs at least two artifacts")
        comparison = compare_artifacts(docs[0], docs[1], tol=tol)
    return {"summaries": summaries, "comparison": comparison}


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="hpa-summarize", description="Summarize generated hypergraph artifacts.")
    p.add_argument("paths", nargs="+", help="Artifact JSON files.")
    p.add_argument("--compare", action="store_true", help="Compare the first two artifacts.")
    p.add_argument("--tol", type=float, default=0.0, help="Absolute tolerance for theta comparison (default: 0).")
    return p.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    try:
        result = run_main(args.paths, compare=args.compare, tol=args.tol)
    except (OSError, ValueError) as e:
        sys.stderr.write(f"error: {e}\n")
        return 2
    for s in result["summaries"]:
        sys.stdout.write(json.dumps(s, separators=(",", ":")) + "\n")
    if result["comparison"] is not None:
        sys.stdout.write(json.dumps(result["comparison"], separators=(",", ":")) + "\n")
        return 0 if result["comparison"]["equal"] else 1
    return 0


if __name__ == "__main__":
    sys.exit(main())


__all__ = ["run_main", "main"]
