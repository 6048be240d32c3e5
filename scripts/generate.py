#!/usr/bin/env python3
# Copyright (c) 2025 HPA Maintainers
# License: MIT
"""
Hypergraph generator CLI.

Generates hypergraphs according to the random preferential attachment hypergraph model
with vertex deactivation H(H_0, pv, pe, pd, Y) and writes one JSON artifact per run to
"<save>-<run index>.json".

Configuration precedence (lowest to highest)
- dataclass defaults (pv=0.30 pe=0.49 pd=0.21 m=3 t=1000 runs=5 retries=100)
- YAML file given with --config (layout: {model: {...}, run: {...}, save: ...})
- dotlist overrides, e.g. 'model.pv=0.4 run.t=500'
- explicit positional arguments and options

Exit codes
- 0: every run produced and saved a hypergraph
- 1: at least one run exhausted its retries or could not be saved
- 2: invalid configuration

Usage:
  python -m scripts.generate 0.3 0.49 0.21 3 1000 --runs 5 --retries 100 --save data/hypergraph --par
  python -m scripts.generate --config configs/default.yaml run.seed=7 --log-dir data/runs
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping, Optional, Sequence

import yaml  # pyyaml (runtime dep)

from hpa_core.errors import ConfigurationError
from hpa_core.random_source import parse_edge_size
from hpa_pipeline.determinism import make_manifest
from hpa_pipeline.export import DEFAULT_TEMPLATE, HypergraphWriter
from hpa_pipeline.logging_utils import JsonIO, RunLogger, make_run_dir
from hpa_pipeline.orchestrator import RunOrchestrator
from hpa_pipeline.pipeline import GenerationConfig


# -------------------------
# Utilities
# -------------------------


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigurationError(f"Cannot read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Malformed YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"YAML at {path} must be a mapping at top-level.")
    return data


def _nested_set(d: MutableMapping[str, Any], keys: Sequence[str], value: Any) -> None:
    cur = d
    for k in keys[:-1]:
        if k not in cur or not isinstance(cur[k], dict):
            cur[k] = {}
        cur = cur[k]
    cur[keys[-1]] = value


def _parse_dotlist(argv: Sequence[str]) -> Dict[str, Any]:
    """
    Parse key=value pairs (dotlist style).
    Example: ["model.pv=0.4", "run.par=true", "save=out/h"]
    """
    overrides: Dict[str, Any] = {}
    for tok in argv:
        if "=" not in tok:
            raise ConfigurationError(f"Unrecognized argument {tok!r}; expected key=value")
        key, val = tok.split("=", 1)
        try:
            coerced = yaml.safe_load(val.strip()) if val.strip() else None
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Malformed value in {tok!r}: {e}") from e
        _nested_set(overrides, key.strip().split("."), coerced)
    return overrides


def _deep_update(dst: Mapping[str, Any], src: Mapping[str, Any]) -> Dict[str, Any]:
    out = dict(dst)
    for k, v in src.items():
        if isinstance(v, Mapping) and isinstance(out.get(k), Mapping):
            out[k] = _deep_update(out[k], v)
        else:
            out[k] = v
    return out


def build_config(
    *,
    pv: Optional[float] = None,
    pe: Optional[float] = None,
    pd: Optional[float] = None,
    m: Optional[str] = None,
    t: Optional[int] = None,
    retries: Optional[int] = None,
    runs: Optional[int] = None,
    par: Optional[bool] = None,
    workers: Optional[int] = None,
    seed: Optional[int] = None,
    save: Optional[str] = None,
    config_path: Optional[str] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> tuple[GenerationConfig, str]:
    """Merge YAML, dotlist overrides, and explicit arguments; return (config, save template)."""
    merged: Dict[str, Any] = {}
    if config_path:
        merged = _load_yaml(Path(config_path))
    if overrides:
        merged = _deep_update(merged, overrides)

    explicit_model = {"pv": pv, "pe": pe, "pd": pd}
    if m is not None:
        explicit_model["edge_size"] = parse_edge_size(str(m))
    explicit_run = {"t": t, "retries": retries, "runs": runs, "parallel": par, "workers": workers, "seed": seed}
    merged = _deep_update(
        merged,
        {
            "model": {k: v for k, v in explicit_model.items() if v is not None},
            "run": {k: v for k, v in explicit_run.items() if v is not None},
        },
    )
    template = str(save if save is not None else merged.pop("save", DEFAULT_TEMPLATE))
    merged.pop("save", None)
    run_map = dict(merged.get("run", {}) or {})
    if "par" in run_map:
        run_map["parallel"] = bool(run_map.pop("par"))
    merged["run"] = run_map
    return GenerationConfig.from_mapping(merged), template


def run_main(
    pv: Optional[float] = None,
    pe: Optional[float] = None,
    pd: Optional[float] = None,
    m: Optional[str] = None,
    t: Optional[int] = None,
    *,
    retries: Optional[int] = None,
    runs: Optional[int] = None,
    save: Optional[str] = None,
    par: Optional[bool] = None,
    workers: Optional[int] = None,
    seed: Optional[int] = None,
    config_path: Optional[str] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    log_path: Optional[str] = None,
    csv_path: Optional[str] = None,
    log_dir: Optional[str] = None,
) -> dict:
    """
    Generate `runs` hypergraphs and return a summary dict.

    Returns:
        {"status": "ok" | "partial", "parameters": {...}, "runs": [run records],
         "manifest": {...}, "elapsed_s": float, "log_dir": str | None}

    With log_dir, a timestamped directory is created under it holding runs.jsonl,
    runs.csv (unless log_path / csv_path are given) and manifest.json.

    Raises:
        ConfigurationError: on invalid parameters (nothing is generated).
    """
    config, template = build_config(
        pv=pv, pe=pe, pd=pd, m=m, t=t, retries=retries, runs=runs, par=par,
        workers=workers, seed=seed, save=save, config_path=config_path, overrides=overrides,
    )
    run_dir = None
    if log_dir is not None:
        run_dir = make_run_dir(log_dir, prefix="gen")
        log_path = log_path or str(run_dir / "runs.jsonl")
        csv_path = csv_path or str(run_dir / "runs.csv")
    start = time.perf_counter()
    with RunLogger(jsonl_path=log_path, csv_path=csv_path) as run_logger:
        reports = RunOrchestrator(config, writer=HypergraphWriter(template), run_logger=run_logger).run_all()
    records = [r.to_record() for r in reports]
    manifest = make_manifest(records, label=template)
    if run_dir is not None:
        JsonIO.write(run_dir / "manifest.json", manifest, indent=2)
    return {
        "status": "ok" if all(r.saved for r in reports) else "partial",
        "parameters": config.parameters(),
        "runs": records,
        "manifest": manifest,
        "elapsed_s": round(time.perf_counter() - start, 6),
        "log_dir": None if run_dir is None else str(run_dir),
    }


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="hpa-gen",
        description=(
            "Generates a hypergraph according to the random preferential attachment "
            "hypergraph model with vertex deactivation."
        ),
    )
    p.add_argument("pv", type=float, nargs="?", help="Probability of the vertex arrival event (default: 0.30).")
    p.add_argument("pe", type=float, nargs="?", help="Probability of the edge arrival event (default: 0.49).")
    p.add_argument("pd", type=float, nargs="?", help="Probability of the vertex deactivation event (default: 0.21).")
    p.add_argument("m", type=str, nargs="?", help="Size of hyperedges: an integer, 'poisson:LAM' or 'categorical:SIZES:WEIGHTS' (default: 3).")
    p.add_argument("t", type=int, nargs="?", help="Number of iterations to perform (default: 1000).")
    p.add_argument("--retries", type=int, default=None, help="Number of retries to perform until the model finishes with success (default: 100).")
    p.add_argument("--runs", type=int, default=None, help="Number of hypergraphs to generate (default: 5).")
    p.add_argument("--save", type=str, default=None, help=f"Template path to the JSON files to save hypergraphs to (default: {DEFAULT_TEMPLATE}).")
    p.add_argument("--par", action="store_true", default=None, help="Generate hypergraphs in parallel.")
    p.add_argument("--workers", type=int, default=None, help="Worker processes for --par (default: CPU count).")
    p.add_argument("--seed", type=int, default=None, help="Master seed; omit for fresh entropy.")
    p.add_argument("--config", type=str, default=None, help="YAML configuration file.")
    p.add_argument("--log", type=str, default=None, help="Append one JSON record per run to this JSONL file.")
    p.add_argument("--csv", type=str, default=None, help="Append one CSV row per run to this file.")
    p.add_argument("--log-dir", type=str, default=None, help="Create a timestamped run directory under this root for run logs and manifest.json.")
    p.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    tokens = list(sys.argv[1:] if argv is None else argv)
    # key=value tokens are dotlist overrides, everything else goes to argparse
    rest = [a for a in tokens if "=" in a and not a.startswith("-")]
    args = _parse_args([a for a in tokens if a not in rest])
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")
    try:
        result = run_main(
            args.pv, args.pe, args.pd, args.m, args.t,
            retries=args.retries,
            runs=args.runs,
            save=args.save,
            par=args.par,
            workers=args.workers,
            seed=args.seed,
            config_path=args.config,
            overrides=_parse_dotlist(rest),
            log_path=args.log,
            csv_path=args.csv,
            log_dir=args.log_dir,
        )
    except ConfigurationError as e:
        sys.stderr.write(f"configuration error: {e}\n")
        return 2
    # Single-line JSON on stdout
    summary = {k: v for k, v in result.items() if k != "manifest"}
    sys.stdout.write(json.dumps(summary, separators=(",", ":")) + "\n")
    return 0 if result["status"] == "ok" else 1


if __name__ == "__main__":
    sys.exit(main())


__all__ = ["run_main", "build_config", "main"]
