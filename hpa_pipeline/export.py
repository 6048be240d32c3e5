# Copyright (c) 2025 HPA Maintainers
# License: MIT
"""
Output collaborator: persists finished hypergraphs as JSON artifacts.

Artifact schema (one document per run):
    {
      "parameters": {"pv": float, "pe": float, "pd": float, "m": int | {...}, "t": int},
      "nodes": int,
      "edges": [[v, ...], ...],
      "degree": [int, ...],
      "theta": [float, ...]
    }

Paths follow the template "<template>-<run index>.json", so names track the run
index rather than completion order.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Union

from hpa_core.errors import OutputError
from hpa_pipeline.logging_utils import JsonIO

ARTIFACT_KEYS = ("parameters", "nodes", "edges", "degree", "theta")
DEFAULT_TEMPLATE = "data/hypergraph"


def artifact_path(template: Union[str, Path], run_index: int) -> Path:
    return Path(f"{template}-{int(run_index)}.json")


class HypergraphWriter:
    """
    Writes artifacts under a path template.

    Parameters
    ----------
    template : str | Path
        Prefix of every artifact path, e.g. "data/hypergraph" -> data/hypergraph-0.json
    indent : int | None
        None writes compact JSON; an int pretty-prints.
    """

    def __init__(self, template: Union[str, Path] = DEFAULT_TEMPLATE, indent: Union[int, None] = None) -> None:
        self.template = str(template)
        self.indent = indent

    def path_for(self, run_index: int) -> Path:
        return artifact_path(self.template, run_index)

    def write(self, run_index: int, document: Mapping[str, Any]) -> Path:
        """Write one artifact; any filesystem or serialization failure becomes OutputError."""
        path = self.path_for(run_index)
        try:
            JsonIO.write(path, dict(document), indent=self.indent)
        except (OSError, TypeError, ValueError) as e:
            raise OutputError(run_index, str(path), e) from e
        return path


def validate_artifact(doc: Mapping[str, Any]) -> None:
    """Raise ValueError if required keys are missing or inconsistent."""
    missing = [k for k in ARTIFACT_KEYS if k not in doc]
    if missing:
        raise ValueError(f"artifact is missing keys: {missing}")
    if len(doc["degree"]) != int(doc["nodes"]):
        raise ValueError(f"degree has {len(doc['degree'])} entries for {doc['nodes']} nodes")
    if sum(doc["degree"]) != sum(len(e) for e in doc["edges"]):
        raise ValueError("sum of degrees differs from total hyperedge size")


def load_artifact(path: Union[str, Path]) -> Dict[str, Any]:
    doc = JsonIO.read(path)
    if not isinstance(doc, dict):
        raise ValueError(f"artifact at {path} is not a JSON object")
    validate_artifact(doc)
    return doc


__all__ = [
    "ARTIFACT_KEYS",
    "DEFAULT_TEMPLATE",
    "artifact_path",
    "HypergraphWriter",
    "validate_artifact",
    "load_artifact",
]
