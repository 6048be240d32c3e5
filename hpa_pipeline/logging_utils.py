# Copyright (c) 2025 HPA Maintainers
# License: MIT
"""
Run logging and small filesystem helpers for hypergraph generation.

This module is filesystem-only; no generation logic lives here.

Exports:
- CSVLogger: append-safe CSV writer with header-once semantics.
- JSONLLogger: newline-delimited JSON writer.
- RunLogger: facade writing one record per finished run to JSONL and/or CSV.
- JsonIO: tiny JSON helpers.
- make_run_dir: create a timestamped directory for a batch of runs.
"""

from __future__ import annotations

import csv
import json
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Union


# Scalar fields of one run record; also the CSV column order.
RUN_FIELDS = [
    "run",
    "ok",
    "attempts",
    "elapsed_s",
    "nodes",
    "edges",
    "deactivations",
    "path",
    "error",
]


# -------------------------
# Filesystem helpers
# -------------------------


def ensure_dir(path: Union[str, Path]) -> None:
    """Create the directory if it does not already exist (parents included)."""
    Path(path).mkdir(parents=True, exist_ok=True)


def timestamp_id() -> str:
    """Return a compact UTC timestamp suitable for folder names."""
    return datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")


def make_run_dir(root: Union[str, Path], *, prefix: Optional[str] = None) -> Path:
    """
    Create a new directory under 'root' named by a UTC timestamp.

    Example:
        root=data, prefix=None => data/20251004T201500/
        root=data, prefix=pa   => data/pa_20251004T201500/
    """
    root = Path(root)
    ensure_dir(root)
    tid = timestamp_id()
    d = root / (f"{prefix}_{tid}" if prefix else tid)
    ensure_dir(d)
    return d


# -------------------------
# CSV logger
# -------------------------


class CSVLogger:
    """
    Append-safe CSV writer that writes the header only once.

    Parameters
    ----------
    path : str | Path
        Target CSV file path.
    fieldnames : list[str] | None
        If None, infer from the first row's keys sorted lexicographically.
    allow_extra : bool
        If False, extra keys in rows raise ValueError. If True, extras are ignored.
    """

    def __init__(
        self,
        path: Union[str, Path],
        fieldnames: Optional[Sequence[str]] = None,
        allow_extra: bool = False,
    ) -> None:
        self.path = Path(path)
        self._fieldnames = list(fieldnames) if fieldnames is not None else None
        self._allow_extra = bool(allow_extra)
        ensure_dir(self.path.parent)
        # An existing non-empty file already has its header.
        self._header_written = self.path.exists() and self.path.stat().st_size > 0
        self._f = None
        self._writer: Optional[csv.DictWriter] = None

    def _ensure_writer(self, row: Mapping[str, Any]) -> csv.DictWriter:
        if self._f is None:
            self._f = self.path.open("a", newline="", encoding="utf-8")
        if self._writer is None:
            if self._fieldnames is None:
                self._fieldnames = sorted(row.keys())
            self._writer = csv.DictWriter(
                self._f,
                fieldnames=self._fieldnames,
                extrasaction="ignore" if self._allow_extra else "raise",
                restval="",
            )
            if not self._header_written:
                self._writer.writeheader()
                self._header_written = True
        return self._writer

    def write_row(self, row: Mapping[str, Any]) -> None:
        self._ensure_writer(row).writerow(row)

    def flush(self) -> None:
        if self._f is not None:
            self._f.flush()

    def close(self) -> None:
        try:
            if self._f is not None:
                self._f.flush()
                self._f.close()
        finally:
            self._f = None
            self._writer = None

    def __enter__(self) -> "CSVLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


# -------------------------
# JSONL logger
# -------------------------


class JSONLLogger:
    """
    Newline-delimited JSON writer with append semantics.

    Parameters
    ----------
    path : str | Path
        Target .jsonl file path.
    auto_timestamp : bool
        If True, inject a 'ts' ISO8601 string when not present in the record.
    """

    def __init__(self, path: Union[str, Path], auto_timestamp: bool = False) -> None:
        self.path = Path(path)
        self.auto_timestamp = bool(auto_timestamp)
        ensure_dir(self.path.parent)
        self._f = self.path.open("a", encoding="utf-8")

    def log(self, record: Mapping[str, Any]) -> None:
        data = dict(record)
        if self.auto_timestamp and "ts" not in data:
            data["ts"] = datetime.now(timezone.utc).isoformat()
        self._f.write(json.dumps(data, ensure_ascii=False) + "\n")

    def flush(self) -> None:
        if self._f is not None:
            self._f.flush()

    def close(self) -> None:
        try:
            if self._f is not None:
                self._f.flush()
                self._f.close()
        finally:
            self._f = None

    def __enter__(self) -> "JSONLLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


# -------------------------
# Run logger
# -------------------------


class RunLogger:
    """
    One record per finished run, to JSONL (full record) and/or CSV (RUN_FIELDS only).

    Parameters
    ----------
    jsonl_path : str | Path | None
        If provided, every record is appended here with a 'ts' timestamp.
    csv_path : str | Path | None
        If provided, the scalar run fields are appended here.
    """

    def __init__(
        self,
        jsonl_path: Optional[Union[str, Path]] = None,
        csv_path: Optional[Union[str, Path]] = None,
    ) -> None:
        self.jsonl: Optional[JSONLLogger] = JSONLLogger(jsonl_path, auto_timestamp=True) if jsonl_path else None
        self.csv: Optional[CSVLogger] = CSVLogger(csv_path, fieldnames=RUN_FIELDS, allow_extra=True) if csv_path else None

    def log_run(self, record: Mapping[str, Any]) -> None:
        if self.jsonl is not None:
            self.jsonl.log(record)
        if self.csv is not None:
            self.csv.write_row(record)

    def flush(self) -> None:
        if self.jsonl is not None:
            self.jsonl.flush()
        if self.csv is not None:
            self.csv.flush()

    def close(self) -> None:
        if self.jsonl is not None:
            self.jsonl.close()
        if self.csv is not None:
            self.csv.close()

    def __enter__(self) -> "RunLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


# -------------------------
# JSON helpers
# -------------------------


class JsonIO:
    """Tiny JSON writer/reader helpers (UTF-8)."""

    @staticmethod
    def write(path: Union[str, Path], obj: Any, *, sort_keys: bool = False, indent: Optional[int] = None) -> None:
        path = Path(path)
        ensure_dir(path.parent)
        if is_dataclass(obj) and not isinstance(obj, type):
            obj = asdict(obj)
        separators = (",", ":") if indent is None else None
        with path.open("w", encoding="utf-8") as f:
            json.dump(obj, f, indent=indent, sort_keys=sort_keys, separators=separators)

    @staticmethod
    def read(path: Union[str, Path]) -> Any:
        with Path(path).open("r", encoding="utf-8") as f:
            return json.load(f)


__all__ = [
    "RUN_FIELDS",
    "CSVLogger",
    "JSONLLogger",
    "RunLogger",
    "JsonIO",
    "make_run_dir",
    "ensure_dir",
    "timestamp_id",
]
