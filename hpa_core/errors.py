# Copyright (c) 2025 HPA Maintainers
# License: MIT
"""
Error taxonomy for hypergraph generation.

- ConfigurationError: invalid model/run parameters; raised at construction time.
- RetriesExhausted: one run failed every attempt; other runs are unaffected.
- OutputError: a finished hypergraph could not be persisted.

A failed step is not an exception; see hpa_core.interfaces.Infeasible.
"""

from __future__ import annotations

from typing import Optional


class HPAError(Exception):
    """Base class for all generation errors."""


class ConfigurationError(HPAError, ValueError):
    pass


class RetriesExhausted(HPAError, RuntimeError):
    def __init__(self, run_index: int, attempts: int, last_reason: Optional[str] = None) -> None:
        self.run_index = int(run_index)
        self.attempts = int(attempts)
        self.last_reason = last_reason
        msg = f"[{self.run_index}]: failed after {self.attempts} attempt(s)"
        if last_reason:
            msg += f" (last: {last_reason})"
        super().__init__(msg)

    def __reduce__(self):
        return (type(self), (self.run_index, self.attempts, self.last_reason))


class OutputError(HPAError, OSError):
    def __init__(self, run_index: int, path: str, cause: Optional[BaseException] = None) -> None:
        self.run_index = int(run_index)
        self.path = str(path)
        self.cause = cause
        super().__init__(f"[{self.run_index}]: could not write {self.path}: {cause}")

    def __reduce__(self):
        return (type(self), (self.run_index, self.path, self.cause))


__all__ = ["HPAError", "ConfigurationError", "RetriesExhausted", "OutputError"]
