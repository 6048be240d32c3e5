# Copyright (c) 2025 HPA Maintainers
# License: MIT
"""
Run orchestrator: launches `runs` independent generations, serially or on a process pool.

Provides:
- RunReport: outcome of one run index (result or error, artifact path, timings)
- RunOrchestrator: fans runs out, re-associates results with their run index,
  hands each finished hypergraph to the output collaborator, and logs one record per run

Concurrency
- Runs share no mutable state; each owns a sub-stream derived from (master seed, run index).
- Parallel runs use a multiprocessing "spawn" context Pool; completion order is irrelevant,
  reports are returned ordered by run index.
- Output is written in the parent process, after a run has fully succeeded.
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from multiprocessing import get_context
from typing import Any, Dict, Iterator, List, Optional, Tuple

import numpy as np

from hpa_core.errors import HPAError, OutputError, RetriesExhausted
from hpa_core.interfaces import EventKind
from hpa_pipeline.export import HypergraphWriter
from hpa_pipeline.logging_utils import RunLogger
from hpa_pipeline.pipeline import GenerationConfig, RunController, RunResult
from hpa_pipeline.seeding import seed_fingerprint, spawn_run_sequences

logger = logging.getLogger(__name__)


@dataclass
class RunReport:
    index: int
    result: Optional[RunResult] = None
    error: Optional[HPAError] = None
    path: Optional[str] = None
    elapsed_s: float = 0.0
    seed: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        """True when the run produced a hypergraph (even if writing it failed)."""
        return self.result is not None

    @property
    def saved(self) -> bool:
        return self.path is not None and self.error is None

    def to_record(self) -> Dict[str, Any]:
        r = self.result
        return {
            "run": self.index,
            "ok": self.ok,
            "attempts": r.attempts if r is not None else getattr(self.error, "attempts", None),
            "elapsed_s": round(self.elapsed_s, 6),
            "nodes": r.hypergraph.num_vertices if r is not None else None,
            "edges": r.hypergraph.num_edges if r is not None else None,
            "deactivations": r.events.get(EventKind.DEACTIVATION.value, 0) if r is not None else None,
            "path": self.path,
            "error": None if self.error is None else str(self.error),
            "seed": self.seed,
        }


_Task = Tuple[int, GenerationConfig, np.random.SeedSequence]
_Done = Tuple[int, Optional[RunResult], Optional[RetriesExhausted], float]


def _run_task(task: _Task) -> _Done:
    """Worker entry point (module-level so the spawn context can import it)."""
    index, config, ss = task
    start = time.perf_counter()
    try:
        result = RunController(config, seed_sequence=ss, run_index=index).run()
    except RetriesExhausted as e:
        return index, None, e, time.perf_counter() - start
    return index, result, None, time.perf_counter() - start


class RunOrchestrator:
    """
    Launches config.run.runs independent runs.

    Args:
        config: GenerationConfig (run.parallel / run.workers select the pool)
        writer: output collaborator; None keeps results in memory only
        run_logger: optional RunLogger receiving one record per run
    """

    def __init__(
        self,
        config: GenerationConfig,
        writer: Optional[HypergraphWriter] = None,
        run_logger: Optional[RunLogger] = None,
    ) -> None:
        self.config = config
        self.writer = writer
        self.run_logger = run_logger

    def _tasks(self) -> List[_Task]:
        seqs = spawn_run_sequences(self.config.run.seed, self.config.run.runs)
        return [(i, self.config, ss) for i, ss in enumerate(seqs)]

    def _execute(self, tasks: List[_Task]) -> Iterator[_Done]:
        run = self.config.run
        if not run.parallel or len(tasks) <= 1:
            for task in tasks:
                yield _run_task(task)
            return
        workers = min(run.workers or os.cpu_count() or 1, len(tasks))
        ctx = get_context("spawn")
        with ctx.Pool(processes=workers) as pool:
            for done in pool.imap_unordered(_run_task, tasks, chunksize=1):
                yield done

    def _finish(self, done: _Done, seeds: Dict[int, Dict[str, Any]]) -> RunReport:
        index, result, error, elapsed = done
        report = RunReport(index=index, result=result, error=error, elapsed_s=elapsed, seed=seeds.get(index))
        if result is not None:
            logger.info("[%d]: %.3fs elapsed (%d attempt(s))", index, elapsed, result.attempts)
            if self.writer is not None:
                try:
                    report.path = str(self.writer.write(index, result.to_jsonable(self.config.parameters())))
                except OutputError as e:
                    logger.error("%s", e)
                    report.error = e
        else:
            logger.error("%s", error)
        if self.run_logger is not None:
            self.run_logger.log_run(report.to_record())
        return report

    def run_all(self) -> List[RunReport]:
        """Run every index; one failing run never aborts the others."""
        start = time.perf_counter()
        tasks = self._tasks()
        seeds = {i: seed_fingerprint(ss) for i, _, ss in tasks}
        reports = [self._finish(done, seeds) for done in self._execute(tasks)]
        reports.sort(key=lambda r: r.index)
        logger.info("Total: %.3fs elapsed", time.perf_counter() - start)
        if self.run_logger is not None:
            self.run_logger.flush()
        return reports


__all__ = ["RunReport", "RunOrchestrator"]
