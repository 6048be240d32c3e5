# Hypergraph Preferential Attachment (HPA) — Pipeline package
# License: MIT

"""
Pipeline package exposing run orchestration for HPA.

Primary exports
- Configs: ModelConfig, RunConfig, GenerationConfig
- RunController: one run with retries (fresh H_0 and sub-stream per attempt)
- RunOrchestrator / RunReport: many independent runs, serial or on a process pool
- HypergraphWriter: JSON artifact output collaborator

See:
- hpa_pipeline/pipeline.py
- hpa_pipeline/orchestrator.py
"""

from __future__ import annotations

from .pipeline import (
    ModelConfig,
    RunConfig,
    GenerationConfig,
    RunResult,
    RunController,
    generate,
)
from .orchestrator import RunOrchestrator, RunReport
from .export import HypergraphWriter, load_artifact

__all__ = [
    "ModelConfig",
    "RunConfig",
    "GenerationConfig",
    "RunResult",
    "RunController",
    "generate",
    "RunOrchestrator",
    "RunReport",
    "HypergraphWriter",
    "load_artifact",
]
