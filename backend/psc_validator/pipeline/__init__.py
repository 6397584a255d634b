"""
Pipeline Engine — PSC archive validation orchestrator.

This package provides the step-based pipeline that takes one incoming
archive through loading, structure and header validation, manifest
rewriting and promotion, with per-step logging, error handling and
guaranteed source cleanup.
"""

from psc_validator.pipeline.context import IncomingArchive, PipelineContext, StepResult
from psc_validator.pipeline.engine import PipelineEngine, PipelineResult
from psc_validator.pipeline.step import PipelineStep

__all__ = [
    "IncomingArchive",
    "PipelineContext",
    "PipelineEngine",
    "PipelineResult",
    "PipelineStep",
    "StepResult",
]
