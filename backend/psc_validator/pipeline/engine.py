"""
PipelineEngine — the orchestrator that runs one archive through the steps.

Responsibilities:
    - Compute the destination root from the arrival timestamp
    - Execute each step with timing, logging, and error handling
    - Roll back the failing step, then always run the finalizers
    - Return a complete PipelineResult; never raise to the caller, except
      when the worker's soft time limit fires (the run is then abandoned
      without finalizers)
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

import structlog
from celery.exceptions import SoftTimeLimitExceeded

from psc_validator.core.config import Settings, settings as default_settings
from psc_validator.core.constants import PipelineStatus, RunState, StepStatus
from psc_validator.core.logging import get_logger
from psc_validator.pipeline.context import IncomingArchive, PipelineContext, StepResult
from psc_validator.pipeline.errors import PipelineError
from psc_validator.pipeline.flow import finalizer_steps, validation_steps
from psc_validator.pipeline.step import PipelineStep
from psc_validator.processing.naming import build_destination_root

if TYPE_CHECKING:
    from psc_validator.storage.blob_store import BlobStore


@dataclass
class PipelineResult:
    """Final outcome of one archive run."""

    execution_id: str
    status: str                     # PipelineStatus value
    outcome: str | None = None      # ValidationOutcome value
    started_at: datetime | None = None
    completed_at: datetime | None = None
    total_duration_ms: int = 0
    steps_completed: int = 0
    total_steps: int = 0
    step_results: list[dict[str, Any]] = field(default_factory=list)
    context_summary: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON-serialisable form (Celery result backend)."""
        return {
            "execution_id": self.execution_id,
            "status": self.status,
            "outcome": self.outcome,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_ms": self.total_duration_ms,
            "steps_completed": self.steps_completed,
            "total_steps": self.total_steps,
            "step_results": self.step_results,
            "context_summary": self.context_summary,
            "error": self.error,
        }


class PipelineEngine:
    """
    Runs the validation steps, then the finalizers, against a PipelineContext.

    Usage::

        engine = PipelineEngine(store=build_blob_store(settings), settings=settings)
        result = await engine.run(IncomingArchive(
            container="invoicingfiles",
            key="2024/05/PSC/batch-17.zip",
        ))
    """

    def __init__(
        self,
        store: BlobStore,
        settings: Settings = default_settings,
        steps: list[PipelineStep] | None = None,
        finalizers: list[PipelineStep] | None = None,
    ) -> None:
        self.store = store
        self.settings = settings
        self.steps = steps if steps is not None else validation_steps(store)
        self.finalizers = finalizers if finalizers is not None else finalizer_steps(store)
        self.logger = get_logger("psc_validator.pipeline.engine")

    def build_context(self, archive: IncomingArchive) -> PipelineContext:
        """Fresh context for one archive, with paths fixed for the whole run."""
        return PipelineContext(
            archive=archive,
            destination_root=build_destination_root(
                self.settings.DESTINATION_CONTAINER,
                archive.arrived_at,
                self.settings.ARCHIVE_CATEGORY,
            ),
            keep_manifest_header=self.settings.KEEP_MANIFEST_HEADER,
            invalid_routing_enabled=self.settings.INVALID_ROUTING_ENABLED,
        )

    async def run(self, archive: IncomingArchive) -> PipelineResult:
        """
        Full run for one archive.

        Every error is caught here, logged with context and recorded on
        the result.  Nothing is retried.  SoftTimeLimitExceeded is the one
        exception that propagates: finalizers do not run, so the source
        archive stays where it arrived.
        """
        started_at = datetime.now(timezone.utc)
        ctx = self.build_context(archive)

        log = self.logger.bind(
            execution_id=ctx.execution_id,
            source=archive.source_path,
        )
        log.info("Processing archive", name=archive.name, arrived_at=archive.arrived_at.isoformat())

        try:
            result = await self.run_steps(ctx)
        except SoftTimeLimitExceeded:
            log.error("Time limit exceeded, run abandoned", states=[s.value for s in ctx.states])
            raise
        except Exception as exc:
            log.exception("Error! Something went wrong", error=str(exc))
            completed_at = datetime.now(timezone.utc)
            return PipelineResult(
                execution_id=ctx.execution_id,
                status=PipelineStatus.FAILED,
                started_at=started_at,
                completed_at=completed_at,
                total_duration_ms=int((completed_at - started_at).total_seconds() * 1000),
                context_summary=ctx.to_summary_dict(),
                error=f"Unexpected: {exc}",
            )

        result.started_at = started_at
        log.info(
            "Archive processed",
            status=result.status,
            outcome=result.outcome,
            steps_completed=result.steps_completed,
            total_steps=result.total_steps,
            duration_ms=result.total_duration_ms,
        )
        return result

    async def run_steps(self, ctx: PipelineContext) -> PipelineResult:
        """
        Execute main steps then finalizers against a context.

        Can be called directly (bypassing run()) for testing.
        """
        started_at = datetime.now(timezone.utc)
        log = self.logger.bind(execution_id=ctx.execution_id)

        all_steps = [*self.steps, *self.finalizers]
        steps_completed = 0
        error: str | None = None

        # ── Main steps ────────────────────────────────
        for index, step in enumerate(self.steps, start=1):
            step_log = log.bind(step_name=step.name, step_index=index)

            if await self._skip(step, ctx, step_log):
                steps_completed += 1
                continue

            step_log.info(f"Step {index}/{len(all_steps)}: {step.description}")
            result = await self._execute(step, ctx, step_log)
            ctx.step_results.append(result)

            if result.status == StepStatus.COMPLETED:
                steps_completed += 1
                step_log.debug("Step completed", duration_ms=result.duration_ms, metadata=result.metadata)
                continue

            ctx.failed = True
            error = f"Step '{step.name}' failed: {result.error}"
            ctx.add_error(error)
            step_log.error("Step failed — skipping to finalizers", error=result.error)

            try:
                await step.rollback(ctx)
            except SoftTimeLimitExceeded:
                raise
            except Exception as rollback_exc:
                step_log.warning("Rollback failed", error=str(rollback_exc))
            break

        # ── Finalizers (always) ───────────────────────
        for index, step in enumerate(self.finalizers, start=len(self.steps) + 1):
            step_log = log.bind(step_name=step.name, step_index=index)

            if await self._skip(step, ctx, step_log):
                steps_completed += 1
                continue

            step_log.info(f"Step {index}/{len(all_steps)}: {step.description}")
            result = await self._execute(step, ctx, step_log)
            ctx.step_results.append(result)

            if result.status == StepStatus.COMPLETED:
                steps_completed += 1
            else:
                # Logged, never escalated
                ctx.add_error(f"Step '{step.name}' failed: {result.error}")
                step_log.warning("Finalizer failed", error=result.error)

        ctx.advance(RunState.DONE)

        # ── Finalise ──────────────────────────────────
        if ctx.failed:
            status = PipelineStatus.FAILED
        elif ctx.is_rejected:
            status = PipelineStatus.REJECTED
        else:
            status = PipelineStatus.COMPLETED

        completed_at = datetime.now(timezone.utc)
        return PipelineResult(
            execution_id=ctx.execution_id,
            status=status,
            outcome=ctx.outcome.value if ctx.outcome else None,
            started_at=started_at,
            completed_at=completed_at,
            total_duration_ms=int((completed_at - started_at).total_seconds() * 1000),
            steps_completed=steps_completed,
            total_steps=len(all_steps),
            step_results=[sr.to_dict() for sr in ctx.step_results],
            context_summary=ctx.to_summary_dict(),
            error=error,
        )

    async def _skip(
        self,
        step: PipelineStep,
        ctx: PipelineContext,
        log: structlog.typing.FilteringBoundLogger,
    ) -> bool:
        try:
            skip = await step.should_skip(ctx)
        except SoftTimeLimitExceeded:
            raise
        except Exception as exc:
            log.warning("should_skip raised, running step anyway", error=str(exc))
            return False

        if skip:
            log.debug("Step skipped")
            now = datetime.now(timezone.utc)
            ctx.step_results.append(StepResult(
                step_name=step.name,
                status=StepStatus.SKIPPED,
                started_at=now,
                completed_at=now,
            ))
        return skip

    async def _execute(
        self,
        step: PipelineStep,
        ctx: PipelineContext,
        log: structlog.typing.FilteringBoundLogger,
    ) -> StepResult:
        """Execute a step, converting any exception into a failed StepResult."""
        started_at = datetime.now(timezone.utc)
        try:
            return await step.execute(ctx)

        except SoftTimeLimitExceeded:
            raise

        except PipelineError as exc:
            log.error(
                "Step raised",
                error_type=type(exc).__name__,
                error=str(exc),
                details=exc.details,
            )
            return StepResult(
                step_name=step.name,
                status=StepStatus.FAILED,
                started_at=started_at,
                completed_at=datetime.now(timezone.utc),
                error=str(exc),
                metadata={"error_type": type(exc).__name__, **exc.details},
            )

        except Exception as exc:
            # Unexpected error
            log.exception("Unexpected error in step", error=str(exc))
            return StepResult(
                step_name=step.name,
                status=StepStatus.FAILED,
                started_at=started_at,
                completed_at=datetime.now(timezone.utc),
                error=f"Unexpected: {exc}",
                metadata={"traceback": traceback.format_exc()},
            )
