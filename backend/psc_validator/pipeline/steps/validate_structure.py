"""
ValidateStructureStep — entry count and manifest presence.

Structural only: entry content is never read here.
"""

from __future__ import annotations

from psc_validator.core.constants import RunState
from psc_validator.core.logging import get_logger
from psc_validator.pipeline.context import PipelineContext, StepResult
from psc_validator.pipeline.step import PipelineStep
from psc_validator.validation.structure import check_structure

logger = get_logger(__name__)


class ValidateStructureStep(PipelineStep):
    """Reject archives that are not exactly one data file plus one manifest."""

    name = "validate_structure"
    description = "Check entry count and manifest presence"

    async def execute(self, ctx: PipelineContext) -> StepResult:
        started_at = self._now()

        outcome = check_structure(ctx.entries)
        ctx.advance(RunState.STRUCTURE_CHECKED)
        if not outcome.is_valid:
            ctx.reject(outcome)
            logger.warning(
                "Validation failed for PSC files",
                reason=outcome.value,
                entry_count=len(ctx.entries),
                entries=[e.name for e in ctx.entries],
            )
        return self._success(started_at, metadata={
            "outcome": outcome.value,
            "entry_count": len(ctx.entries),
        })
