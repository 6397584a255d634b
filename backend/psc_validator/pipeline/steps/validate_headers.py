"""
ValidateHeadersStep — checks the first line of every manifest entry.

Runs to completion before any upload is attempted, so a bad manifest
can never leave a data file behind in the valid area.
"""

from __future__ import annotations

from psc_validator.core.constants import RunState, ValidationOutcome
from psc_validator.core.logging import get_logger
from psc_validator.pipeline.context import PipelineContext, StepResult
from psc_validator.pipeline.errors import PipelineError
from psc_validator.pipeline.step import PipelineStep
from psc_validator.validation.headers import decode_manifest, validate_manifest

logger = get_logger(__name__)


class ValidateHeadersStep(PipelineStep):
    """Validate manifest header lines against the canonical header set."""

    name = "validate_headers"
    description = "Validate manifest header line"

    async def execute(self, ctx: PipelineContext) -> StepResult:
        started_at = self._now()

        for entry in ctx.manifest_entries:
            logger.info("Validating manifest", entry=entry.name)

            try:
                content = decode_manifest(entry.content)
            except PipelineError as exc:
                exc.execution_id = ctx.execution_id
                exc.step_name = self.name
                exc.details.setdefault("entry", entry.name)
                raise

            outcome, record = validate_manifest(content)
            if not outcome.is_valid:
                ctx.reject(outcome, entry.name)
                logger.warning(
                    "Validation failed for manifest",
                    entry=entry.name,
                    reason=outcome.value,
                    header_line=record.header_line if record else None,
                )
                return self._success(started_at, metadata={
                    "outcome": outcome.value,
                    "entry": entry.name,
                })

            ctx.manifests[entry.name] = record
            logger.debug("Manifest headers accepted", entry=entry.name, headers=list(record.headers))

        ctx.outcome = ValidationOutcome.VALID
        ctx.advance(RunState.HEADER_CHECKED)

        return self._success(started_at, metadata={
            "outcome": ValidationOutcome.VALID.value,
            "manifests": list(ctx.manifests),
        })
