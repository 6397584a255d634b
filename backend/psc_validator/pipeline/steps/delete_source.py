"""
DeleteSourceStep — removes the original archive from its arrival location.

Always the last step of a run, whatever the outcome.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from psc_validator.core.constants import RunState
from psc_validator.core.logging import get_logger
from psc_validator.pipeline.context import PipelineContext, StepResult
from psc_validator.pipeline.errors import DeleteError
from psc_validator.pipeline.step import PipelineStep

if TYPE_CHECKING:
    from psc_validator.storage.blob_store import BlobStore

logger = get_logger(__name__)


class DeleteSourceStep(PipelineStep):
    """Delete the source archive exactly once."""

    name = "delete_source"
    description = "Delete the original zip file"

    def __init__(self, store: BlobStore) -> None:
        self.store = store

    async def should_skip(self, ctx: PipelineContext) -> bool:
        return False

    async def execute(self, ctx: PipelineContext) -> StepResult:
        started_at = self._now()
        source = ctx.archive.source_path

        logger.info("Deleting the original zip file", source=source)
        deleted = await asyncio.to_thread(self.store.delete, source)
        if not deleted:
            raise DeleteError(
                f"Source archive not found: {source}",
                path=source,
                execution_id=ctx.execution_id,
                step_name=self.name,
            )

        ctx.source_deleted = True
        ctx.advance(RunState.SOURCE_DELETED)
        return self._success(started_at, metadata={"source": source})
