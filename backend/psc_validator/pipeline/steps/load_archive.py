"""
LoadArchiveStep — fetches the archive bytes and opens them in memory.

If the trigger already delivered the bytes they are used directly;
otherwise the archive is downloaded from its source path.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from psc_validator.core.constants import RunState
from psc_validator.core.logging import get_logger
from psc_validator.pipeline.context import PipelineContext, StepResult
from psc_validator.pipeline.errors import PipelineError
from psc_validator.pipeline.step import PipelineStep
from psc_validator.processing.archive import load_archive

if TYPE_CHECKING:
    from psc_validator.storage.blob_store import BlobStore

logger = get_logger(__name__)


class LoadArchiveStep(PipelineStep):
    """Read the incoming archive into a list of ArchiveEntry objects."""

    name = "load_archive"
    description = "Download and open the incoming zip archive"

    def __init__(self, store: BlobStore) -> None:
        self.store = store

    async def execute(self, ctx: PipelineContext) -> StepResult:
        started_at = self._now()

        try:
            data = ctx.archive.data
            if data is None:
                data = await asyncio.to_thread(self.store.download, ctx.archive.source_path)
            ctx.archive_bytes = data

            ctx.entries = load_archive(data)
        except PipelineError as exc:
            exc.execution_id = ctx.execution_id
            exc.step_name = self.name
            raise

        ctx.advance(RunState.LOADED)
        logger.info(
            "Archive loaded",
            source=ctx.archive.source_path,
            size=len(data),
            entries=[e.name for e in ctx.entries],
        )

        return self._success(started_at, metadata={
            "size": len(data),
            "entry_count": len(ctx.entries),
        })
