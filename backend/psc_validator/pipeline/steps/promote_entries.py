"""
PromoteEntriesStep — uploads the prepared batch to the valid area.

Uploads run one at a time.  If one fails, rollback() removes the blobs
this run already wrote, so a failed promotion leaves nothing behind.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from psc_validator.core.constants import DestinationFolder, RunState
from psc_validator.core.logging import get_logger
from psc_validator.pipeline.context import PipelineContext, StepResult
from psc_validator.pipeline.errors import StorageError
from psc_validator.pipeline.step import PipelineStep

if TYPE_CHECKING:
    from psc_validator.storage.blob_store import BlobStore

logger = get_logger(__name__)


class PromoteEntriesStep(PipelineStep):
    """Upload sanitized/rewritten entries to <root>/valid/."""

    name = "promote_entries"
    description = "Upload validated entries to the valid area"

    def __init__(self, store: BlobStore) -> None:
        self.store = store

    async def execute(self, ctx: PipelineContext) -> StepResult:
        started_at = self._now()

        for upload in ctx.pending_uploads:
            logger.info("Uploading entry", entry=upload.entry_name, path=upload.path)
            try:
                await asyncio.to_thread(self.store.upload, upload.path, upload.data)
            except StorageError as exc:
                exc.execution_id = ctx.execution_id
                exc.step_name = self.name
                exc.details.setdefault("entry", upload.entry_name)
                raise
            ctx.uploaded_paths.append(upload.path)

        ctx.advance(RunState.PROMOTED)
        logger.info(
            "PSC files validated and copied",
            path=ctx.destination_path(DestinationFolder.VALID, ""),
            uploaded=len(ctx.uploaded_paths),
        )

        return self._success(started_at, metadata={"uploaded": list(ctx.uploaded_paths)})

    async def rollback(self, ctx: PipelineContext) -> None:
        """Remove blobs uploaded before the failure."""
        remaining: list[str] = []
        for path in reversed(ctx.uploaded_paths):
            try:
                await asyncio.to_thread(self.store.delete, path)
                logger.info("Partial upload removed", path=path)
            except StorageError as exc:
                remaining.insert(0, path)
                ctx.add_error(f"Could not remove partial upload {path}: {exc}")
                logger.warning("Partial upload not removed", path=path, error=str(exc))
        ctx.uploaded_paths = remaining
