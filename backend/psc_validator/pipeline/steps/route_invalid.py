"""
RouteInvalidStep — copies rejected or failed archives to the Invalid area.

Finalizer: runs after the main steps, before the source is deleted, so a
rejected archive stays inspectable at <root>/Invalid/<archive-file-name>.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from psc_validator.core.constants import DestinationFolder
from psc_validator.core.logging import get_logger
from psc_validator.pipeline.context import PipelineContext, StepResult
from psc_validator.pipeline.step import PipelineStep

if TYPE_CHECKING:
    from psc_validator.storage.blob_store import BlobStore

logger = get_logger(__name__)


class RouteInvalidStep(PipelineStep):
    """Copy the original archive to <root>/Invalid/."""

    name = "route_invalid"
    description = "Copy rejected archive to the Invalid area"

    def __init__(self, store: BlobStore) -> None:
        self.store = store

    async def should_skip(self, ctx: PipelineContext) -> bool:
        if not ctx.invalid_routing_enabled:
            return True
        return not (ctx.is_rejected or ctx.failed)

    async def execute(self, ctx: PipelineContext) -> StepResult:
        started_at = self._now()
        path = ctx.destination_path(DestinationFolder.INVALID, ctx.archive.file_name)

        if ctx.archive_bytes is not None:
            await asyncio.to_thread(self.store.upload, path, ctx.archive_bytes)
        else:
            await asyncio.to_thread(self.store.copy, ctx.archive.source_path, path)

        ctx.invalid_path = path
        logger.info(
            "Archive copied to Invalid",
            path=path,
            reason=ctx.outcome.value if ctx.outcome else "ERROR",
        )

        return self._success(started_at, metadata={"path": path})
