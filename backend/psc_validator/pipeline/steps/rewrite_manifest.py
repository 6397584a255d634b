"""
RewriteManifestStep — builds the promotion batch.

Every entry gets a sanitized destination name under <root>/valid/.
Data entries keep their raw bytes; manifest entries get their body
rewritten (legacy cost-center tags -> canonical tag) and ASCII-encoded.
Nothing is uploaded here.
"""

from __future__ import annotations

from psc_validator.core.constants import DestinationFolder
from psc_validator.core.logging import get_logger
from psc_validator.pipeline.context import ArchiveEntry, PendingUpload, PipelineContext, StepResult
from psc_validator.pipeline.errors import PipelineError
from psc_validator.pipeline.step import PipelineStep
from psc_validator.processing.naming import sanitize_name
from psc_validator.processing.rewriter import encode_manifest, rewrite_content

logger = get_logger(__name__)


class RewriteManifestStep(PipelineStep):
    """Prepare sanitized, rewritten uploads for every archive entry."""

    name = "rewrite_manifest"
    description = "Sanitize entry names and rewrite manifest content"

    async def execute(self, ctx: PipelineContext) -> StepResult:
        started_at = self._now()

        uploads: list[PendingUpload] = []
        for entry in ctx.entries:
            path = ctx.destination_path(DestinationFolder.VALID, sanitize_name(entry.base_name))

            if entry.is_manifest:
                try:
                    data = self._rewrite(ctx, entry)
                except PipelineError as exc:
                    exc.execution_id = ctx.execution_id
                    exc.step_name = self.name
                    exc.details.setdefault("entry", entry.name)
                    raise
                uploads.append(PendingUpload(entry.name, path, data, rewritten=True))
            else:
                uploads.append(PendingUpload(entry.name, path, entry.content))

        ctx.pending_uploads = uploads
        logger.info(
            "Promotion batch prepared",
            uploads=[{"entry": u.entry_name, "path": u.path} for u in uploads],
        )

        return self._success(started_at, metadata={
            "prepared": len(uploads),
            "rewritten": sum(1 for u in uploads if u.rewritten),
        })

    def _rewrite(self, ctx: PipelineContext, entry: ArchiveEntry) -> bytes:
        record = ctx.manifests[entry.name]
        text = rewrite_content(record.body)
        if ctx.keep_manifest_header:
            text = f"{record.header_line}{record.line_break}{text}"
        return encode_manifest(text)
