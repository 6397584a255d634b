"""
Step sequences for the PSC archive validation run.

Main steps run in order and stop at the first failure; a rejected
archive skips the rest of them.  Finalizer steps always run.

    Load → Structure → Headers → Rewrite → Promote   (main)
    Route Invalid → Delete Source                    (finalizers)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from psc_validator.pipeline.step import PipelineStep
from psc_validator.pipeline.steps.delete_source import DeleteSourceStep
from psc_validator.pipeline.steps.load_archive import LoadArchiveStep
from psc_validator.pipeline.steps.promote_entries import PromoteEntriesStep
from psc_validator.pipeline.steps.rewrite_manifest import RewriteManifestStep
from psc_validator.pipeline.steps.route_invalid import RouteInvalidStep
from psc_validator.pipeline.steps.validate_headers import ValidateHeadersStep
from psc_validator.pipeline.steps.validate_structure import ValidateStructureStep

if TYPE_CHECKING:
    from psc_validator.storage.blob_store import BlobStore


def validation_steps(store: BlobStore) -> list[PipelineStep]:
    """Load, validate, rewrite and promote."""
    return [
        LoadArchiveStep(store),
        ValidateStructureStep(),
        ValidateHeadersStep(),
        RewriteManifestStep(),
        PromoteEntriesStep(store),
    ]


def finalizer_steps(store: BlobStore) -> list[PipelineStep]:
    """Steps that run for every archive, after the main steps."""
    return [
        RouteInvalidStep(store),
        DeleteSourceStep(store),
    ]
