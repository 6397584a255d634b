"""Structural archive check — entry count and manifest presence."""

from __future__ import annotations

from collections.abc import Sequence

from psc_validator.core.constants import EXPECTED_ENTRY_COUNT, ValidationOutcome
from psc_validator.pipeline.context import ArchiveEntry


def check_structure(entries: Sequence[ArchiveEntry]) -> ValidationOutcome:
    """
    Accept exactly two entries, at least one of them a ``.txt`` manifest.

    Only names are inspected, never content.  Two manifests and no data
    file still pass; the header check is the remaining content gate.
    """
    if len(entries) != EXPECTED_ENTRY_COUNT:
        return ValidationOutcome.UNEXPECTED_ENTRY_COUNT
    if not any(entry.is_manifest for entry in entries):
        return ValidationOutcome.MISSING_MANIFEST
    return ValidationOutcome.VALID
