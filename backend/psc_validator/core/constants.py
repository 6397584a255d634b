"""Shared constants and enums used across the application."""

from enum import StrEnum


class PipelineStatus(StrEnum):
    """Overall status of a validation run."""

    COMPLETED = "COMPLETED"
    REJECTED = "REJECTED"
    FAILED = "FAILED"


class StepStatus(StrEnum):
    """Status of an individual pipeline step."""

    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    SKIPPED = "SKIPPED"


class RunState(StrEnum):
    """Lifecycle of one archive through the pipeline."""

    LOADED = "LOADED"
    STRUCTURE_CHECKED = "STRUCTURE_CHECKED"
    HEADER_CHECKED = "HEADER_CHECKED"
    REJECTED = "REJECTED"
    PROMOTED = "PROMOTED"
    SOURCE_DELETED = "SOURCE_DELETED"
    DONE = "DONE"


class ValidationOutcome(StrEnum):
    """Result of the structure and header checks."""

    VALID = "VALID"
    UNEXPECTED_ENTRY_COUNT = "UNEXPECTED_ENTRY_COUNT"
    MISSING_MANIFEST = "MISSING_MANIFEST"
    EMPTY_MANIFEST = "EMPTY_MANIFEST"
    NO_HEADERS = "NO_HEADERS"
    INVALID_HEADERS = "INVALID_HEADERS"

    @property
    def is_valid(self) -> bool:
        return self is ValidationOutcome.VALID


class DestinationFolder(StrEnum):
    """Sub-folders under <root>/<yyyy>/<MM>/<category>/."""

    VALID = "valid"
    INVALID = "Invalid"


# ═══════════════════════════════════════════════════════════
#  Archive layout
# ═══════════════════════════════════════════════════════════

EXPECTED_ENTRY_COUNT = 2
MANIFEST_SUFFIX = ".txt"
HEADER_DELIMITER = "\t"

CANONICAL_HEADERS: frozenset[str] = frozenset({
    "JobNo",
    "JobDate",
    "SiteId",
    "Office",
    "FileName",
    "ServiceCode",
    "Units",
    "Description",
})

# Legacy cost-center tags, applied in order.
CANONICAL_COST_CENTER = "PESTMTS"
TOKEN_SUBSTITUTIONS: tuple[tuple[str, str], ...] = (
    ("REVPAY-RECS-OH", CANONICAL_COST_CENTER),
    ("REVPAY-RECS-AZ", CANONICAL_COST_CENTER),
    ("REVPAY-EDEL-OH", CANONICAL_COST_CENTER),
    ("REVPAY-EDEL-AZ", CANONICAL_COST_CENTER),
)
