"""
PipelineContext — mutable state object carried through every step.

This is the single source of truth for one archive run.  Each step
reads from and writes to the context.  The engine serialises the
final context summary into the PipelineResult for auditability.

The archive's entries are buffered in memory by the loader so that
both validators run to completion before any upload happens.
"""

from __future__ import annotations

import posixpath
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from psc_validator.core.constants import (
    MANIFEST_SUFFIX,
    DestinationFolder,
    RunState,
    ValidationOutcome,
)


# ═══════════════════════════════════════════════════════════
#  IncomingArchive
# ═══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class IncomingArchive:
    """
    One newly arrived archive.

    Args:
        container: Source container (bucket) name.
        key: Container-relative object key, e.g. "2024/05/PSC/batch-17.zip".
        arrived_at: Arrival timestamp; derives the destination year/month.
        data: Archive bytes, when the trigger already delivered them.
    """

    container: str
    key: str
    arrived_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    data: bytes | None = field(default=None, repr=False)

    @property
    def source_path(self) -> str:
        """Root-relative path of the archive (<container>/<key>)."""
        return f"{self.container}/{self.key}"

    @property
    def file_name(self) -> str:
        return posixpath.basename(self.key)

    @property
    def name(self) -> str:
        """Logical name: the archive file name without its extension."""
        return posixpath.splitext(self.file_name)[0]


# ═══════════════════════════════════════════════════════════
#  ArchiveEntry / ManifestRecord
# ═══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ArchiveEntry:
    """One member of an archive.  Read-only once the archive is opened."""

    name: str
    size: int
    content: bytes = field(repr=False)

    @property
    def base_name(self) -> str:
        """Last path segment of the member name."""
        return posixpath.basename(self.name.rstrip("/")) or self.name

    @property
    def is_manifest(self) -> bool:
        return self.name.lower().endswith(MANIFEST_SUFFIX)


@dataclass(frozen=True)
class ManifestRecord:
    """Manifest split into its header line and the remaining body text."""

    header_line: str
    headers: tuple[str, ...]
    body: str
    line_break: str = ""


@dataclass
class PendingUpload:
    """One blob the promotion step will write."""

    entry_name: str
    path: str
    data: bytes = field(repr=False)
    rewritten: bool = False


# ═══════════════════════════════════════════════════════════
#  StepResult
# ═══════════════════════════════════════════════════════════

@dataclass
class StepResult:
    """Outcome of a single pipeline step execution."""

    step_name: str
    status: str                     # StepStatus value
    started_at: datetime | None = None
    completed_at: datetime | None = None
    duration_ms: int = 0
    error: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialise for logs and task results."""
        return {
            "step_name": self.step_name,
            "status": self.status,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_ms": self.duration_ms,
            "error": self.error,
            "metadata": self.metadata,
        }


# ═══════════════════════════════════════════════════════════
#  PipelineContext
# ═══════════════════════════════════════════════════════════

@dataclass
class PipelineContext:
    """
    Carries all state between pipeline steps.

    Populated progressively — the loader fills in the raw bytes and
    entries, validators set ``outcome`` and ``manifests``, the rewrite
    step fills ``pending_uploads`` and the writers record what actually
    reached storage.
    """

    # ─── Identity (set at init) ────────────────────────
    archive: IncomingArchive
    destination_root: str           # <container-root>/<yyyy>/<MM>/<category>
    execution_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    # ─── Options (copied from settings by the engine) ──
    keep_manifest_header: bool = False
    invalid_routing_enabled: bool = True

    # ─── Archive contents ─────────────────────────────
    archive_bytes: bytes | None = field(default=None, repr=False)
    entries: list[ArchiveEntry] = field(default_factory=list)
    manifests: dict[str, ManifestRecord] = field(default_factory=dict)

    # ─── Validation ───────────────────────────────────
    outcome: ValidationOutcome | None = None
    rejected_entry: str | None = None

    # ─── Promotion ────────────────────────────────────
    pending_uploads: list[PendingUpload] = field(default_factory=list)
    uploaded_paths: list[str] = field(default_factory=list)
    invalid_path: str | None = None
    source_deleted: bool = False

    # ─── Execution tracking ────────────────────────────
    states: list[RunState] = field(default_factory=list)
    step_results: list[StepResult] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    failed: bool = False

    # ─── State helpers ─────────────────────────────────

    @property
    def state(self) -> RunState | None:
        return self.states[-1] if self.states else None

    def advance(self, state: RunState) -> None:
        """Record a state transition."""
        self.states.append(state)

    def reject(self, outcome: ValidationOutcome, entry_name: str | None = None) -> None:
        """Mark the archive as rejected; remaining main steps are skipped."""
        self.outcome = outcome
        self.rejected_entry = entry_name
        self.advance(RunState.REJECTED)

    @property
    def is_rejected(self) -> bool:
        return self.outcome is not None and not self.outcome.is_valid

    @property
    def manifest_entries(self) -> list[ArchiveEntry]:
        return [e for e in self.entries if e.is_manifest]

    # ─── Path helpers ──────────────────────────────────

    def destination_path(self, folder: DestinationFolder, name: str) -> str:
        """<destination_root>/<valid|Invalid>/<name>"""
        return f"{self.destination_root}/{folder}/{name}"

    # ─── General helpers ───────────────────────────────

    def add_error(self, error: str) -> None:
        """Record a non-fatal error."""
        self.errors.append(error)

    def to_summary_dict(self) -> dict[str, Any]:
        """Compact summary for logging / task results."""
        return {
            "execution_id": self.execution_id,
            "source": self.archive.source_path,
            "destination_root": self.destination_root,
            "entries": [{"name": e.name, "size": e.size} for e in self.entries],
            "outcome": self.outcome.value if self.outcome else None,
            "rejected_entry": self.rejected_entry,
            "states": [s.value for s in self.states],
            "uploaded_paths": list(self.uploaded_paths),
            "invalid_path": self.invalid_path,
            "source_deleted": self.source_deleted,
            "errors": list(self.errors),
        }
