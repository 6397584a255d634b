"""
Blob-created trigger — decides which new objects start a validation run.

Archives arrive as ``<source-container>/<yyyy>/<MM>/<category>/<name>.zip``.
Anything else in the bucket (including our own valid/Invalid output, if
it shares the bucket) is ignored.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from urllib.parse import unquote_plus

from psc_validator.api.schemas.events import S3EventRecord
from psc_validator.core.config import Settings
from psc_validator.pipeline.context import IncomingArchive

ARCHIVE_KEY_PATTERN = re.compile(
    r"^(?P<year>\d{4})/(?P<month>\d{2})/(?P<category>[^/]+)/(?P<name>[^/]+)\.zip$",
    re.IGNORECASE,
)


def match_archive_key(key: str, category: str) -> re.Match[str] | None:
    """Match a container-relative key against the trigger pattern."""
    match = ARCHIVE_KEY_PATTERN.match(key)
    if match is None or match.group("category") != category:
        return None
    return match


def skip_reason(record: S3EventRecord, settings: Settings) -> str | None:
    """Why this record does not start a run, or None if it should."""
    if "ObjectCreated" not in record.event_name:
        return f"ignored event {record.event_name}"
    if record.s3.bucket.name != settings.SOURCE_CONTAINER:
        return f"not the source container {settings.SOURCE_CONTAINER}"
    if match_archive_key(unquote_plus(record.s3.object.key), settings.ARCHIVE_CATEGORY) is None:
        return "key does not match <yyyy>/<MM>/<category>/<name>.zip"
    return None


def archive_from_record(record: S3EventRecord) -> IncomingArchive:
    """Build the IncomingArchive for an accepted event record."""
    arrived_at = record.event_time or datetime.now(timezone.utc)
    if arrived_at.tzinfo is None:
        arrived_at = arrived_at.replace(tzinfo=timezone.utc)
    return IncomingArchive(
        container=record.s3.bucket.name,
        key=unquote_plus(record.s3.object.key),
        arrived_at=arrived_at,
    )
