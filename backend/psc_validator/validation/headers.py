"""
Manifest header validation.

Only the first line of the manifest is inspected.  It is split on tabs
and must share at least one field name with CANONICAL_HEADERS; order
and completeness are not checked.
"""

from __future__ import annotations

import re

from psc_validator.core.constants import CANONICAL_HEADERS, HEADER_DELIMITER, ValidationOutcome
from psc_validator.pipeline.context import ManifestRecord
from psc_validator.pipeline.errors import ManifestEncodingError

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def decode_manifest(data: bytes) -> str:
    """Decode manifest bytes as UTF-8, dropping a leading byte-order mark."""
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ManifestEncodingError(
            f"Manifest is not valid UTF-8: {exc.reason} at byte {exc.start}",
            position=exc.start,
        ) from exc


def parse_manifest(content: str) -> ManifestRecord | None:
    """Split manifest text into header line and body.  None when it has no lines."""
    if not content:
        return None

    match = _LINE_BREAK.search(content)
    if match is None:
        header_line, body, line_break = content, "", ""
    else:
        header_line, body = content[:match.start()], content[match.end():]
        line_break = match.group()

    headers = tuple(f for f in header_line.split(HEADER_DELIMITER) if f)
    return ManifestRecord(
        header_line=header_line,
        headers=headers,
        body=body,
        line_break=line_break,
    )


def check_header(
    record: ManifestRecord | None,
    canonical: frozenset[str] = CANONICAL_HEADERS,
) -> ValidationOutcome:
    """Classify a parsed manifest's header line."""
    if record is None or not record.header_line:
        return ValidationOutcome.EMPTY_MANIFEST
    if not record.headers:
        return ValidationOutcome.NO_HEADERS
    if canonical.isdisjoint(record.headers):
        return ValidationOutcome.INVALID_HEADERS
    return ValidationOutcome.VALID


def validate_manifest(content: str) -> tuple[ValidationOutcome, ManifestRecord | None]:
    """Parse and check in one go."""
    record = parse_manifest(content)
    return check_header(record), record
