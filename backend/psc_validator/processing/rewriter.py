"""
Manifest content rewriter.

Legacy cost-center tags are replaced by the canonical tag, then the text
is encoded as strict ASCII for the downstream invoicing import.
"""

from __future__ import annotations

from psc_validator.core.constants import TOKEN_SUBSTITUTIONS
from psc_validator.pipeline.errors import ManifestEncodingError


def rewrite_content(text: str, substitutions: tuple[tuple[str, str], ...] = TOKEN_SUBSTITUTIONS) -> str:
    """Apply literal, case-sensitive replace-all substitutions in table order."""
    for source, replacement in substitutions:
        text = text.replace(source, replacement)
    return text


def encode_manifest(text: str) -> bytes:
    """
    Encode manifest text as ASCII.

    Raises:
        ManifestEncodingError: On the first non-ASCII character.
    """
    try:
        return text.encode("ascii")
    except UnicodeEncodeError as exc:
        raise ManifestEncodingError(
            f"Non-ASCII character {exc.object[exc.start]!r} at position {exc.start}",
            position=exc.start,
        ) from exc
