"""
Archive loader — opens zip bytes into an in-memory list of entries.
"""

from __future__ import annotations

import io
import zipfile
import zlib

from psc_validator.pipeline.context import ArchiveEntry
from psc_validator.pipeline.errors import CorruptArchiveError


def load_archive(data: bytes) -> list[ArchiveEntry]:
    """
    Read every member of a zip archive into memory, in archive order.

    Directory members are kept: they count towards the entry total just
    like files do.

    Raises:
        CorruptArchiveError: If ``data`` is not a well-formed zip container
            or a member cannot be decompressed (including password-protected
            members).
    """
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            return [
                ArchiveEntry(name=info.filename, size=info.file_size, content=zf.read(info))
                for info in zf.infolist()
            ]
    except (
        zipfile.BadZipFile,
        zipfile.LargeZipFile,
        zlib.error,
        EOFError,
        NotImplementedError,
        RuntimeError,      # encrypted member, no password
        ValueError,
    ) as exc:
        raise CorruptArchiveError(
            f"Unreadable archive: {exc}",
            details={"size": len(data)},
        ) from exc
