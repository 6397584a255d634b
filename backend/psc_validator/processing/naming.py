"""Storage-safe naming and destination path construction."""

from __future__ import annotations

import re
from datetime import datetime

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9\-]")


def sanitize_name(name: str) -> str:
    """
    Map an archive entry name to a blob-safe name.

    Every character outside ``[A-Za-z0-9-]`` becomes a hyphen and the
    result is lowercased, e.g. ``"Jobs 2024.csv"`` -> ``"jobs-2024-csv"``.
    Idempotent.  No length limit is applied.
    """
    return _UNSAFE_CHARS.sub("-", name).lower()


def build_destination_root(container: str, arrived_at: datetime, category: str) -> str:
    """<container>/<yyyy>/<MM>/<category> for the archive's arrival month."""
    return f"{container.rstrip('/')}/{arrived_at.year}/{arrived_at.month:02d}/{category}"
