"""
Shared fixtures for the PSC archive validator tests.

Archives are built in memory with zipfile; storage is the in-memory
blob store, so no MinIO/Redis is needed.
"""

import io
import zipfile
from datetime import datetime, timezone

import pytest

from psc_validator.core.config import Settings
from psc_validator.pipeline.context import IncomingArchive
from psc_validator.pipeline.engine import PipelineEngine
from psc_validator.storage import MemoryBlobStore

SOURCE_CONTAINER = "invoicingfiles"
DESTINATION_CONTAINER = "invoicing"
ARRIVED_AT = datetime(2024, 5, 6, 14, 30, tzinfo=timezone.utc)
DEST_ROOT = "invoicing/2024/05/PSC"


def make_zip(members: dict[str, bytes | str]) -> bytes:
    """Build a zip archive in memory; str members are UTF-8 encoded."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in members.items():
            zf.writestr(name, data.encode("utf-8") if isinstance(data, str) else data)
    return buf.getvalue()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        SOURCE_CONTAINER=SOURCE_CONTAINER,
        DESTINATION_CONTAINER=DESTINATION_CONTAINER,
        ARCHIVE_CATEGORY="PSC",
        INVALID_ROUTING_ENABLED=True,
        KEEP_MANIFEST_HEADER=False,
    )


@pytest.fixture
def store() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture
def engine(store, settings) -> PipelineEngine:
    return PipelineEngine(store=store, settings=settings)


@pytest.fixture
def put_archive(store):
    """Place an archive in the source container and return its IncomingArchive."""

    def _put(members: dict[str, bytes | str] | None = None, *, raw: bytes | None = None,
             name: str = "batch-1") -> IncomingArchive:
        key = f"2024/05/PSC/{name}.zip"
        store.upload(f"{SOURCE_CONTAINER}/{key}", raw if raw is not None else make_zip(members or {}))
        return IncomingArchive(container=SOURCE_CONTAINER, key=key, arrived_at=ARRIVED_AT)

    return _put
