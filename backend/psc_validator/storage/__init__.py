"""
Blob storage backends for the validation pipeline.

``build_blob_store(settings)`` returns the S3/MinIO store the workers use.
"""

from psc_validator.core.config import Settings
from psc_validator.storage.blob_store import BlobStore, split_path
from psc_validator.storage.memory_store import MemoryBlobStore
from psc_validator.storage.s3_store import S3BlobStore


def build_blob_store(settings: Settings) -> BlobStore:
    """Create the configured blob store."""
    return S3BlobStore.from_settings(settings)


__all__ = [
    "BlobStore",
    "MemoryBlobStore",
    "S3BlobStore",
    "build_blob_store",
    "split_path",
]
