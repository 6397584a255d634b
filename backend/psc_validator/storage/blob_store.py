"""
Blob store interface used by the pipeline.

Paths are root-relative: the first segment is the container (bucket),
the remainder is the container-relative key, e.g.
``invoicing/2024/05/PSC/valid/data-csv``.

Implementations are synchronous; pipeline steps call them through
``asyncio.to_thread`` so the run awaits each I/O operation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from psc_validator.pipeline.errors import StorageError


def split_path(path: str) -> tuple[str, str]:
    """Split ``<container>/<key>`` into its two parts."""
    container, sep, key = path.strip("/").partition("/")
    if not sep or not container or not key:
        raise StorageError(f"Expected '<container>/<key>', got '{path}'", path=path)
    return container, key


class BlobStore(ABC):
    """Base interface for blob storage backends."""

    @abstractmethod
    def download(self, path: str) -> bytes:
        """
        Return the blob's bytes.

        Raises:
            BlobNotFoundError: If the blob does not exist.
            StorageError: On any other backend failure.
        """
        ...

    @abstractmethod
    def upload(self, path: str, data: bytes) -> None:
        """Write (or overwrite) a blob.  Raises UploadError on failure."""
        ...

    @abstractmethod
    def delete(self, path: str) -> bool:
        """
        Delete a blob if it exists.

        Returns True if a blob was deleted, False if there was nothing to
        delete.  Raises DeleteError on backend failure.
        """
        ...

    @abstractmethod
    def list(self, prefix: str) -> list[str]:
        """Root-relative paths of all blobs under ``prefix``."""
        ...

    def copy(self, source: str, destination: str) -> None:
        """Copy a blob.  Backends with a server-side copy override this."""
        self.upload(destination, self.download(source))
