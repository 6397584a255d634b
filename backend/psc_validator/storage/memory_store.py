"""In-process blob store for local runs (scripts/demo_pipeline.py) and tests."""

from __future__ import annotations

import threading

from psc_validator.pipeline.errors import BlobNotFoundError
from psc_validator.storage.blob_store import BlobStore, split_path


class MemoryBlobStore(BlobStore):
    """Dict-backed blob store keyed by root-relative path."""

    def __init__(self, blobs: dict[str, bytes] | None = None) -> None:
        self._blobs: dict[str, bytes] = dict(blobs or {})
        self._lock = threading.Lock()

    def download(self, path: str) -> bytes:
        split_path(path)
        with self._lock:
            try:
                return self._blobs[path]
            except KeyError:
                raise BlobNotFoundError(f"Blob not found: {path}", path=path) from None

    def upload(self, path: str, data: bytes) -> None:
        split_path(path)
        with self._lock:
            self._blobs[path] = bytes(data)

    def delete(self, path: str) -> bool:
        split_path(path)
        with self._lock:
            return self._blobs.pop(path, None) is not None

    def list(self, prefix: str) -> list[str]:
        with self._lock:
            return sorted(p for p in self._blobs if p.startswith(prefix))

    def __contains__(self, path: str) -> bool:
        return path in self._blobs

    def __len__(self) -> int:
        return len(self._blobs)
