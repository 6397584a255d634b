"""
Domain-specific exception hierarchy for the validation pipeline.

All pipeline exceptions inherit from PipelineError so callers can
catch broadly or narrowly as needed.  Each exception carries structured
context (step name, execution ID, etc.) for logging/debugging.

Structural and header rejections are NOT exceptions: they travel as
ValidationOutcome values on the PipelineContext.  Exceptions here are
reserved for archives that cannot be processed at all and for storage
I/O failures.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base exception for all pipeline errors."""

    def __init__(
        self,
        message: str,
        *,
        execution_id: str | None = None,
        step_name: str | None = None,
        details: dict | None = None,
    ) -> None:
        self.execution_id = execution_id
        self.step_name = step_name
        self.details = details or {}
        super().__init__(message)


class CorruptArchiveError(PipelineError):
    """The archive bytes are not a readable zip container."""
    pass


class ManifestEncodingError(PipelineError):
    """Manifest text could not be decoded, or contains non-ASCII characters."""

    def __init__(
        self,
        message: str,
        *,
        position: int | None = None,
        **kwargs,
    ) -> None:
        self.position = position
        super().__init__(message, **kwargs)


class StorageError(PipelineError):
    """Blob storage operation (S3/MinIO) failed."""

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        **kwargs,
    ) -> None:
        self.path = path
        super().__init__(message, **kwargs)


class BlobNotFoundError(StorageError):
    """The requested blob does not exist."""
    pass


class UploadError(StorageError):
    """Uploading a blob failed."""
    pass


class DeleteError(StorageError):
    """Deleting a blob failed, or the blob was already gone."""
    pass
