"""API schema package."""

from psc_validator.api.schemas.events import (
    BlobEventResponse,
    DispatchedArchive,
    S3EventNotification,
    S3EventRecord,
    SkippedObject,
)

__all__ = [
    "BlobEventResponse",
    "DispatchedArchive",
    "S3EventNotification",
    "S3EventRecord",
    "SkippedObject",
]
