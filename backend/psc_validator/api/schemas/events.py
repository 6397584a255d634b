"""S3 / MinIO bucket notification schemas (the subset we read)."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class S3Bucket(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str


class S3Object(BaseModel):
    model_config = ConfigDict(extra="ignore")

    key: str                        # URL-encoded, as delivered
    size: int | None = None


class S3Entity(BaseModel):
    model_config = ConfigDict(extra="ignore")

    bucket: S3Bucket
    object: S3Object


class S3EventRecord(BaseModel):
    """One record of an S3 event notification."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    event_name: str = Field(..., alias="eventName")
    event_time: datetime | None = Field(default=None, alias="eventTime")
    s3: S3Entity


class S3EventNotification(BaseModel):
    """Body posted by S3 (via a forwarder) or MinIO webhook targets."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    records: list[S3EventRecord] = Field(default_factory=list, alias="Records")


class DispatchedArchive(BaseModel):
    container: str
    key: str
    task_id: str


class SkippedObject(BaseModel):
    container: str
    key: str
    reason: str


class BlobEventResponse(BaseModel):
    """Result of handling one notification."""

    dispatched: list[DispatchedArchive] = Field(default_factory=list)
    skipped: list[SkippedObject] = Field(default_factory=list)
