"""
S3-compatible blob store (AWS S3, MinIO).

The container segment of a path maps to the bucket, the rest to the
object key.
"""

from __future__ import annotations

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from psc_validator.core.config import Settings
from psc_validator.core.logging import get_logger
from psc_validator.pipeline.errors import BlobNotFoundError, DeleteError, StorageError, UploadError
from psc_validator.storage.blob_store import BlobStore, split_path

logger = get_logger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


def _is_not_found(exc: ClientError) -> bool:
    return exc.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES


class S3BlobStore(BlobStore):
    """
    Blob store backed by an S3 client.

    Configuration:
        AWS S3:
            endpoint_url=None (uses AWS defaults)
        MinIO:
            endpoint_url="http://localhost:9000"
    """

    def __init__(self, client) -> None:
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3BlobStore":
        """Build the boto3 client from the storage connection settings."""
        client = boto3.client(
            "s3",
            endpoint_url=settings.STORAGE_ENDPOINT or None,
            aws_access_key_id=settings.STORAGE_ACCESS_KEY or None,
            aws_secret_access_key=settings.STORAGE_SECRET_KEY or None,
            config=Config(
                region_name=settings.STORAGE_REGION,
                signature_version="s3v4",
                # No client-side retries: a failed call fails the run
                retries={"max_attempts": 1, "mode": "standard"},
            ),
        )
        return cls(client)

    def download(self, path: str) -> bytes:
        bucket, key = split_path(path)
        try:
            response = self.client.get_object(Bucket=bucket, Key=key)
            return response["Body"].read()
        except ClientError as exc:
            if _is_not_found(exc):
                raise BlobNotFoundError(f"Blob not found: {path}", path=path) from exc
            raise StorageError(f"Failed to download {path}: {exc}", path=path) from exc
        except BotoCoreError as exc:
            raise StorageError(f"Failed to download {path}: {exc}", path=path) from exc

    def upload(self, path: str, data: bytes) -> None:
        bucket, key = split_path(path)
        try:
            self.client.put_object(Bucket=bucket, Key=key, Body=data)
        except (ClientError, BotoCoreError) as exc:
            raise UploadError(f"Failed to upload {path}: {exc}", path=path) from exc
        logger.debug("Blob uploaded", path=path, size=len(data))

    def delete(self, path: str) -> bool:
        bucket, key = split_path(path)
        try:
            # S3 deletes are idempotent; probe first to report whether anything was there
            self.client.head_object(Bucket=bucket, Key=key)
        except ClientError as exc:
            if _is_not_found(exc):
                return False
            raise DeleteError(f"Failed to delete {path}: {exc}", path=path) from exc
        except BotoCoreError as exc:
            raise DeleteError(f"Failed to delete {path}: {exc}", path=path) from exc

        try:
            self.client.delete_object(Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as exc:
            raise DeleteError(f"Failed to delete {path}: {exc}", path=path) from exc
        return True

    def list(self, prefix: str) -> list[str]:
        bucket, _, key_prefix = prefix.lstrip("/").partition("/")
        paths: list[str] = []
        try:
            paginator = self.client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=bucket, Prefix=key_prefix):
                for obj in page.get("Contents", []):
                    paths.append(f"{bucket}/{obj['Key']}")
        except (ClientError, BotoCoreError) as exc:
            raise StorageError(f"Failed to list {prefix}: {exc}", path=prefix) from exc
        return paths

    def copy(self, source: str, destination: str) -> None:
        src_bucket, src_key = split_path(source)
        dst_bucket, dst_key = split_path(destination)
        try:
            self.client.copy_object(
                Bucket=dst_bucket,
                Key=dst_key,
                CopySource={"Bucket": src_bucket, "Key": src_key},
            )
        except ClientError as exc:
            if _is_not_found(exc):
                raise BlobNotFoundError(f"Blob not found: {source}", path=source) from exc
            raise UploadError(f"Failed to copy {source} to {destination}: {exc}", path=destination) from exc
        except BotoCoreError as exc:
            raise UploadError(f"Failed to copy {source} to {destination}: {exc}", path=destination) from exc
