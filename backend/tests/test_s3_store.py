"""
Tests for the S3/MinIO blob store, with a mocked boto3 client.
"""

import io
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from psc_validator.core.config import Settings
from psc_validator.pipeline.errors import BlobNotFoundError, DeleteError, StorageError, UploadError
from psc_validator.storage import S3BlobStore, split_path


def _client_error(code: str, operation: str = "GetObject") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.fixture
def client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def s3(client) -> S3BlobStore:
    return S3BlobStore(client)


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

class TestPaths:

    def test_split_path(self):
        assert split_path("invoicing/2024/05/PSC/valid/data-csv") == ("invoicing", "2024/05/PSC/valid/data-csv")

    def test_split_path_requires_key(self):
        with pytest.raises(StorageError):
            split_path("invoicing")


# ---------------------------------------------------------------------------
# Client construction
# ---------------------------------------------------------------------------

class TestFromSettings:

    def test_client_uses_storage_settings(self):
        settings = Settings(
            STORAGE_ENDPOINT="http://minio:9000",
            STORAGE_ACCESS_KEY="key",
            STORAGE_SECRET_KEY="secret",
            STORAGE_REGION="eu-west-1",
        )
        with patch("psc_validator.storage.s3_store.boto3.client") as mock_client:
            store = S3BlobStore.from_settings(settings)

        kwargs = mock_client.call_args.kwargs
        assert mock_client.call_args.args == ("s3",)
        assert kwargs["endpoint_url"] == "http://minio:9000"
        assert kwargs["aws_access_key_id"] == "key"
        assert kwargs["aws_secret_access_key"] == "secret"
        assert store.client is mock_client.return_value

    def test_empty_endpoint_falls_back_to_aws(self):
        with patch("psc_validator.storage.s3_store.boto3.client") as mock_client:
            S3BlobStore.from_settings(Settings(STORAGE_ENDPOINT=""))

        assert mock_client.call_args.kwargs["endpoint_url"] is None


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

class TestDownload:

    def test_returns_body_bytes(self, s3, client):
        client.get_object.return_value = {"Body": io.BytesIO(b"PK\x03\x04")}

        assert s3.download("invoicingfiles/2024/05/PSC/a.zip") == b"PK\x03\x04"
        client.get_object.assert_called_once_with(Bucket="invoicingfiles", Key="2024/05/PSC/a.zip")

    @pytest.mark.parametrize("code", ["NoSuchKey", "404", "NotFound"])
    def test_missing_blob(self, s3, client, code):
        client.get_object.side_effect = _client_error(code)

        with pytest.raises(BlobNotFoundError) as exc_info:
            s3.download("invoicingfiles/2024/05/PSC/a.zip")
        assert exc_info.value.path == "invoicingfiles/2024/05/PSC/a.zip"

    def test_other_client_errors(self, s3, client):
        client.get_object.side_effect = _client_error("AccessDenied")

        with pytest.raises(StorageError) as exc_info:
            s3.download("invoicingfiles/a.zip")
        assert not isinstance(exc_info.value, BlobNotFoundError)

    def test_connection_errors(self, s3, client):
        client.get_object.side_effect = EndpointConnectionError(endpoint_url="http://minio:9000")

        with pytest.raises(StorageError):
            s3.download("invoicingfiles/a.zip")


class TestUpload:

    def test_put_object(self, s3, client):
        s3.upload("invoicing/2024/05/PSC/valid/data-csv", b"1,2")

        client.put_object.assert_called_once_with(
            Bucket="invoicing", Key="2024/05/PSC/valid/data-csv", Body=b"1,2",
        )

    def test_failure_raises_upload_error(self, s3, client):
        client.put_object.side_effect = _client_error("InternalError", "PutObject")

        with pytest.raises(UploadError):
            s3.upload("invoicing/x", b"")


class TestDelete:

    def test_existing_blob(self, s3, client):
        assert s3.delete("invoicingfiles/2024/05/PSC/a.zip") is True
        client.delete_object.assert_called_once_with(Bucket="invoicingfiles", Key="2024/05/PSC/a.zip")

    def test_missing_blob_returns_false(self, s3, client):
        client.head_object.side_effect = _client_error("404", "HeadObject")

        assert s3.delete("invoicingfiles/2024/05/PSC/a.zip") is False
        client.delete_object.assert_not_called()

    def test_backend_failure_raises_delete_error(self, s3, client):
        client.delete_object.side_effect = _client_error("AccessDenied", "DeleteObject")

        with pytest.raises(DeleteError):
            s3.delete("invoicingfiles/a.zip")


class TestListAndCopy:

    def test_list_across_pages(self, s3, client):
        client.get_paginator.return_value.paginate.return_value = [
            {"Contents": [{"Key": "2024/05/PSC/valid/a"}, {"Key": "2024/05/PSC/valid/b"}]},
            {},
        ]

        assert s3.list("invoicing/2024/05/PSC/valid/") == [
            "invoicing/2024/05/PSC/valid/a",
            "invoicing/2024/05/PSC/valid/b",
        ]
        client.get_paginator.return_value.paginate.assert_called_once_with(
            Bucket="invoicing", Prefix="2024/05/PSC/valid/",
        )

    def test_server_side_copy(self, s3, client):
        s3.copy("invoicingfiles/2024/05/PSC/a.zip", "invoicing/2024/05/PSC/Invalid/a.zip")

        client.copy_object.assert_called_once_with(
            Bucket="invoicing",
            Key="2024/05/PSC/Invalid/a.zip",
            CopySource={"Bucket": "invoicingfiles", "Key": "2024/05/PSC/a.zip"},
        )

    def test_copy_of_missing_source(self, s3, client):
        client.copy_object.side_effect = _client_error("NoSuchKey", "CopyObject")

        with pytest.raises(BlobNotFoundError):
            s3.copy("invoicingfiles/a.zip", "invoicing/b.zip")
