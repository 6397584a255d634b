"""
Tests for the Celery validation task, executed eagerly with an in-memory store.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest
from celery.exceptions import SoftTimeLimitExceeded

from psc_validator.core.constants import PipelineStatus, ValidationOutcome
from psc_validator.storage import MemoryBlobStore
from psc_validator.tasks.validation_tasks import _parse_arrived_at, validate_archive

from conftest import make_zip

KEY = "2024/05/PSC/batch-1.zip"


@pytest.fixture
def task_store():
    store = MemoryBlobStore()
    with patch("psc_validator.tasks.validation_tasks.build_blob_store", return_value=store):
        yield store


def _run(**kwargs) -> dict:
    return validate_archive.apply(kwargs=kwargs).get()


class TestValidateArchiveTask:

    def test_valid_archive(self, task_store):
        task_store.upload(f"invoicingfiles/{KEY}", make_zip({
            "data.csv": b"1,2\n",
            "manifest.txt": "JobNo\tServiceCode\n1\tREVPAY-EDEL-OH\n",
        }))

        result = _run(container="invoicingfiles", key=KEY, arrived_at="2024-05-06T14:30:00Z")

        assert result["status"] == PipelineStatus.COMPLETED
        assert result["outcome"] == ValidationOutcome.VALID
        assert task_store.download("invoicing/2024/05/PSC/valid/manifest-txt") == b"1\tPESTMTS\n"
        assert f"invoicingfiles/{KEY}" not in task_store

    def test_rejected_archive(self, task_store):
        task_store.upload(f"invoicingfiles/{KEY}", make_zip({"manifest.txt": "JobNo\n"}))

        result = _run(container="invoicingfiles", key=KEY, arrived_at="2024-05-06T14:30:00Z")

        assert result["status"] == PipelineStatus.REJECTED
        assert result["outcome"] == ValidationOutcome.UNEXPECTED_ENTRY_COUNT

    def test_missing_archive_returns_failed_result(self, task_store):
        result = _run(container="invoicingfiles", key=KEY)

        assert result["status"] == PipelineStatus.FAILED
        assert result["error"]

    def test_store_construction_failure_does_not_raise(self):
        with patch(
            "psc_validator.tasks.validation_tasks.build_blob_store",
            side_effect=RuntimeError("no credentials"),
        ):
            result = _run(container="invoicingfiles", key=KEY)

        assert result == {"execution_id": None, "status": "FAILED", "error": "no credentials"}

    def test_result_is_json_serialisable(self, task_store):
        import json

        task_store.upload(f"invoicingfiles/{KEY}", b"garbage")

        result = _run(container="invoicingfiles", key=KEY, arrived_at="2024-05-06T14:30:00Z")

        assert json.loads(json.dumps(result))["status"] == "FAILED"

    def test_time_limit_leaves_source_in_place(self, task_store):
        task_store.upload(f"invoicingfiles/{KEY}", make_zip({"data.csv": b"x", "manifest.txt": "JobNo\n"}))
        task_store.download = MagicMock(side_effect=SoftTimeLimitExceeded())

        result = _run(container="invoicingfiles", key=KEY)

        assert result["status"] == "FAILED"
        assert result["error"] == "Soft time limit exceeded"
        assert f"invoicingfiles/{KEY}" in task_store
        assert task_store.list("invoicing/") == []

    def test_task_is_never_retried(self):
        assert validate_archive.max_retries == 0


class TestParseArrivedAt:

    def test_zulu_suffix(self):
        assert _parse_arrived_at("2024-05-06T14:30:00Z") == datetime(2024, 5, 6, 14, 30, tzinfo=timezone.utc)

    def test_naive_value_is_utc(self):
        assert _parse_arrived_at("2024-05-06T14:30:00").tzinfo == timezone.utc

    def test_missing_value_is_now(self):
        assert _parse_arrived_at(None).tzinfo is not None
