"""
Blob event endpoints — storage notifications that trigger validation runs.
"""

from fastapi import APIRouter

from psc_validator.api.schemas.events import (
    BlobEventResponse,
    DispatchedArchive,
    S3EventNotification,
    SkippedObject,
)
from psc_validator.core.config import settings
from psc_validator.core.logging import get_logger
from psc_validator.ingestion.blob_events import archive_from_record, skip_reason

router = APIRouter(prefix="/events", tags=["Events"])

logger = get_logger(__name__)


# ─── Blob Created ─────────────────────────────────────────
@router.post("/blob-created", response_model=BlobEventResponse)
async def blob_created(notification: S3EventNotification) -> BlobEventResponse:
    """
    Handle an S3/MinIO "object created" notification.

    Dispatches one Celery task per matching archive and returns
    immediately; processing outcome is only visible in the logs and the
    task result.
    """
    from psc_validator.tasks.validation_tasks import validate_archive

    response = BlobEventResponse()

    for record in notification.records:
        reason = skip_reason(record, settings)
        if reason is not None:
            response.skipped.append(SkippedObject(
                container=record.s3.bucket.name,
                key=record.s3.object.key,
                reason=reason,
            ))
            continue

        archive = archive_from_record(record)
        task = validate_archive.delay(
            container=archive.container,
            key=archive.key,
            arrived_at=archive.arrived_at.isoformat(),
        )
        logger.info(
            "Validation queued",
            source=archive.source_path,
            task_id=task.id,
        )
        response.dispatched.append(DispatchedArchive(
            container=archive.container,
            key=archive.key,
            task_id=task.id,
        ))

    if response.skipped:
        logger.debug("Event records skipped", skipped=[s.model_dump() for s in response.skipped])

    return response
