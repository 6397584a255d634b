"""
Celery tasks — PSC archive validation.

Wires the PipelineEngine into the Celery task system.  One task per
arrived archive; runs for distinct archives are independent.
"""

import asyncio
from datetime import datetime, timezone

from celery.exceptions import SoftTimeLimitExceeded

from psc_validator.core.config import settings
from psc_validator.core.constants import PipelineStatus
from psc_validator.core.logging import get_logger
from psc_validator.pipeline.context import IncomingArchive
from psc_validator.pipeline.engine import PipelineEngine, PipelineResult
from psc_validator.storage import build_blob_store
from psc_validator.tasks import celery_app

logger = get_logger(__name__)


def _parse_arrived_at(value: str | None) -> datetime:
    if not value:
        return datetime.now(timezone.utc)
    arrived_at = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if arrived_at.tzinfo is None:
        arrived_at = arrived_at.replace(tzinfo=timezone.utc)
    return arrived_at


@celery_app.task(
    bind=True,
    name="psc_validator.tasks.validation_tasks.validate_archive",
    max_retries=0,
)
def validate_archive(self, container: str, key: str, arrived_at: str | None = None) -> dict:
    """
    Validate one arrived archive and promote or reject it.

    Returns the PipelineResult as a dict.  Never raises: failures are
    logged and reported in the returned status, and the task is not
    retried.  When the soft time limit fires mid-run the run is abandoned
    as is: no finalizer runs, so the source archive is left in place.
    """
    task_log = logger.bind(
        task_id=self.request.id,
        container=container,
        key=key,
    )
    task_log.info("Validation task started")

    try:
        archive = IncomingArchive(
            container=container,
            key=key,
            arrived_at=_parse_arrived_at(arrived_at),
        )

        # Run the async pipeline engine in sync Celery context
        engine = PipelineEngine(store=build_blob_store(settings), settings=settings)
        result: PipelineResult = asyncio.run(engine.run(archive))

    except SoftTimeLimitExceeded:
        task_log.error("Validation task timed out, source archive left in place")
        return {
            "execution_id": None,
            "status": PipelineStatus.FAILED.value,
            "error": "Soft time limit exceeded",
        }

    except Exception as exc:
        task_log.exception("Validation task failed", error=str(exc))
        return {
            "execution_id": None,
            "status": PipelineStatus.FAILED.value,
            "error": str(exc),
        }

    task_log.info(
        "Validation task finished",
        pipeline_status=result.status,
        outcome=result.outcome,
        duration_ms=result.total_duration_ms,
    )
    return result.to_dict()
