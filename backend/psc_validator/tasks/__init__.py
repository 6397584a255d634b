"""
Celery application factory.
"""

from celery import Celery
from celery.signals import setup_logging as celery_setup_logging

from psc_validator.core.config import settings
from psc_validator.core.logging import setup_logging

celery_app = Celery("psc_validator")
celery_app.config_from_object("celeryconfig")

# Auto-discover tasks in these modules
celery_app.autodiscover_tasks([
    "psc_validator.tasks.validation_tasks",
])


@celery_setup_logging.connect
def _configure_worker_logging(**kwargs) -> None:
    """Use structlog in workers instead of Celery's default handlers."""
    setup_logging(settings.log_level)
