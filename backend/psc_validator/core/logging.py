"""
Structured logging setup (structlog).

Every module obtains its logger through ``get_logger(__name__)`` and logs
an event name plus keyword context::

    logger = get_logger(__name__)
    logger.info("Uploading entry", entry="data.csv", path="invoicing/...")

``setup_logging`` is called once per process (API startup, Celery worker
start, demo script).  Development gets a colourised console renderer,
everything else gets one JSON object per line.
"""

from __future__ import annotations

import logging
import sys

import structlog

from psc_validator.core.config import settings


def setup_logging(level: str = "INFO", json_logs: bool | None = None) -> None:
    """Configure structlog and the stdlib root logger."""
    if json_logs is None:
        json_logs = settings.APP_ENV != "development"

    log_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_logs:
        renderer: structlog.typing.Processor = structlog.processors.JSONRenderer()
        shared_processors.append(structlog.processors.format_exc_info)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(sys.stdout),
        cache_logger_on_first_use=True,
    )

    # Third-party libraries (boto3, celery, uvicorn) log through stdlib
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
        level=log_level,
        force=True,
    )
    for noisy in ("botocore", "boto3", "urllib3", "s3transfer"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.typing.FilteringBoundLogger:
    """Return a structlog logger that tags every event with ``logger_name=name``."""
    if name is None:
        return structlog.get_logger()
    # Initial values stay lazy; the logger picks up setup_logging() on first use
    return structlog.get_logger(logger_name=name)
