"""FastAPI application entry point (storage event webhook)."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from psc_validator.api.v1 import events
from psc_validator.core.config import settings
from psc_validator.core.logging import get_logger, setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle hooks."""
    setup_logging(settings.log_level)
    logger = get_logger("startup")
    logger.info(
        "Application starting",
        env=settings.APP_ENV,
        source_container=settings.SOURCE_CONTAINER,
        destination_container=settings.DESTINATION_CONTAINER,
    )
    yield
    logger.info("Application shutting down")


app = FastAPI(
    title="PSC Archive Validator",
    description="Validates and promotes PSC invoicing archives on arrival",
    version="0.1.0",
    lifespan=lifespan,
)

API_PREFIX = "/api/v1"
app.include_router(events.router, prefix=API_PREFIX)


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Public health-check endpoint."""
    return {"status": "ok", "env": settings.APP_ENV}
