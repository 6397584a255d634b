"""
Pydantic Settings — centralized configuration loaded from environment variables.

Resolved once at process start; the module-level ``settings`` object is
passed explicitly into the pipeline engine and treated as immutable.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Blob Storage (S3 / MinIO) ─────────────
    STORAGE_ENDPOINT: str | None = "http://localhost:9000"
    STORAGE_ACCESS_KEY: str = "minioadmin"
    STORAGE_SECRET_KEY: str = "minioadmin"
    STORAGE_REGION: str = "us-east-1"

    # ── Containers ────────────────────────────
    SOURCE_CONTAINER: str = "invoicingfiles"
    DESTINATION_CONTAINER: str = "invoicing"
    ARCHIVE_CATEGORY: str = "PSC"

    # ── Validation Behaviour ──────────────────
    INVALID_ROUTING_ENABLED: bool = True
    KEEP_MANIFEST_HEADER: bool = False

    # ── Redis / Celery ────────────────────────
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/1"

    # ── Application ───────────────────────────
    APP_ENV: str = "development"
    LOG_LEVEL: str = Field(default="INFO")

    model_config = {"env_file": ["../.env", ".env"], "extra": "ignore", "frozen": True}

    @property
    def log_level(self) -> str:
        """Effective log level: DEBUG in development unless overridden."""
        if self.APP_ENV == "development" and self.LOG_LEVEL == "INFO":
            return "DEBUG"
        return self.LOG_LEVEL.upper()


settings = Settings()
