"""
Forum Search Service Configuration

Service-specific configuration. Inherits infrastructure settings.
"""

import os

from forum_search.core.infrastructure_config import (
    Environment,
    InfrastructureSettings,
)


class ServiceSettings(InfrastructureSettings):
    """Forum search service configuration (inherits infrastructure settings)"""

    # Application
    APP_NAME: str = "Forum Search Service"
    APP_VERSION: str = "1.0.0"
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Admin index operations (required - no default for security)
    ADMIN_API_KEY: str | None = os.getenv("ADMIN_API_KEY")

    # Search
    MAX_QUERY_LEN: int = int(os.getenv("MAX_QUERY_LEN", "200"))
    SEARCH_RESULTS_LIMIT: int = int(os.getenv("SEARCH_RESULTS_LIMIT", "20"))

    # Sync
    SYNC_CHUNK_SIZE: int = int(os.getenv("SYNC_CHUNK_SIZE", "500"))
    RESYNC_INTERVAL_MINUTES: int = int(os.getenv("RESYNC_INTERVAL_MINUTES", "60"))
    RESYNC_IN_PROCESS: bool = os.getenv("RESYNC_IN_PROCESS", "false").lower() == "true"
    SETUP_INDEX_ON_STARTUP: bool = (
        os.getenv("SETUP_INDEX_ON_STARTUP", "false").lower() == "true"
    )

    # Security
    CORS_ORIGINS: list[str] = (
        os.getenv("CORS_ORIGINS", "").split(",") if os.getenv("CORS_ORIGINS") else []
    )


settings = ServiceSettings()


def _validate_required(settings: ServiceSettings) -> None:
    """Validate required settings outside of tests."""
    if settings.ENVIRONMENT == Environment.TEST:
        return

    missing = [name for name in ("MONGODB_URI", "ADMIN_API_KEY") if not getattr(settings, name)]
    if not (settings.ELASTICSEARCH_URL or settings.ELASTIC_CLOUD_ID):
        missing.append("ELASTICSEARCH_URL or ELASTIC_CLOUD_ID")
    if missing:
        raise RuntimeError(
            "Missing required environment variables: " + ", ".join(missing)
        )


_validate_required(settings)
