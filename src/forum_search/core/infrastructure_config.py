"""
Infrastructure Configuration

Connection settings for MongoDB (system of record) and Elasticsearch
(forum search index).
"""

import os
from enum import Enum
from urllib.parse import urlsplit

DEFAULT_DB_NAME = "skillSwapHub"


class Environment(str, Enum):
    """Application environment"""

    PRODUCTION = "production"
    DEVELOPMENT = "development"
    TEST = "test"


def _get_environment() -> Environment:
    """Get and validate ENVIRONMENT variable."""
    env_value = os.getenv("ENVIRONMENT")
    if env_value is None:
        raise RuntimeError(
            "ENVIRONMENT is required. Set to 'production', 'development', or 'test'."
        )
    try:
        return Environment(env_value.lower())
    except ValueError:
        raise RuntimeError(
            f"Invalid ENVIRONMENT value: '{env_value}'. "
            "Must be 'production', 'development', or 'test'."
        )


def database_name_from_uri(uri: str | None, default: str = DEFAULT_DB_NAME) -> str:
    """
    Derive the database name from a MongoDB connection string.

    mongodb+srv://user:pw@cluster.example.net/skillSwap?retryWrites=true -> skillSwap
    mongodb://localhost:27017 -> default
    """
    if not uri:
        return default
    path = urlsplit(uri).path.lstrip("/")
    return path.split("/")[-1] or default


class InfrastructureSettings:
    """Infrastructure-level configuration (MongoDB, Elasticsearch)"""

    # MongoDB
    MONGODB_URI: str | None = os.getenv("MONGODB_URI")
    MONGODB_DB_NAME: str = os.getenv(
        "MONGODB_DB_NAME", database_name_from_uri(os.getenv("MONGODB_URI"))
    )

    # Elasticsearch
    # Elastic Cloud: set ELASTIC_CLOUD_ID + ELASTIC_API_KEY
    # Self-hosted: set ELASTICSEARCH_URL (optionally with API key or basic auth)
    ELASTICSEARCH_URL: str | None = os.getenv("ELASTICSEARCH_URL")
    ELASTIC_CLOUD_ID: str | None = os.getenv("ELASTIC_CLOUD_ID")
    ELASTIC_API_KEY: str | None = os.getenv("ELASTIC_API_KEY")
    ELASTIC_USERNAME: str | None = os.getenv("ELASTIC_USERNAME")
    ELASTIC_PASSWORD: str | None = os.getenv("ELASTIC_PASSWORD")
    FORUM_INDEX: str = os.getenv("FORUM_INDEX", "forums")

    # Environment
    ENVIRONMENT: Environment = _get_environment()


settings = InfrastructureSettings()
