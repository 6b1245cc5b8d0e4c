"""
MongoDB connection and database client.
"""

import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from forum_search.core.infrastructure_config import database_name_from_uri

logger = logging.getLogger(__name__)

FORUM_COLLECTION = "forums"


class MongoDB:
    """MongoDB connection manager."""

    def __init__(self, uri: str, db_name: str | None = None):
        self.uri = uri
        self.db_name = db_name or database_name_from_uri(uri)
        self.client: AsyncIOMotorClient | None = None
        self.database: AsyncIOMotorDatabase | None = None

    def connect(self) -> AsyncIOMotorDatabase:
        """Create the client (Motor connects lazily on first operation)."""
        if self.database is None:
            self.client = AsyncIOMotorClient(self.uri)
            self.database = self.client[self.db_name]
            logger.info("MongoDB client created for database: %s", self.db_name)
        return self.database

    def disconnect(self) -> None:
        """Close the client."""
        if self.client:
            self.client.close()
            self.client = None
            self.database = None
            logger.info("Disconnected from MongoDB")
