"""Forum index lifecycle: create, delete, populate, probe."""

import logging

from elasticsearch import AsyncElasticsearch

from forum_search.search.errors import IndexSetupError
from forum_search.search.mapping import FORUM_INDEX_MAPPINGS, FORUM_INDEX_SETTINGS
from forum_search.search.sync import ForumIndexSync

logger = logging.getLogger(__name__)


class ForumIndexManager:
    """Ensures the forum index exists with the expected schema."""

    def __init__(self, es: AsyncElasticsearch, sync: ForumIndexSync, index_name: str):
        self.es = es
        self.sync = sync
        self.index_name = index_name

    async def index_exists(self) -> bool:
        return bool(await self.es.indices.exists(index=self.index_name))

    async def setup_index(self, delete_existing: bool = False) -> None:
        """
        Create the index if missing and fill it from MongoDB.

        Args:
            delete_existing: Drop and rebuild an existing index

        Raises:
            IndexSetupError: on any connectivity, creation or sync failure.
                A half-built index is left in place; rerun with
                delete_existing=True to recover.
        """
        try:
            exists = await self.index_exists()

            if exists and delete_existing:
                logger.info("Deleting existing index %s", self.index_name)
                await self.es.indices.delete(index=self.index_name)
                exists = False

            if exists:
                logger.info("Index %s already exists", self.index_name)
                return

            logger.info("Creating index %s", self.index_name)
            await self.es.indices.create(
                index=self.index_name,
                settings=FORUM_INDEX_SETTINGS,
                mappings=FORUM_INDEX_MAPPINGS,
            )
            await self.sync.sync_all()
        except Exception as e:
            logger.error(f"Index setup for {self.index_name} failed: {e}", exc_info=True)
            raise IndexSetupError(
                f"Failed to set up index '{self.index_name}': {e}"
            ) from e

    async def check_index(self) -> bool:
        """Probe the index with a one-hit query. Never raises."""
        try:
            await self.es.search(
                index=self.index_name,
                query={"match": {"title": "test"}},
                size=1,
            )
            return True
        except Exception as e:
            logger.error(f"Search index check failed: {e}")
            return False
