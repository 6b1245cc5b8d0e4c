"""
Forum Search Service

Facade over the forum index: lazy one-time initialization, index setup,
sync-on-write and search. Constructed once per process and handed to the
route handlers (see forum_search.api.deps).
"""

import asyncio
import logging
from enum import Enum
from typing import Any

from bson import ObjectId
from elasticsearch import AsyncElasticsearch

from forum_search.core.config import ServiceSettings, settings
from forum_search.db import FORUM_COLLECTION, MongoDB, create_elasticsearch_client
from forum_search.models import Forum, ForumResult
from forum_search.search import (
    ForumIndexManager,
    ForumIndexSync,
    SearchError,
    SearchUnavailableError,
    build_search_body,
    merge_results,
)
from forum_search.search.query import hit_forum_ids
from forum_search.search.sync import SyncOperation

logger = logging.getLogger(__name__)


class ServiceState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"


class SearchService:
    def __init__(
        self,
        es: AsyncElasticsearch,
        database: Any,
        index_name: str = settings.FORUM_INDEX,
        results_limit: int = settings.SEARCH_RESULTS_LIMIT,
        chunk_size: int = settings.SYNC_CHUNK_SIZE,
        mongodb: MongoDB | None = None,
    ):
        """
        Args:
            es: Elasticsearch client
            database: Motor database holding the forums collection
            index_name: Forum search index
            results_limit: Maximum hits per search
            chunk_size: Documents per bulk request during full sync
            mongodb: Owning connection manager, closed by close()
        """
        self.es = es
        self.database = database
        self.index_name = index_name
        self.results_limit = results_limit
        self._mongodb = mongodb

        self.forums = database[FORUM_COLLECTION]
        self.sync = ForumIndexSync(es, self.forums, index_name, chunk_size=chunk_size)
        self.index_manager = ForumIndexManager(es, self.sync, index_name)

        self.state = ServiceState.UNINITIALIZED
        self._init_lock = asyncio.Lock()

    @property
    def is_ready(self) -> bool:
        return self.state is ServiceState.READY

    async def initialize(self) -> None:
        """
        Verify MongoDB and Elasticsearch connectivity once.

        Concurrent first callers wait on the same lock; only one performs
        the checks. A failed attempt leaves the service uninitialized.
        """
        if self.is_ready:
            return

        async with self._init_lock:
            if self.is_ready:
                return

            try:
                await self.database.command("ping")
            except Exception as e:
                logger.error(f"MongoDB ping failed: {e}")
                raise SearchUnavailableError(f"MongoDB is unreachable: {e}") from e
            logger.info("Connected to MongoDB database: %s", self.database.name)

            if not await self.es.ping():
                raise SearchUnavailableError("Elasticsearch is unreachable")
            logger.info("Connected to Elasticsearch (index: %s)", self.index_name)

            self.state = ServiceState.READY

    async def setup_index(self, delete_existing: bool = False) -> None:
        await self.initialize()
        await self.index_manager.setup_index(delete_existing)

    async def check_index(self) -> bool:
        return await self.index_manager.check_index()

    async def sync_all(self) -> int:
        await self.initialize()
        return await self.sync.sync_all()

    async def sync_document(self, forum: Forum, operation: SyncOperation) -> None:
        await self.initialize()
        await self.sync.sync_document(forum, operation)

    async def reconcile(self) -> dict[str, int]:
        await self.initialize()
        return await self.sync.reconcile()

    async def index_status(self) -> dict[str, Any]:
        await self.initialize()
        return await self.sync.index_status()

    async def search_forums(self, query: str) -> list[ForumResult]:
        """
        Search forums by free text.

        Results follow index relevance order. Blank queries return [].

        Raises:
            SearchError: on any query or lookup failure
        """
        query = (query or "").strip()
        if not query:
            return []

        await self.initialize()
        logger.info("Searching forums: %r", query)

        try:
            resp = await self.es.search(
                index=self.index_name,
                **build_search_body(query, size=self.results_limit),
            )
            hits = resp["hits"]["hits"]
            forums_by_id = await self._load_forums(hit_forum_ids(hits))
        except Exception as e:
            logger.exception("Search error for query %r", query)
            raise SearchError("Search failed") from e

        return merge_results(hits, forums_by_id)

    async def _load_forums(self, ids: list[str]) -> dict[str, Forum]:
        object_ids = [ObjectId(i) for i in ids if ObjectId.is_valid(i)]
        if not object_ids:
            return {}
        docs = await self.forums.find({"_id": {"$in": object_ids}}).to_list(length=None)
        forums = (Forum.from_mongo(doc) for doc in docs)
        return {forum.id: forum for forum in forums}

    async def close(self) -> None:
        await self.es.close()
        if self._mongodb is not None:
            self._mongodb.disconnect()
        self.state = ServiceState.UNINITIALIZED


def build_search_service(config: ServiceSettings = settings) -> SearchService:
    """Construct the process-wide SearchService from settings."""
    if not config.MONGODB_URI:
        raise RuntimeError("MONGODB_URI is not defined in environment variables")

    mongodb = MongoDB(config.MONGODB_URI, config.MONGODB_DB_NAME)
    return SearchService(
        es=create_elasticsearch_client(config),
        database=mongodb.connect(),
        index_name=config.FORUM_INDEX,
        results_limit=config.SEARCH_RESULTS_LIMIT,
        chunk_size=config.SYNC_CHUNK_SIZE,
        mongodb=mongodb,
    )
