"""
Forum Index Sync

Keeps the search index eventually consistent with the MongoDB `forums`
collection: full bulk rebuilds, incremental per-forum writes, and a
reconciliation pass that removes documents for deleted forums.
"""

import logging
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Literal

from elasticsearch import AsyncElasticsearch
from elasticsearch.helpers import async_bulk, async_scan

from forum_search.models import Forum
from forum_search.search.errors import SyncError

logger = logging.getLogger(__name__)

SyncOperation = Literal["index", "delete"]


class ForumIndexSync:
    """Pushes forum rows from MongoDB into the search index."""

    def __init__(
        self,
        es: AsyncElasticsearch,
        forums: Any,
        index_name: str,
        chunk_size: int = 500,
    ):
        """
        Args:
            es: Elasticsearch client
            forums: Motor collection holding forum rows
            index_name: Target index
            chunk_size: Documents per bulk request
        """
        self.es = es
        self.forums = forums
        self.index_name = index_name
        self.chunk_size = chunk_size

    async def _bulk_actions(self) -> AsyncIterator[dict[str, Any]]:
        async for doc in self.forums.find({}):
            forum = Forum.from_mongo(doc)
            yield {
                "_op_type": "index",
                "_index": self.index_name,
                "_id": forum.id,
                "_source": forum.to_search_document(),
            }

    async def sync_all(self) -> int:
        """
        Index every forum row.

        Returns:
            Number of documents indexed
        """
        try:
            indexed, _ = await async_bulk(
                self.es,
                self._bulk_actions(),
                chunk_size=self.chunk_size,
                refresh=True,
            )
        except Exception as e:
            logger.error(f"Bulk sync into {self.index_name} failed: {e}")
            raise SyncError(f"Bulk sync into '{self.index_name}' failed: {e}") from e

        logger.info("Bulk synced %s forums into %s", indexed, self.index_name)
        return indexed

    async def sync_document(self, forum: Forum, operation: SyncOperation) -> None:
        """Index or remove the search document of a single forum."""
        if operation not in ("index", "delete"):
            raise ValueError(f"Unsupported sync operation: {operation!r}")
        if not forum.id:
            raise ValueError("Forum has no id; save it before syncing")

        try:
            if operation == "index":
                await self.es.index(
                    index=self.index_name,
                    id=forum.id,
                    document=forum.to_search_document(),
                    refresh=True,
                )
            else:
                # Documents may carry index-generated ids; match on the foreign key.
                await self.es.delete_by_query(
                    index=self.index_name,
                    query={"term": {"mongoId": forum.id}},
                    refresh=True,
                )
        except Exception as e:
            logger.error(f"Sync ({operation}) failed for forum {forum.id}: {e}")
            raise SyncError(
                f"Failed to {operation} forum {forum.id} in '{self.index_name}': {e}"
            ) from e

        logger.info("Synced forum %s (%s)", forum.id, operation)

    async def reconcile(self) -> dict[str, int]:
        """
        Re-index all forums, then purge documents whose forum is gone.

        Only documents last updated before this pass started are purge
        candidates, so forums created while it runs are left alone.

        Returns:
            {"indexed": n, "removed": m}
        """
        started_at = datetime.now(timezone.utc)
        indexed = await self.sync_all()
        live_ids = {str(doc["_id"]) async for doc in self.forums.find({}, {"_id": 1})}

        try:
            stale = await self._stale_document_ids(live_ids, started_at)
            removed = 0
            if stale:
                removed, _ = await async_bulk(
                    self.es,
                    (
                        {"_op_type": "delete", "_index": self.index_name, "_id": doc_id}
                        for doc_id in stale
                    ),
                    chunk_size=self.chunk_size,
                    refresh=True,
                    ignore_status=(404,),
                )
        except Exception as e:
            logger.error(f"Stale document purge in {self.index_name} failed: {e}")
            raise SyncError(f"Stale document purge failed: {e}") from e

        if removed:
            logger.warning("Removed %s stale documents from %s", removed, self.index_name)
        return {"indexed": indexed, "removed": removed}

    async def _stale_document_ids(
        self, live_ids: set[str], started_at: datetime
    ) -> list[str]:
        # Documents without updatedAt predate the field and are always checked.
        query = {
            "query": {
                "bool": {
                    "should": [
                        {"range": {"updatedAt": {"lt": started_at.isoformat()}}},
                        {"bool": {"must_not": {"exists": {"field": "updatedAt"}}}},
                    ],
                    "minimum_should_match": 1,
                }
            },
            "_source": ["mongoId"],
        }
        stale = []
        async for hit in async_scan(self.es, query=query, index=self.index_name):
            if hit.get("_source", {}).get("mongoId") not in live_ids:
                stale.append(hit["_id"])
        return stale

    async def index_status(self) -> dict[str, Any]:
        """Compare forum row count with indexed document count."""
        forum_count = await self.forums.count_documents({})
        exists = bool(await self.es.indices.exists(index=self.index_name))
        doc_count = 0
        if exists:
            resp = await self.es.count(index=self.index_name)
            doc_count = resp["count"]
        return {
            "index": self.index_name,
            "exists": exists,
            "documents": doc_count,
            "forums": forum_count,
            "in_sync": exists and doc_count == forum_count,
        }
