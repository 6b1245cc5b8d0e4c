"""Forum CRUD over MongoDB with search-index sync after every write."""

import logging
from datetime import datetime, timezone

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument

from forum_search.models import Forum, ForumCreate, ForumUpdate
from forum_search.search import ForumSearchError
from forum_search.search.sync import SyncOperation
from forum_search.services.search import SearchService

logger = logging.getLogger(__name__)


def _object_id(forum_id: str) -> ObjectId | None:
    if not ObjectId.is_valid(forum_id):
        return None
    return ObjectId(forum_id)


class ForumService:
    def __init__(self, search_service: SearchService):
        self.search_service = search_service
        self.forums = search_service.forums

    async def list_forums(self) -> list[Forum]:
        docs = await self.forums.find({}).sort("createdAt", DESCENDING).to_list(length=None)
        return [Forum.from_mongo(doc) for doc in docs]

    async def get_forum(self, forum_id: str) -> Forum | None:
        oid = _object_id(forum_id)
        if oid is None:
            return None
        doc = await self.forums.find_one({"_id": oid})
        return Forum.from_mongo(doc) if doc else None

    async def create_forum(self, data: ForumCreate) -> Forum:
        now = datetime.now(timezone.utc)
        forum = Forum(
            title=data.title,
            description=data.description,
            image=data.image,
            last_active=data.last_active or now,
            created_at=now,
            updated_at=now,
        )
        doc = forum.model_dump(by_alias=True, exclude={"id"})
        result = await self.forums.insert_one(doc)
        forum.id = str(result.inserted_id)

        await self._sync(forum, "index")
        return forum

    async def update_forum(self, forum_id: str, data: ForumUpdate) -> Forum | None:
        oid = _object_id(forum_id)
        if oid is None:
            return None

        changes = data.model_dump(by_alias=True, exclude_unset=True)
        changes["updatedAt"] = datetime.now(timezone.utc)
        doc = await self.forums.find_one_and_update(
            {"_id": oid},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            return None

        forum = Forum.from_mongo(doc)
        await self._sync(forum, "index")
        return forum

    async def delete_forum(self, forum_id: str) -> bool:
        forum = await self.get_forum(forum_id)
        if forum is None:
            return False

        await self.forums.delete_one({"_id": ObjectId(forum.id)})
        await self._sync(forum, "delete")
        return True

    async def _sync(self, forum: Forum, operation: SyncOperation) -> None:
        # The Mongo write is already committed; reconciliation repairs the index.
        try:
            await self.search_service.sync_document(forum, operation)
        except ForumSearchError as e:
            logger.warning("Search sync (%s) failed for forum %s: %s", operation, forum.id, e)
