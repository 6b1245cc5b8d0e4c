"""Forum Router - CRUD used by forum management; every write re-syncs the index."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from forum_search.api.deps import get_forum_service
from forum_search.models import ForumCreate, ForumUpdate
from forum_search.services.forums import ForumService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/forums")


@router.get("")
async def list_forums(forum_service: ForumService = Depends(get_forum_service)) -> list:
    forums = await forum_service.list_forums()
    return [forum.model_dump(by_alias=True, mode="json") for forum in forums]


@router.get("/{forum_id}")
async def get_forum(
    forum_id: str, forum_service: ForumService = Depends(get_forum_service)
) -> dict:
    forum = await forum_service.get_forum(forum_id)
    if forum is None:
        raise HTTPException(status_code=404, detail="Forum not found")
    return forum.model_dump(by_alias=True, mode="json")


@router.post("", status_code=201)
async def create_forum(
    payload: ForumCreate, forum_service: ForumService = Depends(get_forum_service)
) -> dict:
    forum = await forum_service.create_forum(payload)
    logger.info("Created forum %s", forum.id)
    return forum.model_dump(by_alias=True, mode="json")


@router.put("/{forum_id}")
async def update_forum(
    forum_id: str,
    payload: ForumUpdate,
    forum_service: ForumService = Depends(get_forum_service),
) -> dict:
    forum = await forum_service.update_forum(forum_id, payload)
    if forum is None:
        raise HTTPException(status_code=404, detail="Forum not found")
    return forum.model_dump(by_alias=True, mode="json")


@router.delete("/{forum_id}")
async def delete_forum(
    forum_id: str, forum_service: ForumService = Depends(get_forum_service)
) -> dict:
    deleted = await forum_service.delete_forum(forum_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Forum not found")
    logger.info("Deleted forum %s", forum_id)
    return {"ok": True, "message": "Forum deleted successfully"}
