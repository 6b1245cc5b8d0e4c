"""FastAPI dependencies resolving the process-wide services."""

import secrets

from fastapi import Header, HTTPException, Request

from forum_search.core.config import settings
from forum_search.services.forums import ForumService
from forum_search.services.search import SearchService


def get_search_service(request: Request) -> SearchService:
    return request.app.state.search_service


def get_forum_service(request: Request) -> ForumService:
    return request.app.state.forum_service


def verify_api_key(x_api_key: str = Header(..., alias="X-API-Key")) -> None:
    """Verify admin API key from header."""
    expected = settings.ADMIN_API_KEY or ""
    if not expected or not secrets.compare_digest(x_api_key, expected):
        raise HTTPException(status_code=401, detail="Invalid API key")
