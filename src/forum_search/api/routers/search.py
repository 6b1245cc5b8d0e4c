"""Search Router - forum search used by the site-wide search popup."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from forum_search.api.deps import get_search_service
from forum_search.api.middleware.rate_limiter import SEARCH_RATE_LIMIT, limiter
from forum_search.core.config import settings
from forum_search.search import SearchError, SearchUnavailableError
from forum_search.services.search import SearchService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/search")
@limiter.limit(SEARCH_RATE_LIMIT)
async def search_forums(
    request: Request,
    q: str | None = None,
    search_service: SearchService = Depends(get_search_service),
):
    """Search forums by title and description. Returns {"forums": [...]}."""
    query = (q or "").strip()
    if len(query) > settings.MAX_QUERY_LEN:
        query = query[: settings.MAX_QUERY_LEN]

    try:
        results = await search_service.search_forums(query)
    except SearchUnavailableError:
        return JSONResponse(
            {"error": "Search is temporarily unavailable", "forums": []},
            status_code=503,
        )
    except SearchError as e:
        return JSONResponse({"error": str(e), "forums": []}, status_code=500)

    return {"forums": [result.to_response() for result in results]}
