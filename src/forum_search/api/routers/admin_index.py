"""Admin Index Router - index setup, rebuild and drift checks (requires API key)."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from forum_search.api.deps import get_search_service, verify_api_key
from forum_search.search import ForumSearchError, SearchUnavailableError
from forum_search.services.search import SearchService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/index", dependencies=[Depends(verify_api_key)])


@router.post("/setup")
async def setup_index(
    delete_existing: bool = False,
    search_service: SearchService = Depends(get_search_service),
) -> dict:
    """Create the forum index if missing (or rebuild it) and bulk-load forums."""
    try:
        await search_service.setup_index(delete_existing=delete_existing)
    except SearchUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except ForumSearchError as e:
        logger.error(f"Index setup failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    return {
        "ok": True,
        "index": search_service.index_name,
        "deleted_existing": delete_existing,
    }


@router.post("/sync")
async def sync_index(search_service: SearchService = Depends(get_search_service)) -> dict:
    """Bulk re-index every forum."""
    try:
        indexed = await search_service.sync_all()
    except SearchUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except ForumSearchError as e:
        logger.error(f"Full sync failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    return {"ok": True, "indexed": indexed}


@router.post("/reconcile")
async def reconcile_index(
    search_service: SearchService = Depends(get_search_service),
) -> dict:
    """Re-index every forum and remove documents of deleted forums."""
    try:
        stats = await search_service.reconcile()
    except SearchUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except ForumSearchError as e:
        logger.error(f"Reconciliation failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    return {"ok": True, **stats}


@router.get("/status")
async def index_status(search_service: SearchService = Depends(get_search_service)) -> dict:
    try:
        status = await search_service.index_status()
    except ForumSearchError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return {"ok": True, **status}
