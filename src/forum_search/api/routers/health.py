"""
Health Check Router

Provides Kubernetes-compatible health check endpoints:
- /health: Simple health for load balancers
- /health/live: Liveness probe (process alive)
- /health/ready: Readiness probe (MongoDB and search index reachable)
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from forum_search.api.deps import get_search_service
from forum_search.services.search import SearchService

logger = logging.getLogger(__name__)

root_router = APIRouter()


@root_router.get("/health")
async def health():
    """Simple health check for load balancers."""
    return {"status": "ok"}


@root_router.get("/health/live")
async def liveness():
    """Kubernetes liveness probe - is the process running?"""
    return {"status": "ok"}


@root_router.get("/health/ready")
async def readiness(search_service: SearchService = Depends(get_search_service)):
    """Kubernetes readiness probe - are dependencies healthy?"""
    checks = {}
    try:
        await search_service.database.command("ping")
        checks["database"] = True
    except Exception as e:
        logger.warning(f"MongoDB readiness check failed: {e}")
        checks["database"] = False

    checks["search_index"] = await search_service.check_index()

    all_ok = all(checks.values())
    return JSONResponse(
        {"status": "ok" if all_ok else "degraded", "checks": checks},
        status_code=200 if all_ok else 503,
    )
