"""
Forum Search Service - FastAPI Application

Serves forum search and keeps the Elasticsearch forum index in sync with
the MongoDB forums collection.
"""

import asyncio
import logging

import uvicorn
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from forum_search.api.middleware.rate_limiter import limiter, rate_limit_exceeded_handler
from forum_search.api.middleware.request_logging import RequestLoggingMiddleware
from forum_search.api.routers import admin_index, forums, search
from forum_search.api.routers.health import root_router as health_root_router
from forum_search.core.config import settings
from forum_search.search import IndexSetupError
from forum_search.services.forums import ForumService
from forum_search.services.reconcile import resync_loop
from forum_search.services.search import build_search_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: construct services once, tear down on exit."""
    # Tests install their own services before entering the lifespan.
    owns_service = getattr(app.state, "search_service", None) is None
    if owns_service:
        app.state.search_service = build_search_service(settings)
    search_service = app.state.search_service
    if getattr(app.state, "forum_service", None) is None:
        app.state.forum_service = ForumService(search_service)

    if settings.SETUP_INDEX_ON_STARTUP:
        try:
            await search_service.setup_index(delete_existing=False)
        except IndexSetupError:
            logger.exception("Index setup on startup failed; search will be degraded")

    resync_task = None
    if settings.RESYNC_IN_PROCESS:
        resync_task = asyncio.create_task(
            resync_loop(search_service, settings.RESYNC_INTERVAL_MINUTES)
        )

    yield

    if resync_task is not None:
        resync_task.cancel()
        await asyncio.gather(resync_task, return_exceptions=True)
    if owns_service:
        await search_service.close()


# --- FastAPI Application ---
app = FastAPI(
    lifespan=lifespan,
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Full-text forum search backed by Elasticsearch, synced from MongoDB.",
    openapi_tags=[
        {"name": "search", "description": "Forum search"},
        {"name": "forums", "description": "Forum management with index sync"},
        {"name": "admin", "description": "Search index administration"},
        {"name": "health", "description": "Health check endpoints"},
    ],
)

# --- Rate Limiter ---
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# --- Middleware ---
app.add_middleware(RequestLoggingMiddleware)

cors_origins = settings.CORS_ORIGINS or (["http://localhost:3000"] if settings.DEBUG else [])
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)

# --- Routers ---
app.include_router(health_root_router, tags=["health"])

# Paths match the web application's existing /api/search and /api/forums calls
app.include_router(search.router, prefix="/api", tags=["search"])
app.include_router(forums.router, prefix="/api", tags=["forums"])

app.include_router(admin_index.router, prefix="/api/v1", tags=["admin"])


if __name__ == "__main__":
    uvicorn.run(
        "forum_search.api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
