"""Periodic repair of drift between MongoDB forums and the search index."""

import asyncio
import logging

from forum_search.services.search import SearchService

logger = logging.getLogger(__name__)


async def resync_loop(search_service: SearchService, interval_minutes: int) -> None:
    """Background task: periodically re-index forums and purge stale documents."""
    interval = max(interval_minutes, 1) * 60
    while True:
        await asyncio.sleep(interval)
        try:
            stats = await search_service.reconcile()
            logger.info(
                "Search index reconciled: %s indexed, %s stale removed",
                stats["indexed"],
                stats["removed"],
            )
        except Exception:
            logger.exception("Search index reconciliation failed")
