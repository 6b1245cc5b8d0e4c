"""
Reconciliation worker process.

Periodically re-indexes every forum and purges index documents whose
forum was deleted without a sync. Run with `python -m forum_search.worker`.
"""

import asyncio
import logging
import signal

from forum_search.core.config import settings
from forum_search.services.reconcile import resync_loop
from forum_search.services.search import build_search_service

logger = logging.getLogger(__name__)


async def main() -> None:
    logging.basicConfig(level=logging.INFO)
    logger.info(
        "Starting search reconciliation worker (every %s min)",
        settings.RESYNC_INTERVAL_MINUTES,
    )

    search_service = build_search_service(settings)
    await search_service.setup_index(delete_existing=False)

    resync_task = asyncio.create_task(
        resync_loop(search_service, settings.RESYNC_INTERVAL_MINUTES)
    )

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:
            signal.signal(sig, lambda *_: stop_event.set())

    await stop_event.wait()

    logger.info("Shutting down search reconciliation worker")
    resync_task.cancel()
    await asyncio.gather(resync_task, return_exceptions=True)
    await search_service.close()


if __name__ == "__main__":
    asyncio.run(main())
