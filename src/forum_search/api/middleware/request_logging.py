# Request Logging Middleware with Correlation IDs

import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("forum_search.api")

# Probes are polled constantly; keep them out of the request log.
QUIET_PATHS = {"/health", "/health/live", "/health/ready"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Tags each request with an X-Request-ID (reused from the caller when
    present) and logs its outcome and duration.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id
        quiet = request.url.path in QUIET_PATHS

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                "Request failed",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "duration_ms": round((time.perf_counter() - start_time) * 1000, 2),
                    "error": str(e),
                },
            )
            raise

        if not quiet:
            logger.info(
                "Request completed",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "query": request.url.query,
                    "status_code": response.status_code,
                    "duration_ms": round((time.perf_counter() - start_time) * 1000, 2),
                },
            )

        response.headers["X-Request-ID"] = request_id
        return response
