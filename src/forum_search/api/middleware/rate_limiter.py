# Rate Limiter for the public search endpoint
# Uses slowapi for IP-based rate limiting

import os

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

SEARCH_RATE_LIMIT = os.getenv("SEARCH_RATE_LIMIT", "120/minute")

limiter = Limiter(key_func=get_remote_address)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Answer in the same shape as search errors so the popup can show it."""
    return JSONResponse(
        status_code=429,
        content={
            "error": f"Too many search requests. {exc.detail}",
            "forums": [],
        },
    )
