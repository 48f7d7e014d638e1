"""
Rate limiting configuration and setup.

Uses slowapi to protect endpoints against abuse. SlowAPIMiddleware applies
the default limit to every route; the unbounded-cost endpoints (full
listing and delete-all) carry the stricter heavy limit instead. The
operations themselves keep no row limit. One limiter is built per
application.
"""

import logging

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from modelview.core.config import Settings

logger = logging.getLogger(__name__)


def build_limiter(settings: Settings) -> Limiter:
    """Create the application's rate limiter from settings."""
    return Limiter(
        key_func=get_remote_address,
        default_limits=[settings.rate_limit_default],
        enabled=settings.rate_limit_enabled,
    )


async def rate_limit_exceeded_handler(
    request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """Handle rate limit exceeded errors with the standard error body.

    Args:
        request: The incoming HTTP request.
        exc: The rate limit exceeded exception.

    Returns:
        A 429 JSON response.
    """
    logger.warning(
        "Rate limit exceeded on %s %s: %s", request.method, request.url.path, exc.detail
    )
    return JSONResponse(
        status_code=429,
        content={"message": f"rate limit exceeded: {exc.detail}"},
    )
