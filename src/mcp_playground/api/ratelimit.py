"""Rate limiting configuration for API endpoints.

Uses slowapi with in-memory storage; the proxy runs as a single process.
"""

from collections.abc import Callable

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from mcp_playground.config import get_settings
from mcp_playground.shared.logging import get_logger

logger = get_logger(__name__)


def _get_rate_limit_key(request: Request) -> str:
    """Get rate limit key based on client IP.

    The first X-Forwarded-For hop is used only when TRUST_FORWARDED_FOR is set.
    """
    if get_settings().trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    return get_remote_address(request)


def _create_limiter(storage_uri: str = "memory://") -> Limiter:
    """Create rate limiter with the given storage backend."""
    return Limiter(
        key_func=_get_rate_limit_key,
        storage_uri=storage_uri,
        strategy="fixed-window",
    )


limiter = _create_limiter("memory://")


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """Custom handler for rate limit exceeded errors."""
    logger.warning(
        "rate_limit_exceeded",
        path=request.url.path,
        method=request.method,
        key=_get_rate_limit_key(request),
        limit=str(exc.detail),
    )

    return JSONResponse(
        status_code=429,
        content={
            "error": "too_many_requests",
            "message": "Too many requests. Please wait a moment.",
            "detail": str(exc.detail),
            "retry_after": getattr(exc, "retry_after", 60),
        },
        headers={
            "Retry-After": str(getattr(exc, "retry_after", 60)),
            "X-RateLimit-Limit": str(exc.detail).split("/")[0] if "/" in str(exc.detail) else "unknown",
        },
    )


# ----- Rate Limit Decorators -----
# Usage: @limiter.limit(RATE_LIMIT_AI)

RATE_LIMIT_DEFAULT = "100/minute"        # General API calls
RATE_LIMIT_AI = "20/minute"              # Upstream chat completions (expensive)
RATE_LIMIT_TOOLS = "60/minute"           # Simulated tool execution
RATE_LIMIT_HEALTH = "60/minute"          # Health checks


def get_rate_limit_decorator(limit: str) -> Callable:
    """Get a rate limit decorator with the specified limit.

    Args:
        limit: Rate limit string (e.g., "10/minute", "100/hour")
    """
    return limiter.limit(limit)
