"""
Rate Limiting Module
Protects write-heavy engagement endpoints from abuse using slowapi
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request, status
from fastapi.responses import JSONResponse
from datetime import datetime, timezone
from rentmzansi.core.config import settings

CLIENT_ID_HEADER = "X-Client-Id"


def client_key(request: Request) -> str:
    """
    Rate limit per client profile, falling back to the remote address
    """
    client_id = request.headers.get(CLIENT_ID_HEADER)
    if client_id:
        return f"client:{client_id}"
    return get_remote_address(request)


# ============================================================================
# RATE LIMITER CONFIGURATION
# ============================================================================

limiter = Limiter(
    key_func=client_key,
    default_limits=["1000/hour"],
    storage_uri=settings.REDIS_URL if settings.STORAGE_BACKEND == "redis" else "memory://",
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED
)


class RateLimits:
    """Centralized rate limit configurations"""

    CONTACT_CLICK = settings.CONTACT_CLICK_RATE_LIMIT
    REVIEW_CREATE = settings.REVIEW_RATE_LIMIT
    REPORT_CREATE = settings.REVIEW_RATE_LIMIT
    NOTIFICATION_CHECK = "60/minute"


# ============================================================================
# CUSTOM RATE LIMIT HANDLER
# ============================================================================

async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Render rate limit errors in the API error format
    """
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={
            "error": {
                "code": "RATE_LIMIT_EXCEEDED",
                "message": f"Too many requests ({exc.detail}). Please try again later.",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "path": request.url.path
            }
        },
        headers={"Retry-After": "60"}
    )
