"""
HTTP hardening: per-client rate limiting and security response headers.

Rate limiting uses slowapi with a single application-wide budget per
client address (``RATE_LIMIT``, default ``100/minute``).  Requests over
budget are answered with 429 ``{"error": "Too many requests"}``.  Behind
Cloud Run the client address comes from ``X-Forwarded-For``, which
uvicorn applies when started with ``proxy_headers`` (see ``run.py``).

``SecurityHeadersMiddleware`` adds the usual hardening headers to every
response without overriding headers a route set itself.  No
Content-Security-Policy is sent: the API only serves JSON.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware

from .config import Settings

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response


def build_limiter(config: Settings) -> Limiter:
    """One shared budget per client address across all routes."""
    return Limiter(
        key_func=get_remote_address,
        application_limits=[config.rate_limit],
        enabled=config.rate_limit_enabled,
    )


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    # slowapi's middleware calls this synchronously.
    logger.warning(
        "Rate limit exceeded for %s on %s %s",
        get_remote_address(request),
        request.method,
        request.url.path,
        extra={"operation": "rate_limit", "client": get_remote_address(request), "limit": str(exc.detail)},
    )
    return JSONResponse(status_code=429, content={"error": "Too many requests"})
