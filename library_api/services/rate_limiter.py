"""
Rate Limiting Service

IP-based rate limiting with slowapi.

Rate Limit Tiers:
=================
- Default (every route, via SlowAPIMiddleware): settings.rate_limit_default
- Register and login: settings.rate_limit_auth

Counters live in process memory. create_app() switches the limiter on or
off and sets both limits from the Settings it is given.
"""

import logging

from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from library_api.config import Settings

logger = logging.getLogger(__name__)


def get_client_ip(request: Request) -> str:
    """
    Get client IP address for rate limiting.

    Honours X-Forwarded-For (first hop) and X-Real-IP set by proxies,
    falling back to the direct connection address.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return get_remote_address(request)


# Limit strings of the most recently configured app; slowapi calls the
# providers below on every request.
_limits = {
    "default": Settings.model_fields["rate_limit_default"].default,
    "auth": Settings.model_fields["rate_limit_auth"].default,
}


def default_limit() -> str:
    return _limits["default"]


def auth_limit() -> str:
    return _limits["auth"]


limiter = Limiter(
    key_func=get_client_ip,
    default_limits=[default_limit],
    strategy="fixed-window",
)


def configure_limiter(settings: Settings) -> Limiter:
    """Apply an app's rate-limit settings to the shared limiter."""
    limiter.enabled = settings.rate_limit_enabled
    _limits["default"] = settings.rate_limit_default
    _limits["auth"] = settings.rate_limit_auth
    logger.info(
        f"Rate limiter configured - enabled: {settings.rate_limit_enabled}, "
        f"default: {settings.rate_limit_default}, auth: {settings.rate_limit_auth}"
    )
    return limiter


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Render a 429 failure envelope with a Retry-After header."""
    limit_detail = str(exc.detail)

    logger.warning(f"Rate limit exceeded for {get_client_ip(request)}: {limit_detail}")

    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "message": "Too many requests. Please slow down.",
            "error": limit_detail,
        },
        headers={
            "Retry-After": "60",
            "X-RateLimit-Limit": limit_detail,
        },
    )
