"""Rate limiting configuration using slowapi.

The limiter keeps its counters in slowapi's storage and is attached to
``app.state`` in ``main.py``; nothing here holds per-user state itself.
"""

import logging

import jwt
from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from portfolio.core.config import settings
from portfolio.core.security import decode_token

logger = logging.getLogger(__name__)


def user_or_ip_key(request: Request) -> str:
    """
    Rate limit key: the token subject when authenticated, else the client IP.

    Limits such as the daily intelligence quota apply per user, so two
    browsers of the same user share a quota.
    """
    authorization = request.headers.get("Authorization", "")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer" and token:
        try:
            subject = decode_token(token).get("sub")
        except jwt.InvalidTokenError:
            subject = None
        if subject:
            return f"user:{subject}"
    return get_remote_address(request)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Render a 429 with a ``Retry-After`` header.

    The retry window is the expiry of the limit that was hit, e.g. one day
    for "100/day".
    """
    retry_after = 60
    limit_item = getattr(getattr(exc, "limit", None), "limit", None)
    if limit_item is not None:
        retry_after = int(limit_item.get_expiry())

    logger.warning(f"Rate limit exceeded on {request.url.path}: {exc.detail}")

    response = JSONResponse(
        status_code=429,
        content={
            "detail": f"Rate limit exceeded: {exc.detail}",
            "retry_after": retry_after,
        },
    )
    response.headers["Retry-After"] = str(retry_after)
    return response


limiter = Limiter(
    key_func=user_or_ip_key,
    default_limits=[],  # each endpoint sets its own limit
    enabled=settings.RATE_LIMIT_ENABLED,
    headers_enabled=False,
)
