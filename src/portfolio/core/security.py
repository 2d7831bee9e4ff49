"""Bearer token handling.

Sign-in happens in the external identity provider, which issues HS256 tokens
signed with the shared ``SECRET_KEY``. The API only verifies them; the
``sub`` claim carries the user's email address.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from portfolio.core.config import settings


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """
    Create a signed access token.

    Used by local tooling and the test suite to mint tokens the way the
    identity provider does.

    Args:
        data: Claims to encode (typically {"sub": email})
        expires_delta: Optional custom expiration time

    Returns:
        The encoded JWT
    """
    to_encode = data.copy()
    now = datetime.now(UTC)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))

    to_encode.update({"exp": expire, "iat": now})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a JWT.

    Raises:
        jwt.InvalidTokenError: If the token is invalid or expired
    """
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
