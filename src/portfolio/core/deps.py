"""Dependencies for FastAPI routes."""

import logging
from typing import Annotated

import jwt
from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.core.config import settings
from portfolio.core.exceptions import AuthenticationError
from portfolio.core.security import decode_token
from portfolio.db.session import get_db
from portfolio.models.exchange_rate import SupportedCurrency
from portfolio.models.user import User
from portfolio.repositories.user import UserRepository

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Resolve the user from the bearer token issued by the identity provider.

    The token's ``sub`` claim is the user's email. Unknown subjects are
    provisioned on first request.

    Raises:
        AuthenticationError: If the token is missing, invalid, expired or
            carries no subject, or the user is deactivated
    """
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    try:
        payload = decode_token(credentials.credentials)
    except jwt.InvalidTokenError as e:
        raise AuthenticationError("Could not validate credentials") from e

    email: str | None = payload.get("sub")
    if not email:
        raise AuthenticationError("Could not validate credentials")

    user = await UserRepository(User, db).get_or_create(email)
    if not user.is_active:
        raise AuthenticationError("Inactive user")
    return user


def get_display_currency(
    currency: Annotated[
        SupportedCurrency | None,
        Query(description="Currency to report values in"),
    ] = None,
) -> SupportedCurrency:
    """Requested display currency, defaulting to ``DEFAULT_DISPLAY_CURRENCY``."""
    return currency or SupportedCurrency(settings.DEFAULT_DISPLAY_CURRENCY)


# Type aliases for cleaner dependency injection
CurrentUser = Annotated[User, Depends(get_current_user)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
DisplayCurrency = Annotated[SupportedCurrency, Depends(get_display_currency)]
