"""User repository."""

from sqlalchemy import select

from portfolio.models.user import User
from portfolio.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User model."""

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_or_create(self, email: str) -> User:
        """Return the user with ``email``, provisioning a row on first sight.

        Identity is asserted by the external auth provider, so an unknown but
        validly signed subject is a new user rather than an error.
        """
        user = await self.get_by_email(email)
        if user is None:
            user = await self.create(obj_in={"email": email})
        return user
