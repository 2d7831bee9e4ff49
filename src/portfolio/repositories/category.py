"""Category repository."""

from uuid import UUID

from sqlalchemy import select

from portfolio.models.category import Category
from portfolio.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    """Repository for per-user category settings."""

    async def get_by_user_id(self, user_id: UUID) -> list[Category]:
        result = await self.db.execute(
            select(Category).where(Category.user_id == user_id).order_by(Category.name)
        )
        return list(result.scalars().all())

    async def get_by_name(self, user_id: UUID, name: str) -> Category | None:
        result = await self.db.execute(
            select(Category).where(Category.user_id == user_id, Category.name == name)
        )
        return result.scalar_one_or_none()
