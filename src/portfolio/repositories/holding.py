"""Holding repository for holding-specific database operations."""

from uuid import UUID

from sqlalchemy import select

from portfolio.models.holding import Holding
from portfolio.repositories.base import BaseRepository


class HoldingRepository(BaseRepository[Holding]):
    """Repository for Holding model.

    Example:
        >>> repo = HoldingRepository(Holding, db)
        >>> holdings = await repo.get_by_user_id(user.id)
    """

    async def get_by_user_id(
        self,
        user_id: UUID,
        *,
        category: str | None = None,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[Holding]:
        """Holdings owned by a user, ordered by category then symbol.

        Args:
            user_id: Owner
            category: Optional category name filter
            skip: Number of records to skip (offset)
            limit: Maximum number of records, None for all
        """
        query = select(Holding).where(Holding.user_id == user_id)
        if category is not None:
            query = query.where(Holding.category == category)
        query = query.order_by(Holding.category, Holding.symbol).offset(skip)
        if limit is not None:
            query = query.limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_symbol(self, user_id: UUID, symbol: str) -> list[Holding]:
        """Every holding of a user with ``symbol`` (one per location)."""
        result = await self.db.execute(
            select(Holding).where(Holding.user_id == user_id, Holding.symbol == symbol.upper())
        )
        return list(result.scalars().all())

    async def get_distinct_symbols(self, user_id: UUID) -> list[str]:
        """Symbols held by a user, sorted."""
        result = await self.db.execute(
            select(Holding.symbol)
            .where(Holding.user_id == user_id)
            .distinct()
            .order_by(Holding.symbol)
        )
        return list(result.scalars().all())
