"""FI milestone repository."""

from uuid import UUID

from sqlalchemy import func, select

from portfolio.models.fi_milestone import FIMilestone
from portfolio.repositories.base import BaseRepository


class FIMilestoneRepository(BaseRepository[FIMilestone]):
    """Repository for a user's FI milestones."""

    async def get_active(self, user_id: UUID) -> list[FIMilestone]:
        """Active milestones in display order."""
        result = await self.db.execute(
            select(FIMilestone)
            .where(FIMilestone.user_id == user_id, FIMilestone.is_active.is_(True))
            .order_by(FIMilestone.sort_order, FIMilestone.created_at)
        )
        return list(result.scalars().all())

    async def get_by_user_id(self, user_id: UUID) -> list[FIMilestone]:
        """All milestones of a user, deactivated ones included."""
        result = await self.db.execute(
            select(FIMilestone)
            .where(FIMilestone.user_id == user_id)
            .order_by(FIMilestone.sort_order)
        )
        return list(result.scalars().all())

    async def next_sort_order(self, user_id: UUID) -> int:
        """One past the last active milestone's position."""
        result = await self.db.execute(
            select(func.max(FIMilestone.sort_order)).where(
                FIMilestone.user_id == user_id, FIMilestone.is_active.is_(True)
            )
        )
        return (result.scalar_one_or_none() or 0) + 1
