"""Allocation target repository."""

from uuid import UUID

from sqlalchemy import select, update

from portfolio.models.allocation_target import AllocationTarget
from portfolio.repositories.base import BaseRepository


class AllocationTargetRepository(BaseRepository[AllocationTarget]):
    """Repository for allocation targets; one active row per user."""

    async def get_active(self, user_id: UUID) -> AllocationTarget | None:
        result = await self.db.execute(
            select(AllocationTarget)
            .where(AllocationTarget.user_id == user_id, AllocationTarget.is_active.is_(True))
            .order_by(AllocationTarget.updated_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_history(self, user_id: UUID) -> list[AllocationTarget]:
        """All targets of a user, newest first."""
        result = await self.db.execute(
            select(AllocationTarget)
            .where(AllocationTarget.user_id == user_id)
            .order_by(AllocationTarget.created_at.desc())
        )
        return list(result.scalars().all())

    async def activate(self, user_id: UUID, data: dict) -> AllocationTarget:
        """Store ``data`` as the new active target, deactivating the previous one."""
        await self.db.execute(
            update(AllocationTarget)
            .where(AllocationTarget.user_id == user_id, AllocationTarget.is_active.is_(True))
            .values(is_active=False)
        )
        return await self.create(obj_in={**data, "user_id": user_id, "is_active": True})
