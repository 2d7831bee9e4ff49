"""Yearly data repository."""

from uuid import UUID

from sqlalchemy import select

from portfolio.models.yearly_data import YearlyData
from portfolio.repositories.base import BaseRepository


class YearlyDataRepository(BaseRepository[YearlyData]):
    """Repository for per-year financial snapshots."""

    async def get_by_user_id(self, user_id: UUID) -> list[YearlyData]:
        """All years of a user, oldest first."""
        result = await self.db.execute(
            select(YearlyData).where(YearlyData.user_id == user_id).order_by(YearlyData.year)
        )
        return list(result.scalars().all())

    async def get_by_year(self, user_id: UUID, year: int) -> YearlyData | None:
        result = await self.db.execute(
            select(YearlyData).where(YearlyData.user_id == user_id, YearlyData.year == year)
        )
        return result.scalar_one_or_none()
