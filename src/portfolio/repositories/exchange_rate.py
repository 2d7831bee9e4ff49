"""Exchange rate repository."""

from datetime import datetime

from sqlalchemy import select, update

from portfolio.models.exchange_rate import ExchangeRate
from portfolio.repositories.base import BaseRepository


class ExchangeRateRepository(BaseRepository[ExchangeRate]):
    """Repository for ExchangeRate model.

    The active set is the current rate table; inactive rows are history.
    """

    async def get_active(self, *, updated_since: datetime | None = None) -> list[ExchangeRate]:
        """Active rates, optionally only those refreshed after ``updated_since``."""
        query = select(ExchangeRate).where(ExchangeRate.is_active.is_(True))
        if updated_since is not None:
            query = query.where(ExchangeRate.updated_at >= updated_since)
        result = await self.db.execute(query.order_by(ExchangeRate.updated_at))
        return list(result.scalars().all())

    async def deactivate_active(self) -> None:
        await self.db.execute(
            update(ExchangeRate).where(ExchangeRate.is_active.is_(True)).values(is_active=False)
        )

    async def get_history(
        self,
        from_currency: str,
        to_currency: str,
        *,
        since: datetime,
    ) -> list[ExchangeRate]:
        """Every stored rate for a pair since ``since``, oldest first."""
        result = await self.db.execute(
            select(ExchangeRate)
            .where(
                ExchangeRate.from_currency == from_currency,
                ExchangeRate.to_currency == to_currency,
                ExchangeRate.created_at >= since,
            )
            .order_by(ExchangeRate.created_at)
        )
        return list(result.scalars().all())
