"""Allocation target (portfolio strategy) model."""

import uuid
from decimal import Decimal

from sqlalchemy import Boolean, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from portfolio.db.base import Base, TimestampMixin, UserOwnedMixin


class AllocationTarget(Base, TimestampMixin, UserOwnedMixin):
    """A set of category targets plus rebalance threshold.

    At most one row per user is active; replaced rows are deactivated and
    kept as history.
    """

    __tablename__ = "allocation_targets"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    name: Mapped[str] = mapped_column(String(100), default="Custom")
    core_target: Mapped[Decimal] = mapped_column(Numeric(5, 2))
    growth_target: Mapped[Decimal] = mapped_column(Numeric(5, 2))
    hedge_target: Mapped[Decimal] = mapped_column(Numeric(5, 2))
    liquidity_target: Mapped[Decimal] = mapped_column(Numeric(5, 2))
    rebalance_threshold: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=Decimal("5"))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    def as_targets(self) -> dict[str, float]:
        """Target percentage keyed by category name."""
        return {
            "Core": float(self.core_target),
            "Growth": float(self.growth_target),
            "Hedge": float(self.hedge_target),
            "Liquidity": float(self.liquidity_target),
        }
