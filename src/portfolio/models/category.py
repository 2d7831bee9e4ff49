"""Allocation category model."""

import enum
import uuid
from decimal import Decimal

from sqlalchemy import Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from portfolio.db.base import Base, TimestampMixin, UserOwnedMixin


class PortfolioCategory(str, enum.Enum):
    """The four fixed allocation buckets."""

    CORE = "Core"
    GROWTH = "Growth"
    HEDGE = "Hedge"
    LIQUIDITY = "Liquidity"


CATEGORY_NAMES = tuple(category.value for category in PortfolioCategory)


class Category(Base, TimestampMixin, UserOwnedMixin):
    """Per-user settings for one allocation bucket.

    ``user_target_percentage`` overrides ``target_percentage`` when set.
    """

    __tablename__ = "categories"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    name: Mapped[str] = mapped_column(String(20))
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    target_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2))
    user_target_percentage: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    rebalance_threshold: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=Decimal("5"))

    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_category_user_name"),)

    @property
    def effective_target(self) -> Decimal:
        if self.user_target_percentage is not None:
            return self.user_target_percentage
        return self.target_percentage
