"""FI milestone model."""

import uuid
from decimal import Decimal

from sqlalchemy import Boolean, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from portfolio.db.base import Base, TimestampMixin, UserOwnedMixin


class FIMilestone(Base, TimestampMixin, UserOwnedMixin):
    """A net worth target on the way to financial independence.

    Amounts are in SGD. Deleting a milestone only deactivates it.
    """

    __tablename__ = "fi_milestones"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    name: Mapped[str] = mapped_column(String(100))
    amount: Mapped[Decimal] = mapped_column(Numeric(15, 2))
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, default=1)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
