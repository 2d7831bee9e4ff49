"""Holding model for tracking investment positions."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from portfolio.db.base import Base, TimestampMixin, UserOwnedMixin


class Holding(Base, TimestampMixin, UserOwnedMixin):
    """A single position: a listed security, a crypto coin or a cash balance.

    ``value_sgd``/``value_usd``/``value_inr`` are snapshots written when the
    holding is saved or repriced. They may drift from quantity x price and
    are only a fallback when live inputs are missing.
    """

    __tablename__ = "holdings"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    symbol: Mapped[str] = mapped_column(String(20), index=True)
    name: Mapped[str] = mapped_column(String(255))
    category: Mapped[str] = mapped_column(String(20), index=True)
    location: Mapped[str] = mapped_column(String(100), default="")
    entry_currency: Mapped[str] = mapped_column(String(3))

    # Absent for cash-like holdings
    quantity: Mapped[Decimal | None] = mapped_column(Numeric(20, 8), nullable=True)
    unit_cost: Mapped[Decimal | None] = mapped_column(Numeric(18, 6), nullable=True)
    current_unit_price: Mapped[Decimal | None] = mapped_column(Numeric(18, 6), nullable=True)

    value_sgd: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=Decimal("0"))
    value_usd: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=Decimal("0"))
    value_inr: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=Decimal("0"))

    price_updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    price_source: Mapped[str | None] = mapped_column(String(20), nullable=True)
