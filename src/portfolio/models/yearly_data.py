"""Yearly financial snapshot model."""

import uuid
from decimal import Decimal

from sqlalchemy import Integer, Numeric, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from portfolio.db.base import Base, TimestampMixin, UserOwnedMixin


class YearlyData(Base, TimestampMixin, UserOwnedMixin):
    """Income, spending and net worth for one calendar year."""

    __tablename__ = "yearly_data"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    year: Mapped[int] = mapped_column(Integer, index=True)
    income: Mapped[Decimal] = mapped_column(Numeric(15, 2), default=Decimal("0"))
    expenses: Mapped[Decimal] = mapped_column(Numeric(15, 2), default=Decimal("0"))
    savings: Mapped[Decimal] = mapped_column(Numeric(15, 2), default=Decimal("0"))
    srs_contribution: Mapped[Decimal] = mapped_column(Numeric(15, 2), default=Decimal("0"))
    net_worth: Mapped[Decimal] = mapped_column(Numeric(15, 2), default=Decimal("0"))

    # Derived from the previous year when left empty
    market_gains: Mapped[Decimal | None] = mapped_column(Numeric(15, 2), nullable=True)
    return_percent: Mapped[Decimal | None] = mapped_column(Numeric(7, 2), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (UniqueConstraint("user_id", "year", name="uq_yearly_data_user_year"),)
