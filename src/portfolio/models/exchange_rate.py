"""Exchange rate model."""

import enum
import uuid
from decimal import Decimal

from sqlalchemy import Boolean, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from portfolio.db.base import Base, TimestampMixin


class SupportedCurrency(str, enum.Enum):
    """Currencies holdings can be entered and displayed in."""

    SGD = "SGD"
    USD = "USD"
    INR = "INR"


class RateSource(str, enum.Enum):
    """Where a stored rate came from."""

    API = "api"
    MANUAL = "manual"


class ExchangeRate(Base, TimestampMixin):
    """Directed rate between two supported currencies.

    Rates are shared market data, not owned by a user. Each refresh
    deactivates the previous set instead of deleting it, which keeps a
    history per pair. ``updated_at`` is the freshness timestamp.
    """

    __tablename__ = "exchange_rates"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    from_currency: Mapped[str] = mapped_column(String(3))
    to_currency: Mapped[str] = mapped_column(String(3))
    rate: Mapped[Decimal] = mapped_column(Numeric(18, 8))
    source: Mapped[str] = mapped_column(String(10), default=RateSource.API.value)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    __table_args__ = (Index("ix_exchange_rates_pair", "from_currency", "to_currency"),)
