"""User model."""

import enum
import uuid
from decimal import Decimal

from sqlalchemy import Boolean, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from portfolio.db.base import Base, TimestampMixin


class EmploymentStatus(str, enum.Enum):
    """Residency status used by the SRS tax estimate."""

    EMPLOYMENT_PASS = "EmploymentPass"
    CITIZEN = "Citizen"
    PR = "PR"


class User(Base, TimestampMixin):
    """Portfolio owner, provisioned on first authenticated request."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Financial profile
    employment_status: Mapped[str] = mapped_column(
        String(20), default=EmploymentStatus.EMPLOYMENT_PASS.value
    )
    annual_income: Mapped[Decimal | None] = mapped_column(Numeric(15, 2), nullable=True)
    fi_goal: Mapped[Decimal | None] = mapped_column(Numeric(15, 2), nullable=True)
    fi_target_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
