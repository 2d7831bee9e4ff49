"""User profile schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from portfolio.models.user import EmploymentStatus


class UserResponse(BaseModel):
    id: UUID
    email: EmailStr
    name: str | None
    employment_status: str
    annual_income: Decimal | None
    fi_goal: Decimal | None
    fi_target_year: int | None
    created_at: datetime

    model_config = {"from_attributes": True}


class UserProfileUpdate(BaseModel):
    """Financial profile fields used by the tax estimate and FI tracking."""

    name: str | None = Field(None, max_length=100)
    employment_status: EmploymentStatus | None = None
    annual_income: Decimal | None = Field(None, ge=0)
    fi_goal: Decimal | None = Field(None, gt=0)
    fi_target_year: int | None = Field(None, ge=2000, le=2200)
