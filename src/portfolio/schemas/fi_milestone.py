"""FI milestone schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class FIMilestoneCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    amount: Decimal = Field(..., gt=0, description="Target net worth in SGD")
    description: str | None = Field(None, max_length=255)
    sort_order: int | None = Field(None, ge=1)


class FIMilestoneUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    amount: Decimal | None = Field(None, gt=0)
    description: str | None = Field(None, max_length=255)
    sort_order: int | None = Field(None, ge=1)
    is_active: bool | None = None

    @field_validator("name", "amount", "sort_order", "is_active")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class FIMilestoneResponse(BaseModel):
    id: UUID
    name: str
    amount: Decimal
    description: str | None
    sort_order: int
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}
