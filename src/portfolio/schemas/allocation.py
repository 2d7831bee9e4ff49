"""Allocation target, category and gap report schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class AllocationTargetBase(BaseModel):
    name: str = Field("Custom", max_length=100)
    core_target: Decimal = Field(..., ge=0, le=100)
    growth_target: Decimal = Field(..., ge=0, le=100)
    hedge_target: Decimal = Field(..., ge=0, le=100)
    liquidity_target: Decimal = Field(..., ge=0, le=100)
    rebalance_threshold: Decimal = Field(Decimal("5"), gt=0, le=50)


class AllocationTargetCreate(AllocationTargetBase):
    """New active targets; the four percentages must add up to 100."""

    @model_validator(mode="after")
    def validate_total(self) -> "AllocationTargetCreate":
        total = self.core_target + self.growth_target + self.hedge_target + self.liquidity_target
        if abs(total - Decimal("100")) > Decimal("0.01"):
            raise ValueError(f"Targets must sum to 100, got {total}")
        return self


class AllocationTargetResponse(AllocationTargetBase):
    id: UUID
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CategoryResponse(BaseModel):
    id: UUID
    name: str
    description: str | None
    target_percentage: Decimal
    user_target_percentage: Decimal | None
    rebalance_threshold: Decimal

    model_config = {"from_attributes": True}


class CategoryUpdate(BaseModel):
    description: str | None = Field(None, max_length=255)
    target_percentage: Decimal | None = Field(None, ge=0, le=100)
    user_target_percentage: Decimal | None = Field(None, ge=0, le=100)
    rebalance_threshold: Decimal | None = Field(None, gt=0, le=50)


class CategoryReportResponse(BaseModel):
    """One category's position against its target."""

    category: str
    current_value: float
    current_percent: float
    target_percent: float
    gap_percent: float
    gap_amount: float
    completion_percent: float
    status: str
    callout: str
    needs_rebalance: bool
    priority: int

    model_config = {"from_attributes": True}


class AllocationReportResponse(BaseModel):
    display_currency: str
    total_value: float
    targets: dict[str, float]
    rebalance_threshold: float
    categories: list[CategoryReportResponse]
    rebalance_suggestion: str | None


class EffectiveTargetsResponse(BaseModel):
    """Targets in force after defaults, category settings and the active target."""

    targets: dict[str, float]
    rebalance_threshold: float
    active_target: AllocationTargetResponse | None
