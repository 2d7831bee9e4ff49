"""Holding schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from portfolio.models.category import PortfolioCategory
from portfolio.models.exchange_rate import SupportedCurrency


class HoldingBase(BaseModel):
    """Fields shared by create and response schemas."""

    symbol: str = Field(..., min_length=1, max_length=20)
    name: str = Field(..., min_length=1, max_length=255)
    category: PortfolioCategory
    location: str = Field("", max_length=100)
    entry_currency: SupportedCurrency
    quantity: Decimal | None = Field(None, ge=0)
    unit_cost: Decimal | None = Field(None, ge=0)
    current_unit_price: Decimal | None = Field(None, ge=0)

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: str) -> str:
        return v.strip().upper()


class HoldingCreate(HoldingBase):
    """Schema for creating a holding.

    Priced holdings give quantity and current_unit_price; cash-like holdings
    give ``value`` in the entry currency instead.
    """

    value: Decimal | None = Field(None, ge=0)

    @model_validator(mode="after")
    def require_value_source(self) -> "HoldingCreate":
        priced = self.quantity is not None and self.current_unit_price is not None
        if not priced and self.value is None:
            raise ValueError("Provide quantity and current_unit_price, or value")
        return self


class HoldingUpdate(BaseModel):
    """Partial update; snapshot values are recomputed from the result."""

    name: str | None = Field(None, min_length=1, max_length=255)
    category: PortfolioCategory | None = None
    location: str | None = Field(None, max_length=100)
    entry_currency: SupportedCurrency | None = None
    quantity: Decimal | None = Field(None, ge=0)
    unit_cost: Decimal | None = Field(None, ge=0)
    current_unit_price: Decimal | None = Field(None, ge=0)
    value: Decimal | None = Field(None, ge=0)

    @field_validator("name", "category", "location", "entry_currency")
    @classmethod
    def reject_null(cls, v):
        # May be left out, but not cleared
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class HoldingAdjust(BaseModel):
    """Buy (positive delta) or sell (negative delta) part of a position."""

    quantity_delta: Decimal
    unit_price: Decimal | None = Field(None, gt=0)

    @field_validator("quantity_delta")
    @classmethod
    def validate_delta(cls, v: Decimal) -> Decimal:
        if v == 0:
            raise ValueError("Quantity delta must not be zero")
        return v


class HoldingResponse(HoldingBase):
    """Schema for holding response."""

    id: UUID
    category: str
    entry_currency: str
    value_sgd: Decimal
    value_usd: Decimal
    value_inr: Decimal
    price_updated_at: datetime | None
    price_source: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class HoldingAdjustResponse(BaseModel):
    """Result of an adjustment; ``holding`` is None once it was closed."""

    deleted: bool
    holding: HoldingResponse | None = None
