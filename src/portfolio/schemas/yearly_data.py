"""Yearly data schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field


class YearlyDataBase(BaseModel):
    income: Decimal = Field(Decimal("0"), ge=0)
    expenses: Decimal = Field(Decimal("0"), ge=0)
    savings: Decimal = Decimal("0")
    srs_contribution: Decimal = Field(Decimal("0"), ge=0)
    net_worth: Decimal = Decimal("0")
    market_gains: Decimal | None = None
    return_percent: Decimal | None = None
    notes: str | None = None


class YearlyDataCreate(YearlyDataBase):
    year: int = Field(..., ge=1900, le=2200)


class YearlyDataUpdate(BaseModel):
    income: Decimal | None = Field(None, ge=0)
    expenses: Decimal | None = Field(None, ge=0)
    savings: Decimal | None = None
    srs_contribution: Decimal | None = Field(None, ge=0)
    net_worth: Decimal | None = None
    market_gains: Decimal | None = None
    return_percent: Decimal | None = None
    notes: str | None = None


class YearlyDataResponse(YearlyDataBase):
    id: UUID
    year: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class NetWorthPoint(BaseModel):
    """One year of the net worth trend, with derived figures filled in."""

    year: int
    net_worth: float
    savings: float
    market_gains: float | None
    return_percent: float | None
    savings_rate: float | None

    model_config = {"from_attributes": True}
