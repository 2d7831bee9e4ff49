"""Price refresh schemas."""

from pydantic import BaseModel, Field


class PriceUpdateResultResponse(BaseModel):
    symbol: str
    action: str
    price: float | None = None
    source: str | None = None
    holdings_updated: int = 0
    reason: str | None = None

    model_config = {"from_attributes": True}


class PriceRefreshResponse(BaseModel):
    updated: int
    used_previous: int
    skipped: int
    failed: int
    results: list[PriceUpdateResultResponse]


class ManualPriceRequest(BaseModel):
    symbol: str = Field(..., min_length=1, max_length=20)
    price: float = Field(..., gt=0, description="Unit price in each holding's entry currency")
    note: str | None = Field(None, max_length=255)
