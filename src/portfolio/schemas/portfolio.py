"""Portfolio summary schemas."""

from uuid import UUID

from pydantic import BaseModel

from portfolio.schemas.allocation import CategoryReportResponse


class HoldingValue(BaseModel):
    id: UUID
    symbol: str
    name: str
    category: str
    value: float
    percent_of_portfolio: float


class PortfolioSummaryResponse(BaseModel):
    """Valuation of every holding in one display currency."""

    display_currency: str
    total_value: float
    per_category: dict[str, float]
    holdings: list[HoldingValue]
    allocation: list[CategoryReportResponse]
    rebalance_suggestion: str | None
    largest_holding: HoldingValue | None
