"""Schemas package."""

from portfolio.schemas.allocation import (
    AllocationReportResponse,
    AllocationTargetCreate,
    AllocationTargetResponse,
    CategoryReportResponse,
    CategoryResponse,
    CategoryUpdate,
    EffectiveTargetsResponse,
)
from portfolio.schemas.exchange_rate import (
    ConversionResponse,
    ExchangeRateResponse,
    ManualRatesRequest,
    RateTableResponse,
)
from portfolio.schemas.fi_milestone import (
    FIMilestoneCreate,
    FIMilestoneResponse,
    FIMilestoneUpdate,
)
from portfolio.schemas.holding import (
    HoldingAdjust,
    HoldingAdjustResponse,
    HoldingCreate,
    HoldingResponse,
    HoldingUpdate,
)
from portfolio.schemas.intelligence import IntelligenceResponse
from portfolio.schemas.portfolio import HoldingValue, PortfolioSummaryResponse
from portfolio.schemas.price import (
    ManualPriceRequest,
    PriceRefreshResponse,
    PriceUpdateResultResponse,
)
from portfolio.schemas.tax import ActionResponse, SRSEstimateResponse, TaxReportResponse
from portfolio.schemas.user import UserProfileUpdate, UserResponse
from portfolio.schemas.yearly_data import (
    NetWorthPoint,
    YearlyDataCreate,
    YearlyDataResponse,
    YearlyDataUpdate,
)

__all__ = [
    # Holding schemas
    "HoldingAdjust",
    "HoldingAdjustResponse",
    "HoldingCreate",
    "HoldingResponse",
    "HoldingUpdate",
    # Portfolio schemas
    "HoldingValue",
    "PortfolioSummaryResponse",
    # Allocation schemas
    "AllocationReportResponse",
    "AllocationTargetCreate",
    "AllocationTargetResponse",
    "CategoryReportResponse",
    "CategoryResponse",
    "CategoryUpdate",
    "EffectiveTargetsResponse",
    # Exchange rate schemas
    "ConversionResponse",
    "ExchangeRateResponse",
    "ManualRatesRequest",
    "RateTableResponse",
    # Tax and intelligence schemas
    "ActionResponse",
    "IntelligenceResponse",
    "SRSEstimateResponse",
    "TaxReportResponse",
    # Price schemas
    "ManualPriceRequest",
    "PriceRefreshResponse",
    "PriceUpdateResultResponse",
    # FI milestone schemas
    "FIMilestoneCreate",
    "FIMilestoneResponse",
    "FIMilestoneUpdate",
    # User schemas
    "UserProfileUpdate",
    "UserResponse",
    # Yearly data schemas
    "NetWorthPoint",
    "YearlyDataCreate",
    "YearlyDataResponse",
    "YearlyDataUpdate",
]
