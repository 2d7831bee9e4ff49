"""Intelligence report schemas."""

from datetime import date, datetime

from pydantic import BaseModel

from portfolio.schemas.allocation import CategoryReportResponse
from portfolio.schemas.tax import ActionResponse, TaxReportResponse


class StatusResponse(BaseModel):
    net_worth: float
    fi_progress: str
    fi_goal: float
    fi_target_year: int
    urgent_action: str
    deadline: date | None

    model_config = {"from_attributes": True}


class NarrativeResponse(BaseModel):
    tone: str
    headline: str
    supporting_messages: list[str]

    model_config = {"from_attributes": True}


class EstateTaxExposureResponse(BaseModel):
    symbols: list[str]
    exposure: float
    estimated_risk: float
    alternatives: dict[str, str]

    model_config = {"from_attributes": True}


class IntelligenceResponse(BaseModel):
    display_currency: str
    status: StatusResponse
    allocation: list[CategoryReportResponse]
    actions: list[ActionResponse]
    narrative: NarrativeResponse
    tax: TaxReportResponse
    estate_tax_exposure: EstateTaxExposureResponse | None
    generated_at: datetime
    next_refresh: datetime

    model_config = {"from_attributes": True}
