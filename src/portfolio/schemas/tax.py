"""Tax estimate schemas."""

from datetime import date

from pydantic import BaseModel


class TaxReportResponse(BaseModel):
    annual_income: float
    employment_status: str
    tax_bracket: float
    max_contribution: float
    current_contribution: float
    remaining_room: float
    tax_savings: float
    net_cost: float
    progress_percent: float
    deadline: date
    days_to_deadline: int
    monthly_target: float
    urgency: str
    employment_pass_advantage: float

    model_config = {"from_attributes": True}


class ActionResponse(BaseModel):
    kind: str
    title: str
    description: str
    impact: float
    priority: int

    model_config = {"from_attributes": True}


class SRSEstimateResponse(BaseModel):
    report: TaxReportResponse
    actions: list[ActionResponse]
