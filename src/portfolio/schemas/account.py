"""Account export schema."""

from datetime import datetime

from pydantic import BaseModel

from portfolio.schemas.allocation import AllocationTargetResponse, CategoryResponse
from portfolio.schemas.fi_milestone import FIMilestoneResponse
from portfolio.schemas.holding import HoldingResponse
from portfolio.schemas.user import UserResponse
from portfolio.schemas.yearly_data import YearlyDataResponse


class AccountExport(BaseModel):
    """Everything stored for one user."""

    exported_at: datetime
    user: UserResponse
    holdings: list[HoldingResponse]
    categories: list[CategoryResponse]
    allocation_targets: list[AllocationTargetResponse]
    yearly_data: list[YearlyDataResponse]
    fi_milestones: list[FIMilestoneResponse]
