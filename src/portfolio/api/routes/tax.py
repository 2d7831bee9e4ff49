"""Tax estimate endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Query

from portfolio.core.deps import CurrentUser, DbSession
from portfolio.models.user import EmploymentStatus
from portfolio.schemas.tax import ActionResponse, SRSEstimateResponse, TaxReportResponse
from portfolio.services import tax_service
from portfolio.services.intelligence_service import build_tax_report

router = APIRouter()


@router.get("/srs", response_model=SRSEstimateResponse)
async def srs_estimate(
    current_user: CurrentUser,
    db: DbSession,
    income: Annotated[float | None, Query(ge=0)] = None,
    srs: Annotated[float | None, Query(ge=0)] = None,
    employment_status: EmploymentStatus | None = None,
) -> SRSEstimateResponse:
    """
    SRS contribution room and tax savings.

    Query parameters override the stored profile; anything left out comes
    from the profile, this year's yearly data, or the default income.
    """
    report = await build_tax_report(db, current_user)
    if income is not None or srs is not None or employment_status is not None:
        report = tax_service.estimate(
            income if income is not None else report.annual_income,
            srs if srs is not None else report.current_contribution,
            employment_status or report.employment_status,
            today=date.today(),
        )
    return SRSEstimateResponse(
        report=TaxReportResponse.model_validate(report),
        actions=[ActionResponse.model_validate(a) for a in tax_service.tax_actions(report)],
    )
