"""Intelligence report endpoint."""

from fastapi import APIRouter, Request

from portfolio.core.config import settings
from portfolio.core.deps import CurrentUser, DbSession, DisplayCurrency
from portfolio.core.rate_limit import limiter
from portfolio.schemas.intelligence import IntelligenceResponse
from portfolio.services.intelligence_service import build_intelligence_report

router = APIRouter()


@router.get("/", response_model=IntelligenceResponse)
@limiter.limit(settings.INTELLIGENCE_RATE_LIMIT)
async def get_intelligence(
    request: Request,
    current_user: CurrentUser,
    db: DbSession,
    currency: DisplayCurrency,
) -> IntelligenceResponse:
    """Status, top actions, allocation and tax insight in one report."""
    report = await build_intelligence_report(db, current_user, currency)
    return IntelligenceResponse.model_validate(report)
