"""Portfolio valuation endpoints."""

from fastapi import APIRouter

from portfolio.core.deps import CurrentUser, DbSession, DisplayCurrency
from portfolio.models.holding import Holding
from portfolio.schemas.allocation import CategoryReportResponse
from portfolio.schemas.portfolio import HoldingValue, PortfolioSummaryResponse
from portfolio.services.portfolio_service import PortfolioSnapshot, build_snapshot

router = APIRouter()


def holding_value(snapshot: PortfolioSnapshot, holding: Holding) -> HoldingValue:
    return HoldingValue(
        id=holding.id,
        symbol=holding.symbol,
        name=holding.name,
        category=holding.category,
        value=snapshot.valuation.per_holding.get(holding.id, 0.0),
        percent_of_portfolio=snapshot.holding_share(holding),
    )


@router.get("/summary", response_model=PortfolioSummaryResponse)
async def portfolio_summary(
    current_user: CurrentUser,
    db: DbSession,
    currency: DisplayCurrency,
) -> PortfolioSummaryResponse:
    """
    Value every holding in the display currency.

    Live quantity x price is preferred over stored snapshots; the category
    breakdown always sums to the total.
    """
    snapshot = await build_snapshot(db, current_user, currency)
    largest = snapshot.largest_holding()
    return PortfolioSummaryResponse(
        display_currency=currency.value,
        total_value=snapshot.valuation.total,
        per_category=snapshot.valuation.per_category,
        holdings=[holding_value(snapshot, holding) for holding in snapshot.holdings],
        allocation=[CategoryReportResponse.model_validate(r) for r in snapshot.reports],
        rebalance_suggestion=snapshot.rebalance_suggestion,
        largest_holding=holding_value(snapshot, largest) if largest is not None else None,
    )
