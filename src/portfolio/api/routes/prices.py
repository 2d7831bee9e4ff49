"""Price refresh and manual price endpoints."""

from fastapi import APIRouter, Request

from portfolio.core.config import settings
from portfolio.core.deps import CurrentUser, DbSession
from portfolio.core.rate_limit import limiter
from portfolio.schemas.price import (
    ManualPriceRequest,
    PriceRefreshResponse,
    PriceUpdateResultResponse,
)
from portfolio.services import price_service
from portfolio.services.exchange_rate_service import get_current_rate_table
from portfolio.services.price_service import UpdateAction

router = APIRouter()


@router.post("/refresh", response_model=PriceRefreshResponse)
@limiter.limit(settings.PRICE_REFRESH_RATE_LIMIT)
async def refresh_prices(
    request: Request,
    current_user: CurrentUser,
    db: DbSession,
) -> PriceRefreshResponse:
    """
    Fetch the latest price of every held symbol and reprice holdings.

    Intended to be called by a scheduler as well as from the UI. Symbols are
    fetched one at a time; cash and manually priced symbols are skipped.
    """
    rates = await get_current_rate_table(db)
    summary = await price_service.refresh_prices(db, current_user.id, rates)
    return PriceRefreshResponse(
        updated=summary.count(UpdateAction.UPDATED),
        used_previous=summary.count(UpdateAction.USED_PREVIOUS),
        skipped=summary.count(UpdateAction.SKIPPED),
        failed=summary.count(UpdateAction.FAILED),
        results=[PriceUpdateResultResponse.model_validate(r) for r in summary.results],
    )


@router.post("/manual", response_model=PriceUpdateResultResponse)
async def set_manual_price(
    price_in: ManualPriceRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> PriceUpdateResultResponse:
    """
    Set the price of a symbol the feed cannot quote.

    Every holding of the symbol is repriced and its snapshot values recomputed.
    """
    rates = await get_current_rate_table(db)
    result = await price_service.set_manual_price(
        db,
        current_user.id,
        price_in.symbol,
        price_in.price,
        rates,
        note=price_in.note,
    )
    return PriceUpdateResultResponse.model_validate(result)
