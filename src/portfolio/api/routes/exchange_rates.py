"""Exchange rate endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query

from portfolio.core.constants import ExchangeRateConstants
from portfolio.core.deps import CurrentUser, DbSession
from portfolio.models.exchange_rate import ExchangeRate, SupportedCurrency
from portfolio.schemas.exchange_rate import (
    ConversionResponse,
    ExchangeRateResponse,
    ManualRatesRequest,
    RateTableResponse,
)
from portfolio.services import exchange_rate_service
from portfolio.services.currency_service import RateTable, convert

router = APIRouter()


def table_response(table: RateTable) -> RateTableResponse:
    return RateTableResponse(rates=table.as_dict(), complete=table.is_complete())


@router.get("/", response_model=RateTableResponse)
async def current_rates(current_user: CurrentUser, db: DbSession) -> RateTableResponse:
    """Rates in use; refreshed from Yahoo Finance when older than an hour."""
    return table_response(await exchange_rate_service.get_current_rate_table(db))


@router.post("/refresh", response_model=RateTableResponse)
async def refresh_rates(current_user: CurrentUser, db: DbSession) -> RateTableResponse:
    """Force a refresh from Yahoo Finance (503 if the feed fails)."""
    return table_response(await exchange_rate_service.refresh_exchange_rates(db))


@router.put("/manual", response_model=RateTableResponse)
async def set_manual_rates(
    rates_in: ManualRatesRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> RateTableResponse:
    """Override the active rates with hand-entered values for every pair."""
    table = await exchange_rate_service.set_manual_exchange_rates(db, rates_in.as_pairs())
    return table_response(table)


@router.get("/convert", response_model=ConversionResponse)
async def convert_amount(
    amount: float,
    from_currency: SupportedCurrency,
    to_currency: SupportedCurrency,
    current_user: CurrentUser,
    db: DbSession,
) -> ConversionResponse:
    """Convert an amount with the current direct rate (422 if the pair is missing)."""
    table = await exchange_rate_service.get_current_rate_table(db)
    return ConversionResponse(
        amount=amount,
        from_currency=from_currency,
        to_currency=to_currency,
        converted=convert(amount, from_currency, to_currency, table),
    )


@router.get("/history", response_model=list[ExchangeRateResponse])
async def rate_history(
    from_currency: SupportedCurrency,
    to_currency: SupportedCurrency,
    current_user: CurrentUser,
    db: DbSession,
    days: Annotated[int, Query(ge=1, le=3650)] = ExchangeRateConstants.HISTORY_DEFAULT_DAYS,
) -> list[ExchangeRate]:
    return await exchange_rate_service.get_rate_history(
        db, from_currency, to_currency, days=days
    )
