"""Exchange rates: fetching from Yahoo Finance, storing, and serving.

Rates for every directed pair of supported currencies are fetched through
yfinance ("SGDUSD=X" is the SGD to USD rate) and stored as the active set.
``get_current_rate_table`` reuses the active set while it is younger than
``EXCHANGE_RATE_MAX_AGE_MINUTES`` and otherwise refreshes once; when that
fails it degrades to stale stored rates, then to the hardcoded fallback.
Concurrent refreshes are not coordinated; the last one to commit wins.
"""

import asyncio
import logging
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pandas as pd
import yfinance as yf  # type: ignore[import-untyped]
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.core.config import settings
from portfolio.core.exceptions import CurrencyConversionError, ExternalAPIError, ValidationError
from portfolio.db.session import transactional
from portfolio.models.exchange_rate import ExchangeRate, RateSource, SupportedCurrency
from portfolio.repositories.exchange_rate import ExchangeRateRepository
from portfolio.services.currency_service import RateTable, parse_currency, supported_pairs

logger = logging.getLogger(__name__)


def pair_ticker(from_currency: SupportedCurrency, to_currency: SupportedCurrency) -> str:
    """Yahoo Finance ticker for a currency pair, e.g. "USDSGD=X"."""
    return f"{from_currency.value}{to_currency.value}=X"


def last_close(history: pd.DataFrame) -> float | None:
    """Most recent non-null close of a yfinance history frame."""
    if history.empty or "Close" not in history:
        return None
    closes = history["Close"].dropna()
    if closes.empty:
        return None
    return float(closes.iloc[-1])


async def fetch_exchange_rates() -> RateTable | None:
    """Fetch a complete rate table from Yahoo Finance.

    Returns:
        The table, or None when any pair could not be fetched. A partial set
        is never returned because it could not replace the active set.
    """
    pairs = supported_pairs()

    def fetch_yfinance_data() -> dict[tuple[SupportedCurrency, SupportedCurrency], float]:
        rates: dict[tuple[SupportedCurrency, SupportedCurrency], float] = {}
        for from_currency, to_currency in pairs:
            ticker_symbol = pair_ticker(from_currency, to_currency)
            try:
                rate = last_close(yf.Ticker(ticker_symbol).history(period="5d"))
            except Exception as e:
                # yfinance surfaces network and parsing failures as arbitrary exceptions
                logger.warning(f"Failed to fetch rate for {ticker_symbol}: {e}")
                continue
            if rate is None or rate <= 0:
                logger.warning(f"No usable data returned for {ticker_symbol}")
                continue
            rates[(from_currency, to_currency)] = rate
        return rates

    loop = asyncio.get_running_loop()
    rates = await loop.run_in_executor(None, fetch_yfinance_data)

    if len(rates) < len(pairs):
        logger.error(f"Fetched {len(rates)} of {len(pairs)} exchange rates; discarding")
        return None

    logger.info(f"Fetched {len(rates)} exchange rates from Yahoo Finance")
    return RateTable(rates)


async def store_rate_table(
    db: AsyncSession, table: RateTable, source: RateSource
) -> list[ExchangeRate]:
    """Replace the active rate set with ``table``; the old set becomes history."""
    repo = ExchangeRateRepository(ExchangeRate, db)
    async with transactional(db):
        await repo.deactivate_active()
        rows = [
            ExchangeRate(
                from_currency=from_currency.value,
                to_currency=to_currency.value,
                rate=Decimal(str(rate)),
                source=source.value,
                is_active=True,
            )
            for (from_currency, to_currency), rate in table.rates.items()
        ]
        db.add_all(rows)
    logger.info(f"Stored {len(rows)} {source.value} exchange rates")
    return rows


async def refresh_exchange_rates(db: AsyncSession) -> RateTable:
    """Fetch fresh rates and make them the active set.

    Raises:
        ExternalAPIError: If Yahoo Finance did not return every pair
    """
    table = await fetch_exchange_rates()
    if table is None:
        raise ExternalAPIError("Could not fetch exchange rates from Yahoo Finance")
    await store_rate_table(db, table, RateSource.API)
    return table


async def set_manual_exchange_rates(
    db: AsyncSession, rates: dict[tuple[str, str], float]
) -> RateTable:
    """Store user-entered rates as the active set.

    Raises:
        ValidationError: If a pair is missing, unsupported or not positive
    """
    try:
        table = RateTable.from_pairs(rates)
    except (CurrencyConversionError, TypeError, ValueError) as e:
        raise ValidationError(str(e)) from e

    if not table.is_complete():
        raise ValidationError("Manual rates must include every currency pair")
    if any(rate <= 0 for rate in table.rates.values()):
        raise ValidationError("Exchange rates must be positive")

    await store_rate_table(db, table, RateSource.MANUAL)
    return table


async def get_current_rate_table(
    db: AsyncSession,
    *,
    max_age: timedelta | None = None,
    now: datetime | None = None,
) -> RateTable:
    """The rate table to use for this request.

    Order of preference:
        1. the active set, when complete and younger than ``max_age``
        2. a freshly fetched set
        3. the stale active set, when complete
        4. ``RateTable.fallback()``
    """
    max_age = max_age or timedelta(minutes=settings.EXCHANGE_RATE_MAX_AGE_MINUTES)
    now = now or datetime.now(UTC)
    repo = ExchangeRateRepository(ExchangeRate, db)

    recent = RateTable.from_records(await repo.get_active(updated_since=now - max_age))
    if recent.is_complete():
        return recent

    try:
        return await refresh_exchange_rates(db)
    except ExternalAPIError as e:
        logger.warning(f"Exchange rate refresh failed: {e.detail}")

    stale = RateTable.from_records(await repo.get_active())
    if stale.is_complete():
        logger.info("Using stale stored exchange rates")
        return stale

    logger.warning("No stored exchange rates available; using fallback rates")
    return RateTable.fallback()


async def get_rate_history(
    db: AsyncSession,
    from_currency: str,
    to_currency: str,
    *,
    days: int,
) -> list[ExchangeRate]:
    """Stored rates for one pair over the last ``days`` days."""
    source = parse_currency(from_currency)
    target = parse_currency(to_currency)
    since = datetime.now(UTC) - timedelta(days=days)
    return await ExchangeRateRepository(ExchangeRate, db).get_history(
        source.value, target.value, since=since
    )
