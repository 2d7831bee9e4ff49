"""Price refresh job: fetch the latest quote per symbol and reprice holdings.

Symbols are processed one at a time with a fixed pause between feed calls to
stay inside Yahoo Finance's rate limits. There is no retry: a symbol that
fails is reported with its reason and picked up again on the next run.

Note:
    HTTP responses from Yahoo Finance go through the requests-cache session
    installed by ``portfolio.core.cache`` at startup.
"""

import asyncio
import enum
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from uuid import UUID

import yfinance as yf  # type: ignore[import-untyped]
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.core.config import settings
from portfolio.core.constants import PriceRefreshConstants
from portfolio.core.exceptions import CurrencyConversionError, NotFoundError
from portfolio.db.session import transactional
from portfolio.models.exchange_rate import SupportedCurrency
from portfolio.models.holding import Holding
from portfolio.repositories.holding import HoldingRepository
from portfolio.services.currency_service import RateTable, convert
from portfolio.services.exchange_rate_service import last_close
from portfolio.services.holding_service import apply_snapshots

logger = logging.getLogger(__name__)


class PriceFeedError(Exception):
    """Base exception for price feed errors."""

    pass


class SymbolNotFoundError(PriceFeedError):
    """Raised when the feed has no data for a symbol."""

    pass


class PriceAPIError(PriceFeedError):
    """Raised when the feed request itself fails."""

    pass


class PriceSource(str, enum.Enum):
    YAHOO = "yahoo"
    CRYPTO = "crypto"
    MANUAL = "manual"


class UpdateAction(str, enum.Enum):
    UPDATED = "updated"
    USED_PREVIOUS = "used_previous"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class PriceUpdateResult:
    symbol: str
    action: UpdateAction
    price: float | None = None
    source: PriceSource | None = None
    holdings_updated: int = 0
    reason: str | None = None


@dataclass
class PriceRefreshSummary:
    results: list[PriceUpdateResult] = field(default_factory=list)

    def count(self, action: UpdateAction) -> int:
        return sum(1 for result in self.results if result.action == action)


def detect_price_source(symbol: str) -> PriceSource:
    """Which feed prices ``symbol``; manual symbols are never fetched."""
    ticker = symbol.upper()
    if ticker in PriceRefreshConstants.MANUAL_SYMBOLS or any(
        marker in ticker for marker in PriceRefreshConstants.MANUAL_SYMBOL_MARKERS
    ):
        return PriceSource.MANUAL
    if ticker in PriceRefreshConstants.CRYPTO_SYMBOLS:
        return PriceSource.CRYPTO
    return PriceSource.YAHOO


def feed_symbol(symbol: str, source: PriceSource) -> str:
    """Ticker to ask Yahoo Finance for, e.g. "BTC-USD" for BTC."""
    if source == PriceSource.CRYPTO:
        return f"{symbol.upper()}-USD"
    return symbol.upper()


def fetch_latest_price(ticker: str) -> float:
    """
    Latest close for ``ticker`` from Yahoo Finance (blocking).

    Raises:
        SymbolNotFoundError: If no price data is available
        PriceAPIError: If the request fails
    """
    try:
        history = yf.Ticker(ticker).history(period=PriceRefreshConstants.HISTORY_PERIOD)
    except Exception as e:
        # yfinance surfaces network and parsing failures as arbitrary exceptions
        raise PriceAPIError(f"Yahoo Finance request failed: {e}") from e

    price = last_close(history)
    if price is None or price <= 0:
        raise SymbolNotFoundError(f"No price data for {ticker}")
    return price


async def get_latest_price(ticker: str) -> float:
    """Async wrapper running ``fetch_latest_price`` in the default executor."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, fetch_latest_price, ticker)


def as_utc(value: datetime | None) -> datetime | None:
    """Treat naive timestamps (as returned by SQLite) as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def has_recent_price(holdings: list[Holding], now: datetime) -> bool:
    cutoff = now - timedelta(hours=PriceRefreshConstants.PREVIOUS_PRICE_MAX_AGE_HOURS)
    return any(
        holding.current_unit_price is not None
        and (updated := as_utc(holding.price_updated_at)) is not None
        and updated >= cutoff
        for holding in holdings
    )


def price_in_entry_currency(
    price: float, source: PriceSource, holding: Holding, rates: RateTable
) -> float:
    """Crypto quotes are in USD; everything else is quoted in the entry currency."""
    if source != PriceSource.CRYPTO:
        return price
    return convert(price, SupportedCurrency.USD, holding.entry_currency, rates)


def reprice_holdings(
    holdings: list[Holding],
    price: float,
    source: PriceSource,
    rates: RateTable,
    now: datetime,
) -> int:
    """Write a new price onto every holding of one symbol; returns how many."""
    updated = 0
    for holding in holdings:
        try:
            unit_price = price_in_entry_currency(price, source, holding, rates)
        except CurrencyConversionError as e:
            logger.warning(
                f"Cannot price {holding.symbol} in {holding.entry_currency}: {e.detail}"
            )
            continue

        holding.current_unit_price = Decimal(str(round(unit_price, 6)))
        holding.price_updated_at = now
        holding.price_source = source.value
        if holding.quantity:
            try:
                apply_snapshots(holding, rates)
            except CurrencyConversionError as e:
                logger.warning(f"Keeping old snapshots for {holding.symbol}: {e.detail}")
        updated += 1
    return updated


async def refresh_prices(
    db: AsyncSession,
    user_id: UUID,
    rates: RateTable,
    *,
    delay_seconds: float | None = None,
    now: datetime | None = None,
) -> PriceRefreshSummary:
    """
    Refresh prices of every symbol a user holds.

    Args:
        db: Database session
        user_id: Owner of the holdings
        rates: Rate table used to recompute snapshot values
        delay_seconds: Pause between feed calls
            (default: ``settings.PRICE_REFRESH_DELAY_SECONDS``)
        now: Timestamp written as ``price_updated_at`` (default: current time)

    Returns:
        One result per symbol, in symbol order
    """
    delay = settings.PRICE_REFRESH_DELAY_SECONDS if delay_seconds is None else delay_seconds
    now = now or datetime.now(UTC)

    by_symbol: dict[str, list[Holding]] = defaultdict(list)
    for holding in await HoldingRepository(Holding, db).get_by_user_id(user_id):
        by_symbol[holding.symbol].append(holding)

    summary = PriceRefreshSummary()
    feed_called = False

    async with transactional(db):
        for symbol in sorted(by_symbol):
            holdings = by_symbol[symbol]
            source = detect_price_source(symbol)
            if source == PriceSource.MANUAL:
                summary.results.append(
                    PriceUpdateResult(symbol=symbol, action=UpdateAction.SKIPPED, source=source)
                )
                continue

            if feed_called and delay > 0:
                await asyncio.sleep(delay)
            feed_called = True

            try:
                price = await get_latest_price(feed_symbol(symbol, source))
            except PriceFeedError as e:
                if has_recent_price(holdings, now):
                    logger.info(f"Keeping previous price for {symbol}: {e}")
                    action = UpdateAction.USED_PREVIOUS
                else:
                    logger.warning(f"Price refresh failed for {symbol}: {e}")
                    action = UpdateAction.FAILED
                summary.results.append(
                    PriceUpdateResult(symbol=symbol, action=action, source=source, reason=str(e))
                )
                continue

            updated = reprice_holdings(holdings, price, source, rates, now)
            summary.results.append(
                PriceUpdateResult(
                    symbol=symbol,
                    action=UpdateAction.UPDATED,
                    price=price,
                    source=source,
                    holdings_updated=updated,
                )
            )

    logger.info(
        f"Price refresh for user {user_id}: "
        f"{summary.count(UpdateAction.UPDATED)} updated, "
        f"{summary.count(UpdateAction.USED_PREVIOUS)} previous, "
        f"{summary.count(UpdateAction.SKIPPED)} skipped, "
        f"{summary.count(UpdateAction.FAILED)} failed"
    )
    return summary


async def set_manual_price(
    db: AsyncSession,
    user_id: UUID,
    symbol: str,
    price: float,
    rates: RateTable,
    *,
    note: str | None = None,
    now: datetime | None = None,
) -> PriceUpdateResult:
    """
    Price every holding of ``symbol`` by hand, in each holding's entry currency.

    Raises:
        NotFoundError: If the user holds no ``symbol``
    """
    now = now or datetime.now(UTC)
    holdings = await HoldingRepository(Holding, db).get_by_symbol(user_id, symbol)
    if not holdings:
        raise NotFoundError(f"No holding of {symbol.upper()}")

    async with transactional(db):
        updated = reprice_holdings(holdings, price, PriceSource.MANUAL, rates, now)

    suffix = f" ({note})" if note else ""
    logger.info(f"Manual price {price} set on {updated} {symbol.upper()} holdings{suffix}")
    return PriceUpdateResult(
        symbol=symbol.upper(),
        action=UpdateAction.UPDATED,
        price=price,
        source=PriceSource.MANUAL,
        holdings_updated=updated,
        reason=note,
    )
