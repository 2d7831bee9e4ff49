"""Tests for the price refresh job and manual pricing."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import pandas as pd
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.core.exceptions import NotFoundError
from portfolio.models.user import User
from portfolio.services.currency_service import RateTable
from portfolio.services.price_service import (
    PriceAPIError,
    PriceSource,
    SymbolNotFoundError,
    UpdateAction,
    detect_price_source,
    feed_symbol,
    fetch_latest_price,
    refresh_prices,
    set_manual_price,
)

NOW = datetime(2026, 10, 17, 9, 0, tzinfo=UTC)


def price_feed(prices: dict[str, float]) -> AsyncMock:
    async def latest(ticker: str) -> float:
        if ticker not in prices:
            raise SymbolNotFoundError(f"No price data for {ticker}")
        return prices[ticker]

    return AsyncMock(side_effect=latest)


@pytest.mark.unit
class TestSymbols:
    @pytest.mark.parametrize(
        "symbol,source",
        [
            ("NIFTY100", PriceSource.MANUAL),
            ("gold", PriceSource.MANUAL),
            ("SGD-CASH", PriceSource.MANUAL),
            ("BTC", PriceSource.CRYPTO),
            ("eth", PriceSource.CRYPTO),
            ("VWRA.L", PriceSource.YAHOO),
            ("D05.SI", PriceSource.YAHOO),
        ],
    )
    def test_detect_price_source(self, symbol, source):
        assert detect_price_source(symbol) == source

    def test_feed_symbol(self):
        assert feed_symbol("btc", PriceSource.CRYPTO) == "BTC-USD"
        assert feed_symbol("es3.si", PriceSource.YAHOO) == "ES3.SI"


@pytest.mark.unit
class TestFetchLatestPrice:
    def test_last_close(self):
        ticker = MagicMock()
        ticker.history.return_value = pd.DataFrame({"Close": [10.0, 11.5, None]})
        with patch("portfolio.services.price_service.yf.Ticker", return_value=ticker):
            assert fetch_latest_price("VWRA.L") == 11.5
        ticker.history.assert_called_once_with(period="5d")

    def test_empty_history(self):
        ticker = MagicMock()
        ticker.history.return_value = pd.DataFrame()
        with patch("portfolio.services.price_service.yf.Ticker", return_value=ticker):
            with pytest.raises(SymbolNotFoundError):
                fetch_latest_price("NOPE")

    def test_request_failure(self):
        ticker = MagicMock()
        ticker.history.side_effect = ConnectionError("timeout")
        with patch("portfolio.services.price_service.yf.Ticker", return_value=ticker):
            with pytest.raises(PriceAPIError):
                fetch_latest_price("VWRA.L")


@pytest.mark.integration
class TestRefreshPrices:
    async def test_updates_prices_and_snapshots(
        self,
        test_db: AsyncSession,
        test_user: User,
        holding_factory,
        fallback_rates: RateTable,
    ):
        btc = holding_factory(
            test_user,
            symbol="BTC",
            name="Bitcoin",
            category="Growth",
            entry_currency="SGD",
            quantity=Decimal("0.5"),
            current_unit_price=Decimal("70000"),
        )
        vwra = holding_factory(test_user)
        nifty = holding_factory(
            test_user, symbol="NIFTY100", name="Nifty 100", entry_currency="INR"
        )
        test_db.add_all([btc, vwra, nifty])
        await test_db.commit()

        feed = price_feed({"BTC-USD": 60000.0, "VWRA": 120.0})
        with patch("portfolio.services.price_service.get_latest_price", new=feed):
            summary = await refresh_prices(
                test_db, test_user.id, fallback_rates, delay_seconds=0, now=NOW
            )

        assert [(r.symbol, r.action) for r in summary.results] == [
            ("BTC", UpdateAction.UPDATED),
            ("NIFTY100", UpdateAction.SKIPPED),
            ("VWRA", UpdateAction.UPDATED),
        ]
        assert summary.count(UpdateAction.UPDATED) == 2
        assert feed.await_count == 2

        await test_db.refresh(btc)
        assert btc.current_unit_price == Decimal("81000")
        assert btc.value_sgd == Decimal("40500.00")
        assert btc.price_source == "crypto"

        await test_db.refresh(vwra)
        assert vwra.current_unit_price == Decimal("120")
        assert vwra.value_usd == Decimal("1200.00")
        assert vwra.value_sgd == Decimal("1620.00")

        await test_db.refresh(nifty)
        assert nifty.current_unit_price == Decimal("100")

    async def test_failed_symbol_keeps_recent_price(
        self,
        test_db: AsyncSession,
        test_user: User,
        holding_factory,
        fallback_rates: RateTable,
    ):
        recent = holding_factory(
            test_user, symbol="ES3", entry_currency="SGD", price_updated_at=NOW - timedelta(hours=2)
        )
        stale = holding_factory(
            test_user, symbol="DELISTED", price_updated_at=NOW - timedelta(days=3)
        )
        test_db.add_all([recent, stale])
        await test_db.commit()

        with patch("portfolio.services.price_service.get_latest_price", new=price_feed({})):
            summary = await refresh_prices(
                test_db, test_user.id, fallback_rates, delay_seconds=0, now=NOW
            )

        results = {r.symbol: r for r in summary.results}
        assert results["ES3"].action == UpdateAction.USED_PREVIOUS
        assert results["DELISTED"].action == UpdateAction.FAILED
        assert "DELISTED" in results["DELISTED"].reason

        await test_db.refresh(stale)
        assert stale.current_unit_price == Decimal("100")

    async def test_only_own_holdings(
        self,
        test_db: AsyncSession,
        test_user: User,
        other_user: User,
        holding_factory,
        fallback_rates: RateTable,
    ):
        test_db.add(holding_factory(other_user, symbol="D05"))
        await test_db.commit()

        feed = price_feed({"D05": 40.0})
        with patch("portfolio.services.price_service.get_latest_price", new=feed):
            summary = await refresh_prices(test_db, test_user.id, fallback_rates, delay_seconds=0)

        assert summary.results == []
        feed.assert_not_awaited()


@pytest.mark.integration
class TestSetManualPrice:
    async def test_reprices_every_location(
        self,
        test_db: AsyncSession,
        test_user: User,
        other_user: User,
        holding_factory,
        fallback_rates: RateTable,
    ):
        ibkr = holding_factory(test_user)
        endowus = holding_factory(test_user, location="Endowus", quantity=Decimal("5"))
        theirs = holding_factory(other_user)
        test_db.add_all([ibkr, endowus, theirs])
        await test_db.commit()

        result = await set_manual_price(
            test_db, test_user.id, "vwra", 110.0, fallback_rates, note="broker statement", now=NOW
        )

        assert result.symbol == "VWRA"
        assert result.action == UpdateAction.UPDATED
        assert result.source == PriceSource.MANUAL
        assert result.holdings_updated == 2
        assert result.reason == "broker statement"

        await test_db.refresh(endowus)
        assert endowus.current_unit_price == Decimal("110")
        assert endowus.value_usd == Decimal("550.00")
        assert endowus.value_sgd == Decimal("742.50")
        assert endowus.price_source == "manual"

        await test_db.refresh(theirs)
        assert theirs.current_unit_price == Decimal("100")

    async def test_unknown_symbol(
        self, test_db: AsyncSession, test_user: User, fallback_rates: RateTable
    ):
        with pytest.raises(NotFoundError):
            await set_manual_price(test_db, test_user.id, "NOPE", 1.0, fallback_rates)
