"""Pytest fixtures for testing."""

from collections.abc import AsyncGenerator, Iterator
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from main import app
from portfolio.core.rate_limit import limiter
from portfolio.core.security import create_access_token
from portfolio.db.base import Base
from portfolio.db.session import get_db
from portfolio.models.exchange_rate import SupportedCurrency
from portfolio.models.holding import Holding
from portfolio.models.user import EmploymentStatus, User
from portfolio.services.currency_service import RateTable

# Test database URL (SQLite in-memory for fast tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(autouse=True)
def no_rate_feed() -> Iterator[AsyncMock]:
    """Keep tests off Yahoo Finance; with no stored rates the fallback table is used."""
    with patch(
        "portfolio.services.exchange_rate_service.fetch_exchange_rates",
        new=AsyncMock(return_value=None),
    ) as mock_fetch:
        yield mock_fetch


@pytest.fixture(autouse=True)
def reset_limiter() -> Iterator[None]:
    """Clear rate limit counters between tests."""
    limiter.reset()
    yield
    limiter.reset()


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_db(test_engine) -> AsyncGenerator[AsyncSession]:
    """Create a test database session."""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session_maker() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(test_db: AsyncSession) -> AsyncGenerator[AsyncClient]:
    """Create a test client with database override."""

    async def override_get_db() -> AsyncGenerator[AsyncSession]:
        yield test_db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def fallback_rates() -> RateTable:
    """USD->SGD 1.35, SGD->USD 0.74, and so on."""
    return RateTable.fallback()


@pytest_asyncio.fixture(scope="function")
async def test_user(test_db: AsyncSession) -> User:
    """Create a test user on an Employment Pass earning 120k."""
    user = User(
        email="test@example.com",
        name="Test User",
        is_active=True,
        employment_status=EmploymentStatus.EMPLOYMENT_PASS.value,
        annual_income=Decimal("120000"),
    )
    test_db.add(user)
    await test_db.commit()
    await test_db.refresh(user)
    return user


@pytest_asyncio.fixture(scope="function")
async def other_user(test_db: AsyncSession) -> User:
    """Create a second user to check ownership boundaries."""
    user = User(email="other@example.com", name="Other User", is_active=True)
    test_db.add(user)
    await test_db.commit()
    await test_db.refresh(user)
    return user


@pytest_asyncio.fixture(scope="function")
async def test_inactive_user(test_db: AsyncSession) -> User:
    """Create an inactive test user."""
    user = User(email="inactive@example.com", name="Inactive User", is_active=False)
    test_db.add(user)
    await test_db.commit()
    await test_db.refresh(user)
    return user


@pytest.fixture(scope="function")
def user_token(test_user: User) -> str:
    """Generate a valid access token for test user."""
    return create_access_token(data={"sub": test_user.email})


@pytest.fixture(scope="function")
def auth_headers(user_token: str) -> dict[str, str]:
    """Generate authorization headers with user token."""
    return {"Authorization": f"Bearer {user_token}"}


@pytest.fixture(scope="function")
def other_user_auth_headers(other_user: User) -> dict[str, str]:
    token = create_access_token(data={"sub": other_user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def inactive_user_auth_headers(test_inactive_user: User) -> dict[str, str]:
    """Generate authorization headers with inactive user token."""
    token = create_access_token(data={"sub": test_inactive_user.email})
    return {"Authorization": f"Bearer {token}"}


def make_holding(user: User, **overrides) -> Holding:
    """Holding with sensible defaults: 10 units of VWRA at 100 USD."""
    fields = {
        "user_id": user.id,
        "symbol": "VWRA",
        "name": "Vanguard FTSE All-World",
        "category": "Core",
        "location": "IBKR",
        "entry_currency": SupportedCurrency.USD.value,
        "quantity": Decimal("10"),
        "unit_cost": Decimal("100"),
        "current_unit_price": Decimal("100"),
        "value_sgd": Decimal("1350.00"),
        "value_usd": Decimal("1000.00"),
        "value_inr": Decimal("85500.00"),
    }
    fields.update(overrides)
    return Holding(**fields)


@pytest_asyncio.fixture(scope="function")
async def test_holdings(test_db: AsyncSession, test_user: User) -> list[Holding]:
    """A small SGD-denominated portfolio worth 100,000 SGD.

    Core 30,000, Growth 50,000, Hedge 10,000, Liquidity 10,000.
    """
    positions = [
        ("ES3", "Core", Decimal("30000")),
        ("CSPX", "Growth", Decimal("50000")),
        ("GLD", "Hedge", Decimal("10000")),
        ("SGD-CASH", "Liquidity", Decimal("10000")),
    ]
    holdings = [
        make_holding(
            test_user,
            symbol=symbol,
            name=symbol,
            category=category,
            entry_currency="SGD",
            quantity=None if category == "Liquidity" else Decimal("100"),
            unit_cost=None if category == "Liquidity" else value / 100,
            current_unit_price=None if category == "Liquidity" else value / 100,
            value_sgd=value,
            value_usd=(value * Decimal("0.74")).quantize(Decimal("0.01")),
            value_inr=(value * Decimal("63.5")).quantize(Decimal("0.01")),
        )
        for symbol, category, value in positions
    ]
    test_db.add_all(holdings)
    await test_db.commit()
    for holding in holdings:
        await test_db.refresh(holding)
    return holdings


@pytest.fixture
def holding_factory():
    """Build unsaved holdings; see ``make_holding`` for the defaults."""
    return make_holding
