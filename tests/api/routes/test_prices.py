"""Tests for the price refresh and manual price endpoints."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import status
from httpx import AsyncClient

from portfolio.core.config import settings
from portfolio.models.holding import Holding
from portfolio.services.price_service import SymbolNotFoundError

pytestmark = pytest.mark.integration

URL = "/api/v1/prices/refresh"


@pytest.fixture(autouse=True)
def no_delay(monkeypatch):
    monkeypatch.setattr(settings, "PRICE_REFRESH_DELAY_SECONDS", 0)


async def test_refresh(
    client: AsyncClient, auth_headers: dict[str, str], test_holdings: list[Holding]
):
    prices = {"ES3": 310.0, "CSPX": 520.0}

    async def latest(ticker: str) -> float:
        if ticker not in prices:
            raise SymbolNotFoundError(f"No price data for {ticker}")
        return prices[ticker]

    with patch(
        "portfolio.services.price_service.get_latest_price", AsyncMock(side_effect=latest)
    ):
        response = await client.post(URL, headers=auth_headers)

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["updated"] == 2
    assert data["skipped"] == 1
    assert data["failed"] == 1
    actions = {result["symbol"]: result["action"] for result in data["results"]}
    assert actions == {
        "CSPX": "updated",
        "ES3": "updated",
        "GLD": "failed",
        "SGD-CASH": "skipped",
    }

    holdings = await client.get(
        "/api/v1/holdings/", params={"category": "Core"}, headers=auth_headers
    )
    assert float(holdings.json()[0]["value_sgd"]) == 31000


async def test_refresh_is_rate_limited(client: AsyncClient, auth_headers: dict[str, str]):
    for _ in range(10):
        response = await client.post(URL, headers=auth_headers)
        assert response.status_code == status.HTTP_200_OK

    response = await client.post(URL, headers=auth_headers)

    assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
    assert response.headers["Retry-After"] == "3600"


async def test_limit_is_per_user(
    client: AsyncClient,
    auth_headers: dict[str, str],
    other_user_auth_headers: dict[str, str],
):
    for _ in range(10):
        await client.post(URL, headers=auth_headers)

    response = await client.post(URL, headers=other_user_auth_headers)
    assert response.status_code == status.HTTP_200_OK


async def test_manual_price(
    client: AsyncClient, auth_headers: dict[str, str], test_holdings: list[Holding]
):
    response = await client.post(
        "/api/v1/prices/manual",
        json={"symbol": "gld", "price": 120, "note": "SGX close"},
        headers=auth_headers,
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["symbol"] == "GLD"
    assert data["source"] == "manual"
    assert data["holdings_updated"] == 1

    holdings = await client.get(
        "/api/v1/holdings/", params={"category": "Hedge"}, headers=auth_headers
    )
    gld = holdings.json()[0]
    assert float(gld["value_sgd"]) == 12000
    assert float(gld["value_usd"]) == 8880
    assert gld["price_source"] == "manual"


async def test_manual_price_for_unheld_symbol(
    client: AsyncClient, auth_headers: dict[str, str], test_holdings: list[Holding]
):
    response = await client.post(
        "/api/v1/prices/manual", json={"symbol": "NOPE", "price": 1}, headers=auth_headers
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


async def test_manual_price_must_be_positive(client: AsyncClient, auth_headers: dict[str, str]):
    response = await client.post(
        "/api/v1/prices/manual", json={"symbol": "GLD", "price": 0}, headers=auth_headers
    )
    assert response.status_code == 422
