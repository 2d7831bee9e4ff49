"""Tests for the request logging middleware."""

from unittest.mock import patch

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.integration


async def test_timing_and_request_id(client: AsyncClient, auth_headers: dict[str, str]):
    response = await client.get("/api/v1/users/me", headers=auth_headers)

    assert float(response.headers["X-Process-Time"]) >= 0
    assert len(response.headers["X-Request-ID"]) == 32


async def test_incoming_request_id_is_echoed(client: AsyncClient):
    response = await client.get("/health", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"


async def test_health_check_is_not_logged(client: AsyncClient):
    with patch("portfolio.core.middleware.logger") as logger:
        response = await client.get("/health")

    assert response.status_code == 200
    assert "X-Process-Time" not in response.headers
    logger.log.assert_not_called()


async def test_client_errors_logged_as_warning(client: AsyncClient):
    with patch("portfolio.core.middleware.logger") as logger:
        await client.get("/api/v1/users/me")

    level, message = logger.log.call_args.args
    assert level == 30
    assert "401" in message
