"""Tests for FI milestone endpoints."""

import pytest
from fastapi import status
from httpx import AsyncClient

from portfolio.models.holding import Holding

pytestmark = pytest.mark.integration

URL = "/api/v1/fi-milestones/"


async def create(client: AsyncClient, headers: dict[str, str], **fields) -> dict:
    response = await client.post(URL, json=fields, headers=headers)
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


async def test_requires_authentication(client: AsyncClient):
    response = await client.get(URL)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


async def test_new_milestones_go_last(client: AsyncClient, auth_headers: dict[str, str]):
    assert (await client.get(URL, headers=auth_headers)).json() == []

    coast = await create(client, auth_headers, name="Coast FI", amount="500000")
    lean = await create(
        client, auth_headers, name="Lean FI", amount="1200000", description="Bare bones"
    )

    assert coast["sort_order"] == 1
    assert lean["sort_order"] == 2
    assert lean["description"] == "Bare bones"

    listed = (await client.get(URL, headers=auth_headers)).json()
    assert [m["name"] for m in listed] == ["Coast FI", "Lean FI"]


async def test_explicit_order(client: AsyncClient, auth_headers: dict[str, str]):
    await create(client, auth_headers, name="Fat FI", amount="3000000", sort_order=5)
    await create(client, auth_headers, name="Coast FI", amount="500000", sort_order=2)

    listed = (await client.get(URL, headers=auth_headers)).json()
    assert [m["name"] for m in listed] == ["Coast FI", "Fat FI"]


async def test_rejects_non_positive_amount(client: AsyncClient, auth_headers: dict[str, str]):
    response = await client.post(URL, json={"name": "Zero", "amount": "0"}, headers=auth_headers)
    assert response.status_code == 422


async def test_update(client: AsyncClient, auth_headers: dict[str, str]):
    milestone = await create(client, auth_headers, name="Coast FI", amount="500000")

    response = await client.put(
        f"{URL}{milestone['id']}", json={"amount": "600000"}, headers=auth_headers
    )

    assert response.status_code == status.HTTP_200_OK
    assert float(response.json()["amount"]) == 600000
    assert response.json()["name"] == "Coast FI"


async def test_update_rejects_null_name(client: AsyncClient, auth_headers: dict[str, str]):
    milestone = await create(client, auth_headers, name="Coast FI", amount="500000")

    response = await client.put(
        f"{URL}{milestone['id']}", json={"name": None}, headers=auth_headers
    )
    assert response.status_code == 422


async def test_other_users_milestone_is_not_found(
    client: AsyncClient,
    auth_headers: dict[str, str],
    other_user_auth_headers: dict[str, str],
):
    milestone = await create(client, auth_headers, name="Coast FI", amount="500000")

    response = await client.put(
        f"{URL}{milestone['id']}", json={"amount": "1"}, headers=other_user_auth_headers
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert (await client.get(URL, headers=other_user_auth_headers)).json() == []


async def test_delete_deactivates(client: AsyncClient, auth_headers: dict[str, str]):
    milestone = await create(client, auth_headers, name="Coast FI", amount="500000")
    url = f"{URL}{milestone['id']}"

    response = await client.delete(url, headers=auth_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT

    assert (await client.get(URL, headers=auth_headers)).json() == []
    response = await client.put(url, json={"amount": "1"}, headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    response = await client.delete(url, headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND

    # A deactivated milestone no longer holds a position
    again = await create(client, auth_headers, name="Lean FI", amount="1200000")
    assert again["sort_order"] == 1


async def test_intelligence_tracks_next_milestone(
    client: AsyncClient, auth_headers: dict[str, str], test_holdings: list[Holding]
):
    await create(client, auth_headers, name="First 50k", amount="50000")
    await create(client, auth_headers, name="Coast FI", amount="200000")

    report = await client.get(
        "/api/v1/intelligence/", params={"currency": "USD"}, headers=auth_headers
    )

    # 74,000 USD of 200,000 SGD (148,000 USD); the 50k milestone is already passed
    assert report.json()["status"]["fi_progress"] == "50.0% to Coast FI"
