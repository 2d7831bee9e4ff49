"""Holding endpoints."""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from portfolio.core.constants import APIConstants
from portfolio.core.deps import CurrentUser, DbSession
from portfolio.core.exceptions import NotFoundError
from portfolio.models.category import PortfolioCategory
from portfolio.models.holding import Holding
from portfolio.repositories.holding import HoldingRepository
from portfolio.schemas.holding import (
    HoldingAdjust,
    HoldingAdjustResponse,
    HoldingCreate,
    HoldingResponse,
    HoldingUpdate,
)
from portfolio.services import holding_service
from portfolio.services.exchange_rate_service import get_current_rate_table

router = APIRouter()
logger = logging.getLogger(__name__)


async def get_owned_holding(holding_id: UUID, user: CurrentUser, db: DbSession) -> Holding:
    holding = await HoldingRepository(Holding, db).get_for_user(holding_id, user.id)
    if holding is None:
        raise NotFoundError(f"Holding {holding_id} not found")
    return holding


@router.get("/", response_model=list[HoldingResponse])
async def list_holdings(
    current_user: CurrentUser,
    db: DbSession,
    category: PortfolioCategory | None = None,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=APIConstants.MAX_PAGE_SIZE)] = (
        APIConstants.DEFAULT_PAGE_SIZE
    ),
) -> list[Holding]:
    """List holdings, optionally for one category."""
    return await HoldingRepository(Holding, db).get_by_user_id(
        current_user.id,
        category=category.value if category else None,
        skip=skip,
        limit=limit,
    )


@router.post("/", response_model=HoldingResponse, status_code=status.HTTP_201_CREATED)
async def create_holding(
    holding_in: HoldingCreate,
    current_user: CurrentUser,
    db: DbSession,
) -> Holding:
    """
    Create a holding.

    Snapshot values in every currency are computed from quantity x price
    (or the given cash value) with the current exchange rates.
    """
    rates = await get_current_rate_table(db)
    return await holding_service.create_holding(db, current_user.id, holding_in, rates)


@router.get("/{holding_id}", response_model=HoldingResponse)
async def get_holding(holding_id: UUID, current_user: CurrentUser, db: DbSession) -> Holding:
    return await get_owned_holding(holding_id, current_user, db)


@router.put("/{holding_id}", response_model=HoldingResponse)
async def update_holding(
    holding_id: UUID,
    holding_in: HoldingUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> Holding:
    """Edit a holding; snapshot values are recomputed."""
    holding = await get_owned_holding(holding_id, current_user, db)
    rates = await get_current_rate_table(db)
    return await holding_service.update_holding(db, holding, holding_in, rates)


@router.post("/{holding_id}/adjust", response_model=HoldingAdjustResponse)
async def adjust_holding(
    holding_id: UUID,
    adjustment: HoldingAdjust,
    current_user: CurrentUser,
    db: DbSession,
) -> HoldingAdjustResponse:
    """Buy or sell part of a position; selling everything deletes it."""
    holding = await get_owned_holding(holding_id, current_user, db)
    rates = await get_current_rate_table(db)
    updated = await holding_service.adjust_holding(db, holding, adjustment, rates)
    if updated is None:
        return HoldingAdjustResponse(deleted=True)
    return HoldingAdjustResponse(deleted=False, holding=HoldingResponse.model_validate(updated))


@router.delete("/{holding_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_holding(holding_id: UUID, current_user: CurrentUser, db: DbSession) -> None:
    holding = await get_owned_holding(holding_id, current_user, db)
    await HoldingRepository(Holding, db).remove(holding)
    logger.info(f"Deleted holding {holding.symbol} ({holding_id})")
