"""Yearly data endpoints."""

import logging
from uuid import UUID

from fastapi import APIRouter, status

from portfolio.core.deps import CurrentUser, DbSession
from portfolio.core.exceptions import ConflictError, NotFoundError
from portfolio.models.yearly_data import YearlyData
from portfolio.repositories.yearly_data import YearlyDataRepository
from portfolio.schemas.yearly_data import (
    NetWorthPoint,
    YearlyDataCreate,
    YearlyDataResponse,
    YearlyDataUpdate,
)
from portfolio.services.net_worth_service import build_trend

router = APIRouter()
logger = logging.getLogger(__name__)


async def get_year_or_404(db: DbSession, user_id: UUID, year: int) -> YearlyData:
    entry = await YearlyDataRepository(YearlyData, db).get_by_year(user_id, year)
    if entry is None:
        raise NotFoundError(f"No data for {year}")
    return entry


@router.get("/", response_model=list[YearlyDataResponse])
async def list_yearly_data(current_user: CurrentUser, db: DbSession) -> list[YearlyData]:
    return await YearlyDataRepository(YearlyData, db).get_by_user_id(current_user.id)


@router.post("/", response_model=YearlyDataResponse, status_code=status.HTTP_201_CREATED)
async def create_yearly_data(
    data_in: YearlyDataCreate,
    current_user: CurrentUser,
    db: DbSession,
) -> YearlyData:
    repo = YearlyDataRepository(YearlyData, db)
    if await repo.get_by_year(current_user.id, data_in.year) is not None:
        raise ConflictError(f"Data for {data_in.year} already exists")
    return await repo.create(obj_in={**data_in.model_dump(), "user_id": current_user.id})


@router.get("/trend", response_model=list[NetWorthPoint])
async def net_worth_trend(current_user: CurrentUser, db: DbSession) -> list[NetWorthPoint]:
    """Net worth by year with market gains and return derived where missing."""
    entries = await YearlyDataRepository(YearlyData, db).get_by_user_id(current_user.id)
    return [NetWorthPoint.model_validate(point) for point in build_trend(entries)]


@router.get("/{year}", response_model=YearlyDataResponse)
async def get_yearly_data(year: int, current_user: CurrentUser, db: DbSession) -> YearlyData:
    return await get_year_or_404(db, current_user.id, year)


@router.put("/{year}", response_model=YearlyDataResponse)
async def update_yearly_data(
    year: int,
    data_in: YearlyDataUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> YearlyData:
    entry = await get_year_or_404(db, current_user.id, year)
    return await YearlyDataRepository(YearlyData, db).update(db_obj=entry, obj_in=data_in)


@router.delete("/{year}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_yearly_data(year: int, current_user: CurrentUser, db: DbSession) -> None:
    entry = await get_year_or_404(db, current_user.id, year)
    await YearlyDataRepository(YearlyData, db).remove(entry)
    logger.info(f"Deleted yearly data {year} for user {current_user.id}")
