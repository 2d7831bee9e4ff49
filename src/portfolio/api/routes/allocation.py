"""Allocation target, category and gap report endpoints."""

import logging
from decimal import Decimal

from fastapi import APIRouter, status

from portfolio.core.constants import AllocationConstants
from portfolio.core.deps import CurrentUser, DbSession, DisplayCurrency
from portfolio.models.allocation_target import AllocationTarget
from portfolio.models.category import Category, PortfolioCategory
from portfolio.repositories.allocation_target import AllocationTargetRepository
from portfolio.repositories.category import CategoryRepository
from portfolio.schemas.allocation import (
    AllocationReportResponse,
    AllocationTargetCreate,
    AllocationTargetResponse,
    CategoryReportResponse,
    CategoryResponse,
    CategoryUpdate,
    EffectiveTargetsResponse,
)
from portfolio.services.portfolio_service import build_snapshot, load_targets

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/targets", response_model=EffectiveTargetsResponse)
async def get_targets(current_user: CurrentUser, db: DbSession) -> EffectiveTargetsResponse:
    """Targets in force, and the active stored target if there is one."""
    targets, threshold = await load_targets(db, current_user)
    active = await AllocationTargetRepository(AllocationTarget, db).get_active(current_user.id)
    return EffectiveTargetsResponse(
        targets=targets,
        rebalance_threshold=threshold,
        active_target=AllocationTargetResponse.model_validate(active) if active else None,
    )


@router.put(
    "/targets", response_model=AllocationTargetResponse, status_code=status.HTTP_201_CREATED
)
async def set_targets(
    target_in: AllocationTargetCreate,
    current_user: CurrentUser,
    db: DbSession,
) -> AllocationTarget:
    """Store new targets as active; the previous set is kept as history."""
    target = await AllocationTargetRepository(AllocationTarget, db).activate(
        current_user.id, target_in.model_dump()
    )
    logger.info(f"Activated allocation target {target.id} for user {current_user.id}")
    return target


@router.get("/targets/history", response_model=list[AllocationTargetResponse])
async def target_history(current_user: CurrentUser, db: DbSession) -> list[AllocationTarget]:
    return await AllocationTargetRepository(AllocationTarget, db).get_history(current_user.id)


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(current_user: CurrentUser, db: DbSession) -> list[Category]:
    return await CategoryRepository(Category, db).get_by_user_id(current_user.id)


@router.put("/categories/{name}", response_model=CategoryResponse)
async def update_category(
    name: PortfolioCategory,
    category_in: CategoryUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> Category:
    """Create or update the settings of one category."""
    repo = CategoryRepository(Category, db)
    category = await repo.get_by_name(current_user.id, name.value)
    if category is None:
        defaults = {
            "user_id": current_user.id,
            "name": name.value,
            "target_percentage": Decimal(str(AllocationConstants.DEFAULT_TARGETS[name.value])),
            "rebalance_threshold": Decimal(str(AllocationConstants.DEFAULT_REBALANCE_THRESHOLD)),
        }
        category = await repo.create(obj_in=defaults)
    update_data = category_in.model_dump(exclude_unset=True)
    # Only the user override may be cleared
    for field in ("target_percentage", "rebalance_threshold"):
        if update_data.get(field, 0) is None:
            del update_data[field]
    return await repo.update(db_obj=category, obj_in=update_data)


@router.get("/report", response_model=AllocationReportResponse)
async def allocation_report(
    current_user: CurrentUser,
    db: DbSession,
    currency: DisplayCurrency,
) -> AllocationReportResponse:
    """Gap between each category and its target, with the next rebalancing move."""
    snapshot = await build_snapshot(db, current_user, currency)
    return AllocationReportResponse(
        display_currency=currency.value,
        total_value=snapshot.valuation.total,
        targets=snapshot.targets,
        rebalance_threshold=snapshot.rebalance_threshold,
        categories=[CategoryReportResponse.model_validate(r) for r in snapshot.reports],
        rebalance_suggestion=snapshot.rebalance_suggestion,
    )
