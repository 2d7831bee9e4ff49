"""FI milestone endpoints.

Milestone amounts are stored in SGD. Deleting a milestone deactivates it, so
it drops out of listings and the intelligence report.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, status

from portfolio.core.deps import CurrentUser, DbSession
from portfolio.core.exceptions import NotFoundError
from portfolio.models.fi_milestone import FIMilestone
from portfolio.repositories.fi_milestone import FIMilestoneRepository
from portfolio.schemas.fi_milestone import (
    FIMilestoneCreate,
    FIMilestoneResponse,
    FIMilestoneUpdate,
)

router = APIRouter()
logger = logging.getLogger(__name__)


async def get_milestone_or_404(db: DbSession, user_id: UUID, milestone_id: UUID) -> FIMilestone:
    milestone = await FIMilestoneRepository(FIMilestone, db).get_for_user(milestone_id, user_id)
    if milestone is None or not milestone.is_active:
        raise NotFoundError("FI milestone not found")
    return milestone


@router.get("/", response_model=list[FIMilestoneResponse])
async def list_milestones(current_user: CurrentUser, db: DbSession) -> list[FIMilestone]:
    """Active milestones, in display order."""
    return await FIMilestoneRepository(FIMilestone, db).get_active(current_user.id)


@router.post("/", response_model=FIMilestoneResponse, status_code=status.HTTP_201_CREATED)
async def create_milestone(
    milestone_in: FIMilestoneCreate,
    current_user: CurrentUser,
    db: DbSession,
) -> FIMilestone:
    """Add a milestone; without ``sort_order`` it goes after the last one."""
    repo = FIMilestoneRepository(FIMilestone, db)
    data = milestone_in.model_dump()
    if data["sort_order"] is None:
        data["sort_order"] = await repo.next_sort_order(current_user.id)
    milestone = await repo.create(obj_in={**data, "user_id": current_user.id})
    logger.info(f"Created FI milestone {milestone.name!r} for user {current_user.id}")
    return milestone


@router.put("/{milestone_id}", response_model=FIMilestoneResponse)
async def update_milestone(
    milestone_id: UUID,
    milestone_in: FIMilestoneUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> FIMilestone:
    milestone = await get_milestone_or_404(db, current_user.id, milestone_id)
    return await FIMilestoneRepository(FIMilestone, db).update(
        db_obj=milestone, obj_in=milestone_in
    )


@router.delete("/{milestone_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_milestone(milestone_id: UUID, current_user: CurrentUser, db: DbSession) -> None:
    milestone = await get_milestone_or_404(db, current_user.id, milestone_id)
    await FIMilestoneRepository(FIMilestone, db).update(
        db_obj=milestone, obj_in={"is_active": False}
    )
    logger.info(f"Deactivated FI milestone {milestone_id} for user {current_user.id}")
