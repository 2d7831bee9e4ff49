"""Account data export and deletion."""

import logging
from datetime import UTC, datetime

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.db.session import transactional
from portfolio.models.allocation_target import AllocationTarget
from portfolio.models.category import Category
from portfolio.models.fi_milestone import FIMilestone
from portfolio.models.holding import Holding
from portfolio.models.user import User
from portfolio.models.yearly_data import YearlyData
from portfolio.repositories.allocation_target import AllocationTargetRepository
from portfolio.repositories.category import CategoryRepository
from portfolio.repositories.fi_milestone import FIMilestoneRepository
from portfolio.repositories.holding import HoldingRepository
from portfolio.repositories.yearly_data import YearlyDataRepository
from portfolio.schemas.account import AccountExport

logger = logging.getLogger(__name__)

# Every table with a user_id column
OWNED_MODELS = (Holding, Category, AllocationTarget, YearlyData, FIMilestone)


async def export_account(db: AsyncSession, user: User) -> AccountExport:
    """Snapshot of the user's profile and every record they own."""
    targets = AllocationTargetRepository(AllocationTarget, db)
    data = {
        "exported_at": datetime.now(UTC),
        "user": user,
        "holdings": await HoldingRepository(Holding, db).get_by_user_id(user.id),
        "categories": await CategoryRepository(Category, db).get_by_user_id(user.id),
        "allocation_targets": await targets.get_history(user.id),
        "yearly_data": await YearlyDataRepository(YearlyData, db).get_by_user_id(user.id),
        "fi_milestones": await FIMilestoneRepository(FIMilestone, db).get_by_user_id(user.id),
    }
    return AccountExport.model_validate(data, from_attributes=True)


async def delete_account(db: AsyncSession, user: User) -> None:
    """Delete the user and everything they own in one transaction.

    Owned rows are deleted explicitly rather than left to ON DELETE CASCADE,
    which SQLite only honours with foreign keys switched on.
    """
    user_id = user.id
    async with transactional(db):
        for model in OWNED_MODELS:
            await db.execute(delete(model).where(model.user_id == user_id))
        await db.delete(user)
    logger.info(f"Deleted account {user_id}")
