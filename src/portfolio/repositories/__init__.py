"""Repository layer for database operations.

Repositories:
    - BaseRepository: Generic CRUD operations for any model
    - UserRepository: Lookup and provisioning by email
    - HoldingRepository: Holdings by owner, category and symbol
    - CategoryRepository: Per-user category settings
    - AllocationTargetRepository: Active target and its history
    - ExchangeRateRepository: Active rate set and per-pair history
    - YearlyDataRepository: Yearly financial snapshots
    - FIMilestoneRepository: FI milestones in display order

Usage:
    >>> from portfolio.repositories import HoldingRepository
    >>> from portfolio.models.holding import Holding
    >>>
    >>> holdings = await HoldingRepository(Holding, db).get_by_user_id(user.id)
"""

from portfolio.repositories.allocation_target import AllocationTargetRepository
from portfolio.repositories.base import BaseRepository
from portfolio.repositories.category import CategoryRepository
from portfolio.repositories.exchange_rate import ExchangeRateRepository
from portfolio.repositories.fi_milestone import FIMilestoneRepository
from portfolio.repositories.holding import HoldingRepository
from portfolio.repositories.user import UserRepository
from portfolio.repositories.yearly_data import YearlyDataRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "HoldingRepository",
    "CategoryRepository",
    "AllocationTargetRepository",
    "ExchangeRateRepository",
    "YearlyDataRepository",
    "FIMilestoneRepository",
]
