"""Loads a user's holdings, targets and rates and runs the calculators.

This is the only place the route layer needs for "the portfolio as of now":
it gathers inputs from the stores, then hands immutable snapshots to the
pure valuation and allocation functions.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.models.allocation_target import AllocationTarget
from portfolio.models.category import Category
from portfolio.models.exchange_rate import SupportedCurrency
from portfolio.models.holding import Holding
from portfolio.models.user import User
from portfolio.repositories.allocation_target import AllocationTargetRepository
from portfolio.repositories.category import CategoryRepository
from portfolio.repositories.holding import HoldingRepository
from portfolio.services.allocation_service import (
    CategoryReport,
    analyze,
    resolve_targets,
    suggest_rebalance,
)
from portfolio.services.currency_service import RateTable, parse_currency
from portfolio.services.exchange_rate_service import get_current_rate_table
from portfolio.services.valuation_service import PortfolioValuation, aggregate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PortfolioSnapshot:
    """Everything computed for one user in one display currency."""

    holdings: list[Holding]
    rates: RateTable
    valuation: PortfolioValuation
    targets: dict[str, float]
    rebalance_threshold: float
    reports: list[CategoryReport]
    rebalance_suggestion: str | None

    @property
    def display_currency(self) -> SupportedCurrency:
        return self.valuation.display_currency

    def holding_share(self, holding: Holding) -> float:
        """Percent of the portfolio held in ``holding``."""
        if self.valuation.total <= 0:
            return 0.0
        return self.valuation.per_holding.get(holding.id, 0.0) / self.valuation.total * 100

    def largest_holding(self) -> Holding | None:
        if not self.holdings:
            return None
        return max(self.holdings, key=lambda h: self.valuation.per_holding.get(h.id, 0.0))


async def load_targets(db: AsyncSession, user: User) -> tuple[dict[str, float], float]:
    """Effective targets and rebalance threshold for ``user``."""
    categories = await CategoryRepository(Category, db).get_by_user_id(user.id)
    active = await AllocationTargetRepository(AllocationTarget, db).get_active(user.id)
    return resolve_targets(categories, active)


async def build_snapshot(
    db: AsyncSession,
    user: User,
    display_currency: "SupportedCurrency | str",
    *,
    rates: RateTable | None = None,
) -> PortfolioSnapshot:
    """Value the user's portfolio and compare it with their targets."""
    currency = parse_currency(display_currency)
    holdings = await HoldingRepository(Holding, db).get_by_user_id(user.id)
    rates = rates or await get_current_rate_table(db)
    targets, threshold = await load_targets(db, user)

    valuation = aggregate(holdings, currency, rates)
    reports = analyze(valuation.per_category, valuation.total, targets, threshold)
    logger.debug(
        f"Valued {len(holdings)} holdings for user {user.id}: "
        f"{valuation.total:,.2f} {currency.value}"
    )

    return PortfolioSnapshot(
        holdings=holdings,
        rates=rates,
        valuation=valuation,
        targets=targets,
        rebalance_threshold=threshold,
        reports=reports,
        rebalance_suggestion=suggest_rebalance(reports, currency.value),
    )
