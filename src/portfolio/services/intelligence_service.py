"""Intelligence report: status, prioritised actions and a short narrative.

``generate_report`` is pure and composes outputs of the valuation,
allocation and tax calculators; ``build_intelligence_report`` gathers those
inputs for a user.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.core.config import settings
from portfolio.core.constants import IntelligenceConstants
from portfolio.models.exchange_rate import SupportedCurrency
from portfolio.models.fi_milestone import FIMilestone
from portfolio.models.user import EmploymentStatus, User
from portfolio.models.yearly_data import YearlyData
from portfolio.repositories.fi_milestone import FIMilestoneRepository
from portfolio.repositories.yearly_data import YearlyDataRepository
from portfolio.services.allocation_service import AllocationStatus, CategoryReport
from portfolio.services.currency_service import RateTable, convert
from portfolio.services.portfolio_service import PortfolioSnapshot, build_snapshot
from portfolio.services.tax_service import (
    ActionItem,
    EstateTaxExposure,
    TaxReport,
    estimate,
    tax_actions,
    us_estate_tax_exposure,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Milestone:
    """A named net worth target, in the report's display currency."""

    name: str
    amount: float


DEFAULT_MILESTONES = (Milestone("first million", IntelligenceConstants.FIRST_MILESTONE),)


@dataclass(frozen=True)
class StatusSummary:
    net_worth: float
    fi_progress: str
    fi_goal: float
    fi_target_year: int
    urgent_action: str
    deadline: date | None


@dataclass(frozen=True)
class Narrative:
    tone: str
    headline: str
    supporting_messages: list[str]


@dataclass(frozen=True)
class IntelligenceReport:
    display_currency: str
    status: StatusSummary
    allocation: list[CategoryReport]
    actions: list[ActionItem]
    narrative: Narrative
    tax: TaxReport
    estate_tax_exposure: EstateTaxExposure | None
    generated_at: datetime
    next_refresh: datetime


def allocation_actions(reports: Sequence[CategoryReport]) -> list[ActionItem]:
    """Cash drag and underweight-category actions."""
    actions: list[ActionItem] = []
    for report in reports:
        if (
            report.category == "Liquidity"
            and report.gap_percent > IntelligenceConstants.CASH_DRAG_MIN_GAP
        ):
            actions.append(
                ActionItem(
                    kind="cash_drag",
                    title="Deploy excess cash",
                    description=(
                        f"Liquidity is {report.gap_percent:.1f} points over target; "
                        f"{report.gap_amount:,.0f} is not invested"
                    ),
                    impact=report.gap_amount * IntelligenceConstants.CASH_DRAG_RETURN,
                    priority=9,
                )
            )
        elif (
            report.status == AllocationStatus.UNDERWEIGHT
            and abs(report.gap_amount) > IntelligenceConstants.UNDERWEIGHT_MIN_AMOUNT
        ):
            actions.append(
                ActionItem(
                    kind="rebalance",
                    title=f"Increase {report.category} allocation",
                    description=report.callout,
                    impact=abs(report.gap_amount) * IntelligenceConstants.UNDERWEIGHT_IMPACT,
                    priority=8,
                )
            )
    return actions


def concentration_actions(
    holding_values: Sequence[tuple[str, float]], total_value: float
) -> list[ActionItem]:
    """One urgent action per holding above the concentration limit."""
    if total_value <= 0:
        return []
    actions: list[ActionItem] = []
    for symbol, value in holding_values:
        share = value / total_value * 100
        if share > IntelligenceConstants.CONCENTRATION_PERCENT:
            actions.append(
                ActionItem(
                    kind="concentration",
                    title=f"Reduce {symbol} concentration",
                    description=f"{symbol} is {share:.1f}% of the portfolio",
                    impact=value * IntelligenceConstants.CONCENTRATION_IMPACT,
                    priority=10,
                    urgent=True,
                )
            )
    return actions


def estate_tax_action(exposure: EstateTaxExposure | None) -> list[ActionItem]:
    if exposure is None:
        return []
    alternatives = ", ".join(f"{us} -> {ie}" for us, ie in exposure.alternatives.items())
    description = f"{', '.join(exposure.symbols)} expose {exposure.exposure:,.0f} to US estate tax"
    if alternatives:
        description += f"; Irish-domiciled alternatives: {alternatives}"
    return [
        ActionItem(
            kind="estate_tax",
            title="Reduce US estate tax exposure",
            description=description,
            impact=exposure.estimated_risk,
            priority=6,
        )
    ]


def next_milestone(net_worth: float, milestones: Sequence[Milestone]) -> Milestone | None:
    """First milestone, in order, that ``net_worth`` has not reached yet."""
    return next((m for m in milestones if net_worth < m.amount), None)


def fi_progress_text(
    net_worth: float, fi_goal: float, milestones: Sequence[Milestone] = DEFAULT_MILESTONES
) -> str:
    milestone = next_milestone(net_worth, milestones)
    if milestone is not None:
        percent = max(net_worth, 0.0) / milestone.amount * 100
        return f"{percent:.1f}% to {milestone.name}"
    percent = net_worth / fi_goal * 100 if fi_goal > 0 else 100.0
    return f"{percent:.1f}% to FI goal"


def build_narrative(
    reports: Sequence[CategoryReport],
    actions: Sequence[ActionItem],
    tax: TaxReport,
    net_worth: float,
    milestones: Sequence[Milestone] = DEFAULT_MILESTONES,
) -> Narrative:
    """Pick a tone and headline: urgent actions first, then big wins."""
    perfect = sum(1 for report in reports if report.status == AllocationStatus.PERFECT)
    milestone = next_milestone(net_worth, milestones) or milestones[-1]
    milestone_percent = max(net_worth, 0.0) / milestone.amount * 100
    urgent = next((action for action in actions if action.urgent), None)
    big = next((action for action in actions if action.impact > 5000), None)

    if urgent is not None:
        tone, headline = "urgency", f"{urgent.title}: act on this first"
    elif big is not None:
        tone, headline = "guidance", f"{big.title} could add {big.impact:,.0f} a year"
    elif perfect >= 3:
        tone = "celebration"
        headline = f"Portfolio well balanced, {milestone_percent:.1f}% to {milestone.name}"
    elif not actions:
        tone, headline = "reassurance", "Nothing needs your attention right now"
    else:
        tone, headline = "guidance", f"{len(actions)} optimisation opportunities identified"

    messages: list[str] = []
    if milestone_percent > 40:
        messages.append(
            f"Strong FI progress: {min(milestone_percent, 100):.1f}% to {milestone.name}"
        )
    if tax.employment_pass_advantage > 1000:
        messages.append(
            f"Employment Pass SRS advantage worth {tax.employment_pass_advantage:,.0f} a year"
        )
    if perfect >= 2:
        messages.append(f"{perfect}/{len(reports)} categories well allocated")

    return Narrative(tone=tone, headline=headline, supporting_messages=messages)


def generate_report(
    snapshot: PortfolioSnapshot,
    tax: TaxReport,
    *,
    fi_goal: float,
    fi_target_year: int,
    generated_at: datetime,
    milestones: Sequence[Milestone] = DEFAULT_MILESTONES,
) -> IntelligenceReport:
    """Compose the intelligence report from already computed inputs.

    ``milestones`` must be in the display currency and in the user's order.
    """
    total = snapshot.valuation.total
    holding_values = [
        (holding.symbol, snapshot.valuation.per_holding.get(holding.id, 0.0))
        for holding in snapshot.holdings
    ]
    exposure = us_estate_tax_exposure(holding_values)

    actions = (
        concentration_actions(holding_values, total)
        + allocation_actions(snapshot.reports)
        + tax_actions(tax)
        + estate_tax_action(exposure)
    )
    actions.sort(key=lambda action: (action.priority, action.impact), reverse=True)
    top_actions = actions[: IntelligenceConstants.MAX_ACTIONS]

    status = StatusSummary(
        net_worth=total,
        fi_progress=fi_progress_text(total, fi_goal, milestones),
        fi_goal=fi_goal,
        fi_target_year=fi_target_year,
        urgent_action=top_actions[0].title if top_actions else "Portfolio optimized",
        deadline=tax.deadline if tax.remaining_room > 0 else None,
    )

    return IntelligenceReport(
        display_currency=snapshot.display_currency.value,
        status=status,
        allocation=snapshot.reports,
        actions=top_actions,
        narrative=build_narrative(snapshot.reports, top_actions, tax, total, milestones),
        tax=tax,
        estate_tax_exposure=exposure,
        generated_at=generated_at,
        next_refresh=generated_at
        + timedelta(minutes=IntelligenceConstants.REFRESH_INTERVAL_MINUTES),
    )


async def current_srs_contribution(db: AsyncSession, user: User, year: int) -> float:
    """SRS contributed so far this year, from the user's yearly data."""
    entry = await YearlyDataRepository(YearlyData, db).get_by_year(user.id, year)
    return float(entry.srs_contribution) if entry is not None else 0.0


async def build_tax_report(
    db: AsyncSession, user: User, *, today: date | None = None
) -> TaxReport:
    """Tax estimate from the user's profile, substituting the default income."""
    today = today or date.today()
    income = (
        float(user.annual_income)
        if user.annual_income is not None
        else settings.DEFAULT_ANNUAL_INCOME
    )
    status = user.employment_status or EmploymentStatus.EMPLOYMENT_PASS.value
    contributed = await current_srs_contribution(db, user, today.year)
    return estimate(income, contributed, status, today=today)


async def load_milestones(
    db: AsyncSession, user: User, currency: SupportedCurrency, rates: RateTable
) -> tuple[Milestone, ...]:
    """The user's active milestones converted from SGD, or the defaults when none."""
    stored = await FIMilestoneRepository(FIMilestone, db).get_active(user.id)
    if not stored:
        return DEFAULT_MILESTONES
    return tuple(
        Milestone(m.name, convert(float(m.amount), SupportedCurrency.SGD, currency, rates))
        for m in stored
    )


async def build_intelligence_report(
    db: AsyncSession,
    user: User,
    display_currency: "SupportedCurrency | str",
) -> IntelligenceReport:
    """Intelligence report for ``user`` as of now."""
    now = datetime.now(UTC)
    snapshot = await build_snapshot(db, user, display_currency)
    tax = await build_tax_report(db, user, today=now.date())
    milestones = await load_milestones(db, user, snapshot.display_currency, snapshot.rates)
    report = generate_report(
        snapshot,
        tax,
        fi_goal=float(user.fi_goal) if user.fi_goal is not None else settings.DEFAULT_FI_GOAL,
        fi_target_year=user.fi_target_year or settings.DEFAULT_FI_TARGET_YEAR,
        generated_at=now,
        milestones=milestones,
    )
    logger.info(f"Built intelligence report for user {user.id} with {len(report.actions)} actions")
    return report
