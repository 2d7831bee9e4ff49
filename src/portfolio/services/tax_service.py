"""Simplified Singapore SRS tax-savings estimate.

One marginal bracket lookup, one linear savings figure and one deadline
urgency tier. Progressive blending, CPF, other reliefs and multiple income
sources are deliberately ignored: this drives insight cards, not filings.
"""

import enum
import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date

from portfolio.core.constants import TaxConstants
from portfolio.models.user import EmploymentStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaxBracketTable:
    """Marginal rate step function.

    ``brackets`` is a sequence of (inclusive upper bound, rate percent) in
    ascending order; the last bound may be None for "and above".
    """

    brackets: Sequence[tuple[float | None, float]]

    def rate_for(self, annual_income: float) -> float:
        for upper_bound, rate in self.brackets:
            if upper_bound is None or annual_income <= upper_bound:
                return rate
        return self.brackets[-1][1]


# Year of assessment 2024 onwards, resident individuals
SINGAPORE_RESIDENT_BRACKETS = TaxBracketTable(
    brackets=(
        (20000, 0.0),
        (30000, 2.0),
        (40000, 3.5),
        (80000, 7.0),
        (120000, 11.5),
        (160000, 15.0),
        (200000, 18.0),
        (240000, 19.0),
        (280000, 19.5),
        (320000, 20.0),
        (None, 22.0),
    )
)

SRS_CAPS: Mapping[EmploymentStatus, float] = {
    EmploymentStatus.EMPLOYMENT_PASS: TaxConstants.SRS_CAP_EMPLOYMENT_PASS,
    EmploymentStatus.CITIZEN: TaxConstants.SRS_CAP_RESIDENT,
    EmploymentStatus.PR: TaxConstants.SRS_CAP_RESIDENT,
}


class UrgencyLevel(str, enum.Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class TaxReport:
    annual_income: float
    employment_status: EmploymentStatus
    tax_bracket: float
    max_contribution: float
    current_contribution: float
    remaining_room: float
    tax_savings: float
    net_cost: float
    progress_percent: float
    deadline: date
    days_to_deadline: int
    monthly_target: float
    urgency: UrgencyLevel
    employment_pass_advantage: float


@dataclass(frozen=True)
class ActionItem:
    """A suggested step with its estimated yearly value."""

    kind: str
    title: str
    description: str
    impact: float
    priority: int
    urgent: bool = False


def urgency_for(days_to_deadline: int, remaining_room: float) -> UrgencyLevel:
    if remaining_room <= 0:
        return UrgencyLevel.LOW
    if days_to_deadline < TaxConstants.URGENCY_CRITICAL_DAYS:
        return UrgencyLevel.CRITICAL
    if days_to_deadline < TaxConstants.URGENCY_HIGH_DAYS:
        return UrgencyLevel.HIGH
    if days_to_deadline < TaxConstants.URGENCY_MEDIUM_DAYS:
        return UrgencyLevel.MEDIUM
    return UrgencyLevel.LOW


def estimate(
    annual_income: float,
    current_srs_contribution: float,
    employment_status: "EmploymentStatus | str",
    *,
    today: date | None = None,
    tax_year: int | None = None,
    brackets: TaxBracketTable = SINGAPORE_RESIDENT_BRACKETS,
) -> TaxReport:
    """
    Estimate SRS contribution room and the tax it would save.

    The deadline is 31 December of ``tax_year`` (default: the year of
    ``today``). Pass ``today`` to make the result reproducible.
    """
    status = EmploymentStatus(employment_status)
    today = today or date.today()
    deadline = date(tax_year or today.year, 12, 31)

    bracket = brackets.rate_for(annual_income)
    cap = SRS_CAPS[status]
    contributed = max(0.0, current_srs_contribution)
    remaining_room = max(0.0, cap - contributed)
    tax_savings = remaining_room * (bracket / 100)

    days_to_deadline = (deadline - today).days
    months_left = max(1, math.ceil(days_to_deadline / TaxConstants.DAYS_PER_MONTH))

    # Extra room an EP holder gets over a citizen, valued at the same bracket
    ep_advantage = 0.0
    if status == EmploymentStatus.EMPLOYMENT_PASS:
        ep_advantage = (TaxConstants.SRS_CAP_EMPLOYMENT_PASS - TaxConstants.SRS_CAP_RESIDENT) * (
            bracket / 100
        )

    return TaxReport(
        annual_income=annual_income,
        employment_status=status,
        tax_bracket=bracket,
        max_contribution=cap,
        current_contribution=contributed,
        remaining_room=remaining_room,
        tax_savings=tax_savings,
        net_cost=remaining_room - tax_savings,
        progress_percent=min(100.0, contributed / cap * 100) if cap > 0 else 0.0,
        deadline=deadline,
        days_to_deadline=days_to_deadline,
        monthly_target=remaining_room / months_left,
        urgency=urgency_for(days_to_deadline, remaining_room),
        employment_pass_advantage=ep_advantage,
    )


def tax_actions(report: TaxReport) -> list[ActionItem]:
    """Actions worth showing for a tax report, highest priority first."""
    actions: list[ActionItem] = []
    if report.remaining_room > 0:
        actions.append(
            ActionItem(
                kind="srs_contribution",
                title=f"Contribute {report.remaining_room:,.0f} to SRS",
                description=(
                    f"Saves about {report.tax_savings:,.0f} in tax at your "
                    f"{report.tax_bracket}% bracket; {report.days_to_deadline} days left "
                    f"({report.monthly_target:,.0f} per month)"
                ),
                impact=report.tax_savings,
                priority=10 if report.urgency == UrgencyLevel.CRITICAL else 8,
            )
        )
    if report.employment_pass_advantage > TaxConstants.MIN_EP_ADVANTAGE_ACTION:
        actions.append(
            ActionItem(
                kind="employment_pass_advantage",
                title="Use your higher Employment Pass SRS cap",
                description=(
                    f"The extra room over the citizen cap is worth about "
                    f"{report.employment_pass_advantage:,.0f} a year in tax"
                ),
                impact=report.employment_pass_advantage,
                priority=7,
            )
        )
    return sorted(actions, key=lambda action: action.priority, reverse=True)


@dataclass(frozen=True)
class EstateTaxExposure:
    symbols: list[str]
    exposure: float
    estimated_risk: float
    alternatives: dict[str, str]


def us_estate_tax_exposure(
    holding_values: Iterable[tuple[str, float]],
) -> EstateTaxExposure | None:
    """
    Exposure to US situs estate tax through US-domiciled ETFs.

    Args:
        holding_values: (symbol, value) pairs in the display currency

    Returns:
        None when no US-domiciled ETF is held
    """
    symbols: list[str] = []
    exposure = 0.0
    for symbol, value in holding_values:
        ticker = symbol.upper()
        if ticker in TaxConstants.US_DOMICILED_ETFS and value > 0:
            symbols.append(ticker)
            exposure += value

    if not symbols:
        return None

    return EstateTaxExposure(
        symbols=sorted(set(symbols)),
        exposure=exposure,
        estimated_risk=exposure * TaxConstants.US_ESTATE_TAX_RATE,
        alternatives={
            symbol: TaxConstants.IRISH_ALTERNATIVES[symbol]
            for symbol in sorted(set(symbols))
            if symbol in TaxConstants.IRISH_ALTERNATIVES
        },
    )
