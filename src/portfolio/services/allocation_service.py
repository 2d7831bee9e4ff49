"""Allocation gap analysis against category targets.

Status is decided by completion (current / target): within 95-105% of the
target a category is on target, below it is underweight, above it is in
excess. The rebalance threshold is applied separately to the gap in
percentage points and decides whether a category needs rebalancing.
"""

import enum
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from portfolio.core.constants import AllocationConstants
from portfolio.models.category import CATEGORY_NAMES

logger = logging.getLogger(__name__)


class AllocationStatus(str, enum.Enum):
    PERFECT = "perfect"
    UNDERWEIGHT = "underweight"
    EXCESS = "excess"


@dataclass(frozen=True)
class CategoryReport:
    """Where one category stands against its target."""

    category: str
    current_value: float
    current_percent: float
    target_percent: float
    gap_percent: float
    gap_amount: float
    completion_percent: float
    status: AllocationStatus
    callout: str
    needs_rebalance: bool
    priority: int


def classify(completion_percent: float) -> AllocationStatus:
    """Status of a category with a positive target, from its completion."""
    if completion_percent < AllocationConstants.PERFECT_COMPLETION_MIN:
        return AllocationStatus.UNDERWEIGHT
    if completion_percent > AllocationConstants.PERFECT_COMPLETION_MAX:
        return AllocationStatus.EXCESS
    return AllocationStatus.PERFECT


def classify_untargeted(gap_percent: float) -> AllocationStatus:
    """Status of a category with a 0% target: any holding in it is excess."""
    return AllocationStatus.EXCESS if gap_percent > 0 else AllocationStatus.PERFECT


def build_callout(
    category: str,
    status: AllocationStatus,
    completion_percent: float,
    gap_amount: float,
) -> str:
    """Short advice text, banded by how far completion is from 100%."""
    amount = f"{abs(gap_amount):,.0f}"
    if status == AllocationStatus.PERFECT:
        return f"{category} is on target"
    if amount == "0":
        # Nothing to move yet, e.g. an empty portfolio
        direction = "below" if status == AllocationStatus.UNDERWEIGHT else "above"
        return f"{category} is {direction} target"

    if status == AllocationStatus.EXCESS and completion_percent <= 0:
        return f"{category} has no target: trim {amount} to rebalance"

    if status == AllocationStatus.UNDERWEIGHT:
        shortfall = 100.0 - completion_percent
        if shortfall > AllocationConstants.CALLOUT_SEVERE:
            return f"{category} is well below target: add {amount} to catch up"
        if shortfall >= AllocationConstants.CALLOUT_MODERATE:
            return f"{category} is below target: consider adding {amount}"
        return f"{category} is slightly below target ({amount} short)"

    overage = completion_percent - 100.0
    if overage > AllocationConstants.CALLOUT_SEVERE:
        return f"{category} is well above target: trim {amount} to rebalance"
    if overage >= AllocationConstants.CALLOUT_MODERATE:
        return f"{category} is above target: consider trimming {amount}"
    return f"{category} is slightly above target ({amount} over)"


def gap_priority(gap_percent: float) -> int:
    gap = abs(gap_percent)
    if gap > AllocationConstants.PRIORITY_HIGH_GAP:
        return 10
    if gap > AllocationConstants.PRIORITY_MEDIUM_GAP:
        return 7
    return 3


def analyze(
    category_totals: Mapping[str, float],
    total_value: float,
    targets: Mapping[str, float],
    rebalance_threshold: float = AllocationConstants.DEFAULT_REBALANCE_THRESHOLD,
) -> list[CategoryReport]:
    """
    Compare each fixed category's share of ``total_value`` with its target.

    Categories missing from ``category_totals`` count as 0 and missing targets
    as 0%. A zero total gives 0% everywhere; a zero target gives 0% completion
    and is classified by the sign of the gap instead.

    Returns:
        One report per category, in Core, Growth, Hedge, Liquidity order
    """
    reports: list[CategoryReport] = []
    for category in CATEGORY_NAMES:
        category_total = float(category_totals.get(category, 0.0))
        target_percent = float(targets.get(category, 0.0))

        current_percent = (category_total / total_value) * 100 if total_value > 0 else 0.0
        gap_percent = current_percent - target_percent
        gap_amount = (gap_percent / 100) * total_value
        completion_percent = (
            (current_percent / target_percent) * 100 if target_percent > 0 else 0.0
        )
        status = (
            classify(completion_percent)
            if target_percent > 0
            else classify_untargeted(gap_percent)
        )

        reports.append(
            CategoryReport(
                category=category,
                current_value=category_total,
                current_percent=current_percent,
                target_percent=target_percent,
                gap_percent=gap_percent,
                gap_amount=gap_amount,
                completion_percent=completion_percent,
                status=status,
                callout=build_callout(category, status, completion_percent, gap_amount),
                needs_rebalance=abs(gap_percent) > rebalance_threshold,
                priority=gap_priority(gap_percent),
            )
        )
    return reports


def suggest_rebalance(reports: Iterable[CategoryReport], currency: str = "") -> str | None:
    """
    Next rebalancing move: the category with the largest gap beyond threshold.

    Returns e.g. "Reduce Growth by 12,000 SGD", or None when every category is
    within the threshold.
    """
    candidates = [report for report in reports if report.needs_rebalance]
    if not candidates:
        return None

    biggest = max(candidates, key=lambda report: abs(report.gap_percent))
    amount = f"{abs(biggest.gap_amount):,.0f}"
    suffix = f" {currency}" if currency else ""
    if biggest.gap_percent > 0:
        return f"Reduce {biggest.category} by {amount}{suffix}"
    return f"Add to {biggest.category} by {amount}{suffix}"


def resolve_targets(
    categories: Iterable[object] = (),
    active_target: object | None = None,
) -> tuple[dict[str, float], float]:
    """
    Target percentages and rebalance threshold for a user.

    Defaults are overridden by per-category settings (the user override wins
    over the category target), which are in turn overridden by the active
    allocation target when one exists.

    Returns:
        (targets by category name, rebalance threshold)
    """
    targets = dict(AllocationConstants.DEFAULT_TARGETS)
    threshold = AllocationConstants.DEFAULT_REBALANCE_THRESHOLD

    for category in categories:
        if category.name not in targets:
            logger.warning(f"Ignoring settings for unknown category {category.name!r}")
            continue
        targets[category.name] = float(category.effective_target)
        threshold = float(category.rebalance_threshold)

    if active_target is not None:
        targets.update(active_target.as_targets())
        threshold = float(active_target.rebalance_threshold)

    total = sum(targets.values())
    if abs(total - 100.0) > 0.01:
        logger.warning(f"Allocation targets sum to {total:.2f}%, not 100%")
    return targets, threshold
