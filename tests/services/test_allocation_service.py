"""Tests for allocation gap analysis."""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from portfolio.services.allocation_service import (
    AllocationStatus,
    analyze,
    build_callout,
    classify,
    gap_priority,
    resolve_targets,
    suggest_rebalance,
)
from portfolio.services.intelligence_service import allocation_actions

pytestmark = pytest.mark.unit

DEFAULT_TARGETS = {"Core": 25.0, "Growth": 55.0, "Hedge": 10.0, "Liquidity": 10.0}


def by_category(reports):
    return {report.category: report for report in reports}


class TestClassify:
    @pytest.mark.parametrize(
        "completion,expected",
        [
            (0.0, AllocationStatus.UNDERWEIGHT),
            (94.99, AllocationStatus.UNDERWEIGHT),
            (95.0, AllocationStatus.PERFECT),
            (105.0, AllocationStatus.PERFECT),
            (105.01, AllocationStatus.EXCESS),
            (250.0, AllocationStatus.EXCESS),
        ],
    )
    def test_completion_bands(self, completion, expected):
        assert classify(completion) == expected


class TestAnalyze:
    def test_overweight_core(self):
        totals = {"Core": 30000, "Growth": 50000, "Hedge": 10000, "Liquidity": 10000}
        reports = by_category(analyze(totals, 100000, DEFAULT_TARGETS))

        core = reports["Core"]
        assert core.current_percent == pytest.approx(30.0)
        assert core.completion_percent == pytest.approx(120.0)
        assert core.status == AllocationStatus.EXCESS
        assert core.gap_percent == pytest.approx(5.0)
        assert core.gap_amount == pytest.approx(5000.0)

        growth = reports["Growth"]
        assert growth.status == AllocationStatus.UNDERWEIGHT
        assert growth.gap_amount == pytest.approx(-5000.0)

        assert reports["Hedge"].status == AllocationStatus.PERFECT
        assert reports["Liquidity"].callout == "Liquidity is on target"

    def test_small_portfolio_gap_amount(self):
        reports = by_category(analyze({"Core": 30}, 100, DEFAULT_TARGETS, 5))
        assert reports["Core"].completion_percent == pytest.approx(120.0)
        assert reports["Core"].status == AllocationStatus.EXCESS
        assert reports["Core"].gap_amount == pytest.approx(5.0)

    def test_reports_in_fixed_order(self):
        reports = analyze({}, 0, DEFAULT_TARGETS)
        assert [r.category for r in reports] == ["Core", "Growth", "Hedge", "Liquidity"]

    def test_zero_total(self):
        for report in analyze({"Core": 0}, 0, DEFAULT_TARGETS):
            assert report.current_percent == 0
            assert report.gap_amount == 0
            assert report.completion_percent == 0
            assert report.status == AllocationStatus.UNDERWEIGHT
            assert report.callout == f"{report.category} is below target"
            assert "add 0" not in report.callout

    def test_zero_target(self):
        targets = {**DEFAULT_TARGETS, "Hedge": 0.0, "Growth": 65.0}
        reports = by_category(analyze({"Hedge": 500, "Core": 500}, 1000, targets))
        assert reports["Hedge"].completion_percent == 0
        assert reports["Hedge"].gap_percent == pytest.approx(50.0)
        assert reports["Hedge"].needs_rebalance is True
        assert reports["Hedge"].status == AllocationStatus.EXCESS
        assert reports["Hedge"].callout == "Hedge has no target: trim 500 to rebalance"

    def test_zero_target_and_nothing_held(self):
        targets = {"Core": 30.0, "Growth": 70.0, "Hedge": 0.0, "Liquidity": 0.0}
        totals = {"Core": 30000, "Growth": 40000, "Hedge": 30000}
        reports = by_category(analyze(totals, 100000, targets, 5))

        assert reports["Hedge"].status == AllocationStatus.EXCESS
        assert reports["Hedge"].gap_amount == pytest.approx(30000.0)
        assert reports["Liquidity"].status == AllocationStatus.PERFECT
        assert reports["Liquidity"].callout == "Liquidity is on target"
        titles = [action.title for action in allocation_actions(list(reports.values()))]
        assert titles == ["Increase Growth allocation"]

    def test_missing_target_counts_as_zero(self):
        reports = by_category(analyze({"Core": 100}, 100, {"Core": 100.0}))
        assert reports["Growth"].target_percent == 0

    def test_threshold_drives_rebalance_flag(self):
        totals = {"Core": 31000, "Growth": 49000, "Hedge": 10000, "Liquidity": 10000}
        loose = by_category(analyze(totals, 100000, DEFAULT_TARGETS, rebalance_threshold=10))
        tight = by_category(analyze(totals, 100000, DEFAULT_TARGETS, rebalance_threshold=5))
        assert loose["Core"].needs_rebalance is False
        assert tight["Core"].needs_rebalance is True
        assert loose["Core"].status == tight["Core"].status == AllocationStatus.EXCESS


class TestCallouts:
    def test_underweight_bands(self):
        assert "well below" in build_callout("Growth", AllocationStatus.UNDERWEIGHT, 60, -20000)
        assert "consider adding 5,000" in build_callout(
            "Growth", AllocationStatus.UNDERWEIGHT, 90, -5000
        )
        assert "slightly below" in build_callout("Growth", AllocationStatus.UNDERWEIGHT, 96, -10)

    def test_excess_bands(self):
        assert "trim 12,000" in build_callout("Core", AllocationStatus.EXCESS, 150, 12000)
        assert "consider trimming" in build_callout("Core", AllocationStatus.EXCESS, 110, 2000)
        assert "slightly above" in build_callout("Core", AllocationStatus.EXCESS, 103, 50)

    def test_priority_by_gap(self):
        assert gap_priority(-7.5) == 10
        assert gap_priority(3) == 7
        assert gap_priority(2) == 3


class TestSuggestRebalance:
    def test_none_when_within_threshold(self):
        totals = {"Core": 25, "Growth": 55, "Hedge": 10, "Liquidity": 10}
        assert suggest_rebalance(analyze(totals, 100, DEFAULT_TARGETS)) is None

    def test_largest_gap_wins(self):
        totals = {"Core": 20000, "Growth": 40000, "Hedge": 10000, "Liquidity": 30000}
        suggestion = suggest_rebalance(analyze(totals, 100000, DEFAULT_TARGETS), "SGD")
        assert suggestion == "Reduce Liquidity by 20,000 SGD"

    def test_add_when_underweight(self):
        totals = {"Core": 40000, "Growth": 35000, "Hedge": 15000, "Liquidity": 10000}
        suggestion = suggest_rebalance(analyze(totals, 100000, DEFAULT_TARGETS))
        assert suggestion == "Add to Growth by 20,000"


class TestResolveTargets:
    def test_defaults(self):
        targets, threshold = resolve_targets()
        assert targets == DEFAULT_TARGETS
        assert threshold == 5.0

    def test_category_override(self):
        categories = [
            SimpleNamespace(
                name="Growth", effective_target=Decimal("50"), rebalance_threshold=Decimal("3")
            ),
            SimpleNamespace(
                name="Core", effective_target=Decimal("30"), rebalance_threshold=Decimal("3")
            ),
            SimpleNamespace(
                name="Crypto", effective_target=Decimal("5"), rebalance_threshold=Decimal("1")
            ),
        ]
        targets, threshold = resolve_targets(categories)
        assert targets["Growth"] == 50.0
        assert targets["Core"] == 30.0
        assert "Crypto" not in targets
        assert threshold == 3.0

    def test_active_target_wins(self):
        active = SimpleNamespace(
            as_targets=lambda: {"Core": 40.0, "Growth": 40.0, "Hedge": 10.0, "Liquidity": 10.0},
            rebalance_threshold=Decimal("7.5"),
        )
        categories = [
            SimpleNamespace(
                name="Core", effective_target=Decimal("30"), rebalance_threshold=Decimal("3")
            )
        ]
        targets, threshold = resolve_targets(categories, active)
        assert targets["Core"] == 40.0
        assert threshold == 7.5
