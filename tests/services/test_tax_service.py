"""Tests for the SRS tax estimate."""

from datetime import date

import pytest

from portfolio.models.user import EmploymentStatus
from portfolio.services.tax_service import (
    SINGAPORE_RESIDENT_BRACKETS,
    TaxBracketTable,
    UrgencyLevel,
    estimate,
    tax_actions,
    urgency_for,
    us_estate_tax_exposure,
)

pytestmark = pytest.mark.unit

TODAY = date(2026, 10, 17)


class TestBrackets:
    @pytest.mark.parametrize(
        "income,rate",
        [
            (0, 0.0),
            (20000, 0.0),
            (20001, 2.0),
            (80000, 7.0),
            (120000, 11.5),
            (120001, 15.0),
            (320000, 20.0),
            (320001, 22.0),
            (2000000, 22.0),
        ],
    )
    def test_resident_marginal_rate(self, income, rate):
        assert SINGAPORE_RESIDENT_BRACKETS.rate_for(income) == rate

    def test_custom_table_without_open_top(self):
        table = TaxBracketTable(brackets=((1000, 1.0), (2000, 5.0)))
        assert table.rate_for(5000) == 5.0


class TestEstimate:
    def test_employment_pass_at_120k(self):
        report = estimate(120000, 0, EmploymentStatus.EMPLOYMENT_PASS, today=TODAY)

        assert report.tax_bracket == 11.5
        assert report.max_contribution == 35700
        assert report.remaining_room == 35700
        assert report.tax_savings == pytest.approx(4105.5)
        assert report.net_cost == pytest.approx(35700 - 4105.5)
        assert report.deadline == date(2026, 12, 31)
        assert report.days_to_deadline == 75
        assert report.monthly_target == pytest.approx(11900.0)
        assert report.urgency == UrgencyLevel.HIGH
        assert report.employment_pass_advantage == pytest.approx(2380.5)

    def test_citizen_cap(self):
        report = estimate(50000, 5000, "Citizen", today=TODAY)

        assert report.employment_status == EmploymentStatus.CITIZEN
        assert report.max_contribution == 15000
        assert report.remaining_room == 10000
        assert report.tax_savings == pytest.approx(700.0)
        assert report.progress_percent == pytest.approx(100 / 3)
        assert report.employment_pass_advantage == 0

    def test_over_contribution_clamps_room(self):
        report = estimate(120000, 40000, "EmploymentPass", today=TODAY)

        assert report.remaining_room == 0
        assert report.tax_savings == 0
        assert report.progress_percent == 100
        assert report.urgency == UrgencyLevel.LOW

    def test_deadline_day(self):
        report = estimate(120000, 0, "PR", today=date(2026, 12, 31))
        assert report.days_to_deadline == 0
        assert report.monthly_target == 15000
        assert report.urgency == UrgencyLevel.CRITICAL

    def test_explicit_tax_year(self):
        report = estimate(120000, 0, "PR", today=TODAY, tax_year=2027)
        assert report.deadline == date(2027, 12, 31)
        assert report.urgency == UrgencyLevel.LOW

    def test_rejects_unknown_status(self):
        with pytest.raises(ValueError):
            estimate(120000, 0, "Tourist", today=TODAY)

    def test_same_inputs_same_report(self):
        first = estimate(95000, 1000, "EmploymentPass", today=TODAY)
        second = estimate(95000, 1000, "EmploymentPass", today=TODAY)
        assert first == second


class TestUrgency:
    @pytest.mark.parametrize(
        "days,expected",
        [
            (0, UrgencyLevel.CRITICAL),
            (59, UrgencyLevel.CRITICAL),
            (60, UrgencyLevel.HIGH),
            (119, UrgencyLevel.HIGH),
            (120, UrgencyLevel.MEDIUM),
            (239, UrgencyLevel.MEDIUM),
            (240, UrgencyLevel.LOW),
        ],
    )
    def test_tiers(self, days, expected):
        assert urgency_for(days, remaining_room=1000) == expected

    def test_no_room_is_always_low(self):
        assert urgency_for(5, remaining_room=0) == UrgencyLevel.LOW


class TestTaxActions:
    def test_srs_and_employment_pass_actions(self):
        actions = tax_actions(estimate(120000, 0, "EmploymentPass", today=TODAY))

        assert [a.kind for a in actions] == ["srs_contribution", "employment_pass_advantage"]
        assert actions[0].priority == 8
        assert actions[0].impact == pytest.approx(4105.5)

    def test_critical_srs_action_has_top_priority(self):
        actions = tax_actions(estimate(120000, 0, "Citizen", today=date(2026, 12, 1)))
        assert len(actions) == 1
        assert actions[0].priority == 10

    def test_no_actions_when_nothing_to_gain(self):
        assert tax_actions(estimate(15000, 15000, "Citizen", today=TODAY)) == []


class TestEstateTax:
    def test_us_domiciled_exposure(self):
        exposure = us_estate_tax_exposure(
            [("VOO", 10000.0), ("VWRA", 5000.0), ("voo", 2000.0), ("QQQ", 0.0)]
        )

        assert exposure is not None
        assert exposure.symbols == ["VOO"]
        assert exposure.exposure == 12000.0
        assert exposure.estimated_risk == pytest.approx(4800.0)
        assert exposure.alternatives == {"VOO": "VUAA.L"}

    def test_no_exposure(self):
        assert us_estate_tax_exposure([("VWRA", 5000.0), ("ES3", 1000.0)]) is None
