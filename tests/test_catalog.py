"""Tests for the lock period catalog."""

import pytest
from decimal import Decimal

from lockedsavings.catalog import DEFAULT_PLANS, LockPeriodCatalog
from lockedsavings.errors import UnknownPlan
from lockedsavings.models.savings import LockPeriod, SavingsPlan


class TestDefaultCatalog:
    """Tests for the published plans."""

    def test_all_periods_offered(self):
        """Test that every lock period has a plan."""
        catalog = LockPeriodCatalog()
        assert len(catalog) == len(LockPeriod)
        assert {plan.lock_period for plan in catalog} == set(LockPeriod)

    def test_plans_ordered_by_duration(self):
        """Test plans come shortest first."""
        durations = [plan.duration_days for plan in LockPeriodCatalog().plans()]
        assert durations == sorted(durations)

    def test_longer_locks_never_pay_less(self):
        """Test that rates are non-decreasing in lock duration."""
        rates = [plan.annual_interest_rate_percent for plan in LockPeriodCatalog().plans()]
        assert all(a <= b for a, b in zip(rates, rates[1:]))

    def test_published_terms(self):
        """Test a few published rates and minimums."""
        catalog = LockPeriodCatalog()
        one_month = catalog.plan_for(LockPeriod.ONE_MONTH)
        assert one_month.annual_interest_rate_percent == Decimal("2.5")
        assert one_month.minimum_deposit == Decimal("50.00")

        one_year = catalog.plan_for(LockPeriod.ONE_YEAR)
        assert one_year.annual_interest_rate_percent == Decimal("9.0")
        assert one_year.minimum_deposit == Decimal("500.00")

        five_years = catalog.plan_for(LockPeriod.FIVE_YEARS)
        assert five_years.annual_interest_rate_percent == Decimal("15.0")

    def test_plans_carry_marketing_copy(self):
        """Test that every plan has a description and features."""
        for plan in DEFAULT_PLANS:
            assert plan.description
            assert len(plan.features) == 3


class TestPlanLookup:
    """Tests for plan_for()."""

    def test_lookup_by_identifier(self):
        """Test lookup by identifier string, case and whitespace insensitive."""
        catalog = LockPeriodCatalog()
        assert catalog.plan_for("six_months").lock_period == LockPeriod.SIX_MONTHS
        assert catalog.plan_for("  ONE_YEAR ").lock_period == LockPeriod.ONE_YEAR

    def test_unknown_identifier(self):
        """Test that an unknown identifier raises UnknownPlan."""
        with pytest.raises(UnknownPlan) as exc_info:
            LockPeriodCatalog().plan_for("ten_years")
        assert exc_info.value.code == "unknown_plan"
        assert exc_info.value.lock_period == "ten_years"

    def test_period_missing_from_custom_catalog(self):
        """Test that a valid period not offered by this catalog is unknown."""
        catalog = LockPeriodCatalog([
            SavingsPlan(
                lock_period=LockPeriod.ONE_YEAR,
                annual_interest_rate_percent=Decimal("5"),
                minimum_deposit=Decimal("10"),
            ),
        ])
        assert len(catalog) == 1
        with pytest.raises(UnknownPlan):
            catalog.plan_for(LockPeriod.ONE_MONTH)

    def test_duplicate_periods_rejected(self):
        """Test that a catalog cannot offer one period twice."""
        plan = DEFAULT_PLANS[0]
        with pytest.raises(ValueError, match="Duplicate plan"):
            LockPeriodCatalog([plan, plan])

    def test_custom_plans_sorted(self):
        """Test custom plans are sorted by duration."""
        catalog = LockPeriodCatalog(reversed(DEFAULT_PLANS))
        assert catalog.plans() == DEFAULT_PLANS


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
