"""
Property-Based Tests for Accrual and Settlement

INVARIANTS checked for arbitrary principals, plans and instants:
    0 <= accrued(t) <= projected
    accrued is non-decreasing in t
    0 <= penalty(t) <= accrued(t)
    payout >= principal, with payout == principal for an early forfeit
    a withdrawn account's accrued interest never changes again
    a deposit below the plan minimum never creates an account
"""

import asyncio
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from datetime import timedelta
from decimal import Decimal

from conftest import START, FixedClock
from lockedsavings.accrual import (
    accrued_interest,
    early_withdrawal_penalty,
    progress_fraction,
    projected_interest,
)
from lockedsavings.catalog import DEFAULT_PLANS
from lockedsavings.config import SavingsSettings
from lockedsavings.errors import BelowMinimumDeposit, InvalidAmount
from lockedsavings.models.savings import PenaltyPolicy
from lockedsavings.settlement import create_settlement_service


# =============================================================================
# STRATEGIES FOR PROPERTY-BASED TESTING
# =============================================================================

principals = st.decimals(
    min_value=Decimal("0.01"),
    max_value=Decimal("10000000"),
    places=2,
    allow_nan=False,
    allow_infinity=False,
)

rates = st.decimals(
    min_value=Decimal("0"),
    max_value=Decimal("25"),
    places=2,
    allow_nan=False,
    allow_infinity=False,
)

plans = st.sampled_from(DEFAULT_PLANS)

# Anything from a week before opening to well past the longest maturity
offsets = st.integers(min_value=-7 * 86400, max_value=2000 * 86400).map(
    lambda seconds: timedelta(seconds=seconds)
)

policies = st.sampled_from(list(PenaltyPolicy))


# =============================================================================
# CALCULATOR PROPERTIES
# =============================================================================

class TestAccrualProperties:
    """Properties of the pure calculator."""

    @given(principal=principals, rate=rates, plan=plans, offset=offsets)
    def test_accrued_bounded_by_projected(self, principal, rate, plan, offset):
        accrued = accrued_interest(principal, rate, START, START + offset, plan.duration_days)
        projected = projected_interest(principal, rate, plan.duration_days)
        assert 0 <= accrued <= projected

    @given(principal=principals, rate=rates, plan=plans, a=offsets, b=offsets)
    def test_accrued_monotonic(self, principal, rate, plan, a, b):
        early, late = sorted([a, b])
        assert (
            accrued_interest(principal, rate, START, START + early, plan.duration_days)
            <= accrued_interest(principal, rate, START, START + late, plan.duration_days)
        )

    @given(
        principal=principals,
        rate=rates,
        plan=plans,
        offset=offsets,
        policy=policies,
        percent=st.decimals(min_value=Decimal("0"), max_value=Decimal("100"), places=2),
    )
    def test_penalty_never_exceeds_accrued(self, principal, rate, plan, offset, policy, percent):
        at = START + offset
        penalty = early_withdrawal_penalty(
            principal, rate, START, at, plan.duration_days,
            policy=policy,
            penalty_percent_of_principal=percent,
        )
        accrued = accrued_interest(principal, rate, START, at, plan.duration_days)
        assert 0 <= penalty <= accrued
        if offset >= timedelta(days=plan.duration_days):
            assert penalty == 0

    @given(plan=plans, offset=offsets)
    def test_progress_bounded(self, plan, offset):
        maturity = START + timedelta(days=plan.duration_days)
        assert 0 <= progress_fraction(START, maturity, START + offset) <= 1


# =============================================================================
# SETTLEMENT PROPERTIES
# =============================================================================

class TestSettlementProperties:
    """Properties of end-to-end withdrawals."""

    @settings(max_examples=50, deadline=None)
    @given(plan=plans, extra=principals, offset=offsets.filter(lambda o: o >= timedelta(0)))
    def test_payout_never_below_principal(self, plan, extra, offset):
        clock = FixedClock()
        service = create_settlement_service(settings=SavingsSettings(_env_file=None), clock=clock)
        amount = min(plan.minimum_deposit + extra, Decimal("10000000"))

        async def scenario():
            account = await service.create_account("cust-1", "Property", amount, plan.lock_period)
            clock.advance(seconds=offset.total_seconds())
            return await service.withdraw("cust-1", account.id)

        receipt = asyncio.run(scenario())
        assert receipt.payout >= receipt.principal
        if receipt.was_early:
            assert receipt.payout == receipt.principal
        else:
            assert receipt.penalty == 0

    @settings(max_examples=50, deadline=None)
    @given(plan=plans, offset=offsets.filter(lambda o: o >= timedelta(0)), later=offsets)
    def test_accrual_frozen_after_withdrawal(self, plan, offset, later):
        clock = FixedClock()
        service = create_settlement_service(settings=SavingsSettings(_env_file=None), clock=clock)

        async def scenario():
            account = await service.create_account(
                "cust-1", "Property", plan.minimum_deposit, plan.lock_period
            )
            clock.advance(seconds=offset.total_seconds())
            receipt = await service.withdraw("cust-1", account.id)
            clock.advance(seconds=abs(later.total_seconds()))
            return receipt, await service.view_account("cust-1", account.id)

        receipt, snapshot = asyncio.run(scenario())
        assert snapshot.accrued_interest == receipt.interest_portion
        assert snapshot.account.withdrawn_timestamp == receipt.withdrawn_at

    @settings(max_examples=50, deadline=None)
    @given(plan=plans, shortfall=principals)
    def test_minimum_deposit_enforced(self, plan, shortfall):
        service = create_settlement_service(settings=SavingsSettings(_env_file=None), clock=FixedClock())
        amount = plan.minimum_deposit - shortfall

        async def scenario():
            with pytest.raises((BelowMinimumDeposit, InvalidAmount)):
                await service.create_account("cust-1", "Property", amount, plan.lock_period)
            return await service.list_accounts("cust-1")

        assert asyncio.run(scenario()) == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
