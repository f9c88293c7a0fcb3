"""
Lock Period Catalog

The static table of savings plans on offer. Pure and side-effect free.

The default catalog reproduces the product's published plans. Longer lock
periods never pay a lower rate; that property is checked by the test suite,
not enforced here.
"""

from decimal import Decimal
from typing import Iterable, Optional, Union

from lockedsavings.errors import UnknownPlan
from lockedsavings.models.savings import LockPeriod, SavingsPlan


DEFAULT_PLANS: tuple[SavingsPlan, ...] = (
    SavingsPlan(
        lock_period=LockPeriod.ONE_MONTH,
        annual_interest_rate_percent=Decimal("2.5"),
        minimum_deposit=Decimal("50.00"),
        description="Short-term savings with quick access",
        features=("Low minimum deposit", "Monthly returns", "Flexible terms"),
    ),
    SavingsPlan(
        lock_period=LockPeriod.THREE_MONTHS,
        annual_interest_rate_percent=Decimal("4.0"),
        minimum_deposit=Decimal("100.00"),
        description="Build your savings with better rates",
        features=("Better interest rate", "Quarterly returns", "Good liquidity"),
    ),
    SavingsPlan(
        lock_period=LockPeriod.SIX_MONTHS,
        annual_interest_rate_percent=Decimal("6.5"),
        minimum_deposit=Decimal("200.00"),
        description="Mid-term savings for your goals",
        features=("Competitive rates", "Bi-annual returns", "Goal-oriented"),
    ),
    SavingsPlan(
        lock_period=LockPeriod.ONE_YEAR,
        annual_interest_rate_percent=Decimal("9.0"),
        minimum_deposit=Decimal("500.00"),
        description="One year to grow your money",
        features=("High interest rate", "Annual maturity", "Guaranteed returns"),
    ),
    SavingsPlan(
        lock_period=LockPeriod.TWO_YEARS,
        annual_interest_rate_percent=Decimal("11.5"),
        minimum_deposit=Decimal("1000.00"),
        description="Long-term savings with excellent returns",
        features=("Premium rates", "Long-term growth", "Wealth building"),
    ),
    SavingsPlan(
        lock_period=LockPeriod.FIVE_YEARS,
        annual_interest_rate_percent=Decimal("15.0"),
        minimum_deposit=Decimal("2000.00"),
        description="Maximum returns for patient savers",
        features=("Highest rates", "Maximum returns", "Future security"),
    ),
)


class LockPeriodCatalog:
    """
    Ordered, read-only collection of offered plans.

    Plans are kept shortest lock period first regardless of the order they
    were supplied in.
    """

    def __init__(self, plans: Optional[Iterable[SavingsPlan]] = None):
        ordered = sorted(
            DEFAULT_PLANS if plans is None else plans,
            key=lambda plan: plan.duration_days,
        )
        by_period: dict[LockPeriod, SavingsPlan] = {}
        for plan in ordered:
            if plan.lock_period in by_period:
                raise ValueError(f"Duplicate plan for lock period {plan.lock_period.value}")
            by_period[plan.lock_period] = plan

        self._plans = tuple(ordered)
        self._by_period = by_period

    def plans(self) -> tuple[SavingsPlan, ...]:
        """All offered plans, shortest lock period first."""
        return self._plans

    def plan_for(self, lock_period: Union[LockPeriod, str]) -> SavingsPlan:
        """
        Look up the plan for a lock period (enum member or identifier string).

        Raises:
            UnknownPlan: If the lock period is not offered
        """
        if not isinstance(lock_period, LockPeriod):
            try:
                lock_period = LockPeriod(str(lock_period).strip().lower())
            except ValueError:
                raise UnknownPlan(lock_period) from None

        plan = self._by_period.get(lock_period)
        if plan is None:
            raise UnknownPlan(lock_period)
        return plan

    def __iter__(self):
        return iter(self._plans)

    def __len__(self) -> int:
        return len(self._plans)
