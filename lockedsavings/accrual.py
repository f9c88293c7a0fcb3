"""
Accrual Calculator

All interest and penalty arithmetic for locked savings. Pure functions with
no hidden state; time is always an explicit argument.

Interest is simple (non-compounding):

    interest = principal * (rate / 100) * (days / days_per_year)

Elapsed time is counted in whole days and capped at the lock duration, so
interest stops at maturity no matter how late it is read.

IMPORTANT: Decimal arithmetic throughout. Nothing here rounds; rounding to
the currency's minor unit happens only where an amount leaves the engine
(snapshots, quotes, receipts) via round_currency().
"""

from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Union

from lockedsavings.errors import InvalidAmount, InvalidPlan
from lockedsavings.models.savings import PenaltyPolicy, ensure_utc


DEFAULT_DAYS_PER_YEAR = 365

# Working precision for intermediate results
_PRECISION = 34

_ONE_DAY = timedelta(days=1)
_ONE_MICROSECOND = timedelta(microseconds=1)

Number = Union[Decimal, int, str, float]


def to_decimal(value: Number) -> Decimal:
    """
    Coerce an amount to Decimal.

    Floats go through str() so that 0.1 becomes Decimal('0.1'), not its
    binary expansion.

    Raises:
        InvalidAmount: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise InvalidAmount(f"Not an amount: {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidAmount(f"Not an amount: {value!r}") from None
    if not amount.is_finite():
        raise InvalidAmount(f"Amount must be finite, got {amount}")
    return amount


def round_currency(amount: Decimal, places: int = 2) -> Decimal:
    """Round half-up to the currency's minor unit."""
    return amount.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def _check_terms(principal: Decimal, annual_rate_percent: Decimal, duration_days: int) -> None:
    if principal < 0:
        raise InvalidAmount(f"Principal cannot be negative, got {principal}")
    if annual_rate_percent < 0:
        raise InvalidPlan(f"Interest rate cannot be negative, got {annual_rate_percent}")
    if duration_days <= 0:
        raise InvalidPlan(f"Lock duration must be positive, got {duration_days} days")


def _simple_interest(
    principal: Decimal,
    annual_rate_percent: Decimal,
    days: int,
    days_per_year: int,
) -> Decimal:
    # One division only, so no intermediate value is truncated
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return (principal * annual_rate_percent * days) / (100 * days_per_year)


def maturity_for(start_timestamp: datetime, duration_days: int) -> datetime:
    """
    The maturity instant of a deposit started at start_timestamp.

    Computed in UTC so calendar and DST changes cannot move it.
    """
    if duration_days <= 0:
        raise InvalidPlan(f"Lock duration must be positive, got {duration_days} days")
    return ensure_utc(start_timestamp) + timedelta(days=duration_days)


def days_between(start: datetime, end: datetime) -> int:
    """Whole days elapsed from start to end (floor; negative if end precedes start)."""
    return (ensure_utc(end) - ensure_utc(start)) // _ONE_DAY


def days_remaining(as_of: datetime, maturity_timestamp: datetime) -> int:
    """Days left until maturity, rounded up; 0 once matured."""
    remaining = ensure_utc(maturity_timestamp) - ensure_utc(as_of)
    if remaining <= timedelta(0):
        return 0
    return -((-remaining) // _ONE_DAY)


def projected_interest(
    principal: Decimal,
    annual_rate_percent: Decimal,
    duration_days: int,
    days_per_year: int = DEFAULT_DAYS_PER_YEAR,
) -> Decimal:
    """Interest earned if the deposit is held for the full lock duration."""
    _check_terms(principal, annual_rate_percent, duration_days)
    return _simple_interest(principal, annual_rate_percent, duration_days, days_per_year)


def accrued_interest(
    principal: Decimal,
    annual_rate_percent: Decimal,
    start_timestamp: datetime,
    as_of_timestamp: datetime,
    duration_days: int,
    days_per_year: int = DEFAULT_DAYS_PER_YEAR,
) -> Decimal:
    """
    Interest earned between start and as_of.

    Elapsed days are clamped to [0, duration_days]: nothing accrues before
    the start, and nothing accrues after maturity.
    """
    _check_terms(principal, annual_rate_percent, duration_days)
    elapsed = days_between(start_timestamp, as_of_timestamp)
    elapsed = min(max(0, elapsed), duration_days)
    return _simple_interest(principal, annual_rate_percent, elapsed, days_per_year)


def early_withdrawal_penalty(
    principal: Decimal,
    annual_rate_percent: Decimal,
    start_timestamp: datetime,
    withdraw_timestamp: datetime,
    duration_days: int,
    policy: PenaltyPolicy = PenaltyPolicy.FORFEIT_INTEREST,
    penalty_percent_of_principal: Decimal = Decimal("1.0"),
    days_per_year: int = DEFAULT_DAYS_PER_YEAR,
) -> Decimal:
    """
    Penalty charged for withdrawing at withdraw_timestamp.

    Zero at or after maturity. Before maturity:
    - FORFEIT_INTEREST: all accrued interest, so the payout is exactly principal.
    - PERCENT_OF_PRINCIPAL: a flat fee on principal, capped at accrued interest.

    Either way the penalty never exceeds accrued interest, so a depositor
    always gets at least the principal back.
    """
    _check_terms(principal, annual_rate_percent, duration_days)
    if ensure_utc(withdraw_timestamp) >= maturity_for(start_timestamp, duration_days):
        return Decimal(0)

    earned = accrued_interest(
        principal,
        annual_rate_percent,
        start_timestamp,
        withdraw_timestamp,
        duration_days,
        days_per_year,
    )
    if policy == PenaltyPolicy.FORFEIT_INTEREST:
        return earned

    if penalty_percent_of_principal < 0:
        raise InvalidPlan(f"Penalty percent cannot be negative, got {penalty_percent_of_principal}")
    fee = principal * penalty_percent_of_principal / 100
    return min(fee, earned)


def progress_fraction(
    start_timestamp: datetime,
    maturity_timestamp: datetime,
    as_of_timestamp: datetime,
) -> Decimal:
    """Share of the lock period elapsed at as_of, clamped to [0, 1]."""
    start = ensure_utc(start_timestamp)
    span = ensure_utc(maturity_timestamp) - start
    if span <= timedelta(0):
        raise InvalidPlan("Maturity must be after start")

    elapsed = ensure_utc(as_of_timestamp) - start
    if elapsed <= timedelta(0):
        return Decimal(0)
    if elapsed >= span:
        return Decimal(1)

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return Decimal(elapsed // _ONE_MICROSECOND) / Decimal(span // _ONE_MICROSECOND)
