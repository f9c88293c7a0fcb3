"""
Core Data Models for Locked Savings

These models define the strict schemas for all data flowing through the engine.
They are designed to:
1. Enforce the account invariants at construction time
2. Be immutable, so a record is replaced as a whole and never torn
3. Be serializable for storage and logging

DESIGN DECISION: Every model is a frozen Pydantic v2 model.
A status change builds a new SavingsAccount and swaps it into storage;
nothing is ever assigned field-by-field.

All money is Decimal. Floats never touch currency values.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


def ensure_utc(value: datetime) -> datetime:
    """Normalise an instant to timezone-aware UTC. Naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    """Default clock."""
    return datetime.now(timezone.utc)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class LockPeriod(str, Enum):
    """
    Lock durations offered for locked savings.

    DESIGN DECISION: A closed enumeration, not an open duration type.
    The duration and label of each member are fixed at import time.
    """
    ONE_MONTH = "one_month"
    THREE_MONTHS = "three_months"
    SIX_MONTHS = "six_months"
    ONE_YEAR = "one_year"
    TWO_YEARS = "two_years"
    FIVE_YEARS = "five_years"

    @property
    def identifier(self) -> str:
        return self.value

    @property
    def duration_days(self) -> int:
        return _LOCK_PERIOD_TERMS[self][0]

    @property
    def display_label(self) -> str:
        return _LOCK_PERIOD_TERMS[self][1]


_LOCK_PERIOD_TERMS: dict[LockPeriod, tuple[int, str]] = {
    LockPeriod.ONE_MONTH: (30, "1 Month"),
    LockPeriod.THREE_MONTHS: (90, "3 Months"),
    LockPeriod.SIX_MONTHS: (180, "6 Months"),
    LockPeriod.ONE_YEAR: (365, "1 Year"),
    LockPeriod.TWO_YEARS: (730, "2 Years"),
    LockPeriod.FIVE_YEARS: (1825, "5 Years"),
}


class SavingsStatus(str, Enum):
    """
    Account lifecycle status.

    Allowed transitions:
        ACTIVE  -> MATURED    (lazily, when read at or after maturity)
        ACTIVE  -> WITHDRAWN  (early exit)
        MATURED -> WITHDRAWN
    WITHDRAWN is terminal.
    """
    ACTIVE = "active"
    MATURED = "matured"
    WITHDRAWN = "withdrawn"


ALLOWED_TRANSITIONS: dict[SavingsStatus, frozenset[SavingsStatus]] = {
    SavingsStatus.ACTIVE: frozenset({SavingsStatus.MATURED, SavingsStatus.WITHDRAWN}),
    SavingsStatus.MATURED: frozenset({SavingsStatus.WITHDRAWN}),
    SavingsStatus.WITHDRAWN: frozenset(),
}


class PenaltyPolicy(str, Enum):
    """How an early-withdrawal penalty is derived."""
    FORFEIT_INTEREST = "forfeit_interest"  # penalty == accrued interest
    PERCENT_OF_PRINCIPAL = "percent_of_principal"  # flat fee, capped at accrued interest


# =============================================================================
# CATALOG MODEL
# =============================================================================

class SavingsPlan(BaseModel):
    """
    A savings product: one lock period with its rate and minimum deposit.

    Plans are shared, read-only catalog entries referenced by many accounts.
    """
    model_config = ConfigDict(frozen=True)

    lock_period: LockPeriod
    annual_interest_rate_percent: Decimal = Field(
        ...,
        ge=0,
        description="Advertised annual rate, e.g. 9.0 means 9%/year"
    )
    minimum_deposit: Decimal = Field(
        ...,
        gt=0,
        description="Smallest principal accepted for this plan"
    )
    description: str = ""
    features: tuple[str, ...] = ()

    @property
    def duration_days(self) -> int:
        return self.lock_period.duration_days


# =============================================================================
# ACCOUNT MODEL
# =============================================================================

class SavingsAccount(BaseModel):
    """
    A single locked savings account.

    CRITICAL: principal, plan, start_timestamp and maturity_timestamp are
    written once at creation. Withdrawal ends the account; it never reduces
    the principal. Withdrawn accounts are kept as audit records.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique account ID, never reused"
    )
    owner_id: str = Field(
        ...,
        min_length=1,
        description="Customer reference; identity is owned elsewhere"
    )
    account_name: str = Field(
        ...,
        min_length=1,
        max_length=100,
    )
    principal: Decimal = Field(..., gt=0)
    plan: SavingsPlan

    start_timestamp: datetime
    maturity_timestamp: datetime = Field(
        ...,
        description="Frozen at creation; never recomputed"
    )
    status: SavingsStatus = SavingsStatus.ACTIVE
    withdrawn_timestamp: Optional[datetime] = None

    @field_validator('start_timestamp', 'maturity_timestamp', 'withdrawn_timestamp')
    @classmethod
    def normalise_timestamps(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v) if v is not None else None

    @model_validator(mode='after')
    def validate_lifecycle(self) -> 'SavingsAccount':
        """Validate timestamp relationships and the withdrawn invariant."""
        if self.maturity_timestamp <= self.start_timestamp:
            raise ValueError("Maturity must be after start")

        is_withdrawn = self.status == SavingsStatus.WITHDRAWN
        if is_withdrawn and self.withdrawn_timestamp is None:
            raise ValueError("Withdrawn account must record when it was withdrawn")
        if not is_withdrawn and self.withdrawn_timestamp is not None:
            raise ValueError("Only a withdrawn account can have a withdrawn timestamp")

        return self

    @property
    def lock_period(self) -> LockPeriod:
        return self.plan.lock_period

    @property
    def annual_interest_rate_percent(self) -> Decimal:
        return self.plan.annual_interest_rate_percent

    @property
    def is_withdrawn(self) -> bool:
        return self.status == SavingsStatus.WITHDRAWN


# =============================================================================
# READ MODELS
# =============================================================================

class SavingsSnapshot(BaseModel):
    """
    Read-only view of an account at one instant.

    This is the single source of truth the presentation layer renders.
    Amounts are already rounded to the currency's minor unit.
    """
    model_config = ConfigDict(frozen=True)

    account: SavingsAccount
    as_of: datetime
    accrued_interest: Decimal = Field(..., ge=0)
    projected_interest_at_maturity: Decimal = Field(..., ge=0)
    progress_fraction: Decimal = Field(..., ge=0, le=1)
    is_matured: bool
    early_withdrawal_penalty_if_withdrawn_now: Decimal = Field(..., ge=0)
    days_remaining: int = Field(..., ge=0)

    @property
    def current_value(self) -> Decimal:
        """Principal plus interest earned so far."""
        return self.account.principal + self.accrued_interest

    @property
    def payout_if_withdrawn_now(self) -> Decimal:
        return self.current_value - self.early_withdrawal_penalty_if_withdrawn_now


class WithdrawalReceipt(BaseModel):
    """
    Immutable record of a completed withdrawal.

    Only ever issued after the WITHDRAWN status has been committed.
    The wallet-crediting collaborator moves ``payout``.
    """
    model_config = ConfigDict(frozen=True)

    receipt_id: UUID = Field(default_factory=uuid4)
    account_id: UUID
    owner_id: str
    principal: Decimal = Field(..., gt=0)
    interest_portion: Decimal = Field(..., ge=0)
    penalty: Decimal = Field(..., ge=0)
    payout: Decimal
    was_early: bool
    withdrawn_at: datetime

    @model_validator(mode='after')
    def validate_composition(self) -> 'WithdrawalReceipt':
        """Payout must reconcile against its parts and never dip below principal."""
        if self.payout != self.principal + self.interest_portion - self.penalty:
            raise ValueError("Payout does not reconcile with principal, interest and penalty")
        if self.payout < self.principal:
            raise ValueError("Payout cannot be less than principal")
        return self


class PlanQuote(BaseModel):
    """Preview of what a deposit would earn if held to maturity."""
    model_config = ConfigDict(frozen=True)

    plan: SavingsPlan
    principal: Decimal = Field(..., gt=0)
    projected_interest: Decimal = Field(..., ge=0)
    total_at_maturity: Decimal


class PortfolioSummary(BaseModel):
    """
    Totals across an owner's open (ACTIVE or MATURED) accounts.

    Withdrawn accounts are history and are excluded.
    """
    model_config = ConfigDict(frozen=True)

    owner_id: str
    as_of: datetime
    open_count: int = Field(..., ge=0)
    total_locked: Decimal = Field(..., ge=0)
    total_accrued_interest: Decimal = Field(..., ge=0)
    total_projected_interest: Decimal = Field(..., ge=0)
    average_interest_rate_percent: Decimal = Field(..., ge=0)
