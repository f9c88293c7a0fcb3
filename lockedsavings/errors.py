"""
Engine Errors

Every expected failure of the savings engine has its own exception class.
Callers match on the class (or on its stable ``code``) instead of parsing
messages, which keeps form feedback in the presentation layer deterministic.

DESIGN DECISION: No error is ever raised after a mutation has been applied.
If one of these escapes an operation, nothing was changed.
"""

from decimal import Decimal
from typing import Optional


class SavingsError(Exception):
    """Base exception for all savings engine errors."""

    code = "savings_error"


class UnknownPlan(SavingsError):
    """The requested lock period is not offered by the catalog."""

    code = "unknown_plan"

    def __init__(self, lock_period: object):
        self.lock_period = lock_period
        super().__init__(f"No savings plan is offered for lock period: {lock_period!r}")


class InvalidPlan(SavingsError):
    """
    A plan (or its terms) is internally inconsistent.

    Indicates a catalog data bug. Should never occur in production.
    """

    code = "invalid_plan"


class InvalidAmount(SavingsError):
    """An amount is negative, zero, non-finite or too precise."""

    code = "invalid_amount"


class InvalidAccountName(SavingsError):
    """The account name is empty or too long."""

    code = "invalid_account_name"


class BelowMinimumDeposit(SavingsError):
    """The deposit is smaller than the plan's minimum."""

    code = "below_minimum_deposit"

    def __init__(self, amount: Decimal, minimum: Decimal):
        self.amount = amount
        self.minimum = minimum
        super().__init__(f"Deposit of {amount} is below the plan minimum of {minimum}")


class InvalidOwner(SavingsError):
    """The owner reference is missing or blank."""

    code = "invalid_owner"


class NotFound(SavingsError):
    """No such account (for this owner)."""

    code = "not_found"

    def __init__(self, account_id: object, message: Optional[str] = None):
        self.account_id = account_id
        super().__init__(message or f"Savings account not found: {account_id}")


class Forbidden(NotFound):
    """
    The account exists but belongs to another owner.

    Subclasses NotFound so that handlers written for NotFound cover it;
    the settlement service reports it as a plain NotFound.
    """

    code = "forbidden"


class AlreadyWithdrawn(SavingsError):
    """
    The account has already been withdrawn.

    Callers must treat this as an idempotency signal, not a retryable fault.
    """

    code = "already_withdrawn"

    def __init__(self, account_id: object):
        self.account_id = account_id
        super().__init__(f"Savings account already withdrawn: {account_id}")
