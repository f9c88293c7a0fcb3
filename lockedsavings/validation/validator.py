"""
Deposit Validation

Input checks for opening a locked savings account:
- Account name must be present and reasonably short
- Amount must be a finite, positive number in whole minor units
- Amount must not exceed the configured sanity ceiling
- Amount must meet the chosen plan's minimum deposit

IMPORTANT: Validation NEVER silently fixes issues.
An amount like 100.005 is rejected, not rounded, and the error goes back
to the presentation layer verbatim for form feedback.
"""

from decimal import Decimal
from typing import Optional

from lockedsavings.accrual import Number, to_decimal
from lockedsavings.config import SavingsSettings, get_settings
from lockedsavings.errors import BelowMinimumDeposit, InvalidAccountName, InvalidAmount
from lockedsavings.models.savings import SavingsPlan


MAX_ACCOUNT_NAME_LENGTH = 100


class DepositValidator:
    """Validates deposit requests before anything is stored."""

    def __init__(self, settings: Optional[SavingsSettings] = None):
        self._settings = settings or get_settings()

    def validate_account_name(self, account_name: Optional[str]) -> str:
        """
        Returns the name with surrounding whitespace stripped.

        Raises:
            InvalidAccountName: If the name is blank or too long
        """
        name = (account_name or "").strip()
        if not name:
            raise InvalidAccountName("Account name is required")
        if len(name) > MAX_ACCOUNT_NAME_LENGTH:
            raise InvalidAccountName(
                f"Account name is longer than {MAX_ACCOUNT_NAME_LENGTH} characters"
            )
        return name

    def validate_amount(self, amount: Number) -> Decimal:
        """
        Returns the amount as Decimal.

        Raises:
            InvalidAmount: If the amount is not positive, not finite,
                finer than the currency's minor unit, or above the ceiling
        """
        value = to_decimal(amount)
        if value <= 0:
            raise InvalidAmount(f"Amount must be greater than zero, got {value}")

        if value > self._settings.max_deposit_amount:
            raise InvalidAmount(
                f"Amount {value} exceeds the maximum deposit of "
                f"{self._settings.max_deposit_amount}"
            )

        minor_unit = self._settings.minor_unit
        if value.quantize(minor_unit) != value:
            raise InvalidAmount(
                f"Amount {value} has more than "
                f"{self._settings.currency_decimal_places} decimal places"
            )
        return value

    def validate_deposit(self, amount: Number, plan: SavingsPlan) -> Decimal:
        """
        Full amount validation against a plan.

        Raises:
            InvalidAmount: See validate_amount()
            BelowMinimumDeposit: If the amount is under the plan minimum
        """
        value = self.validate_amount(amount)
        if value < plan.minimum_deposit:
            raise BelowMinimumDeposit(value, plan.minimum_deposit)
        return value
