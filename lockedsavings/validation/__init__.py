"""Validation package."""

from lockedsavings.validation.validator import DepositValidator, MAX_ACCOUNT_NAME_LENGTH

__all__ = ["DepositValidator", "MAX_ACCOUNT_NAME_LENGTH"]
