"""Tests for deposit validation."""

import pytest
from decimal import Decimal

from lockedsavings.catalog import LockPeriodCatalog
from lockedsavings.config import SavingsSettings
from lockedsavings.errors import BelowMinimumDeposit, InvalidAccountName, InvalidAmount
from lockedsavings.models.savings import LockPeriod
from lockedsavings.validation import DepositValidator, MAX_ACCOUNT_NAME_LENGTH


@pytest.fixture
def validator(settings):
    return DepositValidator(settings)


class TestAccountName:
    """Tests for validate_account_name()."""

    def test_name_stripped(self, validator):
        """Test surrounding whitespace is removed."""
        assert validator.validate_account_name("  New car ") == "New car"

    def test_blank_rejected(self, validator):
        """Test empty and whitespace-only names are rejected."""
        for bad in ("", "   ", None):
            with pytest.raises(InvalidAccountName, match="required"):
                validator.validate_account_name(bad)

    def test_length_limit(self, validator):
        """Test the maximum name length."""
        assert validator.validate_account_name("x" * MAX_ACCOUNT_NAME_LENGTH)
        with pytest.raises(InvalidAccountName, match="longer than"):
            validator.validate_account_name("x" * (MAX_ACCOUNT_NAME_LENGTH + 1))


class TestAmount:
    """Tests for validate_amount()."""

    def test_valid_amounts(self, validator):
        """Test accepted amount forms."""
        assert validator.validate_amount("100.50") == Decimal("100.50")
        assert validator.validate_amount(100) == Decimal("100")
        assert validator.validate_amount(0.1) == Decimal("0.1")

    def test_non_positive_rejected(self, validator):
        """Test zero and negative amounts are rejected."""
        for bad in ("0", "-5", Decimal("-0.01")):
            with pytest.raises(InvalidAmount, match="greater than zero"):
                validator.validate_amount(bad)

    def test_sub_cent_rejected(self, validator):
        """Test amounts finer than the minor unit are rejected, not rounded."""
        with pytest.raises(InvalidAmount, match="decimal places"):
            validator.validate_amount("100.005")

    def test_ceiling(self, validator):
        """Test the maximum deposit."""
        assert validator.validate_amount("10000000") == Decimal("10000000")
        with pytest.raises(InvalidAmount, match="exceeds the maximum"):
            validator.validate_amount("10000000.01")
        with pytest.raises(InvalidAmount, match="exceeds the maximum"):
            validator.validate_amount("1E+40")

    def test_non_finite_rejected(self, validator):
        """Test NaN and infinity are rejected."""
        for bad in ("NaN", "Infinity", "-Infinity"):
            with pytest.raises(InvalidAmount):
                validator.validate_amount(bad)

    def test_whole_unit_currency(self):
        """Test a currency without a minor unit."""
        validator = DepositValidator(SavingsSettings(_env_file=None, currency_decimal_places=0))
        assert validator.validate_amount("100") == Decimal("100")
        with pytest.raises(InvalidAmount):
            validator.validate_amount("100.5")


class TestDeposit:
    """Tests for validate_deposit()."""

    def test_minimum_deposit(self, validator):
        """Test the plan minimum is inclusive."""
        plan = LockPeriodCatalog().plan_for(LockPeriod.ONE_MONTH)
        assert validator.validate_deposit("50.00", plan) == Decimal("50.00")

    def test_below_minimum(self, validator):
        """Test deposits below the plan minimum are rejected."""
        plan = LockPeriodCatalog().plan_for(LockPeriod.ONE_MONTH)
        with pytest.raises(BelowMinimumDeposit) as exc_info:
            validator.validate_deposit("40.00", plan)
        assert exc_info.value.amount == Decimal("40.00")
        assert exc_info.value.minimum == Decimal("50.00")
        assert exc_info.value.code == "below_minimum_deposit"

    def test_amount_checked_before_minimum(self, validator):
        """Test a malformed amount is InvalidAmount even if below the minimum."""
        plan = LockPeriodCatalog().plan_for(LockPeriod.ONE_YEAR)
        with pytest.raises(InvalidAmount):
            validator.validate_deposit("-10", plan)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
