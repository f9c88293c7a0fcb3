"""Tests for engine settings."""

import pytest
from decimal import Decimal

from pydantic import ValidationError

from lockedsavings.config import SavingsSettings, get_settings
from lockedsavings.models.savings import PenaltyPolicy


class TestSavingsSettings:
    """Tests for SavingsSettings."""

    def test_defaults(self, settings):
        """Test default configuration."""
        assert settings.currency_code == "USD"
        assert settings.currency_decimal_places == 2
        assert settings.days_per_year == 365
        assert settings.penalty_policy == PenaltyPolicy.FORFEIT_INTEREST
        assert settings.penalty_percent_of_principal == Decimal("1.0")
        assert settings.max_deposit_amount == Decimal("10000000")
        assert settings.minor_unit == Decimal("0.01")

    def test_environment_overrides(self, monkeypatch):
        """Test LOCKED_SAVINGS_* variables are read."""
        monkeypatch.setenv("LOCKED_SAVINGS_DAYS_PER_YEAR", "360")
        monkeypatch.setenv("LOCKED_SAVINGS_PENALTY_POLICY", "percent_of_principal")
        monkeypatch.setenv("LOCKED_SAVINGS_CURRENCY_DECIMAL_PLACES", "3")

        settings = SavingsSettings(_env_file=None)
        assert settings.days_per_year == 360
        assert settings.penalty_policy == PenaltyPolicy.PERCENT_OF_PRINCIPAL
        assert settings.minor_unit == Decimal("0.001")

    def test_invalid_values_rejected(self):
        """Test out-of-range settings fail fast."""
        with pytest.raises(ValidationError):
            SavingsSettings(_env_file=None, days_per_year=400)
        with pytest.raises(ValidationError):
            SavingsSettings(_env_file=None, penalty_percent_of_principal=Decimal("-1"))
        with pytest.raises(ValidationError):
            SavingsSettings(_env_file=None, currency_code="DOLLARS")

    def test_get_settings_cached(self):
        """Test get_settings() returns one shared instance."""
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
