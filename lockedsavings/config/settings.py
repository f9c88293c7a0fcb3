"""
Configuration Management for Locked Savings

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: Settings are passed into the settlement service at
construction. get_settings() is only the fallback used when a caller does
not pass any, so the engine itself never reads ambient global state.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from lockedsavings.models.savings import PenaltyPolicy


class SavingsSettings(BaseSettings):
    """
    Engine settings.

    Loads configuration from LOCKED_SAVINGS_* environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="LOCKED_SAVINGS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Currency
    currency_code: str = Field(
        default="USD",
        min_length=3,
        max_length=3,
        description="ISO currency code of all amounts"
    )
    currency_decimal_places: int = Field(
        default=2,
        ge=0,
        le=4,
        description="Digits of the currency's minor unit"
    )

    # Interest
    days_per_year: int = Field(
        default=365,
        ge=360,
        le=366,
        description="Day-count denominator for simple interest"
    )
    penalty_policy: PenaltyPolicy = Field(
        default=PenaltyPolicy.FORFEIT_INTEREST,
        description="How early-withdrawal penalties are derived"
    )
    penalty_percent_of_principal: Decimal = Field(
        default=Decimal("1.0"),
        ge=0,
        le=100,
        description="Fee for PERCENT_OF_PRINCIPAL, capped at accrued interest"
    )

    # Deposit limits
    max_deposit_amount: Decimal = Field(
        default=Decimal("10000000"),
        gt=0,
        description="Largest single deposit accepted (sanity check)"
    )

    @property
    def minor_unit(self) -> Decimal:
        """Smallest currency step, e.g. Decimal('0.01')."""
        return Decimal(1).scaleb(-self.currency_decimal_places)


@lru_cache()
def get_settings() -> SavingsSettings:
    """
    Get engine settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return SavingsSettings()
