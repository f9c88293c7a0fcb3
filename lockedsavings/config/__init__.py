"""Configuration package."""

from lockedsavings.config.settings import (
    SavingsSettings,
    get_settings,
)

__all__ = [
    "SavingsSettings",
    "get_settings",
]
