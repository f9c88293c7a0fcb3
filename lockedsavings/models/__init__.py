"""
Data Models Package

This package contains all Pydantic models used by the locked savings engine.
All data flowing through the engine must conform to these schemas.
"""

from lockedsavings.models.savings import (
    ALLOWED_TRANSITIONS,
    LockPeriod,
    PenaltyPolicy,
    PlanQuote,
    PortfolioSummary,
    SavingsAccount,
    SavingsPlan,
    SavingsSnapshot,
    SavingsStatus,
    WithdrawalReceipt,
    ensure_utc,
    utc_now,
)
from lockedsavings.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Savings models
    "ALLOWED_TRANSITIONS",
    "LockPeriod",
    "PenaltyPolicy",
    "PlanQuote",
    "PortfolioSummary",
    "SavingsAccount",
    "SavingsPlan",
    "SavingsSnapshot",
    "SavingsStatus",
    "WithdrawalReceipt",
    "ensure_utc",
    "utc_now",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
