"""
Audit Models for Locked Savings

Every state-changing action on a savings account is logged for audit purposes.
This provides:
1. Complete traceability of deposits and payouts
2. Debugging information when things go wrong
3. Ability to reconstruct account history

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from lockedsavings.models.savings import utc_now


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Account lifecycle
    ACCOUNT_CREATED = "account_created"
    ACCOUNT_CREATION_REJECTED = "account_creation_rejected"
    ACCOUNT_MATURED = "account_matured"

    # Settlement
    WITHDRAWAL_COMPLETED = "withdrawal_completed"
    WITHDRAWAL_REJECTED = "withdrawal_rejected"

    # Access
    ACCESS_DENIED = "access_denied"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - what is this about?
    owner_id: Optional[str] = None
    account_id: Optional[UUID] = None

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate the events of one operation"
    )

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "owner_id": self.owner_id,
            "account_id": str(self.account_id) if self.account_id else None,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.account_created(account, correlation_id)
        event = AuditEventBuilder.withdrawal_completed(receipt, correlation_id)
    """

    @staticmethod
    def account_created(
        owner_id: str,
        account_id: UUID,
        lock_period: str,
        principal: Decimal,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_CREATED,
            owner_id=owner_id,
            account_id=account_id,
            correlation_id=correlation_id,
            description=f"Locked savings opened: {principal} for {lock_period}",
            details={
                "lock_period": lock_period,
                "principal": str(principal),
            },
        )

    @staticmethod
    def account_creation_rejected(
        owner_id: str,
        error_code: str,
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_CREATION_REJECTED,
            severity=AuditSeverity.WARNING,
            owner_id=owner_id,
            correlation_id=correlation_id,
            description=f"Locked savings not opened: {error_code}",
            error_code=error_code,
            error_message=error_message,
        )

    @staticmethod
    def account_matured(
        owner_id: str,
        account_id: UUID,
        maturity_timestamp: datetime,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_MATURED,
            owner_id=owner_id,
            account_id=account_id,
            correlation_id=correlation_id,
            description="Locked savings reached maturity",
            details={
                "maturity_timestamp": maturity_timestamp.isoformat(),
            },
        )

    @staticmethod
    def withdrawal_completed(
        owner_id: str,
        account_id: UUID,
        payout: Decimal,
        penalty: Decimal,
        was_early: bool,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.WITHDRAWAL_COMPLETED,
            owner_id=owner_id,
            account_id=account_id,
            correlation_id=correlation_id,
            description=f"Withdrawal settled: payout {payout}",
            details={
                "payout": str(payout),
                "penalty": str(penalty),
                "was_early": was_early,
            },
        )

    @staticmethod
    def withdrawal_rejected(
        owner_id: str,
        account_id: UUID,
        error_code: str,
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.WITHDRAWAL_REJECTED,
            severity=AuditSeverity.WARNING,
            owner_id=owner_id,
            account_id=account_id,
            correlation_id=correlation_id,
            description=f"Withdrawal rejected: {error_code}",
            error_code=error_code,
            error_message=error_message,
        )

    @staticmethod
    def access_denied(
        owner_id: str,
        account_id: UUID,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCESS_DENIED,
            severity=AuditSeverity.WARNING,
            owner_id=owner_id,
            account_id=account_id,
            correlation_id=correlation_id,
            description="Access to another owner's account was refused",
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_code=error_type,
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
