"""
Audit Logger

DESIGN DECISION: Every deposit, maturity and payout is logged.
This provides:
1. Complete traceability of money in and out
2. Debugging capability
3. Escalation of internal invariant violations

The audit logger:
- Is async, matching the storage interface
- Gracefully handles storage failures (an audit write never fails a settlement)
- Supports correlation IDs to trace the events of one operation
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

import structlog

from lockedsavings.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from lockedsavings.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for persistence), when configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("lockedsavings.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_account_created(
        self,
        owner_id: str,
        account_id: UUID,
        lock_period: str,
        principal: Decimal,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.account_created(
            owner_id=owner_id,
            account_id=account_id,
            lock_period=lock_period,
            principal=principal,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_account_creation_rejected(
        self,
        owner_id: str,
        error_code: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.account_creation_rejected(
            owner_id=owner_id,
            error_code=error_code,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_account_matured(
        self,
        owner_id: str,
        account_id: UUID,
        maturity_timestamp: datetime,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.account_matured(
            owner_id=owner_id,
            account_id=account_id,
            maturity_timestamp=maturity_timestamp,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_withdrawal_completed(
        self,
        owner_id: str,
        account_id: UUID,
        payout: Decimal,
        penalty: Decimal,
        was_early: bool,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.withdrawal_completed(
            owner_id=owner_id,
            account_id=account_id,
            payout=payout,
            penalty=penalty,
            was_early=was_early,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_withdrawal_rejected(
        self,
        owner_id: str,
        account_id: UUID,
        error_code: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.withdrawal_rejected(
            owner_id=owner_id,
            account_id=account_id,
            error_code=error_code,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_access_denied(
        self,
        owner_id: str,
        account_id: UUID,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.access_denied(
            owner_id=owner_id,
            account_id=account_id,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of each settlement operation and pass it
    through all subsequent calls.
    """
    return uuid4()
