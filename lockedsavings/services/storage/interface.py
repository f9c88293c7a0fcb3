"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the engine agnostic of the storage technology
2. Use in-memory storage for tests and single-process deployments
3. Plug in a durable database later without touching the ledger

The interface is intentionally small. The one non-trivial requirement is
compare_and_swap(): the status transition to WITHDRAWN must be atomic per
account id, so backends implement it with a conditional update (or a row
lock) keyed by id and the expected current status.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from lockedsavings.models.audit import AuditEvent
from lockedsavings.models.savings import SavingsAccount, SavingsStatus


class SavingsStorageInterface(ABC):
    """
    Abstract interface for savings account storage.

    Any storage implementation must implement these methods.
    Records are stored whole; a stored record is never partially updated.
    """

    @abstractmethod
    async def insert(self, account: SavingsAccount) -> None:
        """
        Store a newly created account.

        Raises:
            DuplicateError: If an account with the same id was ever stored
        """
        pass

    @abstractmethod
    async def get(self, account_id: UUID) -> Optional[SavingsAccount]:
        """
        Retrieve an account by its ID.

        Returns:
            The account if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_by_owner(self, owner_id: str) -> list[SavingsAccount]:
        """
        List all accounts of an owner, in insertion order.
        """
        pass

    @abstractmethod
    async def compare_and_swap(
        self,
        account: SavingsAccount,
        expected_status: SavingsStatus,
    ) -> bool:
        """
        Replace the stored record with ``account`` only if the stored
        record's status is still ``expected_status``.

        Returns:
            True if the swap committed, False if the status had changed

        Raises:
            NotFoundError: If no record with account.id exists
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events of one operation, in chronological order.
        """
        pass

    @abstractmethod
    async def get_events_by_account(
        self,
        account_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific account, in chronological order.
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events (newest first).
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
