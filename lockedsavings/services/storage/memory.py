"""
In-Memory Storage Implementation

Process-local storage for savings accounts and audit events.

TRADEOFFS:
- Not durable (state is lost when the process exits)
- Fine for tests, demos and single-process deployments

Each method completes without awaiting anything, so under asyncio a
compare-and-swap can never interleave with another coroutine's write.
"""

from typing import Optional
from uuid import UUID

from lockedsavings.models.audit import AuditEvent
from lockedsavings.models.savings import SavingsAccount, SavingsStatus
from lockedsavings.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    NotFoundError,
    SavingsStorageInterface,
)


class InMemorySavingsStorage(SavingsStorageInterface):
    """Dictionary-backed account storage keyed by account id."""

    def __init__(self):
        self._accounts: dict[UUID, SavingsAccount] = {}
        self._ids_by_owner: dict[str, list[UUID]] = {}

    async def insert(self, account: SavingsAccount) -> None:
        if account.id in self._accounts:
            raise DuplicateError(f"Account id already used: {account.id}")
        self._accounts[account.id] = account
        self._ids_by_owner.setdefault(account.owner_id, []).append(account.id)

    async def get(self, account_id: UUID) -> Optional[SavingsAccount]:
        return self._accounts.get(account_id)

    async def list_by_owner(self, owner_id: str) -> list[SavingsAccount]:
        return [self._accounts[i] for i in self._ids_by_owner.get(owner_id, [])]

    async def compare_and_swap(
        self,
        account: SavingsAccount,
        expected_status: SavingsStatus,
    ) -> bool:
        current = self._accounts.get(account.id)
        if current is None:
            raise NotFoundError(f"Account not stored: {account.id}")
        if current.status != expected_status:
            return False
        self._accounts[account.id] = account
        return True


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    async def get_events_by_account(
        self,
        account_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.account_id == account_id]

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
