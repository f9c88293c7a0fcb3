"""
Savings Ledger

The authoritative collection of savings accounts, and the only component
allowed to change an account's status.

Key responsibilities:
    - Creates accounts (validated, with maturity frozen at creation)
    - Enforces ownership on lookup
    - Applies status transitions atomically per account

Concurrency:
    Mutations of one account are serialised by an asyncio.Lock keyed by
    account id, and every write is a compare-and-swap on the stored status.
    The lock orders callers inside this process; the compare-and-swap keeps
    the guarantee when several processes share one storage backend.
    Reads take no lock. Records are immutable and replaced whole, so a reader
    sees either the old or the new record, never a mix.

    A ledger belongs to one event loop. The lock of a withdrawn account is
    dropped, since WITHDRAWN is terminal and nothing needs ordering after it.
"""

import asyncio
from datetime import datetime
from typing import Callable, Optional, Union
from uuid import UUID

from lockedsavings.accrual import Number, maturity_for
from lockedsavings.errors import AlreadyWithdrawn, Forbidden, InvalidOwner, NotFound
from lockedsavings.models.savings import (
    ALLOWED_TRANSITIONS,
    SavingsAccount,
    SavingsPlan,
    SavingsStatus,
    ensure_utc,
    utc_now,
)
from lockedsavings.services.storage import InMemorySavingsStorage, SavingsStorageInterface
from lockedsavings.validation import DepositValidator


AccountId = Union[UUID, str]


def _as_uuid(account_id: AccountId) -> UUID:
    if isinstance(account_id, UUID):
        return account_id
    try:
        return UUID(str(account_id))
    except ValueError:
        raise NotFound(account_id) from None


def _with_status(
    account: SavingsAccount,
    status: SavingsStatus,
    withdrawn_timestamp: Optional[datetime] = None,
) -> SavingsAccount:
    """Build the successor record. Goes through full model validation."""
    if status not in ALLOWED_TRANSITIONS[account.status]:
        raise ValueError(f"Illegal transition {account.status.value} -> {status.value}")
    fields = dict(account)
    fields.update(status=status, withdrawn_timestamp=withdrawn_timestamp)
    return SavingsAccount(**fields)


class SavingsLedger:
    """
    Per-owner collection of locked savings accounts.

    Example:
        ledger = SavingsLedger()
        account = await ledger.create("cust-1", "Rainy day", Decimal("500"), plan)
        await ledger.transition_to_withdrawn(account.id, at)
    """

    def __init__(
        self,
        storage: Optional[SavingsStorageInterface] = None,
        validator: Optional[DepositValidator] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            storage: Persistence backend (default: in-memory)
            validator: Deposit validator (default: built from get_settings())
            clock: Returns the current instant (default: UTC wall clock)
        """
        self._storage = storage or InMemorySavingsStorage()
        self._validator = validator or DepositValidator()
        self._clock = clock or utc_now
        self._locks: dict[UUID, asyncio.Lock] = {}

    def _lock_for(self, account_id: UUID) -> asyncio.Lock:
        return self._locks.setdefault(account_id, asyncio.Lock())

    # ========================================================================
    # CREATION
    # ========================================================================

    async def create(
        self,
        owner_id: str,
        account_name: str,
        principal: Number,
        plan: SavingsPlan,
    ) -> SavingsAccount:
        """
        Open a new ACTIVE account starting now.

        Raises:
            InvalidOwner: If owner_id is missing or blank
            InvalidAccountName: If the name is blank or too long
            InvalidAmount: If the principal is not a valid amount
            BelowMinimumDeposit: If the principal is under plan.minimum_deposit
        """
        if not isinstance(owner_id, str) or not owner_id.strip():
            raise InvalidOwner("owner_id is required")

        name = self._validator.validate_account_name(account_name)
        amount = self._validator.validate_deposit(principal, plan)

        start = ensure_utc(self._clock())
        account = SavingsAccount(
            owner_id=owner_id,
            account_name=name,
            principal=amount,
            plan=plan,
            start_timestamp=start,
            maturity_timestamp=maturity_for(start, plan.duration_days),
        )
        await self._storage.insert(account)
        return account

    # ========================================================================
    # READS
    # ========================================================================

    async def list_for(self, owner_id: str) -> list[SavingsAccount]:
        """All of an owner's accounts, oldest first (stable for equal starts)."""
        accounts = await self._storage.list_by_owner(owner_id)
        return sorted(accounts, key=lambda account: account.start_timestamp)

    async def get(self, owner_id: str, account_id: AccountId) -> SavingsAccount:
        """
        Fetch an account, checking that owner_id owns it.

        Raises:
            NotFound: If no such account exists
            Forbidden: If it belongs to a different owner
        """
        account = await self._storage.get(_as_uuid(account_id))
        if account is None:
            raise NotFound(account_id)
        if account.owner_id != owner_id:
            raise Forbidden(account_id, f"Savings account {account_id} is not owned by {owner_id}")
        return account

    async def _load(self, account_id: UUID) -> SavingsAccount:
        account = await self._storage.get(account_id)
        if account is None:
            raise NotFound(account_id)
        return account

    # ========================================================================
    # TRANSITIONS (Mutating)
    # ========================================================================

    async def transition_to_withdrawn(
        self,
        account_id: AccountId,
        at: datetime,
    ) -> SavingsAccount:
        """
        Mark an account WITHDRAWN at ``at``.

        Exactly one of any number of concurrent callers succeeds; the rest
        get AlreadyWithdrawn.

        Raises:
            NotFound: If no such account exists
            AlreadyWithdrawn: If the account is already WITHDRAWN
        """
        account_id = _as_uuid(account_id)
        at = ensure_utc(at)

        async with self._lock_for(account_id):
            while True:
                current = await self._load(account_id)
                if current.status == SavingsStatus.WITHDRAWN:
                    self._locks.pop(account_id, None)
                    raise AlreadyWithdrawn(account_id)

                updated = _with_status(current, SavingsStatus.WITHDRAWN, withdrawn_timestamp=at)
                if await self._storage.compare_and_swap(updated, expected_status=current.status):
                    # Waiters keep their reference and will see WITHDRAWN
                    self._locks.pop(account_id, None)
                    return updated
                # Status moved under us (another process); re-read and decide again

    async def promote_if_matured(
        self,
        account_id: AccountId,
        at: datetime,
    ) -> SavingsAccount:
        """
        Move an ACTIVE account to MATURED if ``at`` is at or past maturity.

        Returns the (possibly updated) record. Any other account is returned
        unchanged. Called lazily on reads; there is no scheduler.
        """
        account, _ = await self.try_promote(account_id, at)
        return account

    async def try_promote(
        self,
        account_id: AccountId,
        at: datetime,
    ) -> tuple[SavingsAccount, bool]:
        """
        Same as promote_if_matured(), also reporting whether this call made
        the promotion. Of any number of concurrent callers, at most one gets
        True.
        """
        account_id = _as_uuid(account_id)
        at = ensure_utc(at)

        current = await self._load(account_id)
        if current.status != SavingsStatus.ACTIVE or at < current.maturity_timestamp:
            return current, False

        async with self._lock_for(account_id):
            while True:
                current = await self._load(account_id)
                if current.status != SavingsStatus.ACTIVE:
                    return current, False

                updated = _with_status(current, SavingsStatus.MATURED)
                if await self._storage.compare_and_swap(updated, expected_status=SavingsStatus.ACTIVE):
                    return updated, True
