"""
Settlement Service for Locked Savings

This module ties together the catalog, the ledger and the accrual
calculator, and defines the end-to-end operations callers use:
1. Open (plan lookup -> validate -> store)
2. View (ownership check -> lazy maturity -> snapshot)
3. Withdraw (ownership check -> lazy maturity -> payout -> commit -> receipt)

DESIGN DECISION: The service enforces the boundaries:
- No receipt is returned unless the WITHDRAWN transition committed
- No interest figure leaves the engine without coming from the calculator
- Another owner's account is indistinguishable from a missing one
- Every operation is audited under one correlation id

There are no timers. Maturity and accrued interest are recomputed from
"now" on every call.
"""

from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable, Optional, Union
from uuid import UUID

from lockedsavings.accrual import (
    Number,
    accrued_interest,
    days_remaining,
    early_withdrawal_penalty,
    progress_fraction,
    projected_interest,
    round_currency,
)
from lockedsavings.audit import AuditLogger, create_correlation_id
from lockedsavings.catalog import LockPeriodCatalog
from lockedsavings.config import SavingsSettings, get_settings
from lockedsavings.errors import (
    AlreadyWithdrawn,
    Forbidden,
    InvalidPlan,
    NotFound,
    SavingsError,
)
from lockedsavings.ledger import AccountId, SavingsLedger
from lockedsavings.models.savings import (
    LockPeriod,
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
from lockedsavings.services.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    SavingsStorageInterface,
)
from lockedsavings.validation import DepositValidator


HISTORY_STATUSES = frozenset({SavingsStatus.MATURED, SavingsStatus.WITHDRAWN})


class SettlementService:
    """
    The only entry point callers use.

    Example:
        service = SettlementService()
        account = await service.create_account("cust-1", "House", "500.00", LockPeriod.ONE_YEAR)
        snapshot = await service.view_account("cust-1", account.id)
        receipt = await service.withdraw("cust-1", account.id)
    """

    def __init__(
        self,
        ledger: Optional[SavingsLedger] = None,
        catalog: Optional[LockPeriodCatalog] = None,
        settings: Optional[SavingsSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._settings = settings or get_settings()
        self._clock = clock or utc_now
        self._validator = DepositValidator(self._settings)
        self._ledger = ledger or SavingsLedger(validator=self._validator, clock=self._clock)
        self._catalog = catalog or LockPeriodCatalog()
        self._audit_logger = audit_logger or AuditLogger()

    def _now(self, at: Optional[datetime]) -> datetime:
        return ensure_utc(at if at is not None else self._clock())

    def _round(self, amount: Decimal) -> Decimal:
        return round_currency(amount, self._settings.currency_decimal_places)

    # ========================================================================
    # CATALOG
    # ========================================================================

    def available_plans(self) -> tuple[SavingsPlan, ...]:
        """Offered plans, shortest lock period first."""
        return self._catalog.plans()

    def quote(self, amount: Number, lock_period: Union[LockPeriod, str]) -> PlanQuote:
        """
        Preview interest at maturity for a deposit, without opening anything.

        Raises:
            UnknownPlan, InvalidAmount, BelowMinimumDeposit
        """
        plan = self._catalog.plan_for(lock_period)
        principal = self._validator.validate_deposit(amount, plan)
        interest = self._round(projected_interest(
            principal,
            plan.annual_interest_rate_percent,
            plan.duration_days,
            self._settings.days_per_year,
        ))
        return PlanQuote(
            plan=plan,
            principal=principal,
            projected_interest=interest,
            total_at_maturity=principal + interest,
        )

    # ========================================================================
    # OPEN
    # ========================================================================

    async def create_account(
        self,
        owner_id: str,
        account_name: str,
        amount: Number,
        lock_period: Union[LockPeriod, str],
    ) -> SavingsAccount:
        """
        Open a locked savings account.

        Raises:
            UnknownPlan: If the lock period is not offered
            InvalidAccountName, InvalidAmount, BelowMinimumDeposit: Input errors
        """
        correlation_id = create_correlation_id()
        try:
            plan = self._catalog.plan_for(lock_period)
            account = await self._ledger.create(owner_id, account_name, amount, plan)
        except SavingsError as e:
            await self._audit_logger.log_account_creation_rejected(
                owner_id=owner_id,
                error_code=e.code,
                error_message=str(e),
                correlation_id=correlation_id,
            )
            raise

        await self._audit_logger.log_account_created(
            owner_id=owner_id,
            account_id=account.id,
            lock_period=account.lock_period.value,
            principal=account.principal,
            correlation_id=correlation_id,
        )
        return account

    # ========================================================================
    # VIEW
    # ========================================================================

    async def view_account(
        self,
        owner_id: str,
        account_id: AccountId,
        as_of: Optional[datetime] = None,
    ) -> SavingsSnapshot:
        """
        Snapshot of one account as of ``as_of`` (default: now).

        Raises:
            NotFound: If the account does not exist or is not owner_id's
        """
        as_of = self._now(as_of)
        correlation_id = create_correlation_id()

        account = await self._get_owned(owner_id, account_id, correlation_id)
        account = await self._promote(account, as_of, correlation_id)
        return await self._snapshot(account, as_of, correlation_id)

    async def list_accounts(
        self,
        owner_id: str,
        as_of: Optional[datetime] = None,
    ) -> list[SavingsSnapshot]:
        """Snapshots of all of an owner's accounts, oldest first."""
        as_of = self._now(as_of)
        correlation_id = create_correlation_id()

        snapshots = []
        for account in await self._ledger.list_for(owner_id):
            account = await self._promote(account, as_of, correlation_id)
            snapshots.append(await self._snapshot(account, as_of, correlation_id))
        return snapshots

    async def history(
        self,
        owner_id: str,
        as_of: Optional[datetime] = None,
    ) -> list[SavingsSnapshot]:
        """Snapshots of matured and withdrawn accounts only."""
        return [
            snapshot for snapshot in await self.list_accounts(owner_id, as_of)
            if snapshot.account.status in HISTORY_STATUSES
        ]

    async def portfolio_summary(
        self,
        owner_id: str,
        as_of: Optional[datetime] = None,
    ) -> PortfolioSummary:
        """Totals over the owner's open (not yet withdrawn) accounts."""
        as_of = self._now(as_of)
        open_snapshots = [
            snapshot for snapshot in await self.list_accounts(owner_id, as_of)
            if not snapshot.account.is_withdrawn
        ]
        return _summarise(owner_id, as_of, open_snapshots)

    # ========================================================================
    # WITHDRAW
    # ========================================================================

    async def withdraw(
        self,
        owner_id: str,
        account_id: AccountId,
        at: Optional[datetime] = None,
    ) -> WithdrawalReceipt:
        """
        Withdraw an account in full at ``at`` (default: now).

        Before maturity the penalty policy applies; from maturity on there
        is no penalty.

        Raises:
            NotFound: If the account does not exist or is not owner_id's
            AlreadyWithdrawn: If it was already withdrawn, including by a
                concurrent call that committed first
        """
        at = self._now(at)
        correlation_id = create_correlation_id()

        account = await self._get_owned(owner_id, account_id, correlation_id)
        try:
            account = await self._promote(account, at, correlation_id)
            if account.is_withdrawn:
                raise AlreadyWithdrawn(account.id)

            interest_portion = self._round(await self._accrued(account, at, correlation_id))
            penalty = self._round(await self._penalty(account, at, correlation_id))
            receipt = WithdrawalReceipt(
                account_id=account.id,
                owner_id=account.owner_id,
                principal=account.principal,
                interest_portion=interest_portion,
                penalty=penalty,
                payout=account.principal + interest_portion - penalty,
                was_early=at < account.maturity_timestamp,
                withdrawn_at=at,
            )

            # The commit point: nothing above has changed any state
            await self._ledger.transition_to_withdrawn(account.id, at)
        except SavingsError as e:
            await self._audit_logger.log_withdrawal_rejected(
                owner_id=owner_id,
                account_id=account.id,
                error_code=e.code,
                error_message=str(e),
                correlation_id=correlation_id,
            )
            raise

        await self._audit_logger.log_withdrawal_completed(
            owner_id=owner_id,
            account_id=account.id,
            payout=receipt.payout,
            penalty=receipt.penalty,
            was_early=receipt.was_early,
            correlation_id=correlation_id,
        )
        return receipt

    # ========================================================================
    # INTERNALS
    # ========================================================================

    async def _get_owned(
        self,
        owner_id: str,
        account_id: AccountId,
        correlation_id: UUID,
    ) -> SavingsAccount:
        try:
            return await self._ledger.get(owner_id, account_id)
        except Forbidden as e:
            await self._audit_logger.log_access_denied(
                owner_id=owner_id,
                account_id=e.account_id,
                correlation_id=correlation_id,
            )
            # Do not reveal that the account exists
            raise NotFound(account_id) from None

    async def _promote(
        self,
        account: SavingsAccount,
        at: datetime,
        correlation_id: UUID,
    ) -> SavingsAccount:
        # Only the caller whose swap did the promotion announces it
        updated, promoted = await self._ledger.try_promote(account.id, at)
        if promoted:
            await self._audit_logger.log_account_matured(
                owner_id=updated.owner_id,
                account_id=updated.id,
                maturity_timestamp=updated.maturity_timestamp,
                correlation_id=correlation_id,
            )
        return updated

    async def _escalate(self, error: InvalidPlan, account: SavingsAccount, correlation_id: UUID) -> None:
        await self._audit_logger.log_error(
            error_type=error.code,
            error_message=str(error),
            details={
                "account_id": str(account.id),
                "lock_period": account.lock_period.value,
                "annual_interest_rate_percent": str(account.annual_interest_rate_percent),
            },
            correlation_id=correlation_id,
        )

    async def _accrued(self, account: SavingsAccount, at: datetime, correlation_id: UUID) -> Decimal:
        try:
            return accrued_interest(
                account.principal,
                account.annual_interest_rate_percent,
                account.start_timestamp,
                at,
                account.plan.duration_days,
                self._settings.days_per_year,
            )
        except InvalidPlan as e:
            await self._escalate(e, account, correlation_id)
            raise

    async def _projected(self, account: SavingsAccount, correlation_id: UUID) -> Decimal:
        try:
            return projected_interest(
                account.principal,
                account.annual_interest_rate_percent,
                account.plan.duration_days,
                self._settings.days_per_year,
            )
        except InvalidPlan as e:
            await self._escalate(e, account, correlation_id)
            raise

    async def _penalty(self, account: SavingsAccount, at: datetime, correlation_id: UUID) -> Decimal:
        if at >= account.maturity_timestamp:
            return Decimal(0)
        try:
            return early_withdrawal_penalty(
                account.principal,
                account.annual_interest_rate_percent,
                account.start_timestamp,
                at,
                account.plan.duration_days,
                policy=self._settings.penalty_policy,
                penalty_percent_of_principal=self._settings.penalty_percent_of_principal,
                days_per_year=self._settings.days_per_year,
            )
        except InvalidPlan as e:
            await self._escalate(e, account, correlation_id)
            raise

    async def _snapshot(
        self,
        account: SavingsAccount,
        as_of: datetime,
        correlation_id: UUID,
    ) -> SavingsSnapshot:
        # A withdrawn account is frozen at the instant it was withdrawn
        effective = account.withdrawn_timestamp if account.is_withdrawn else as_of

        if account.is_withdrawn:
            penalty_now = Decimal(0)
        else:
            penalty_now = await self._penalty(account, effective, correlation_id)

        return SavingsSnapshot(
            account=account,
            as_of=as_of,
            accrued_interest=self._round(await self._accrued(account, effective, correlation_id)),
            projected_interest_at_maturity=self._round(await self._projected(account, correlation_id)),
            progress_fraction=progress_fraction(
                account.start_timestamp,
                account.maturity_timestamp,
                effective,
            ),
            is_matured=effective >= account.maturity_timestamp,
            early_withdrawal_penalty_if_withdrawn_now=self._round(penalty_now),
            days_remaining=days_remaining(effective, account.maturity_timestamp),
        )


def _summarise(
    owner_id: str,
    as_of: datetime,
    snapshots: Iterable[SavingsSnapshot],
) -> PortfolioSummary:
    snapshots = list(snapshots)
    count = len(snapshots)
    total_rate = sum((s.account.annual_interest_rate_percent for s in snapshots), Decimal(0))
    return PortfolioSummary(
        owner_id=owner_id,
        as_of=as_of,
        open_count=count,
        total_locked=sum((s.account.principal for s in snapshots), Decimal(0)),
        total_accrued_interest=sum((s.accrued_interest for s in snapshots), Decimal(0)),
        total_projected_interest=sum(
            (s.projected_interest_at_maturity for s in snapshots), Decimal(0)
        ),
        average_interest_rate_percent=(
            round_currency(total_rate / count) if count else Decimal(0)
        ),
    )


def create_settlement_service(
    settings: Optional[SavingsSettings] = None,
    storage: Optional[SavingsStorageInterface] = None,
    audit_storage: Optional[AuditStorageInterface] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> SettlementService:
    """
    Factory function wiring a complete service.

    Args:
        settings: Engine settings (default: get_settings())
        storage: Account storage (default: in-memory)
        audit_storage: Audit storage (default: in-memory)
        clock: Returns the current instant (default: UTC wall clock)
    """
    settings = settings or get_settings()
    ledger = SavingsLedger(
        storage=storage,
        validator=DepositValidator(settings),
        clock=clock,
    )
    return SettlementService(
        ledger=ledger,
        settings=settings,
        audit_logger=AuditLogger(audit_storage or InMemoryAuditStorage()),
        clock=clock,
    )
