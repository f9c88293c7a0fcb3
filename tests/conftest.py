"""
Shared fixtures for the locked savings tests.

Time is always injected: every service under test reads a FixedClock,
which a test moves forward explicitly.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from lockedsavings.config import SavingsSettings
from lockedsavings.services.storage import InMemoryAuditStorage, InMemorySavingsStorage
from lockedsavings.settlement import create_settlement_service


START = datetime(2024, 1, 1, 9, 30, tzinfo=timezone.utc)


class FixedClock:
    """A clock that only moves when told to."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def settings():
    # Ignore any .env file in the working directory
    return SavingsSettings(_env_file=None)


@pytest.fixture
def storage():
    return InMemorySavingsStorage()


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def service(settings, storage, audit_storage, clock):
    return create_settlement_service(
        settings=settings,
        storage=storage,
        audit_storage=audit_storage,
        clock=clock,
    )


class YieldingSavingsStorage(InMemorySavingsStorage):
    """
    In-memory storage that gives up control on every read and swap,
    so concurrent coroutines genuinely interleave.
    """

    async def get(self, account_id):
        await asyncio.sleep(0)
        return await super().get(account_id)

    async def compare_and_swap(self, account, expected_status):
        await asyncio.sleep(0)
        return await super().compare_and_swap(account, expected_status)


@pytest.fixture
def yielding_service(settings, audit_storage, clock):
    return create_settlement_service(
        settings=settings,
        storage=YieldingSavingsStorage(),
        audit_storage=audit_storage,
        clock=clock,
    )
