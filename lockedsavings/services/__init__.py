"""Services package."""

from lockedsavings.services.storage import (
    AuditStorageInterface,
    DuplicateError,
    InMemoryAuditStorage,
    InMemorySavingsStorage,
    NotFoundError,
    SavingsStorageInterface,
    StorageError,
)

__all__ = [
    "AuditStorageInterface",
    "DuplicateError",
    "InMemoryAuditStorage",
    "InMemorySavingsStorage",
    "NotFoundError",
    "SavingsStorageInterface",
    "StorageError",
]
