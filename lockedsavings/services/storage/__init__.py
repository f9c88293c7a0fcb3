"""
Storage Services Package

Provides abstract interfaces and an in-memory implementation for data storage.
Durable backends implement the same interfaces.
"""

from lockedsavings.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    NotFoundError,
    SavingsStorageInterface,
    StorageError,
)
from lockedsavings.services.storage.memory import (
    InMemoryAuditStorage,
    InMemorySavingsStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "SavingsStorageInterface",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemorySavingsStorage",
]
