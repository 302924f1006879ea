"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Expenses are kept as one JSON document in a local key-value store.
"""

from expense_tracker.services.storage.interface import (
    ExpenseStorageInterface,
    KeyValueBackend,
    QuotaExceededError,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from expense_tracker.services.storage.local_storage import (
    DEFAULT_STORAGE_KEY,
    FileKeyValueBackend,
    InMemoryKeyValueBackend,
    LocalStorageExpenseStorage,
)

__all__ = [
    # Interfaces
    "ExpenseStorageInterface",
    "KeyValueBackend",
    # Exceptions
    "QuotaExceededError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Local storage implementation
    "DEFAULT_STORAGE_KEY",
    "FileKeyValueBackend",
    "InMemoryKeyValueBackend",
    "LocalStorageExpenseStorage",
]
