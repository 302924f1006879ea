"""Services package."""

from expense_tracker.services.storage import (
    DEFAULT_STORAGE_KEY,
    ExpenseStorageInterface,
    FileKeyValueBackend,
    InMemoryKeyValueBackend,
    KeyValueBackend,
    LocalStorageExpenseStorage,
    QuotaExceededError,
    StorageError,
    StorageReadError,
    StorageWriteError,
)

__all__ = [
    "DEFAULT_STORAGE_KEY",
    "ExpenseStorageInterface",
    "FileKeyValueBackend",
    "InMemoryKeyValueBackend",
    "KeyValueBackend",
    "LocalStorageExpenseStorage",
    "QuotaExceededError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
]
