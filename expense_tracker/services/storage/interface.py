"""
Abstract Storage Interfaces

DESIGN DECISION: We define abstract interfaces for storage operations.
This allows us to:
1. Keep the store and engines testable without touching the disk
2. Swap the local file store for something else later
3. Use in-memory storage for tests and throwaway sessions

There are two layers:
- KeyValueBackend: a string-to-string store with the same shape as
  browser local storage (get/set/remove a document by key)
- ExpenseStorageInterface: load/save the whole expense collection
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Optional

from expense_tracker.models.expense import Expense


class KeyValueBackend(ABC):
    """
    Abstract string key-value store.

    Values are whole documents; writes replace the previous value.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageReadError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Store a value, overwriting any previous value.

        Raises:
            QuotaExceededError: If the value is larger than the quota
            StorageWriteError: If the write fails
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove a key. Removing an absent key is a no-op."""
        pass


class ExpenseStorageInterface(ABC):
    """
    Abstract interface for persisting the expense collection.

    The collection is always read and written as a whole.
    Neither method raises: failures are logged and degrade to an
    empty collection (load) or a False result (save).
    """

    @abstractmethod
    def load(self) -> list[Expense]:
        """
        Read the stored collection.

        Returns:
            The stored expenses, or an empty list if nothing is stored
            or the stored data cannot be read
        """
        pass

    @abstractmethod
    def save(self, expenses: Iterable[Expense]) -> bool:
        """
        Replace the stored collection.

        Returns:
            True if written, False if the write failed
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """The backend could not be read."""
    pass


class StorageWriteError(StorageError):
    """The backend could not be written."""
    pass


class QuotaExceededError(StorageWriteError):
    """The value is larger than the backend allows."""

    def __init__(self, key: str, size: int, quota: int):
        self.key = key
        self.size = size
        self.quota = quota
        super().__init__(
            f"Value for {key!r} is {size} bytes, quota is {quota} bytes"
        )
