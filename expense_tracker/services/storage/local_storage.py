"""
Local Storage Implementation

DESIGN DECISION: Expenses live in a single JSON document under one key,
exactly like a browser app writing to localStorage:
1. Nothing to install or configure
2. The file is human-readable and easy to back up
3. The whole collection is rewritten on every change

TRADEOFFS:
- Not suitable for large histories (a few thousand records is fine)
- No schema versioning: incompatible content is discarded on load
- No retry: a failed write is logged and the in-memory copy stays
  authoritative for the session

Writes go to a temporary file that is then renamed over the target,
so a crash never leaves a half-written document behind.
"""

import os
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import Optional, Union

from pydantic import TypeAdapter, ValidationError

from expense_tracker.audit.logger import AuditLogger
from expense_tracker.models.expense import Expense
from expense_tracker.services.storage.interface import (
    ExpenseStorageInterface,
    KeyValueBackend,
    QuotaExceededError,
    StorageError,
    StorageReadError,
    StorageWriteError,
)


DEFAULT_STORAGE_KEY = "expense-tracker-data"

_EXPENSE_LIST = TypeAdapter(list[Expense])


def _check_quota(key: str, value: str, quota_bytes: Optional[int]) -> None:
    if quota_bytes is None:
        return
    size = len(value.encode("utf-8"))
    if size > quota_bytes:
        raise QuotaExceededError(key, size, quota_bytes)


class InMemoryKeyValueBackend(KeyValueBackend):
    """Dict-backed key-value store for tests and ephemeral sessions."""

    def __init__(
        self,
        initial: Optional[dict[str, str]] = None,
        quota_bytes: Optional[int] = None,
    ):
        self._items: dict[str, str] = dict(initial or {})
        self._quota_bytes = quota_bytes

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        _check_quota(key, value, self._quota_bytes)
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class FileKeyValueBackend(KeyValueBackend):
    """
    Directory-backed key-value store.

    Each key is stored as `<directory>/<key>.json`. The directory is
    created on first write.
    """

    def __init__(
        self,
        directory: Union[str, Path],
        quota_bytes: Optional[int] = None,
    ):
        self._directory = Path(directory)
        self._quota_bytes = quota_bytes

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        """File that holds the given key."""
        return self._directory / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(f"Failed to read {path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        _check_quota(key, value, self._quota_bytes)

        path = self.path_for(key)
        temp_name: Optional[str] = None
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            # Temp file in the same directory so the rename stays atomic
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                prefix=f"{key}-",
                suffix=".tmp",
                dir=self._directory,
                delete=False,
            ) as tf:
                temp_name = tf.name
                tf.write(value)
                tf.flush()
                os.fsync(tf.fileno())
            os.replace(temp_name, path)
        except OSError as e:
            if temp_name and os.path.exists(temp_name):
                os.unlink(temp_name)
            raise StorageWriteError(f"Failed to write {path}: {e}") from e

    def remove_item(self, key: str) -> None:
        try:
            self.path_for(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageWriteError(f"Failed to remove {key!r}: {e}") from e


class LocalStorageExpenseStorage(ExpenseStorageInterface):
    """
    Expense collection stored as a JSON array under a single key.

    Records use the field names id, amount, category, description,
    date, createdAt and updatedAt.
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        storage_key: str = DEFAULT_STORAGE_KEY,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._backend = backend
        self._key = storage_key
        self._audit_logger = audit_logger or AuditLogger()

    @property
    def storage_key(self) -> str:
        return self._key

    def load(self) -> list[Expense]:
        try:
            raw = self._backend.get_item(self._key)
        except StorageError as e:
            self._audit_logger.log_storage_load_failed(self._key, str(e))
            return []

        if raw is None:
            return []

        try:
            return _EXPENSE_LIST.validate_json(raw)
        except ValidationError as e:
            # Covers malformed JSON as well as records of the wrong shape
            self._audit_logger.log_storage_load_failed(
                self._key,
                f"{e.error_count()} validation errors: {e.errors()[0]['msg']}",
            )
            return []

    def save(self, expenses: Iterable[Expense]) -> bool:
        expenses = list(expenses)
        payload = _EXPENSE_LIST.dump_json(expenses, by_alias=True).decode("utf-8")

        try:
            self._backend.set_item(self._key, payload)
        except StorageError as e:
            self._audit_logger.log_storage_save_failed(
                self._key,
                str(e),
                expense_count=len(expenses),
            )
            return False

        return True

    def clear(self) -> None:
        """Remove the stored collection entirely."""
        self._backend.remove_item(self._key)
