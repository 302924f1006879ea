"""Tests for the local storage adapter and key-value backends."""

import json

import pytest
from structlog.testing import capture_logs

from expense_tracker.models.expense import ExpenseCategory
from expense_tracker.services.storage import (
    DEFAULT_STORAGE_KEY,
    FileKeyValueBackend,
    InMemoryKeyValueBackend,
    LocalStorageExpenseStorage,
    QuotaExceededError,
    StorageReadError,
)
from expense_tracker.services.storage.interface import KeyValueBackend


class BrokenBackend(KeyValueBackend):
    """Backend whose every operation fails."""

    def get_item(self, key):
        raise StorageReadError("disk unavailable")

    def set_item(self, key, value):
        raise QuotaExceededError(key, len(value), 0)

    def remove_item(self, key):
        pass


class TestInMemoryKeyValueBackend:
    """Tests for the dict-backed backend."""

    def test_get_missing_key(self):
        """Test absent keys read as None."""
        assert InMemoryKeyValueBackend().get_item("nope") is None

    def test_set_overwrites(self):
        """Test set replaces the previous value."""
        backend = InMemoryKeyValueBackend()
        backend.set_item("k", "one")
        backend.set_item("k", "two")
        assert backend.get_item("k") == "two"

    def test_remove_missing_key_is_noop(self):
        """Test removing an absent key does not raise."""
        backend = InMemoryKeyValueBackend()
        backend.remove_item("nope")
        assert backend.get_item("nope") is None

    def test_quota_exceeded(self):
        """Test writes larger than the quota are refused."""
        backend = InMemoryKeyValueBackend(quota_bytes=4)
        with pytest.raises(QuotaExceededError) as exc_info:
            backend.set_item("k", "12345")
        assert exc_info.value.size == 5
        assert backend.get_item("k") is None


class TestFileKeyValueBackend:
    """Tests for the directory-backed backend."""

    def test_round_trip(self, tmp_path):
        """Test a value written can be read back."""
        backend = FileKeyValueBackend(tmp_path / "data")
        backend.set_item("k", '{"a": 1}')
        assert backend.get_item("k") == '{"a": 1}'
        assert (tmp_path / "data" / "k.json").exists()

    def test_missing_file_reads_none(self, tmp_path):
        """Test absent keys read as None without creating the directory."""
        backend = FileKeyValueBackend(tmp_path / "data")
        assert backend.get_item("k") is None
        assert not (tmp_path / "data").exists()

    def test_no_temp_files_left(self, tmp_path):
        """Test atomic writes clean up after themselves."""
        backend = FileKeyValueBackend(tmp_path)
        backend.set_item("k", "one")
        backend.set_item("k", "two")
        assert sorted(p.name for p in tmp_path.iterdir()) == ["k.json"]

    def test_quota_exceeded_keeps_previous_value(self, tmp_path):
        """Test an oversized write leaves the old document intact."""
        backend = FileKeyValueBackend(tmp_path, quota_bytes=8)
        backend.set_item("k", "small")
        with pytest.raises(QuotaExceededError):
            backend.set_item("k", "much too large")
        assert backend.get_item("k") == "small"

    def test_unreadable_path_raises_storage_error(self, tmp_path):
        """Test OS errors other than a missing file become StorageReadError."""
        backend = FileKeyValueBackend(tmp_path)
        with pytest.raises(StorageReadError):
            backend.get_item("k" * 300)

    def test_directory_in_place_of_file(self, tmp_path):
        """Test a key whose path is a directory cannot be read."""
        (tmp_path / "k.json").mkdir()
        with pytest.raises(StorageReadError):
            FileKeyValueBackend(tmp_path).get_item("k")

    def test_remove_item(self, tmp_path):
        """Test removing a key deletes its file."""
        backend = FileKeyValueBackend(tmp_path)
        backend.set_item("k", "v")
        backend.remove_item("k")
        assert backend.get_item("k") is None


class TestLocalStorageExpenseStorage:
    """Tests for loading and saving the expense collection."""

    def test_load_empty_on_first_run(self):
        """Test a missing key loads as an empty collection."""
        storage = LocalStorageExpenseStorage(InMemoryKeyValueBackend())
        assert storage.load() == []
        assert storage.storage_key == DEFAULT_STORAGE_KEY

    def test_round_trip(self, make_expense):
        """Test load(save(C)) == C."""
        expenses = [
            make_expense(amount=42.5, description="Lunch"),
            make_expense(
                amount=20.0,
                category=ExpenseCategory.BILLS,
                description='Power, "electric"',
            ),
        ]
        storage = LocalStorageExpenseStorage(InMemoryKeyValueBackend())
        assert storage.save(expenses) is True
        assert storage.load() == expenses

    def test_round_trip_through_files(self, tmp_path, make_expense):
        """Test the collection survives a new adapter on the same directory."""
        expenses = [make_expense(), make_expense(amount=3.25)]
        LocalStorageExpenseStorage(FileKeyValueBackend(tmp_path)).save(expenses)
        assert LocalStorageExpenseStorage(FileKeyValueBackend(tmp_path)).load() == expenses

    def test_stored_format(self, make_expense):
        """Test the document is a JSON array of camelCase records."""
        backend = InMemoryKeyValueBackend()
        LocalStorageExpenseStorage(backend, storage_key="k").save([make_expense()])
        records = json.loads(backend.get_item("k"))
        assert isinstance(records, list)
        assert records[0]["amount"] == 10.0
        assert records[0]["createdAt"].startswith("2024-01-20T12:00:00")

    def test_save_overwrites(self, make_expense):
        """Test each save replaces the previous collection."""
        storage = LocalStorageExpenseStorage(InMemoryKeyValueBackend())
        storage.save([make_expense(), make_expense()])
        storage.save([])
        assert storage.load() == []

    def test_malformed_json_loads_empty(self):
        """Test unparseable data resets to empty and is logged."""
        backend = InMemoryKeyValueBackend({DEFAULT_STORAGE_KEY: "{not json"})
        with capture_logs() as logs:
            storage = LocalStorageExpenseStorage(backend)
            assert storage.load() == []
        assert any(
            log.get("event_type") == "storage_load_failed" and log["log_level"] == "error"
            for log in logs
        )

    def test_incompatible_shape_loads_empty(self):
        """Test structurally wrong records reset to empty."""
        backend = InMemoryKeyValueBackend({
            DEFAULT_STORAGE_KEY: json.dumps([{"id": "1", "amount": "lots"}]),
        })
        assert LocalStorageExpenseStorage(backend).load() == []

    def test_non_array_loads_empty(self):
        """Test a JSON object instead of an array resets to empty."""
        backend = InMemoryKeyValueBackend({DEFAULT_STORAGE_KEY: '{"expenses": []}'})
        assert LocalStorageExpenseStorage(backend).load() == []

    def test_unreadable_backend_loads_empty(self):
        """Test a read failure degrades to empty."""
        assert LocalStorageExpenseStorage(BrokenBackend()).load() == []

    def test_inaccessible_file_loads_empty(self, tmp_path):
        """Test a path the OS refuses to open loads as empty and is logged."""
        with capture_logs() as logs:
            storage = LocalStorageExpenseStorage(
                FileKeyValueBackend(tmp_path), storage_key="k" * 300
            )
            assert storage.load() == []
        assert [log["event_type"] for log in logs] == ["storage_load_failed"]

    def test_save_failure_reported_not_raised(self, make_expense):
        """Test a failed write returns False and is logged."""
        with capture_logs() as logs:
            storage = LocalStorageExpenseStorage(BrokenBackend())
            assert storage.save([make_expense()]) is False
        failures = [log for log in logs if log.get("event_type") == "storage_save_failed"]
        assert len(failures) == 1
        assert failures[0]["details"]["expense_count"] == 1

    def test_clear(self, make_expense):
        """Test clearing removes the stored collection."""
        storage = LocalStorageExpenseStorage(InMemoryKeyValueBackend())
        storage.save([make_expense()])
        storage.clear()
        assert storage.load() == []
