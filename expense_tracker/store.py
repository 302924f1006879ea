"""
Expense Store

The store is the single owner of the expense collection and the current
filters. Everything else reads derived snapshots from it and changes
data only through its operations.

DESIGN DECISION: The store is an explicit object, created once per
session and handed to the UI, with its collaborators injected:
- storage: where the collection is persisted (write-through)
- clock: what "now" means (UTC timestamps; its local calendar day
  decides the current month)
- id_factory: how new expense IDs are generated

Lifecycle:
    LOADING --load()--> READY

The transition happens exactly once, whether or not the stored data
could be read. Mutations are only allowed once READY.

After every mutation the whole collection is written to storage and the
summary and filtered views are recomputed from scratch.
"""

from collections.abc import Callable
from datetime import date, datetime, timezone
from typing import Optional
from uuid import uuid4

from expense_tracker.audit import AuditLogger
from expense_tracker.config import Settings, get_settings
from expense_tracker.export import ExportFormat, EmptyExportError, export_expenses, export_filename
from expense_tracker.models.expense import (
    Expense,
    ExpenseFilters,
    ExpenseFormData,
    ExpenseSummary,
    MutationResult,
    StoreState,
)
from expense_tracker.queries import apply_filters, compute_summary
from expense_tracker.services.storage import (
    ExpenseStorageInterface,
    FileKeyValueBackend,
    LocalStorageExpenseStorage,
)


_EDITABLE_FIELDS = ("amount", "category", "description", "date")


class StoreError(Exception):
    """Base exception for store operations."""
    pass


class StoreNotReadyError(StoreError):
    """A mutation was attempted before the initial load."""
    pass


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid4())


class ExpenseStore:
    """
    In-memory expense collection with write-through persistence.

    Read views (`expenses`, `summary`, `filtered_expenses`) are
    snapshots; mutating a returned list does not affect the store.
    """

    def __init__(
        self,
        storage: ExpenseStorageInterface,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = _new_id,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._clock = clock
        self._id_factory = id_factory
        self._audit_logger = audit_logger or AuditLogger()

        self._state = StoreState.LOADING
        self._expenses: list[Expense] = []
        self._filters = ExpenseFilters()
        self._summary = ExpenseSummary()
        self._filtered: list[Expense] = []

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def state(self) -> StoreState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._state == StoreState.LOADING

    def load(self) -> None:
        """
        Read the stored collection and become READY.

        Storage failures leave the store empty but READY. Calling this
        again after the first load does nothing.
        """
        if self._state == StoreState.READY:
            return

        self._expenses = list(self._storage.load())
        self._state = StoreState.READY
        self._refresh()
        self._audit_logger.log_store_ready(len(self._expenses))

    def _require_ready(self) -> None:
        if self._state != StoreState.READY:
            raise StoreNotReadyError("Expenses have not been loaded yet")

    # ------------------------------------------------------------------
    # Read views
    # ------------------------------------------------------------------

    def today(self) -> date:
        """Current calendar day in local time, according to the injected clock."""
        return self._clock().astimezone().date()

    @property
    def expenses(self) -> list[Expense]:
        return list(self._expenses)

    @property
    def filters(self) -> ExpenseFilters:
        return self._filters.model_copy()

    @property
    def summary(self) -> ExpenseSummary:
        return self._summary

    @property
    def filtered_expenses(self) -> list[Expense]:
        return list(self._filtered)

    def get_expense_by_id(self, expense_id: str) -> Optional[Expense]:
        """Look up an expense; None if no expense has this ID."""
        for expense in self._expenses:
            if expense.id == expense_id:
                return expense
        return None

    def refresh(self) -> None:
        """
        Recompute derived views without changing data.

        Useful when the day rolls over and monthly spending
        should move to the new month.
        """
        self._refresh()

    def _refresh(self) -> None:
        self._summary = compute_summary(self._expenses, self.today())
        self._filtered = apply_filters(self._expenses, self._filters)

    def _commit(self) -> None:
        # In-memory state stays authoritative if the write fails
        self._storage.save(self._expenses)
        self._refresh()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _generate_id(self) -> str:
        existing = {expense.id for expense in self._expenses}
        expense_id = self._id_factory()
        while expense_id in existing:
            expense_id = self._id_factory()
        return expense_id

    def add_expense(self, form: ExpenseFormData) -> Expense:
        """
        Record a new expense at the front of the collection.

        Returns:
            The stored expense, with its generated ID and timestamps
        """
        self._require_ready()

        now = self._clock()
        expense = Expense(
            id=self._generate_id(),
            amount=form.amount,
            category=form.category,
            description=form.description,
            date=form.date,
            created_at=now,
            updated_at=now,
        )
        self._expenses.insert(0, expense)
        self._commit()

        self._audit_logger.log_expense_added(
            expense_id=expense.id,
            amount=expense.amount,
            category=expense.category.value,
        )
        return expense

    def update_expense(self, expense_id: str, form: ExpenseFormData) -> MutationResult:
        """
        Replace the editable fields of an expense.

        `created_at` is kept; `updated_at` is set to now. An unknown ID
        changes nothing and returns a result with `applied=False`.
        """
        self._require_ready()

        for index, current in enumerate(self._expenses):
            if current.id != expense_id:
                continue

            changes = {field: getattr(form, field) for field in _EDITABLE_FIELDS}
            changed_fields = [
                field for field in _EDITABLE_FIELDS
                if getattr(current, field) != changes[field]
            ]
            updated = current.model_copy(
                update={**changes, "updated_at": self._clock()}
            )
            self._expenses[index] = updated
            self._commit()

            self._audit_logger.log_expense_updated(expense_id, changed_fields)
            return MutationResult(expense_id=expense_id, applied=True, expense=updated)

        self._audit_logger.log_mutation_ignored(expense_id, "update")
        return MutationResult(expense_id=expense_id, applied=False)

    def delete_expense(self, expense_id: str) -> MutationResult:
        """
        Remove an expense.

        An unknown ID changes nothing and returns a result with
        `applied=False`.
        """
        self._require_ready()

        removed = self.get_expense_by_id(expense_id)
        if removed is None:
            self._audit_logger.log_mutation_ignored(expense_id, "delete")
            return MutationResult(expense_id=expense_id, applied=False)

        self._expenses = [
            expense for expense in self._expenses if expense.id != expense_id
        ]
        self._commit()

        self._audit_logger.log_expense_deleted(expense_id)
        return MutationResult(expense_id=expense_id, applied=True, expense=removed)

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def set_filters(self, **changes) -> ExpenseFilters:
        """
        Merge filter changes into the current filters.

        Example:
            store.set_filters(category=ExpenseCategory.BILLS, search="")

        Raises:
            pydantic.ValidationError: On unknown filter names or bad values
        """
        merged = {**self._filters.model_dump(), **changes}
        self._filters = ExpenseFilters.model_validate(merged)
        self._filtered = apply_filters(self._expenses, self._filters)

        self._audit_logger.log_filters_changed(changes)
        return self.filters

    def clear_filters(self) -> ExpenseFilters:
        """Reset filters to their defaults."""
        self._filters = ExpenseFilters()
        self._filtered = apply_filters(self._expenses, self._filters)

        self._audit_logger.log_filters_cleared()
        return self.filters

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export(
        self,
        export_format: ExportFormat,
        expenses: Optional[list[Expense]] = None,
        basename: Optional[str] = None,
    ) -> tuple[str, str]:
        """
        Render expenses for download.

        Args:
            export_format: CSV, JSON or HTML report
            expenses: Selection to export; defaults to the whole collection
            basename: File name without extension; defaults to a dated name

        Returns:
            (content, filename)

        Raises:
            EmptyExportError: If the selection is empty
        """
        selection = self._expenses if expenses is None else expenses
        try:
            content = export_expenses(selection, export_format, generated_on=self.today())
        except EmptyExportError as e:
            self._audit_logger.log_export_aborted(export_format.value, str(e))
            raise

        filename = export_filename(export_format, self.today(), basename)
        self._audit_logger.log_export_generated(
            export_format=export_format.value,
            expense_count=len(selection),
            filename=filename,
        )
        return content, filename


def create_store(
    settings: Optional[Settings] = None,
    load: bool = True,
) -> ExpenseStore:
    """
    Factory wiring the store to file-backed local storage.

    Args:
        settings: Configuration; defaults to the global settings
        load: Read the stored collection immediately

    Returns:
        The store (READY if `load` is True)
    """
    settings = settings or get_settings()
    storage_settings = settings.storage

    audit_logger = AuditLogger()
    backend = FileKeyValueBackend(
        storage_settings.data_path,
        quota_bytes=storage_settings.quota_bytes,
    )
    storage = LocalStorageExpenseStorage(
        backend,
        storage_key=storage_settings.storage_key,
        audit_logger=audit_logger,
    )

    store = ExpenseStore(storage, audit_logger=audit_logger)
    if load:
        store.load()
    return store
