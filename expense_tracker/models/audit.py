"""
Audit Models for the Expense Tracker

Every change to the expense collection, and every storage or export
failure, is recorded as an AuditEvent and written to the structured log.
This provides:
1. Traceability of edits (who changed what, and when)
2. Debugging information when the local store misbehaves
3. A record of mutations that were skipped (unknown IDs)

DESIGN DECISION: Audit events are write-only. Nothing in the app reads
them back to make decisions.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Store lifecycle
    STORE_READY = "store_ready"

    # Collection changes
    EXPENSE_ADDED = "expense_added"
    EXPENSE_UPDATED = "expense_updated"
    EXPENSE_DELETED = "expense_deleted"
    MUTATION_IGNORED = "mutation_ignored"

    # Filters
    FILTERS_CHANGED = "filters_changed"
    FILTERS_CLEARED = "filters_cleared"

    # Persistence
    STORAGE_LOAD_FAILED = "storage_load_failed"
    STORAGE_SAVE_FAILED = "storage_save_failed"

    # Export
    EXPORT_GENERATED = "export_generated"
    EXPORT_ABORTED = "export_aborted"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of the audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'storage', 'export')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(expense_id, amount, category)
        event = AuditEventBuilder.storage_save_failed(key, error)
    """

    @staticmethod
    def store_ready(expense_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_READY,
            entity_type="store",
            description=f"Store ready with {expense_count} expenses",
            details={"expense_count": expense_count},
        )

    @staticmethod
    def expense_added(
        expense_id: str,
        amount: float,
        category: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense added: {category} ${amount:,.2f}",
            details={
                "amount": amount,
                "category": category,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_updated(
        expense_id: str,
        changed_fields: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_UPDATED,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense updated ({len(changed_fields)} fields changed)",
            details={"changed_fields": changed_fields},
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(expense_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_id=expense_id,
            description="Expense deleted",
            is_user_action=True,
        )

    @staticmethod
    def mutation_ignored(expense_id: str, operation: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MUTATION_IGNORED,
            severity=AuditSeverity.WARNING,
            entity_type="expense",
            entity_id=expense_id,
            description=f"{operation.capitalize()} skipped: no expense with this ID",
            details={"operation": operation},
            is_user_action=True,
        )

    @staticmethod
    def filters_changed(changes: dict[str, Any]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FILTERS_CHANGED,
            severity=AuditSeverity.DEBUG,
            entity_type="filters",
            description="Filters changed",
            details={key: str(value) for key, value in changes.items()},
            is_user_action=True,
        )

    @staticmethod
    def filters_cleared() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FILTERS_CLEARED,
            severity=AuditSeverity.DEBUG,
            entity_type="filters",
            description="Filters reset to defaults",
            is_user_action=True,
        )

    @staticmethod
    def storage_load_failed(storage_key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="storage",
            entity_id=storage_key,
            description="Stored expenses could not be read; starting empty",
            error_message=error_message,
        )

    @staticmethod
    def storage_save_failed(
        storage_key: str,
        error_message: str,
        expense_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="storage",
            entity_id=storage_key,
            description="Expenses could not be written to local storage",
            error_message=error_message,
            details={"expense_count": expense_count},
        )

    @staticmethod
    def export_generated(
        export_format: str,
        expense_count: int,
        filename: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_GENERATED,
            entity_type="export",
            entity_id=filename,
            description=f"Exported {expense_count} expenses as {export_format.upper()}",
            details={
                "format": export_format,
                "expense_count": expense_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def export_aborted(export_format: str, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_ABORTED,
            severity=AuditSeverity.WARNING,
            entity_type="export",
            description=f"{export_format.upper()} export aborted",
            error_message=reason,
            details={"format": export_format},
            is_user_action=True,
        )
