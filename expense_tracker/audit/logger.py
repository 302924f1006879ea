"""
Audit Logger

DESIGN DECISION: Every change to the expense collection is logged.
This provides:
1. Traceability of edits and deletions
2. Debugging capability when local storage misbehaves
3. Visibility into mutations that were skipped

The audit logger:
- Writes structured JSON lines through structlog
- Gracefully handles failures (never crashes the app if logging fails)
"""

import logging
import sys
from typing import Optional

import structlog

from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditSeverity,
)


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route stdlib logging (and therefore structlog) to stderr.

    structlog renders the JSON line itself, so the handler
    only prints the message.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Events are written to the structured local log at a level
    matching their severity.
    """

    def __init__(self, logger_name: Optional[str] = None):
        self._logger = structlog.get_logger(logger_name or "expense_tracker.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the log write failed; never raises.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            return False

        return True

    def log_store_ready(self, expense_count: int) -> None:
        """Log the store finishing its initial load."""
        self.log(AuditEventBuilder.store_ready(expense_count))

    def log_expense_added(
        self,
        expense_id: str,
        amount: float,
        category: str,
    ) -> None:
        """Log a new expense."""
        event = AuditEventBuilder.expense_added(
            expense_id=expense_id,
            amount=amount,
            category=category,
        )
        self.log(event)

    def log_expense_updated(
        self,
        expense_id: str,
        changed_fields: list[str],
    ) -> None:
        """Log an expense edit."""
        event = AuditEventBuilder.expense_updated(
            expense_id=expense_id,
            changed_fields=changed_fields,
        )
        self.log(event)

    def log_expense_deleted(self, expense_id: str) -> None:
        """Log an expense deletion."""
        self.log(AuditEventBuilder.expense_deleted(expense_id))

    def log_mutation_ignored(self, expense_id: str, operation: str) -> None:
        """Log an update/delete that referenced an unknown ID."""
        self.log(AuditEventBuilder.mutation_ignored(expense_id, operation))

    def log_filters_changed(self, changes: dict) -> None:
        self.log(AuditEventBuilder.filters_changed(changes))

    def log_filters_cleared(self) -> None:
        self.log(AuditEventBuilder.filters_cleared())

    def log_storage_load_failed(
        self,
        storage_key: str,
        error_message: str,
    ) -> None:
        """Log a failed read of the stored collection."""
        event = AuditEventBuilder.storage_load_failed(
            storage_key=storage_key,
            error_message=error_message,
        )
        self.log(event)

    def log_storage_save_failed(
        self,
        storage_key: str,
        error_message: str,
        expense_count: int,
    ) -> None:
        """Log a failed write of the collection."""
        event = AuditEventBuilder.storage_save_failed(
            storage_key=storage_key,
            error_message=error_message,
            expense_count=expense_count,
        )
        self.log(event)

    def log_export_generated(
        self,
        export_format: str,
        expense_count: int,
        filename: str,
    ) -> None:
        """Log a generated CSV/JSON export."""
        event = AuditEventBuilder.export_generated(
            export_format=export_format,
            expense_count=expense_count,
            filename=filename,
        )
        self.log(event)

    def log_export_aborted(self, export_format: str, reason: str) -> None:
        """Log an export that was refused."""
        self.log(AuditEventBuilder.export_aborted(export_format, reason))
