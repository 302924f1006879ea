"""
Data Models Package

This package contains all Pydantic models used in the Expense Tracker.
All data flowing through the system must conform to these schemas.
"""

from expense_tracker.models.expense import (
    ALL_CATEGORIES,
    CategoryFilter,
    CategoryRanking,
    Expense,
    ExpenseCategory,
    ExpenseFilters,
    ExpenseFormData,
    ExpenseSummary,
    MonthlyInsights,
    MonthlyTotal,
    MutationResult,
    StoreState,
    ValidationIssue,
    ValidationResult,
    VendorSummary,
)
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "ALL_CATEGORIES",
    "CategoryFilter",
    "CategoryRanking",
    "Expense",
    "ExpenseCategory",
    "ExpenseFilters",
    "ExpenseFormData",
    "ExpenseSummary",
    "MonthlyInsights",
    "MonthlyTotal",
    "MutationResult",
    "StoreState",
    "ValidationIssue",
    "ValidationResult",
    "VendorSummary",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
