"""
Core Data Models for the Expense Tracker

These models define the schemas for every record flowing through the system.
They are designed to:
1. Round-trip cleanly through the local JSON store
2. Keep the stored field names stable (camelCase on disk)
3. Separate user-editable input from store-managed fields

DESIGN DECISION: The store trusts ExpenseFormData. Range checks
(amount limits, future dates) live in the validation package and run
before anything reaches the store.
"""

import datetime as dt
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ExpenseCategory(str, Enum):
    """
    Supported expense categories.

    The string values are what gets stored and exported.
    """
    FOOD = "Food"
    TRANSPORTATION = "Transportation"
    ENTERTAINMENT = "Entertainment"
    SHOPPING = "Shopping"
    BILLS = "Bills"
    OTHER = "Other"


# Filter sentinel meaning "no category restriction"
ALL_CATEGORIES = "All"

CategoryFilter = Union[ExpenseCategory, Literal["All"]]


class StoreState(str, Enum):
    """Lifecycle of the expense store."""
    LOADING = "loading"  # durable state not read yet
    READY = "ready"      # collection available, mutations permitted


# =============================================================================
# CORE EXPENSE MODEL
# =============================================================================

class ExpenseFormData(BaseModel):
    """User-editable fields of an expense."""
    model_config = ConfigDict(str_strip_whitespace=True)

    amount: float = Field(
        ...,
        description="Amount spent (display currency is USD)"
    )
    category: ExpenseCategory = Field(
        default=ExpenseCategory.FOOD,
        description="Spending category"
    )
    description: str = Field(
        ...,
        description="What the money was spent on (doubles as vendor name)"
    )
    date: dt.date = Field(
        ...,
        description="Day the expense occurred"
    )


class Expense(BaseModel):
    """
    A single recorded expense.

    `id`, `created_at` and `updated_at` are owned by the store and are
    never set from user input. On disk the timestamps are stored as
    `createdAt` / `updatedAt`; both spellings are accepted when loading.
    """

    id: str = Field(
        ...,
        min_length=1,
        description="Unique, immutable expense ID"
    )
    amount: float = Field(
        ...,
        description="Amount spent"
    )
    category: ExpenseCategory
    description: str
    date: dt.date
    created_at: dt.datetime = Field(
        ...,
        validation_alias=AliasChoices("createdAt", "created_at"),
        serialization_alias="createdAt",
    )
    updated_at: dt.datetime = Field(
        ...,
        validation_alias=AliasChoices("updatedAt", "updated_at"),
        serialization_alias="updatedAt",
    )

    def to_storage_dict(self) -> dict:
        """Convert to the JSON-ready dict written to the local store."""
        return self.model_dump(mode="json", by_alias=True)

    def to_form_data(self) -> ExpenseFormData:
        """Editable view of this expense (pre-fills the edit form)."""
        return ExpenseFormData(
            amount=self.amount,
            category=self.category,
            description=self.description,
            date=self.date,
        )


class ExpenseFilters(BaseModel):
    """
    Filter criteria for the expense list.

    Empty defaults mean "match everything". Filters are session state
    only and are never persisted.
    """
    model_config = ConfigDict(extra="forbid")

    search: str = Field(
        default="",
        description="Case-insensitive substring of description or category"
    )
    category: CategoryFilter = Field(
        default=ALL_CATEGORIES,
        description="A specific category, or 'All'"
    )
    start_date: Optional[dt.date] = Field(
        default=None,
        description="Exclude expenses before this day"
    )
    end_date: Optional[dt.date] = Field(
        default=None,
        description="Exclude expenses after this day (inclusive of the day)"
    )

    @property
    def is_active(self) -> bool:
        """True when any filter narrows the result."""
        return bool(
            self.search
            or self.category != ALL_CATEGORIES
            or self.start_date
            or self.end_date
        )


class MutationResult(BaseModel):
    """
    Outcome of an update or delete.

    Unknown IDs are not an error: the mutation is skipped and
    `applied` is False.
    """

    expense_id: str
    applied: bool
    expense: Optional[Expense] = Field(
        default=None,
        description="The updated or removed expense, if any"
    )


# =============================================================================
# DERIVED VIEWS (never persisted)
# =============================================================================

class ExpenseSummary(BaseModel):
    """
    Aggregate statistics over the whole collection.

    Categories without expenses are absent from `category_breakdown`;
    use `amount_for` to read a category with a zero default.
    """

    total_spending: float = 0.0
    monthly_spending: float = 0.0
    category_breakdown: dict[ExpenseCategory, float] = Field(default_factory=dict)
    average_expense: float = 0.0
    expense_count: int = Field(default=0, ge=0)

    def amount_for(self, category: ExpenseCategory) -> float:
        return self.category_breakdown.get(category, 0.0)


class CategoryRanking(BaseModel):
    """One row of the top-categories table."""

    rank: int = Field(ge=1)
    category: ExpenseCategory
    amount: float
    percentage: float = Field(
        ge=0.0,
        description="Share of total spending, 0-100"
    )


class VendorSummary(BaseModel):
    """Spending aggregated by vendor (the expense description)."""

    name: str
    total_amount: float
    transaction_count: int = Field(ge=1)
    average_amount: float
    category_breakdown: dict[ExpenseCategory, float] = Field(default_factory=dict)

    @property
    def categories(self) -> list[ExpenseCategory]:
        """Categories seen for this vendor, largest spend first."""
        return [
            category for category, _ in sorted(
                self.category_breakdown.items(),
                key=lambda item: (-item[1], item[0].value),
            )
        ]


class MonthlyTotal(BaseModel):
    """Spending for one calendar month."""

    key: str = Field(
        ...,
        pattern=r"^\d{4}-\d{2}$",
        description="Month key, YYYY-MM"
    )
    label: str = Field(..., description="Short month name, e.g. 'Jan'")
    amount: float = 0.0


class MonthlyInsights(BaseModel):
    """Breakdown of the current calendar month."""

    total: float = 0.0
    expense_count: int = 0
    category_totals: dict[ExpenseCategory, float] = Field(default_factory=dict)
    top_categories: list[tuple[ExpenseCategory, float]] = Field(default_factory=list)
    category_shares: dict[ExpenseCategory, float] = Field(
        default_factory=dict,
        description="Fraction (0-1) of the month's total per category"
    )
    budget_streak: int = Field(
        default=0,
        ge=0,
        description="Consecutive days up to today within the daily budget"
    )


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'out_of_range', 'future_date')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """Result of validating an expense form."""

    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    def errors_by_field(self) -> dict[str, str]:
        """First error message per field, for inline form errors."""
        errors: dict[str, str] = {}
        for issue in self.issues:
            if issue.severity == "error":
                errors.setdefault(issue.field, issue.message)
        return errors
