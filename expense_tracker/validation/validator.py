"""
Expense Form Validation

DESIGN DECISION: Validation happens at the input boundary, before the
store is called. The store itself trusts what it is given.

Checks:
- Amount is positive and not absurdly large
- Description is present and not too long
- Date is not in the future

IMPORTANT: Validation NEVER silently fixes input.
It reports issues for the user to correct.
"""

from datetime import date
from typing import Optional

from expense_tracker.config import AppSettings, get_settings
from expense_tracker.models.expense import (
    ExpenseFormData,
    ValidationIssue,
    ValidationResult,
)


class ExpenseValidator:
    """Validates expense form input against the configured limits."""

    def __init__(self, settings: Optional[AppSettings] = None):
        """
        Initialize validator.

        Args:
            settings: Limits to apply. Defaults to the global app settings.
        """
        self._settings = settings or get_settings().app

    def _validate_amount(self, amount: float) -> list[ValidationIssue]:
        if amount != amount:  # NaN
            return [ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Please enter a valid amount",
                severity="error",
            )]
        if amount <= 0:
            return [ValidationIssue(
                field="amount",
                issue_type="out_of_range",
                message="Amount must be greater than 0",
                severity="error",
            )]
        if amount > self._settings.max_expense_amount:
            return [ValidationIssue(
                field="amount",
                issue_type="out_of_range",
                message="Amount seems too large",
                severity="error",
            )]
        return []

    def _validate_description(self, description: str) -> list[ValidationIssue]:
        if not description.strip():
            return [ValidationIssue(
                field="description",
                issue_type="missing",
                message="Please enter a description",
                severity="error",
            )]
        limit = self._settings.max_description_length
        if len(description) > limit:
            return [ValidationIssue(
                field="description",
                issue_type="too_long",
                message=f"Description must be less than {limit} characters",
                severity="error",
            )]
        return []

    def _validate_date(self, expense_date: date, today: date) -> list[ValidationIssue]:
        if expense_date > today:
            return [ValidationIssue(
                field="date",
                issue_type="future_date",
                message="Date cannot be in the future",
                severity="error",
            )]
        return []

    def validate(
        self,
        form: ExpenseFormData,
        today: Optional[date] = None,
    ) -> ValidationResult:
        """
        Validate an expense form.

        Args:
            form: The submitted form
            today: Reference day for the future-date check

        Returns:
            ValidationResult with all issues found
        """
        today = today or date.today()

        issues = []
        issues.extend(self._validate_amount(form.amount))
        issues.extend(self._validate_description(form.description))
        issues.extend(self._validate_date(form.date, today))

        return ValidationResult(
            is_valid=not any(issue.severity == "error" for issue in issues),
            issues=issues,
        )

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """Generate the message shown above the form."""
        if result.is_valid:
            return "✅ Looks good!"

        lines = ["❌ Please fix the following:"]
        for issue in result.issues:
            if issue.severity == "error":
                lines.append(f"   • {issue.message}")
        return "\n".join(lines)
