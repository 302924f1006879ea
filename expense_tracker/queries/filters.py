"""
Expense Filtering

Pure predicates over the in-memory collection. Nothing here sorts:
results keep the order of the input, and display order is up to
the caller.

Date bounds compare calendar dates, so an end date includes the
whole of that day.
"""

from collections.abc import Collection, Iterable
from datetime import date
from typing import Optional

from expense_tracker.models.expense import (
    ALL_CATEGORIES,
    Expense,
    ExpenseCategory,
    ExpenseFilters,
)


def _in_date_range(
    expense: Expense,
    start_date: Optional[date],
    end_date: Optional[date],
) -> bool:
    if start_date and expense.date < start_date:
        return False
    if end_date and expense.date > end_date:
        return False
    return True


def matches_search(expense: Expense, search: str) -> bool:
    """Case-insensitive substring match on description or category."""
    if not search:
        return True
    needle = search.lower()
    return (
        needle in expense.description.lower()
        or needle in expense.category.value.lower()
    )


def matches_filters(expense: Expense, filters: ExpenseFilters) -> bool:
    """True if the expense passes every active filter."""
    if not matches_search(expense, filters.search):
        return False

    if filters.category != ALL_CATEGORIES and expense.category != filters.category:
        return False

    return _in_date_range(expense, filters.start_date, filters.end_date)


def apply_filters(
    expenses: Iterable[Expense],
    filters: ExpenseFilters,
) -> list[Expense]:
    """
    Return the expenses matching all active filters, in input order.

    Filtering is idempotent: applying the same filters to the
    result returns it unchanged.
    """
    return [expense for expense in expenses if matches_filters(expense, filters)]


def select_for_export(
    expenses: Iterable[Expense],
    categories: Optional[Collection[ExpenseCategory]] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> list[Expense]:
    """
    Pick the expenses to include in an export.

    Args:
        expenses: Source collection
        categories: Allowed categories; None allows all of them
        start_date: Drop expenses before this day
        end_date: Drop expenses after this day

    Returns:
        Matching expenses in input order
    """
    allowed = set(ExpenseCategory) if categories is None else set(categories)
    return [
        expense for expense in expenses
        if expense.category in allowed
        and _in_date_range(expense, start_date, end_date)
    ]
