"""
Aggregation Engine

DESIGN DECISION: Every aggregate is a pure function of the collection
and an explicit `today`. Nothing here reads the system clock, so the
same inputs always produce the same summary.

Rankings sort by amount (largest first) and break ties by name, so the
order never depends on the order expenses were added.
"""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, timedelta

from expense_tracker.models.expense import (
    CategoryRanking,
    Expense,
    ExpenseCategory,
    ExpenseSummary,
    MonthlyInsights,
    MonthlyTotal,
    VendorSummary,
)


def _in_month(expense: Expense, year: int, month: int) -> bool:
    return expense.date.year == year and expense.date.month == month


def _category_totals(expenses: Iterable[Expense]) -> dict[ExpenseCategory, float]:
    totals: dict[ExpenseCategory, float] = {}
    for expense in expenses:
        totals[expense.category] = totals.get(expense.category, 0.0) + expense.amount
    return totals


def _ranked(totals: dict[ExpenseCategory, float]) -> list[tuple[ExpenseCategory, float]]:
    return sorted(totals.items(), key=lambda item: (-item[1], item[0].value))


def compute_summary(expenses: Sequence[Expense], today: date) -> ExpenseSummary:
    """
    Summary statistics for the whole collection.

    Args:
        expenses: The full collection
        today: Reference day; monthly spending covers its calendar month

    Returns:
        ExpenseSummary (categories without expenses are left out of
        the breakdown)
    """
    total = sum(expense.amount for expense in expenses)
    monthly = sum(
        expense.amount for expense in expenses
        if _in_month(expense, today.year, today.month)
    )
    count = len(expenses)

    return ExpenseSummary(
        total_spending=total,
        monthly_spending=monthly,
        category_breakdown=_category_totals(expenses),
        average_expense=total / count if count > 0 else 0.0,
        expense_count=count,
    )


def rank_categories(expenses: Sequence[Expense]) -> list[CategoryRanking]:
    """
    All categories ranked by total spend, including unused ones.

    Percentages are shares of total spending (0 when nothing is spent).
    """
    totals = _category_totals(expenses)
    grand_total = sum(totals.values())

    rows = [(category, totals.get(category, 0.0)) for category in ExpenseCategory]
    rows.sort(key=lambda row: (-row[1], row[0].value))

    return [
        CategoryRanking(
            rank=index,
            category=category,
            amount=amount,
            percentage=(amount / grand_total * 100) if grand_total > 0 else 0.0,
        )
        for index, (category, amount) in enumerate(rows, start=1)
    ]


def rank_vendors(expenses: Iterable[Expense]) -> list[VendorSummary]:
    """
    Spending grouped by vendor, largest first.

    The vendor is the expense description with surrounding whitespace
    removed. Expenses with a blank description are skipped.
    """
    totals: dict[str, float] = defaultdict(float)
    counts: dict[str, int] = defaultdict(int)
    breakdowns: dict[str, dict[ExpenseCategory, float]] = defaultdict(dict)

    for expense in expenses:
        name = expense.description.strip()
        if not name:
            continue
        totals[name] += expense.amount
        counts[name] += 1
        breakdown = breakdowns[name]
        breakdown[expense.category] = breakdown.get(expense.category, 0.0) + expense.amount

    vendors = [
        VendorSummary(
            name=name,
            total_amount=total,
            transaction_count=counts[name],
            average_amount=total / counts[name],
            category_breakdown=breakdowns[name],
        )
        for name, total in totals.items()
    ]
    vendors.sort(key=lambda vendor: (-vendor.total_amount, vendor.name))
    return vendors


def _shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def monthly_trend(
    expenses: Iterable[Expense],
    today: date,
    months: int = 6,
) -> list[MonthlyTotal]:
    """
    Spending per calendar month, oldest first, ending with today's month.

    Months without expenses are included with an amount of 0.
    """
    buckets: dict[str, float] = {}
    for offset in range(months - 1, -1, -1):
        year, month = _shift_month(today.year, today.month, -offset)
        buckets[f"{year:04d}-{month:02d}"] = 0.0

    for expense in expenses:
        key = expense.date.strftime("%Y-%m")
        if key in buckets:
            buckets[key] += expense.amount

    return [
        MonthlyTotal(
            key=key,
            label=date(int(key[:4]), int(key[5:]), 1).strftime("%b"),
            amount=amount,
        )
        for key, amount in buckets.items()
    ]


def budget_streak(
    expenses: Iterable[Expense],
    today: date,
    daily_budget: float,
    max_days: int = 365,
) -> int:
    """
    Count consecutive days, ending today, spent within the daily budget.

    Days with no expenses count as within budget. The count stops at
    the first day over budget, or after `max_days`.
    """
    daily_totals: dict[date, float] = defaultdict(float)
    for expense in expenses:
        daily_totals[expense.date] += expense.amount

    streak = 0
    day = today
    while streak < max_days and daily_totals.get(day, 0.0) <= daily_budget:
        streak += 1
        day -= timedelta(days=1)
    return streak


def monthly_insights(
    expenses: Sequence[Expense],
    today: date,
    top_n: int = 3,
    daily_budget: float = 100.0,
) -> MonthlyInsights:
    """Category breakdown and budget streak for today's calendar month."""
    month_expenses = [
        expense for expense in expenses
        if _in_month(expense, today.year, today.month)
    ]
    totals = _category_totals(month_expenses)
    month_total = sum(totals.values())

    shares = (
        {category: amount / month_total for category, amount in totals.items()}
        if month_total > 0 else {}
    )

    return MonthlyInsights(
        total=month_total,
        expense_count=len(month_expenses),
        category_totals=totals,
        top_categories=_ranked(totals)[:top_n],
        category_shares=shares,
        budget_streak=budget_streak(expenses, today, daily_budget),
    )


def sort_by_date(expenses: Iterable[Expense], newest_first: bool = True) -> list[Expense]:
    """Sort by expense date; equal dates keep their relative order."""
    return sorted(expenses, key=lambda expense: expense.date, reverse=newest_first)


def recent_expenses(expenses: Iterable[Expense], limit: int = 5) -> list[Expense]:
    """The `limit` most recent expenses by date."""
    return sort_by_date(expenses)[:limit]
