"""Filtering and aggregation over the expense collection."""

from expense_tracker.queries.aggregation import (
    budget_streak,
    compute_summary,
    monthly_insights,
    monthly_trend,
    rank_categories,
    rank_vendors,
    recent_expenses,
    sort_by_date,
)
from expense_tracker.queries.filters import (
    apply_filters,
    matches_filters,
    matches_search,
    select_for_export,
)

__all__ = [
    "apply_filters",
    "budget_streak",
    "compute_summary",
    "matches_filters",
    "matches_search",
    "monthly_insights",
    "monthly_trend",
    "rank_categories",
    "rank_vendors",
    "recent_expenses",
    "select_for_export",
    "sort_by_date",
]
