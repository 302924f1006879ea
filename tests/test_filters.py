"""Tests for the filter engine."""

from datetime import date

from expense_tracker.models.expense import ALL_CATEGORIES, ExpenseCategory, ExpenseFilters
from expense_tracker.queries.filters import (
    apply_filters,
    matches_search,
    select_for_export,
)


class TestSearch:
    """Tests for free-text search."""

    def test_empty_search_matches(self, make_expense):
        """Test an empty search matches every expense."""
        assert matches_search(make_expense(), "") is True

    def test_description_case_insensitive(self, make_expense):
        """Test search ignores case in descriptions."""
        expense = make_expense(description="Morning Coffee")
        assert matches_search(expense, "coffee") is True
        assert matches_search(expense, "COFFEE") is True

    def test_matches_category_name(self, make_expense):
        """Test search also looks at the category."""
        expense = make_expense(description="Rent", category=ExpenseCategory.BILLS)
        assert matches_search(expense, "bill") is True
        assert matches_search(expense, "food") is False


class TestApplyFilters:
    """Tests for apply_filters."""

    def test_default_filters_keep_everything(self, make_expense):
        """Test inactive filters return the collection unchanged."""
        expenses = [make_expense(), make_expense(), make_expense()]
        assert apply_filters(expenses, ExpenseFilters()) == expenses

    def test_category_filter(self, make_expense):
        """Test only the chosen category is kept."""
        food = make_expense(category=ExpenseCategory.FOOD)
        bills = make_expense(category=ExpenseCategory.BILLS)
        filters = ExpenseFilters(category=ExpenseCategory.BILLS)
        assert apply_filters([food, bills], filters) == [bills]

    def test_all_category_keeps_everything(self, make_expense):
        """Test the All sentinel disables the category filter."""
        expenses = [
            make_expense(category=ExpenseCategory.FOOD),
            make_expense(category=ExpenseCategory.OTHER),
        ]
        assert apply_filters(expenses, ExpenseFilters(category=ALL_CATEGORIES)) == expenses

    def test_search_and_category_combined(self, make_expense):
        """Test a Food expense is excluded by a Bills filter even when search matches."""
        coffee = make_expense(description="Coffee", category=ExpenseCategory.FOOD)
        filters = ExpenseFilters(search="coffee", category=ExpenseCategory.BILLS)
        assert apply_filters([coffee], filters) == []

    def test_end_date_inclusive(self, make_expense):
        """Test an expense dated on the end date is kept."""
        on_end = make_expense(expense_date=date(2024, 1, 31))
        after_end = make_expense(expense_date=date(2024, 2, 1))
        filters = ExpenseFilters(end_date=date(2024, 1, 31))
        assert apply_filters([on_end, after_end], filters) == [on_end]

    def test_start_date_inclusive(self, make_expense):
        """Test an expense dated on the start date is kept."""
        before = make_expense(expense_date=date(2023, 12, 31))
        on_start = make_expense(expense_date=date(2024, 1, 1))
        filters = ExpenseFilters(start_date=date(2024, 1, 1))
        assert apply_filters([before, on_start], filters) == [on_start]

    def test_keeps_input_order(self, make_expense):
        """Test results are not re-sorted."""
        expenses = [
            make_expense(expense_date=date(2024, 1, 1)),
            make_expense(expense_date=date(2024, 1, 10)),
            make_expense(expense_date=date(2024, 1, 5)),
        ]
        filters = ExpenseFilters(search="lunch")
        assert apply_filters(expenses, filters) == expenses

    def test_idempotent(self, make_expense):
        """Test filtering twice gives the same result as once."""
        expenses = [
            make_expense(description="Coffee", expense_date=date(2024, 1, 3)),
            make_expense(description="Taxi", category=ExpenseCategory.TRANSPORTATION),
            make_expense(description="Coffee beans", expense_date=date(2024, 2, 3)),
        ]
        filters = ExpenseFilters(search="coffee", end_date=date(2024, 1, 31))
        once = apply_filters(expenses, filters)
        assert apply_filters(once, filters) == once

    def test_result_is_subset(self, make_expense):
        """Test every result is an element of the input."""
        expenses = [make_expense(description=d) for d in ("Tea", "Coffee", "Cake")]
        result = apply_filters(expenses, ExpenseFilters(search="c"))
        assert all(expense in expenses for expense in result)
        assert len(result) == 2


class TestSelectForExport:
    """Tests for select_for_export."""

    def test_no_restrictions(self, make_expense):
        """Test everything is selected by default."""
        expenses = [make_expense(), make_expense(category=ExpenseCategory.OTHER)]
        assert select_for_export(expenses) == expenses

    def test_categories_and_dates(self, make_expense):
        """Test category and date bounds both apply."""
        keep = make_expense(category=ExpenseCategory.BILLS, expense_date=date(2024, 1, 10))
        wrong_category = make_expense(category=ExpenseCategory.FOOD, expense_date=date(2024, 1, 10))
        too_late = make_expense(category=ExpenseCategory.BILLS, expense_date=date(2024, 1, 21))
        selection = select_for_export(
            [keep, wrong_category, too_late],
            categories=[ExpenseCategory.BILLS],
            start_date=date(2024, 1, 1),
            end_date=date(2024, 1, 20),
        )
        assert selection == [keep]

    def test_empty_category_list_selects_nothing(self, make_expense):
        """Test an explicit empty category list excludes everything."""
        assert select_for_export([make_expense()], categories=[]) == []
