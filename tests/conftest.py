"""Shared fixtures for Expense Tracker tests."""

from datetime import date, datetime, timedelta, timezone
from itertools import count
from typing import Optional

import pytest

from expense_tracker.models.expense import Expense, ExpenseCategory


FIXED_NOW = datetime(2024, 1, 20, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_expense():
    """Factory for expenses with sequential IDs."""
    ids = count(1)

    def _make(
        amount: float = 10.0,
        category: ExpenseCategory = ExpenseCategory.FOOD,
        description: str = "Lunch",
        expense_date: date = date(2024, 1, 15),
        expense_id: Optional[str] = None,
    ) -> Expense:
        return Expense(
            id=expense_id or f"exp-{next(ids)}",
            amount=amount,
            category=category,
            description=description,
            date=expense_date,
            created_at=FIXED_NOW,
            updated_at=FIXED_NOW,
        )

    return _make
