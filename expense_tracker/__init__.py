"""
Expense Tracker - Source Package

A personal expense tracker: record expenses, browse and filter them,
export them, and see where the money goes.

DESIGN PRINCIPLES:
1. One owner for the data (the ExpenseStore)
2. Derived views are recomputed, never edited
3. Storage failures degrade, they never crash
4. Time is injected, so every aggregate is reproducible
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
