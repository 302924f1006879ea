"""Display formatting for amounts and dates (US conventions)."""

from datetime import date


def format_currency(amount: float) -> str:
    """Format as US dollars, e.g. -$1,234.50."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_date(value: date) -> str:
    """Medium date, e.g. 'Jan 15, 2024'."""
    return f"{value.strftime('%b')} {value.day}, {value.year}"


def format_short_date(value: date) -> str:
    """Short numeric date, e.g. '1/15/2024'."""
    return f"{value.month}/{value.day}/{value.year}"
