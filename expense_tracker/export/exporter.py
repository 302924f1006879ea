"""
CSV, JSON and Report Export

Exports are generated as strings; writing them to a file or a download
button is the caller's job.

CSV layout: `Date,Category,Amount,Description`, one row per expense,
dates as US short dates, amounts with two decimals. Descriptions are
quoted (with quotes doubled) only when they contain a comma, a quote or
a line break.

The report is a standalone HTML page ("Expense Report") laid out for
printing, so the browser's print dialog can turn it into a PDF.
"""

import html
import json
import re
from collections.abc import Sequence
from datetime import date
from enum import Enum
from typing import Optional

from expense_tracker.formatting import format_currency, format_short_date
from expense_tracker.models.expense import Expense


CSV_HEADER = ("Date", "Category", "Amount", "Description")

DEFAULT_EXPORT_BASENAME = "expenses"

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')

_REPORT_STYLE = """\
body { font-family: Arial, sans-serif; padding: 40px; }
h1 { color: #1f2937; border-bottom: 2px solid #3b82f6; padding-bottom: 10px; }
.meta { color: #6b7280; margin-bottom: 20px; }
table { width: 100%; border-collapse: collapse; margin-top: 20px; }
th { background: #f3f4f6; text-align: left; padding: 12px; border-bottom: 2px solid #e5e7eb; }
td { padding: 12px; border-bottom: 1px solid #e5e7eb; }
.amount { text-align: right; font-family: monospace; }
.total-row { font-weight: bold; background: #f3f4f6; }
.footer { margin-top: 30px; color: #9ca3af; font-size: 12px; }"""


class ExportFormat(str, Enum):
    """Supported export formats."""
    CSV = "csv"
    JSON = "json"
    HTML = "html"

    @property
    def mime_type(self) -> str:
        return {
            ExportFormat.CSV: "text/csv",
            ExportFormat.JSON: "application/json",
            ExportFormat.HTML: "text/html",
        }[self]

    @property
    def label(self) -> str:
        return "Report (HTML/PDF)" if self is ExportFormat.HTML else self.value.upper()


class ExportError(Exception):
    """Base exception for export operations."""
    pass


class EmptyExportError(ExportError):
    """Nothing matched the export selection."""

    def __init__(self, message: str = "No expenses to export"):
        super().__init__(message)


def escape_csv_field(value: str) -> str:
    """Quote a field if it contains a delimiter, quote or line break."""
    if any(ch in value for ch in (",", '"', "\n", "\r")):
        return '"' + value.replace('"', '""') + '"'
    return value


def _require_rows(expenses: Sequence[Expense]) -> None:
    if not expenses:
        raise EmptyExportError()


def to_csv(expenses: Sequence[Expense]) -> str:
    """
    Render expenses as CSV.

    Raises:
        EmptyExportError: If there is nothing to export
    """
    _require_rows(expenses)

    lines = [",".join(CSV_HEADER)]
    for expense in expenses:
        lines.append(",".join([
            format_short_date(expense.date),
            expense.category.value,
            f"{expense.amount:.2f}",
            escape_csv_field(expense.description),
        ]))
    return "\n".join(lines)


def to_json(expenses: Sequence[Expense]) -> str:
    """
    Render expenses as a pretty-printed JSON array.

    Each object has date (ISO), category, amount (a number) and
    description.

    Raises:
        EmptyExportError: If there is nothing to export
    """
    _require_rows(expenses)

    rows = [
        {
            "date": expense.date.isoformat(),
            "category": expense.category.value,
            "amount": expense.amount,
            "description": expense.description,
        }
        for expense in expenses
    ]
    return json.dumps(rows, indent=2, ensure_ascii=False)


def to_html_report(expenses: Sequence[Expense], generated_on: date) -> str:
    """
    Render a printable expense report.

    The page has a generated-on line with the count and total, one
    table row per expense and a closing total row. All user text is
    HTML-escaped.

    Raises:
        EmptyExportError: If there is nothing to export
    """
    _require_rows(expenses)

    total = format_currency(sum(expense.amount for expense in expenses))
    rows = "\n".join(
        "<tr>"
        f"<td>{format_short_date(expense.date)}</td>"
        f"<td>{html.escape(expense.category.value)}</td>"
        f"<td>{html.escape(expense.description)}</td>"
        f'<td class="amount">{format_currency(expense.amount)}</td>'
        "</tr>"
        for expense in expenses
    )

    return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>Expense Report</title>
<style>
{_REPORT_STYLE}
</style>
</head>
<body>
<h1>Expense Report</h1>
<div class="meta">Generated on {format_short_date(generated_on)} &bull; {len(expenses)} expenses &bull; Total: {total}</div>
<table>
<thead>
<tr><th>Date</th><th>Category</th><th>Description</th><th class="amount">Amount</th></tr>
</thead>
<tbody>
{rows}
<tr class="total-row"><td colspan="3">Total</td><td class="amount">{total}</td></tr>
</tbody>
</table>
<div class="footer">Expense Tracker &bull; Generated automatically</div>
</body>
</html>
"""


def export_expenses(
    expenses: Sequence[Expense],
    export_format: ExportFormat,
    generated_on: Optional[date] = None,
) -> str:
    """
    Render expenses in the requested format.

    Args:
        expenses: Selection to export
        export_format: CSV, JSON or HTML report
        generated_on: Day printed on the report; defaults to today
    """
    if export_format is ExportFormat.CSV:
        return to_csv(expenses)
    if export_format is ExportFormat.JSON:
        return to_json(expenses)
    return to_html_report(expenses, generated_on or date.today())


def clean_basename(basename: Optional[str]) -> str:
    """
    Make a user-typed file name safe to offer as a download name.

    Path separators and other characters that are invalid in file
    names become underscores. A trailing extension matching an export
    format is dropped, since it is added again on export.
    """
    name = _UNSAFE_FILENAME_CHARS.sub("_", (basename or "").strip())
    for export_format in ExportFormat:
        suffix = f".{export_format.value}"
        if name.lower().endswith(suffix):
            name = name[: -len(suffix)]
            break
    name = name.strip(" .")
    return name or DEFAULT_EXPORT_BASENAME


def export_filename(
    export_format: ExportFormat,
    today: date,
    basename: Optional[str] = None,
) -> str:
    """
    Download name for an export.

    Without a basename the day is included, e.g. expenses-2024-01-15.csv.
    A user-chosen basename is used as given, e.g. january.csv.
    """
    if basename is None:
        return f"{DEFAULT_EXPORT_BASENAME}-{today.isoformat()}.{export_format.value}"
    return f"{clean_basename(basename)}.{export_format.value}"
