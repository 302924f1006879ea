"""Export package."""

from expense_tracker.export.exporter import (
    CSV_HEADER,
    DEFAULT_EXPORT_BASENAME,
    EmptyExportError,
    ExportError,
    ExportFormat,
    clean_basename,
    escape_csv_field,
    export_expenses,
    export_filename,
    to_csv,
    to_html_report,
    to_json,
)

__all__ = [
    "CSV_HEADER",
    "DEFAULT_EXPORT_BASENAME",
    "EmptyExportError",
    "ExportError",
    "ExportFormat",
    "clean_basename",
    "escape_csv_field",
    "export_expenses",
    "export_filename",
    "to_csv",
    "to_html_report",
    "to_json",
]
