"""
Spreadsheet backends.

The engine depends only on the SpreadsheetBackend protocol. Two
implementations are provided: Excel tables through openpyxl and Google
Sheets through the Sheets API v4.
"""

from autoestimate.infrastructure.sheets.backend import (
    DeleteRows,
    InputMode,
    InsertRange,
    InsertRows,
    SheetTables,
    SpreadsheetBackend,
    StructuralOperation,
    TableEntry,
    UpdateCellLink,
    UpdateTableRange,
)
from autoestimate.infrastructure.sheets.google import GoogleSheetsBackend, spreadsheet_id_from_url
from autoestimate.infrastructure.sheets.workbook import WorkbookBackend

__all__ = [
    "DeleteRows",
    "InputMode",
    "InsertRange",
    "InsertRows",
    "SheetTables",
    "SpreadsheetBackend",
    "StructuralOperation",
    "TableEntry",
    "UpdateCellLink",
    "UpdateTableRange",
    "GoogleSheetsBackend",
    "spreadsheet_id_from_url",
    "WorkbookBackend",
]
