"""
Error taxonomy for the structured-table engine.

Every error here is fatal to the current operation. None of them is
retried automatically: a partially applied reconciliation cannot tell
which step completed, so a retry could duplicate or lose rows.
"""

from __future__ import annotations

from collections.abc import Iterable


class AutoEstimateError(Exception):
    """Base exception for all AutoEstimate errors."""


class TableNotFound(AutoEstimateError):
    """No structured table with the given name exists in the spreadsheet."""

    def __init__(self, name: str, spreadsheet: str | None = None):
        where = f" in spreadsheet {spreadsheet}" if spreadsheet else ""
        super().__init__(f"Table not found: {name}{where}")
        self.name = name
        self.spreadsheet = spreadsheet


class HeaderNotFound(AutoEstimateError):
    """A column name is absent from the first row of a table."""

    def __init__(self, table_name: str, column_name: str):
        super().__init__(f"Header not found in table {table_name}: {column_name}")
        self.table_name = table_name
        self.column_name = column_name


class MalformedRectangle(AutoEstimateError):
    """A table range has a missing, non-integer or inverted bound."""

    def __init__(self, table_id: str | None, reason: str):
        label = table_id if table_id is not None else "<unbound>"
        super().__init__(f"Malformed range for table {label}: {reason}")
        self.table_id = table_id
        self.reason = reason


class EmptyTable(AutoEstimateError):
    """A table read returned no rows at all, not even a header."""

    def __init__(self, table_name: str):
        super().__init__(f"Table is empty: {table_name}")
        self.table_name = table_name


class StructuralMutationFailed(AutoEstimateError):
    """
    A structural step of a reconciliation was rejected by the backend.

    The sheet is left in whatever state the completed steps produced.
    There is no rollback.
    """

    def __init__(self, table_name: str, step: str, cause: Exception | None = None):
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Structural mutation '{step}' failed for table {table_name}{detail}")
        self.table_name = table_name
        self.step = step


class MissingTemplateLink(AutoEstimateError):
    """A required template key has no link in the templates table."""

    def __init__(self, key: str):
        super().__init__(f"Required template link not found: {key}")
        self.key = key


class MissingDeadline(AutoEstimateError):
    """The deadline table holds no row."""

    def __init__(self) -> None:
        super().__init__("No estimate deadline is configured")


class UnknownCheck(AutoEstimateError):
    """One or more requested health check names are not registered."""

    def __init__(self, names: Iterable[str]):
        self.names = sorted(names)
        super().__init__(f"Unknown check(s): {', '.join(self.names)}")
