"""
Table Registry.

Scans a spreadsheet's sheets for declared structured tables and exposes
name -> TableDescriptor lookup. The scan is memoized for the lifetime of
the registry object (one execution); it is never refreshed behind the
caller's back, even after rows are inserted or deleted.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from autoestimate.domain.errors import TableNotFound
from autoestimate.domain.tables import TableDescriptor

if TYPE_CHECKING:
    from autoestimate.infrastructure.sheets.backend import SpreadsheetBackend

logger = logging.getLogger(__name__)


class TableRegistry:
    """
    Name -> TableDescriptor index over one spreadsheet.

    Duplicate table names are not reconciled: the table scanned last wins
    and a warning is logged for every name that was shadowed.
    """

    def __init__(self, backend: "SpreadsheetBackend") -> None:
        self.backend = backend
        self._tables: dict[str, TableDescriptor] | None = None

    def list_tables(self) -> dict[str, TableDescriptor]:
        """Return every table by name, scanning on first use only."""
        if self._tables is None:
            self._tables = self._scan()
        return dict(self._tables)

    def get_table(self, name: str) -> TableDescriptor:
        """
        Look up one table by declared name.

        Raises:
            TableNotFound: If no table has that name
        """
        tables = self.list_tables()
        try:
            return tables[name]
        except KeyError:
            raise TableNotFound(name, self.backend.spreadsheet_label) from None

    def refresh(self) -> dict[str, TableDescriptor]:
        """Drop the memo and rescan. Call after mutating a sheet you keep using."""
        self._tables = None
        return self.list_tables()

    def _scan(self) -> dict[str, TableDescriptor]:
        tables: dict[str, TableDescriptor] = {}
        for sheet in self.backend.list_sheets():
            for entry in sheet.tables:
                descriptor = TableDescriptor(
                    id=entry.id,
                    name=entry.name,
                    sheet_id=sheet.sheet_id,
                    sheet_title=sheet.title,
                    rectangle=entry.rectangle,
                )
                previous = tables.get(entry.name)
                if previous is not None:
                    logger.warning(
                        "Duplicate table name %s: %s on sheet %s shadows %s on sheet %s",
                        entry.name,
                        descriptor.id,
                        descriptor.sheet_title,
                        previous.id,
                        previous.sheet_title,
                    )
                tables[entry.name] = descriptor

        logger.info("Indexed %d tables in %s", len(tables), self.backend.spreadsheet_label)
        return tables
