"""
Workbook Backend - Excel tables through openpyxl.

Treats the Excel tables (ListObjects) of an .xlsx workbook as the
structured tables of the engine. Structural row operations keep every
other table on the sheet in place the way a spreadsheet engine does:
tables below the affected rows move, tables spanning them grow or shrink.

Identity mapping:
    sheet_id  -> worksheet position in the workbook
    table id  -> table display name (unique per workbook)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from openpyxl import load_workbook

from autoestimate.domain.address import column_letter, parse_address, to_range_ref, to_rectangle
from autoestimate.domain.geometry import Rectangle
from autoestimate.infrastructure.sheets.backend import (
    DeleteRows,
    InputMode,
    InsertRange,
    InsertRows,
    SheetTables,
    StructuralOperation,
    TableEntry,
    UpdateCellLink,
    UpdateTableRange,
    normalize_rows,
)

if TYPE_CHECKING:
    from openpyxl import Workbook
    from openpyxl.worksheet.table import Table
    from openpyxl.worksheet.worksheet import Worksheet

logger = logging.getLogger(__name__)


def _cell_text(value: Any) -> str:
    """Render a cell value the way a formatted read would show it."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        if value.time() == datetime.min.time():
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _shift_for_insert(rect: Rectangle, start: int, count: int) -> Rectangle:
    if rect.start_row >= start:
        return rect.with_rows(rect.start_row + count, rect.end_row + count)
    if start < rect.end_row:
        return rect.with_rows(rect.start_row, rect.end_row + count)
    return rect


def _shift_for_delete(rect: Rectangle, start: int, end: int) -> Rectangle | None:
    """New rectangle after deleting rows [start, end), None if nothing is left."""

    def moved(row: int) -> int:
        return row - max(0, min(row, end) - start)

    new_start, new_end = moved(rect.start_row), moved(rect.end_row)
    if new_end <= new_start:
        return None
    return rect.with_rows(new_start, new_end)


class WorkbookBackend:
    """
    SpreadsheetBackend over an in-memory openpyxl Workbook.

    Changes live in memory until save() is called.
    """

    def __init__(self, workbook: "Workbook", path: Path | str | None = None) -> None:
        self.workbook = workbook
        self.path = Path(path) if path else None

    @classmethod
    def open(cls, path: Path | str) -> WorkbookBackend:
        """
        Load a workbook from disk, keeping formulas as written.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Workbook not found: {path}")
        logger.debug("Opening workbook %s", path)
        return cls(load_workbook(path), path)

    @property
    def spreadsheet_label(self) -> str:
        return self.path.name if self.path else "<in-memory workbook>"

    def save(self, path: Path | str | None = None) -> Path:
        """
        Write the workbook to path, or back to the file it was opened from.

        Raises:
            ValueError: If there is no path to save to
        """
        target = Path(path) if path else self.path
        if target is None:
            raise ValueError("No path given and workbook was not opened from a file")
        self.workbook.save(target)
        logger.info("Saved workbook %s", target)
        return target

    # ─────────────────────────────────────────────────────────────────────
    # Reads
    # ─────────────────────────────────────────────────────────────────────

    def list_sheets(self) -> list[SheetTables]:
        sheets = []
        for sheet_id, ws in enumerate(self.workbook.worksheets):
            entries = [
                TableEntry(
                    name=table.displayName,
                    id=table.displayName,
                    rectangle=to_rectangle(table.ref),
                )
                for table in ws.tables.values()
            ]
            sheets.append(SheetTables(sheet_id=sheet_id, title=ws.title, tables=entries))
        return sheets

    def read_values(self, address: str) -> list[list[str]]:
        ws, rect = self._resolve(address)
        rows = ws.iter_rows(
            min_row=rect.start_row + 1,
            max_row=rect.end_row,
            min_col=rect.start_col + 1,
            max_col=rect.end_col,
            values_only=True,
        )
        return normalize_rows([[_cell_text(v) for v in row] for row in rows], rect.col_count)

    # ─────────────────────────────────────────────────────────────────────
    # Writes
    # ─────────────────────────────────────────────────────────────────────

    def write_values(
        self,
        address: str,
        rows: Sequence[Sequence[str]],
        input_mode: InputMode = InputMode.USER_ENTERED,
    ) -> None:
        """
        Write a block of values starting at the address's top-left cell.

        Raises:
            ValueError: If the block does not fit the addressed range
        """
        ws, rect = self._resolve(address)
        if len(rows) > rect.row_count or any(len(r) > rect.col_count for r in rows):
            raise ValueError(f"Values do not fit range {address}")

        for r, row in enumerate(rows):
            for c, value in enumerate(row):
                cell = ws.cell(row=rect.start_row + 1 + r, column=rect.start_col + 1 + c)
                cell.value = value if value != "" else None
                if input_mode == InputMode.RAW and isinstance(value, str) and value.startswith("="):
                    cell.data_type = "s"

    def batch_update(self, operations: Sequence[StructuralOperation]) -> None:
        for op in operations:
            match op:
                case InsertRows():
                    self._insert_rows(op)
                case DeleteRows():
                    self._delete_rows(op)
                case InsertRange():
                    self._insert_range(op)
                case UpdateTableRange():
                    self._update_table_range(op)
                case UpdateCellLink():
                    self._update_cell_link(op)
                case _:
                    raise TypeError(f"Unsupported structural operation: {op!r}")

    # ─────────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────────

    def _sheet(self, sheet_id: int) -> "Worksheet":
        try:
            return self.workbook.worksheets[sheet_id]
        except IndexError:
            raise ValueError(f"No sheet with id {sheet_id}") from None

    def _resolve(self, address: str) -> tuple["Worksheet", Rectangle]:
        title, rect = parse_address(address)
        if title is None:
            raise ValueError(f"Address has no sheet part: {address!r}")
        if title not in self.workbook.sheetnames:
            raise ValueError(f"No sheet titled {title!r}")
        return self.workbook[title], rect

    def _find_table(self, ws: "Worksheet", table_id: str) -> "Table":
        for table in ws.tables.values():
            if table.displayName == table_id:
                return table
        raise ValueError(f"No table {table_id!r} on sheet {ws.title!r}")

    @staticmethod
    def _set_ref(table: "Table", rect: Rectangle) -> None:
        ref = to_range_ref(rect)
        table.ref = ref
        if table.autoFilter is not None:
            table.autoFilter.ref = ref

    def _insert_rows(self, op: InsertRows) -> None:
        ws = self._sheet(op.sheet_id)
        count = op.end_index - op.start_index
        ws.insert_rows(op.start_index + 1, amount=count)
        for table in ws.tables.values():
            rect = to_rectangle(table.ref)
            self._set_ref(table, _shift_for_insert(rect, op.start_index, count))
        logger.debug("Inserted %d rows at %d on %s", count, op.start_index, ws.title)

    def _delete_rows(self, op: DeleteRows) -> None:
        ws = self._sheet(op.sheet_id)
        count = op.end_index - op.start_index
        ws.delete_rows(op.start_index + 1, amount=count)
        # TableList.items() yields refs, not tables
        for table in list(ws.tables.values()):
            shifted = _shift_for_delete(to_rectangle(table.ref), op.start_index, op.end_index)
            if shifted is None:
                logger.warning("Table %s lost all its rows and was removed", table.displayName)
                del ws.tables[table.name]
            else:
                self._set_ref(table, shifted)
        logger.debug("Deleted %d rows at %d on %s", count, op.start_index, ws.title)

    def _insert_range(self, op: InsertRange) -> None:
        ws = self._sheet(op.sheet_id)
        rect = op.rectangle
        count = rect.row_count
        last_row = ws.max_row
        if last_row > rect.start_row:
            block = (
                f"{column_letter(rect.start_col + 1)}{rect.start_row + 1}:"
                f"{column_letter(rect.end_col)}{last_row}"
            )
            ws.move_range(block, rows=count)
        for table in ws.tables.values():
            table_rect = to_rectangle(table.ref)
            overlaps = table_rect.start_col < rect.end_col and rect.start_col < table_rect.end_col
            if overlaps:
                self._set_ref(table, _shift_for_insert(table_rect, rect.start_row, count))

    def _update_table_range(self, op: UpdateTableRange) -> None:
        ws = self._sheet(op.sheet_id)
        self._set_ref(self._find_table(ws, op.table_id), op.rectangle)

    def _update_cell_link(self, op: UpdateCellLink) -> None:
        ws = self._sheet(op.sheet_id)
        cell = ws.cell(row=op.row + 1, column=op.col + 1)
        cell.value = op.text
        cell.hyperlink = op.url
