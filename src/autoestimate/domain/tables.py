"""
Structured table types.

TableDescriptor identifies one named region, HeaderIndex maps header names
to column offsets, and ReconciliationPlan is the derived arithmetic of a
resize. All three are pure values with no I/O.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any

from autoestimate.domain.address import to_address
from autoestimate.domain.errors import HeaderNotFound
from autoestimate.domain.geometry import Rectangle


@dataclass(frozen=True, slots=True)
class TableDescriptor:
    """
    One named structured region inside a sheet.

    A descriptor goes stale as soon as rows are inserted or deleted
    anywhere in its sheet. Re-resolve it after any mutation you did
    not get the corrected descriptor back from.

    Attributes:
        id: Backend table identifier
        name: Declared table name
        sheet_id: Backend sheet identifier
        sheet_title: Sheet tab title, used to build addresses
        rectangle: Declared range, header row included
    """

    id: str
    name: str
    sheet_id: int
    sheet_title: str
    rectangle: Rectangle

    @property
    def address(self) -> str:
        return to_address(self.rectangle, self.sheet_title)

    @property
    def data_start_row(self) -> int:
        """Row right below the single header row."""
        return self.rectangle.start_row + 1

    @property
    def data_row_count(self) -> int:
        return self.rectangle.row_count - 1

    @property
    def header_rectangle(self) -> Rectangle:
        return self.rectangle.with_rows(self.rectangle.start_row, self.data_start_row)

    def data_rectangle(self, row_count: int) -> Rectangle:
        """Data region of row_count rows under the header, same column span."""
        return self.rectangle.with_rows(self.data_start_row, self.data_start_row + row_count)

    def with_rectangle(self, rectangle: Rectangle) -> TableDescriptor:
        return replace(self, rectangle=rectangle)


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


@dataclass(frozen=True, slots=True)
class HeaderIndex:
    """
    Header name to column offset lookup for one table.

    Offsets are relative to the table's start column, not the sheet.
    Lookups are exact and case-sensitive after trimming header cells.
    """

    table_name: str
    column_names: tuple[str, ...]
    offsets: Mapping[str, int] = field(default_factory=dict)

    @classmethod
    def from_header_row(cls, table_name: str, header_row: Sequence[Any]) -> HeaderIndex:
        names = tuple(_cell_text(v) for v in header_row)
        offsets: dict[str, int] = {}
        for idx, name in enumerate(names):
            # first occurrence wins, like a left-to-right header scan
            if name and name not in offsets:
                offsets[name] = idx
        return cls(table_name=table_name, column_names=names, offsets=offsets)

    @property
    def width(self) -> int:
        return len(self.column_names)

    def __contains__(self, name: object) -> bool:
        return name in self.offsets

    def offset(self, name: str) -> int:
        """
        Zero-based offset of a header within the table's column span.

        Raises:
            HeaderNotFound: If no header cell equals name
        """
        try:
            return self.offsets[name]
        except KeyError:
            raise HeaderNotFound(self.table_name, name) from None

    def offsets_for(self, columns: Mapping[str, str]) -> dict[str, int]:
        """
        Resolve a whole field -> header mapping at once.

        Raises:
            HeaderNotFound: On the first header that is absent
        """
        return {field_name: self.offset(header) for field_name, header in columns.items()}


@dataclass(frozen=True, slots=True)
class ReconciliationPlan:
    """
    Arithmetic of resizing a table's data region to a target row count.

    Insert happens first at data_start_row, then the old rows, now pushed
    down by the insert, are deleted starting at delete_start_row.
    """

    data_start_row: int
    current_row_count: int
    target_row_count: int
    rows_to_insert: int
    rows_to_delete: int

    @property
    def delete_start_row(self) -> int:
        return self.data_start_row + self.rows_to_insert

    def new_rectangle(self, table: TableDescriptor) -> Rectangle:
        """Declared range after the resize: header plus target rows."""
        rect = table.rectangle
        return rect.with_rows(rect.start_row, rect.start_row + 1 + self.target_row_count)


def plan_reconciliation(table: TableDescriptor, target_row_count: int) -> ReconciliationPlan:
    """
    Compute the reconciliation plan for a table and a desired row count.

    Raises:
        ValueError: If target_row_count is negative
    """
    if target_row_count < 0:
        raise ValueError(f"target_row_count must be >= 0, got {target_row_count}")

    current = table.data_row_count
    return ReconciliationPlan(
        data_start_row=table.data_start_row,
        current_row_count=current,
        target_row_count=target_row_count,
        rows_to_insert=target_row_count,
        rows_to_delete=current,
    )
