"""
Spreadsheet Backend Protocol.

The table engine talks to a spreadsheet only through this interface:
a table listing, a cell-range read, a cell-range write and an ordered
batch of structural operations. Every call is blocking and is issued
strictly in sequence by the engine.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, Union

from autoestimate.domain.geometry import Rectangle


class InputMode(str, Enum):
    """How written values are interpreted by the spreadsheet."""

    RAW = "RAW"  # stored literally, "=A1" stays text
    USER_ENTERED = "USER_ENTERED"  # parsed as typed by a user, formulas evaluate


@dataclass(frozen=True, slots=True)
class TableEntry:
    """A structured table as declared in sheet metadata."""

    name: str
    id: str
    rectangle: Rectangle


@dataclass(frozen=True, slots=True)
class SheetTables:
    """One sheet and the tables declared on it."""

    sheet_id: int
    title: str
    tables: list[TableEntry] = field(default_factory=list)


# =============================================================================
# Structural operations
# =============================================================================


@dataclass(frozen=True, slots=True)
class InsertRows:
    """Insert whole rows [start_index, end_index) pushing rows below down."""

    sheet_id: int
    start_index: int
    end_index: int


@dataclass(frozen=True, slots=True)
class DeleteRows:
    """Delete whole rows [start_index, end_index) pulling rows below up."""

    sheet_id: int
    start_index: int
    end_index: int


@dataclass(frozen=True, slots=True)
class InsertRange:
    """Insert empty cells over a rectangle, shifting cells below it down.

    Only the rectangle's column span moves; other columns are untouched.
    """

    sheet_id: int
    rectangle: Rectangle


@dataclass(frozen=True, slots=True)
class UpdateTableRange:
    """Redeclare the range of a table."""

    table_id: str
    sheet_id: int
    rectangle: Rectangle


@dataclass(frozen=True, slots=True)
class UpdateCellLink:
    """Set a cell to text whose whole run links to url."""

    sheet_id: int
    row: int
    col: int
    text: str
    url: str


StructuralOperation = Union[InsertRows, DeleteRows, InsertRange, UpdateTableRange, UpdateCellLink]


class SpreadsheetBackend(Protocol):
    """Protocol every spreadsheet implementation provides."""

    @property
    def spreadsheet_label(self) -> str:
        """Human-readable identity for logs and errors."""
        ...

    def list_sheets(self) -> list[SheetTables]:
        """List every sheet with its declared tables."""
        ...

    def read_values(self, address: str) -> list[list[str]]:
        """Read a range as strings.

        Trailing empty rows are dropped; kept rows span the full width.
        """
        ...

    def write_values(
        self,
        address: str,
        rows: Sequence[Sequence[str]],
        input_mode: InputMode = InputMode.USER_ENTERED,
    ) -> None:
        """Write a 2D block of values starting at the address."""
        ...

    def batch_update(self, operations: Sequence[StructuralOperation]) -> None:
        """Apply structural operations in order."""
        ...


def normalize_rows(rows: Sequence[Sequence[object]], width: int) -> list[list[str]]:
    """
    Shape a ragged 2D block the way read_values returns it.

    Trailing rows with no value are dropped, as the Sheets API does.
    Every kept row is padded or cut to width strings.
    """
    out: list[list[str]] = []
    for row in rows:
        cells = ["" if v is None else str(v) for v in list(row)[:width]]
        cells.extend([""] * (width - len(cells)))
        out.append(cells)
    while out and not any(out[-1]):
        out.pop()
    return out
