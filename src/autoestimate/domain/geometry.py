"""
Rectangle geometry for structured tables.

A Rectangle is zero-based and end-exclusive on both axes, the same
convention as a Sheets API GridRange. It is never persisted on its own;
it is always paired with a sheet in a TableDescriptor.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from autoestimate.domain.errors import MalformedRectangle

_BOUNDS = ("start_row", "end_row", "start_col", "end_col")

# GridRange wire names, in the same order as _BOUNDS
_GRID_KEYS = ("startRowIndex", "endRowIndex", "startColumnIndex", "endColumnIndex")


@dataclass(frozen=True, slots=True)
class Rectangle:
    """
    Zero-based, end-exclusive cell region.

    Attributes:
        start_row: First row (inclusive)
        end_row: Row after the last row (exclusive)
        start_col: First column (inclusive)
        end_col: Column after the last column (exclusive)
    """

    start_row: int
    end_row: int
    start_col: int
    end_col: int

    def __post_init__(self) -> None:
        self.validate()

    def validate(self, table_id: str | None = None) -> None:
        """Raise MalformedRectangle unless every bound is a sane integer."""
        for name in _BOUNDS:
            value = getattr(self, name)
            # bool is an int subclass but never a valid bound
            if isinstance(value, bool) or not isinstance(value, int):
                raise MalformedRectangle(table_id, f"{name} is {value!r}")
            if value < 0:
                raise MalformedRectangle(table_id, f"{name} is negative ({value})")
        if self.end_row <= self.start_row:
            raise MalformedRectangle(
                table_id, f"end_row {self.end_row} <= start_row {self.start_row}"
            )
        if self.end_col <= self.start_col:
            raise MalformedRectangle(
                table_id, f"end_col {self.end_col} <= start_col {self.start_col}"
            )

    @property
    def row_count(self) -> int:
        return self.end_row - self.start_row

    @property
    def col_count(self) -> int:
        return self.end_col - self.start_col

    def with_rows(self, start_row: int, end_row: int) -> Rectangle:
        """Same column span, different rows."""
        return replace(self, start_row=start_row, end_row=end_row)

    @classmethod
    def from_grid_range(
        cls, grid: Mapping[str, Any] | None, table_id: str | None = None
    ) -> Rectangle:
        """
        Build a Rectangle from a GridRange mapping.

        The Sheets API omits zero-valued fields, so a missing start index
        decodes to 0. A missing end index means an unbounded range, which
        no table can have, and is rejected.

        Raises:
            MalformedRectangle: If the mapping is absent or an end is missing
        """
        if not grid:
            raise MalformedRectangle(table_id, "range is missing")

        values: dict[str, Any] = {}
        for name, key in zip(_BOUNDS, _GRID_KEYS):
            value = grid.get(key)
            if value is None:
                if name.startswith("end"):
                    raise MalformedRectangle(table_id, f"{key} is missing")
                value = 0
            values[name] = value

        try:
            return cls(**values)
        except MalformedRectangle as e:
            raise MalformedRectangle(table_id, e.reason) from e

    def to_grid_range(self, sheet_id: int) -> dict[str, int]:
        """Render as a GridRange mapping for the given sheet."""
        return {
            "sheetId": sheet_id,
            "startRowIndex": self.start_row,
            "endRowIndex": self.end_row,
            "startColumnIndex": self.start_col,
            "endColumnIndex": self.end_col,
        }
