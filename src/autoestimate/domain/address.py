"""
Address Converter.

Converts between a zero-based, end-exclusive Rectangle and a one-based
"Sheet!A1:B2" address string.

Row mapping:
    start_row (0-based, inclusive)  -> start_row + 1 (1-based, inclusive)
    end_row   (0-based, exclusive)  -> end_row       (1-based, inclusive)

Column mapping goes through bijective base-26 letters (1 -> A, 26 -> Z,
27 -> AA); the exclusive end column is stepped back by one before encoding.
"""

from __future__ import annotations

import re

from openpyxl.utils import column_index_from_string, get_column_letter

from autoestimate.domain.geometry import Rectangle

# letter-led word; digits-only or cell-like titles ("A1", "R1C1") need quotes
_PLAIN_TITLE = re.compile(r"[^\W\d]\w*")
_CELL_LIKE_TITLE = re.compile(r"[A-Za-z]{1,3}[0-9]+|[Rr][0-9]*[Cc][0-9]*")

_ADDRESS = re.compile(
    r"""
    ^(?:(?P<title>'(?:[^']|'')+'|[^!']+)!)?
    (?P<c1>[A-Za-z]{1,3})(?P<r1>[0-9]+)
    (?::(?P<c2>[A-Za-z]{1,3})(?P<r2>[0-9]+))?$
    """,
    re.VERBOSE,
)


def column_letter(number: int) -> str:
    """
    Encode a 1-based column number as letters.

    Raises:
        ValueError: For 0, negatives, or columns past the sheet limit
    """
    return get_column_letter(number)


def column_number(letters: str) -> int:
    """Decode column letters into a 1-based column number."""
    return column_index_from_string(letters.upper())


def quote_sheet_title(title: str) -> str:
    """Quote a sheet title for A1 notation unless it is a plain letter-led word."""
    if _PLAIN_TITLE.fullmatch(title) and not _CELL_LIKE_TITLE.fullmatch(title):
        return title
    return "'" + title.replace("'", "''") + "'"


def to_range_ref(rect: Rectangle) -> str:
    """Render a rectangle as "A1:B2" with no sheet part."""
    rect.validate()
    start = f"{column_letter(rect.start_col + 1)}{rect.start_row + 1}"
    end = f"{column_letter(rect.end_col)}{rect.end_row}"
    return f"{start}:{end}"


def to_address(rect: Rectangle, sheet_title: str) -> str:
    """
    Render a rectangle as a one-based "Sheet!A1:B2" address.

    Raises:
        MalformedRectangle: If the rectangle has an invalid bound
    """
    return f"{quote_sheet_title(sheet_title)}!{to_range_ref(rect)}"


def parse_address(address: str) -> tuple[str | None, Rectangle]:
    """
    Split an address into its sheet title and rectangle.

    A single-cell address ("Sheet!B3") yields a one-by-one rectangle.
    The title is None when the address carries no sheet part.

    Raises:
        ValueError: If the address cannot be parsed
    """
    match = _ADDRESS.match(address.strip())
    if not match:
        raise ValueError(f"Unparsable A1 address: {address!r}")

    title = match.group("title")
    if title is not None and title.startswith("'"):
        title = title[1:-1].replace("''", "'")

    c1, r1 = match.group("c1"), int(match.group("r1"))
    c2 = match.group("c2") or c1
    r2 = int(match.group("r2") or r1)
    if r1 < 1 or r2 < 1:
        raise ValueError(f"Row numbers are 1-based: {address!r}")

    first_col, last_col = column_number(c1), column_number(c2)
    rect = Rectangle(
        start_row=min(r1, r2) - 1,
        end_row=max(r1, r2),
        start_col=min(first_col, last_col) - 1,
        end_col=max(first_col, last_col),
    )
    return title, rect


def to_rectangle(address: str) -> Rectangle:
    """Inverse of to_address: parse an address into a Rectangle."""
    return parse_address(address)[1]
