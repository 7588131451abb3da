"""
Header Index Resolver.

Builds the header name -> column offset index of a table from its first
row. If the caller already read the table, its row 0 is reused instead of
issuing a second read.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from autoestimate.domain.address import to_address
from autoestimate.domain.errors import EmptyTable
from autoestimate.domain.tables import HeaderIndex, TableDescriptor

if TYPE_CHECKING:
    from autoestimate.infrastructure.sheets.backend import SpreadsheetBackend

logger = logging.getLogger(__name__)


def read_table_rows(backend: "SpreadsheetBackend", table: TableDescriptor) -> list[list[str]]:
    """
    Read the whole declared range of a table, header included.

    Raises:
        EmptyTable: If the read returns no row at all
    """
    rows = backend.read_values(table.address)
    if not rows:
        raise EmptyTable(table.name)
    return rows


def resolve_headers(
    backend: "SpreadsheetBackend",
    table: TableDescriptor,
    prefetched_rows: Sequence[Sequence[str]] | None = None,
) -> HeaderIndex:
    """
    Build the HeaderIndex of a table.

    Args:
        backend: Spreadsheet to read from when nothing was prefetched
        table: Table to index
        prefetched_rows: Rows already read from the table's range

    Raises:
        EmptyTable: If there is no header row to index
    """
    if prefetched_rows:
        header_row = prefetched_rows[0]
    else:
        rows = backend.read_values(to_address(table.header_rectangle, table.sheet_title))
        if not rows:
            raise EmptyTable(table.name)
        header_row = rows[0]

    index = HeaderIndex.from_header_row(table.name, header_row)
    logger.debug("Headers of %s: %s", table.name, list(index.column_names))
    return index
