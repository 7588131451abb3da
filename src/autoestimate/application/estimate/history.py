"""
見積もり履歴 writer.

Prepends one entry to the history table: newest estimate on top. Only the
table's own columns shift down, so content beside the table stays put.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from autoestimate.application.tables.reconciler import apply_step
from autoestimate.domain.address import to_address
from autoestimate.domain.errors import StructuralMutationFailed
from autoestimate.domain.records import HistoryEntry
from autoestimate.domain.table_specs import ESTIMATE_HISTORY
from autoestimate.infrastructure.sheets.backend import (
    InputMode,
    InsertRange,
    UpdateCellLink,
    UpdateTableRange,
)

if TYPE_CHECKING:
    from autoestimate.application.tables.session import TableSession
    from autoestimate.domain.tables import TableDescriptor

logger = logging.getLogger(__name__)

LINK_FIELDS = ("mid", "form", "result")


def add_history_entry(session: "TableSession", entry: HistoryEntry) -> "TableDescriptor":
    """
    Insert entry as the first data row of the history table.

    The date is written USER_ENTERED so the spreadsheet parses it. The three
    link columns get their display text and a hyperlink on the cell itself.

    Returns:
        Descriptor of the history table, one row taller

    Raises:
        HeaderNotFound: If a history column is missing
        StructuralMutationFailed: If a step is rejected by the backend
    """
    spec = session.spec(ESTIMATE_HISTORY)
    table = session.table_for(spec)
    offsets = session.resolve_headers(table).offsets_for(spec.columns)
    backend = session.backend

    row_rect = table.data_rectangle(1)
    apply_step(backend, table, "insert", [InsertRange(table.sheet_id, row_rect)])

    values = [""] * table.rectangle.col_count
    values[offsets["date"]] = entry.date
    for field_name in LINK_FIELDS:
        values[offsets[field_name]] = getattr(entry, field_name).text

    address = to_address(row_rect, table.sheet_title)
    try:
        backend.write_values(address, [values], InputMode.USER_ENTERED)
    except Exception as e:
        logger.error("Writing history row to %s failed: %s", address, e)
        raise StructuralMutationFailed(table.name, "write_values", e) from e

    rect = table.rectangle
    new_rect = rect.with_rows(rect.start_row, rect.end_row + 1)
    apply_step(backend, table, "update_range", [UpdateTableRange(table.id, table.sheet_id, new_rect)])

    links = []
    for field_name in LINK_FIELDS:
        linked = getattr(entry, field_name)
        links.append(
            UpdateCellLink(
                sheet_id=table.sheet_id,
                row=row_rect.start_row,
                col=rect.start_col + offsets[field_name],
                text=linked.text,
                url=linked.url,
            )
        )
    apply_step(backend, table, "link", links)
    session.refresh()

    logger.info("Added history entry %s to %s (%s)", entry.date, table.name, address)
    return table.with_rectangle(new_rect)
