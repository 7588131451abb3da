"""
Row Reconciler.

Resizes the data region of a table (everything under its single header
row) to exactly N rows. The steps run in a fixed order so row indexes
never drift:

    1. insert N blank rows right under the header
    2. delete the old data rows, now pushed down below the new block
    3. redeclare the table range as header + N rows

The insert always comes first, so the table never passes through an empty
state that would break live formulas referencing it. This is a full
replace: old row identity is discarded. The caller writes the values.

Each step is its own backend call. A failure leaves the sheet in the state
of the completed steps; there is no rollback and nothing is retried.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from autoestimate.domain.errors import AutoEstimateError, StructuralMutationFailed
from autoestimate.domain.tables import TableDescriptor, plan_reconciliation
from autoestimate.infrastructure.sheets.backend import (
    DeleteRows,
    InsertRows,
    StructuralOperation,
    UpdateTableRange,
)

if TYPE_CHECKING:
    from autoestimate.infrastructure.sheets.backend import SpreadsheetBackend

logger = logging.getLogger(__name__)


def apply_step(
    backend: "SpreadsheetBackend",
    table: TableDescriptor,
    step: str,
    operations: Sequence[StructuralOperation],
) -> None:
    """Send one batch of structural operations, naming the step on failure."""
    try:
        backend.batch_update(operations)
    except AutoEstimateError:
        raise
    except Exception as e:
        logger.error("Step '%s' on table %s failed: %s", step, table.name, e)
        raise StructuralMutationFailed(table.name, step, e) from e


def reconcile(
    backend: "SpreadsheetBackend",
    table: TableDescriptor,
    target_row_count: int,
) -> TableDescriptor:
    """
    Resize a table's data region to target_row_count rows.

    Args:
        backend: Spreadsheet holding the table
        table: Freshly resolved descriptor of the table
        target_row_count: Desired number of data rows (0 leaves the header only)

    Returns:
        Descriptor with the corrected range

    Raises:
        ValueError: If target_row_count is negative
        StructuralMutationFailed: If a step is rejected by the backend
    """
    plan = plan_reconciliation(table, target_row_count)
    sheet_id = table.sheet_id

    if plan.rows_to_insert > 0:
        apply_step(
            backend,
            table,
            "insert",
            [InsertRows(sheet_id, plan.data_start_row, plan.data_start_row + plan.rows_to_insert)],
        )
        logger.debug("Inserted %d rows at %d in %s", plan.rows_to_insert, plan.data_start_row, table.name)

    if plan.rows_to_delete > 0:
        start = plan.delete_start_row
        apply_step(
            backend,
            table,
            "delete",
            [DeleteRows(sheet_id, start, start + plan.rows_to_delete)],
        )
        logger.debug("Deleted %d old rows at %d in %s", plan.rows_to_delete, start, table.name)

    new_rect = plan.new_rectangle(table)
    apply_step(backend, table, "update_range", [UpdateTableRange(table.id, sheet_id, new_rect)])

    updated = table.with_rectangle(new_rect)
    logger.info(
        "Reconciled %s: %d -> %d data rows (%s)",
        table.name,
        plan.current_row_count,
        plan.target_row_count,
        updated.address,
    )
    return updated
