"""
Record Loader/Writer.

Reads a table into typed records and writes typed records back. Column
positions come from the table's HeaderIndex, resolved and validated once
per call. Formula strings are opaque payloads: they are placed verbatim
and evaluated by the spreadsheet, never interpreted here.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any, TypeVar

from autoestimate.application.tables.headers import read_table_rows, resolve_headers
from autoestimate.application.tables.reconciler import reconcile
from autoestimate.domain.address import to_address
from autoestimate.domain.errors import StructuralMutationFailed
from autoestimate.domain.table_specs import TableSpec
from autoestimate.domain.tables import TableDescriptor
from autoestimate.infrastructure.sheets.backend import InputMode

if TYPE_CHECKING:
    from autoestimate.infrastructure.sheets.backend import SpreadsheetBackend

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")

# (data row index, header text) -> formula
FormulaCells = Mapping[tuple[int, str], str]


@dataclass(frozen=True, slots=True)
class TableRow:
    """
    Tracked fields of one data row.

    Attributes:
        row_number: 1-based sheet row, for log messages
        values: Map of table spec field -> trimmed cell text
    """

    row_number: int
    values: dict[str, str]

    @property
    def is_empty(self) -> bool:
        return not any(self.values.values())


def iter_rows(
    backend: "SpreadsheetBackend",
    table: TableDescriptor,
    spec: TableSpec,
    skip_empty: bool = True,
) -> Iterator[TableRow]:
    """
    Yield the tracked fields of every data row of a table.

    Raises:
        EmptyTable: If the table range reads back empty
        HeaderNotFound: If a table spec column is missing from the header row
    """
    rows = read_table_rows(backend, table)
    offsets = resolve_headers(backend, table, rows).offsets_for(spec.columns)

    for i, row in enumerate(rows[1:], start=1):
        values = {
            field_name: (row[idx] if idx < len(row) else "").strip()
            for field_name, idx in offsets.items()
        }
        table_row = TableRow(row_number=table.rectangle.start_row + i + 1, values=values)
        if skip_empty and table_row.is_empty:
            continue
        yield table_row


def _record_kwargs(record_type: type, values: Mapping[str, str]) -> dict[str, str]:
    return {f.name: values[f.name] for f in fields(record_type) if f.name in values}


def load_records(
    backend: "SpreadsheetBackend",
    table: TableDescriptor,
    spec: TableSpec,
    record_type: type[RecordT],
) -> list[RecordT]:
    """
    Read a table into records, skipping rows whose tracked fields are all empty.

    Record fields are matched to table spec fields by name.
    """
    records = [
        record_type(**_record_kwargs(record_type, row.values))
        for row in iter_rows(backend, table, spec)
    ]
    logger.info("Loaded %d records from %s", len(records), table.name)
    return records


def _cell_value(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def build_rows(
    width: int,
    offsets: Mapping[str, int],
    records: Sequence[Any],
    formulas: FormulaCells | None = None,
    header_offsets: Mapping[str, int] | None = None,
) -> list[list[str]]:
    """
    Lay records out as full-width rows.

    Columns not covered by a record field are "". A formula cell
    overrides whatever the record put in that column.
    """
    rows = []
    for record in records:
        row = [""] * width
        for field_name, idx in offsets.items():
            if hasattr(record, field_name):
                row[idx] = _cell_value(getattr(record, field_name))
        rows.append(row)

    for (row_index, header), formula in (formulas or {}).items():
        if header_offsets is None or header not in header_offsets:
            raise KeyError(f"Formula targets unknown header: {header}")
        rows[row_index][header_offsets[header]] = formula
    return rows


def write_records(
    backend: "SpreadsheetBackend",
    table: TableDescriptor,
    spec: TableSpec,
    records: Sequence[Any],
    formulas: FormulaCells | None = None,
) -> TableDescriptor:
    """
    Replace a table's data rows with records.

    Reconciles the table to len(records) rows, then writes every cell of
    the new data region in one USER_ENTERED pass.

    Args:
        backend: Spreadsheet holding the table
        table: Freshly resolved descriptor of the table
        spec: Field -> header mapping of the records
        records: Records to write, in order
        formulas: Optional (row index, header) -> formula cells

    Returns:
        Descriptor with the corrected range

    Raises:
        HeaderNotFound: If a table spec column or formula header is missing
        StructuralMutationFailed: If a reconciliation step or the write fails
    """
    headers = resolve_headers(backend, table)
    offsets = headers.offsets_for(spec.columns)
    formula_offsets = {header: headers.offset(header) for _, header in (formulas or {})}
    for row_index, _ in formulas or {}:
        if not 0 <= row_index < len(records):
            raise IndexError(f"Formula row {row_index} is outside {len(records)} records")

    rows = build_rows(table.rectangle.col_count, offsets, records, formulas, formula_offsets)

    updated = reconcile(backend, table, len(records))
    if not rows:
        return updated

    address = to_address(updated.data_rectangle(len(rows)), updated.sheet_title)
    try:
        backend.write_values(address, rows, InputMode.USER_ENTERED)
    except Exception as e:
        logger.error("Writing values to %s failed: %s", address, e)
        raise StructuralMutationFailed(table.name, "write_values", e) from e

    logger.info("Wrote %d records to %s (%s)", len(rows), table.name, address)
    return updated
