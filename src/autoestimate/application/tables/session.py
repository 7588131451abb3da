"""
Table session.

Explicit per-execution state for one spreadsheet: the backend plus the
memoized TableRegistry. Every table operation goes through a session, so
nothing is cached at module level and two spreadsheets never share state.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

from autoestimate.application.tables import headers as header_ops
from autoestimate.application.tables import records as record_ops
from autoestimate.application.tables.reconciler import reconcile as reconcile_table
from autoestimate.application.tables.registry import TableRegistry
from autoestimate.domain.table_specs import TableSpec, resolve_specs
from autoestimate.domain.tables import HeaderIndex, TableDescriptor

if TYPE_CHECKING:
    from autoestimate.infrastructure.sheets.backend import SpreadsheetBackend

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")


class TableSession:
    """
    Upward-facing entry point of the table engine.

    Usage:
        session = TableSession(WorkbookBackend.open("estimate.xlsx"))
        members = session.load_records(REQUIRED_MEMBERS, RequiredMember)
        session.write_records(MEMBERS, rows)

    Descriptors returned by get_table() go stale once a sheet is mutated.
    reconcile() and write_records() rescan the registry after they change
    the sheet, so later lookups through the session see the moved tables.
    Descriptors held from before a write must be looked up again.
    """

    def __init__(
        self,
        backend: "SpreadsheetBackend",
        table_names: Mapping[str, str] | None = None,
    ) -> None:
        self.backend = backend
        self.registry = TableRegistry(backend)
        self.specs: dict[str, TableSpec] = resolve_specs(table_names)

    @property
    def label(self) -> str:
        return self.backend.spreadsheet_label

    def spec(self, spec: TableSpec | str) -> TableSpec:
        """Return the session's spec for a key, honouring name overrides."""
        key = spec if isinstance(spec, str) else spec.key
        return self.specs[key]

    # ─────────────────────────────────────────────────────────────────────
    # Registry
    # ─────────────────────────────────────────────────────────────────────

    def list_tables(self) -> dict[str, TableDescriptor]:
        return self.registry.list_tables()

    def get_table(self, name: str) -> TableDescriptor:
        return self.registry.get_table(name)

    def table_for(self, spec: TableSpec | str) -> TableDescriptor:
        return self.get_table(self.spec(spec).name)

    def refresh(self) -> dict[str, TableDescriptor]:
        return self.registry.refresh()

    # ─────────────────────────────────────────────────────────────────────
    # Reads
    # ─────────────────────────────────────────────────────────────────────

    def read_rows(self, table: TableDescriptor | str) -> list[list[str]]:
        return header_ops.read_table_rows(self.backend, self._table(table))

    def resolve_headers(
        self,
        table: TableDescriptor | str,
        prefetched_rows: Sequence[Sequence[str]] | None = None,
    ) -> HeaderIndex:
        return header_ops.resolve_headers(self.backend, self._table(table), prefetched_rows)

    def iter_rows(self, spec: TableSpec | str, skip_empty: bool = True) -> Iterator[record_ops.TableRow]:
        spec = self.spec(spec)
        return record_ops.iter_rows(self.backend, self.get_table(spec.name), spec, skip_empty)

    def load_records(self, spec: TableSpec | str, record_type: type[RecordT]) -> list[RecordT]:
        spec = self.spec(spec)
        return record_ops.load_records(self.backend, self.get_table(spec.name), spec, record_type)

    # ─────────────────────────────────────────────────────────────────────
    # Writes
    # ─────────────────────────────────────────────────────────────────────

    def reconcile(self, table: TableDescriptor | str, target_row_count: int) -> TableDescriptor:
        updated = reconcile_table(self.backend, self._table(table), target_row_count)
        self.refresh()
        return updated

    def write_records(
        self,
        spec: TableSpec | str,
        records: Sequence[Any],
        formulas: record_ops.FormulaCells | None = None,
    ) -> TableDescriptor:
        spec = self.spec(spec)
        updated = record_ops.write_records(
            self.backend, self.get_table(spec.name), spec, records, formulas
        )
        # inserted and deleted rows move every table below on the sheet
        self.refresh()
        return updated

    def _table(self, table: TableDescriptor | str) -> TableDescriptor:
        return self.get_table(table) if isinstance(table, str) else table
