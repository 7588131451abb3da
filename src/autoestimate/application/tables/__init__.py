"""
Structured table engine: registry, header resolution, row reconciliation
and the typed record layer, tied together by TableSession.
"""

from autoestimate.application.tables.headers import read_table_rows, resolve_headers
from autoestimate.application.tables.reconciler import reconcile
from autoestimate.application.tables.records import (
    TableRow,
    build_rows,
    iter_rows,
    load_records,
    write_records,
)
from autoestimate.application.tables.registry import TableRegistry
from autoestimate.application.tables.session import TableSession

__all__ = [
    "read_table_rows",
    "resolve_headers",
    "reconcile",
    "TableRow",
    "build_rows",
    "iter_rows",
    "load_records",
    "write_records",
    "TableRegistry",
    "TableSession",
]
