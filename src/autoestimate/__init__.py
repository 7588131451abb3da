"""
AutoEstimate - Estimation workflow automation over spreadsheet tables.

Reads the estimation source tables (templates, members, issues, deadline)
from a spreadsheet and keeps the tables of the generated documents in sync.
The reusable core is the structured-table engine: table lookup by name,
range addressing, header-indexed columns and row-count reconciliation.

Usage:
    # CLI (recommended)
    autoestimate tables list

    # Programmatic
    from autoestimate import TableSession
    from autoestimate.infrastructure.sheets import WorkbookBackend

    session = TableSession(WorkbookBackend.open("estimate.xlsx"))
    members = session.get_table("メンバー")
"""

__version__ = "0.1.0"
__author__ = "AutoEstimate Team"

from autoestimate.application.tables.session import TableSession

__all__ = ["TableSession", "__version__"]
