"""
CLI result formatters.

Rich tables for table listings, table contents and health check reports,
kept apart from the command logic.
"""

from collections.abc import Mapping, Sequence

from rich.console import Console
from rich.table import Table

from autoestimate.application.checks import CheckReport
from autoestimate.domain.tables import TableDescriptor

console = Console()


def print_error(message: str) -> None:
    console.print(f"[red]❌ Error:[/red] {message}")


def display_tables(tables: Mapping[str, TableDescriptor], label: str) -> None:
    """One line per table: name, sheet, address and data row count."""
    table = Table(title=f"Tables in {label}")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Sheet", style="blue")
    table.add_column("Range", style="magenta")
    table.add_column("Rows", justify="right", style="green")

    for name in sorted(tables):
        descriptor = tables[name]
        table.add_row(
            name,
            descriptor.sheet_title,
            descriptor.address,
            str(descriptor.data_row_count),
        )
    console.print(table)


def display_table_rows(descriptor: TableDescriptor, rows: Sequence[Sequence[str]]) -> None:
    """Header row as columns, data rows underneath."""
    header, data = rows[0], rows[1:]
    table = Table(title=f"{descriptor.name} ({descriptor.address})")
    for name in header:
        table.add_column(name or "-")
    for row in data:
        table.add_row(*row)
    console.print(table)
    console.print(f"[dim]{len(data)} data rows[/dim]")


def display_check_report(report: CheckReport) -> None:
    table = Table(title="Health Checks")
    table.add_column("Check", style="cyan", no_wrap=True)
    table.add_column("Status")
    table.add_column("ms", justify="right", style="dim")
    table.add_column("Message")

    for result in report.results:
        status = "[green]✅ PASS[/green]" if result.ok else "[red]❌ FAIL[/red]"
        table.add_row(result.name, status, str(result.ms), result.message)
    console.print(table)

    color = "green" if report.ok else "red"
    console.print(
        f"[{color}]{report.passed} passed, {report.failed} failed[/{color}] "
        f"of {len(report.results)} checks"
    )
