"""
Tables Commands - inspect and resize structured tables of the source spreadsheet.
"""

import logging

import typer

from autoestimate.application.container import Container
from autoestimate.domain.errors import AutoEstimateError
from autoestimate.infrastructure.logging_config import timed_operation
from autoestimate.interface.cli.formatters import (
    console,
    display_table_rows,
    display_tables,
    print_error,
)

logger = logging.getLogger(__name__)

tables_app = typer.Typer(
    help="📋 Inspect and resize structured tables",
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@tables_app.command("list")
def tables_list(ctx: typer.Context):
    """List every table with its sheet, range and data row count."""
    container: Container = ctx.obj
    try:
        session = container.source_session
        display_tables(session.list_tables(), session.label)
    except (AutoEstimateError, FileNotFoundError, ValueError) as e:
        logger.error("Listing tables failed: %s", e)
        print_error(str(e))
        raise typer.Exit(1)


@tables_app.command("show")
def tables_show(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Declared table name."),
):
    """Print the header and data rows of one table."""
    container: Container = ctx.obj
    try:
        session = container.source_session
        table = session.get_table(name)
        display_table_rows(table, session.read_rows(table))
    except (AutoEstimateError, FileNotFoundError, ValueError) as e:
        logger.error("Showing table %s failed: %s", name, e)
        print_error(str(e))
        raise typer.Exit(1)


@tables_app.command("resize")
def tables_resize(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Declared table name."),
    count: int = typer.Argument(..., min=0, help="Number of blank data rows to leave."),
):
    """
    Replace the data rows of a table with COUNT blank rows.

    [yellow]Existing data rows are discarded.[/yellow]
    """
    container: Container = ctx.obj
    try:
        session = container.source_session
        with timed_operation(f"tables resize {name}", logger):
            updated = session.reconcile(name, count)
            container.save(session.backend)
    except (AutoEstimateError, FileNotFoundError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(1)

    console.print(f"[green]✅ {updated.name}[/green] now spans {updated.address}")
