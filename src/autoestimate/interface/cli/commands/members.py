"""
Members Commands - copy required members into a generated spreadsheet.
"""

import logging

import typer

from autoestimate.application.container import Container
from autoestimate.application.estimate import seed_form_responses, sync_members_table
from autoestimate.domain.config import SpreadsheetSource
from autoestimate.domain.errors import AutoEstimateError
from autoestimate.infrastructure.logging_config import timed_operation
from autoestimate.interface.cli.formatters import console, print_error

logger = logging.getLogger(__name__)

members_app = typer.Typer(
    help="👥 Sync estimate members",
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@members_app.command("sync")
def members_sync(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Target workbook path or Google spreadsheet URL."),
    seed_responses: bool = typer.Option(
        False,
        "--seed-form-responses",
        help="Also reset Form_Responses to a single placeholder row.",
    ),
):
    """
    Write the required members of the source into the target's メンバー table.
    """
    container: Container = ctx.obj
    try:
        with timed_operation("members sync", logger):
            members = container.sources.required_members
            backend = container.build_backend(SpreadsheetSource.from_target(target))
            target_session = container.build_session(backend)

            updated = sync_members_table(target_session, members)
            if seed_responses:
                seed_form_responses(target_session)
            container.save(backend)
    except (AutoEstimateError, FileNotFoundError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(1)

    if updated is None:
        console.print("[yellow]⚠ No required members, target left unchanged[/yellow]")
    else:
        console.print(f"[green]✅ {len(members)} members[/green] written to {updated.address}")
