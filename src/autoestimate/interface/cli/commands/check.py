"""
Check Command - run health checks against the source spreadsheet.
"""

import logging
from typing import List, Optional

import typer

from autoestimate.application.checks import CHECKS, check_names, run_checks
from autoestimate.application.container import Container
from autoestimate.domain.errors import AutoEstimateError
from autoestimate.infrastructure.logging_config import timed_operation
from autoestimate.interface.cli.formatters import console, display_check_report, print_error

logger = logging.getLogger(__name__)


def check(
    ctx: typer.Context,
    names: Optional[List[str]] = typer.Argument(None, help="Checks to run (default: all but opt-in)."),
    list_only: bool = typer.Option(False, "--list", help="List check names and exit."),
):
    """
    Run health checks on the source spreadsheet.

    Opt-in checks, which write to the spreadsheet, run only when named.

    Exits with code 1 if any check fails.
    """
    if list_only:
        for name in check_names():
            suffix = " [dim](opt-in)[/dim]" if CHECKS[name].opt_in else ""
            console.print(f"{name}{suffix}")
        return

    container: Container = ctx.obj
    try:
        with timed_operation("check", logger):
            report = run_checks(container.source_session, names)
    except (AutoEstimateError, FileNotFoundError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(1)

    display_check_report(report)
    if not report.ok:
        raise typer.Exit(1)
