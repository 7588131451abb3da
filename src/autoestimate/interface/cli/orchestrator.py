"""
CLI Orchestrator - Main Entry Point

Wires the command modules into one typer app. The callback sets up
logging and puts a Container in the context for every command.
"""

import logging
from pathlib import Path
from typing import Optional

import typer

from autoestimate.application.container import Container
from autoestimate.infrastructure.logging_config import setup_logging
from autoestimate.interface.cli.commands import check, members_app, tables_app

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="autoestimate",
    help="📊 Estimation workflow tables - structured table engine",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)

app.add_typer(tables_app, name="tables")
app.add_typer(members_app, name="members")
app.command("check")(check)


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_dir: Path = typer.Option(
        Path("config"),
        "--config-dir",
        "-c",
        help="Directory holding autoestimate.json or autoestimate.jsonc.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also log to this file."),
):
    """
    📊 AutoEstimate - structured tables for the estimation workflow

    🎯 **Available Commands:**
    - `autoestimate tables` - list, show and resize tables
    - `autoestimate members sync` - fill a generated spreadsheet's member table
    - `autoestimate check` - run health checks on the source spreadsheet
    """
    container = Container(config_dir)
    settings = container.logging_settings()
    level = logging.DEBUG if verbose else logging.getLevelName(settings.level)
    setup_logging(level, str(log_file) if log_file else settings.file)
    ctx.obj = container
    logger.debug("Config directory: %s", config_dir)
