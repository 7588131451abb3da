"""CLI command modules."""

from autoestimate.interface.cli.commands.check import check
from autoestimate.interface.cli.commands.members import members_app
from autoestimate.interface.cli.commands.tables import tables_app

__all__ = ["check", "members_app", "tables_app"]
