"""
CLI main entry point.
"""


def main() -> None:
    """Main entry point for the autoestimate CLI."""
    # Import here to avoid loading typer for library users
    from autoestimate.interface.cli.orchestrator import app

    app()
