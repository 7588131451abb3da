"""
CLI package for AutoEstimate.

Contains command-line interface components.
"""

from autoestimate.interface.cli.cli import main

__all__ = ["main"]
