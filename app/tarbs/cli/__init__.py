"""CLI package for tarbs.

This package contains the Typer application.
"""

from tarbs.cli.main import app

__all__ = ["app"]
