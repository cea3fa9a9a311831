"""Themed console output.

``console`` carries progress and results; warnings and errors go to
``err_console`` so they stay visible when stdout is redirected.
"""

import sys

from rich.console import Console

from tarbs.core.theme import get_theme


def _make_console(*, stderr: bool = False) -> Console:
    stream = sys.stderr if stderr else sys.stdout
    # The palette is hex.
    color_system = "truecolor" if stream.isatty() else None
    return Console(theme=get_theme(), stderr=stderr, color_system=color_system)


console = _make_console()
err_console = _make_console(stderr=True)


def print_step(message: str) -> None:
    """Announce the start of a provisioning step."""
    console.print(f"\n[step]::[/] {message}")


def print_info(message: str) -> None:
    console.print(f"[info]{message}[/]")


def print_success(message: str) -> None:
    console.print(f"[success]{message}[/]")


def print_warning(message: str) -> None:
    err_console.print(f"[warning]WARNING![/] {message}")


def print_error(message: str) -> None:
    """Print an error line to stderr."""
    err_console.print(f"[error]Error:[/] {message}")
