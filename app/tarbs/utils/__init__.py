"""Utility modules for tarbs.

This module exports commonly used utility functions.
"""

from tarbs.utils.formatting import (
    console,
    err_console,
    print_error,
    print_info,
    print_step,
    print_success,
    print_warning,
)
from tarbs.utils.shell import CommandResult, Shell, command_exists, run_command

__all__ = [
    "CommandResult",
    "Shell",
    "command_exists",
    "console",
    "err_console",
    "print_error",
    "print_info",
    "print_step",
    "print_success",
    "print_warning",
    "run_command",
]
