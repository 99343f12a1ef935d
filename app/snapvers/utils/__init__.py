"""Utility modules for snapvers.

This module exports commonly used utility functions.
"""

from snapvers.utils.formatting import (
    console,
    err_console,
    format_size,
    format_timestamp,
    print_error,
    print_info,
    print_success,
)
from snapvers.utils.shell import CommandResult, run_command

__all__ = [
    "CommandResult",
    "console",
    "err_console",
    "format_size",
    "format_timestamp",
    "print_error",
    "print_info",
    "print_success",
    "run_command",
]
