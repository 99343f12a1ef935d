"""CLI commands for snapvers.

This package contains all subcommand implementations.
"""

from snapvers.cli.commands import config, deleted, lookup

__all__ = ["config", "deleted", "lookup"]
