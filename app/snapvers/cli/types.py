"""Shared types and utilities for CLI commands.

This module provides the output format enum and the settings merging
used by the lookup and deleted commands.
"""

from enum import Enum
from pathlib import Path

import typer

from snapvers.core.settings import SettingsError, SnapversSettings, load_effective_settings
from snapvers.utils.formatting import print_error


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def resolve_settings(
    *,
    snap_dir: Path | None = None,
    local_dir: Path | None = None,
    alt_replicated: bool = False,
    no_live: bool = False,
) -> SnapversSettings:
    """Merge command line options over the effective settings.

    Command line flags can only switch options on; directories given on
    the command line replace configured ones. Relative directories are
    made absolute against the current directory.

    Args:
        snap_dir: --snap-dir option value.
        local_dir: --local-dir option value.
        alt_replicated: --alt-replicated flag.
        no_live: --no-live flag.

    Returns:
        Validated settings.

    Raises:
        typer.Exit: If the settings file or the merged options are invalid.
    """
    try:
        settings = load_effective_settings()
        updates: dict[str, object] = {
            "alt_replicated": settings.alt_replicated or alt_replicated,
            "no_live": settings.no_live or no_live,
        }
        if snap_dir is not None:
            updates["snap_dir"] = snap_dir.absolute()
        if local_dir is not None:
            updates["local_dir"] = local_dir.absolute()
        return SnapversSettings.model_validate({**settings.model_dump(), **updates})
    except (SettingsError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def is_quiet(ctx: typer.Context) -> bool:
    """Check whether --quiet was passed to the main command."""
    return bool(ctx.obj and ctx.obj.get("quiet"))
