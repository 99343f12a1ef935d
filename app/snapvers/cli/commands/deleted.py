"""Deleted command implementation.

Lists files that still exist in snapshots of a directory but have been
deleted from the live directory.
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from snapvers.cli.display import create_deleted_table, path_data_to_dict
from snapvers.cli.types import OutputFormat, is_quiet, resolve_settings
from snapvers.core.settings import build_config
from snapvers.snapshots.deleted import iter_deleted
from snapvers.snapshots.errors import SnapversError
from snapvers.utils.formatting import console, print_error, print_success


def deleted(
    ctx: typer.Context,
    directory: Annotated[
        Path | None,
        typer.Argument(help="Directory to inspect (default: current directory)."),
    ] = None,
    recursive: Annotated[
        bool,
        typer.Option("--recursive", "-r", help="Also inspect all subdirectories."),
    ] = False,
    snap_dir: Annotated[
        Path | None,
        typer.Option("--snap-dir", help="Dataset root holding the snapshots (needs --local-dir)."),
    ] = None,
    local_dir: Annotated[
        Path | None,
        typer.Option("--local-dir", help="Live directory matching --snap-dir."),
    ] = None,
    alt_replicated: Annotated[
        bool,
        typer.Option("--alt-replicated", "-a", help="Also search replicated datasets."),
    ] = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Show files deleted from a directory that snapshots still hold."""
    settings = resolve_settings(
        snap_dir=snap_dir,
        local_dir=local_dir,
        alt_replicated=alt_replicated,
    )

    try:
        config = build_config(settings, requested_dir=directory, recursive=recursive)
        results = list(iter_deleted(config))
    except (SnapversError, OSError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if output_format == OutputFormat.JSON:
        data = [
            {"directory": str(path), "deleted": [path_data_to_dict(p) for p in entries]}
            for path, entries in results
        ]
        console.print_json(json.dumps(data))
        return

    if not results:
        if not is_quiet(ctx):
            print_success("No deleted files found.")
        return

    for path, entries in results:
        console.print(create_deleted_table(path, entries))

    total = sum(len(entries) for _, entries in results)
    if not is_quiet(ctx):
        console.print(f"\n[dim]Found {total} deleted entries in {len(results)} directories[/dim]")
