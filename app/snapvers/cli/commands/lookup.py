"""Lookup command implementation.

Lists the distinct versions of files preserved in snapshots alongside
their live copies.
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from snapvers.cli.display import create_versions_table, versions_to_dict
from snapvers.cli.types import OutputFormat, resolve_settings
from snapvers.core.settings import build_config
from snapvers.snapshots.errors import SnapversError
from snapvers.snapshots.models import PathData
from snapvers.snapshots.versions import lookup_versions
from snapvers.utils.formatting import console, print_error


def lookup(
    paths: Annotated[
        list[Path],
        typer.Argument(help="Live files to find snapshot versions of."),
    ],
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
    no_live: Annotated[
        bool,
        typer.Option("--no-live", help="Omit live versions."),
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
    """Show snapshot versions of one or more files.

    Examples:
        snapvers lookup ~/notes.txt                 # Versions from mounted snapshots
        snapvers lookup -a /srv/data/db.sqlite      # Include replicated datasets
        snapvers lookup --no-live --format json f   # JSON, snapshots only
    """
    settings = resolve_settings(
        snap_dir=snap_dir,
        local_dir=local_dir,
        alt_replicated=alt_replicated,
        no_live=no_live,
    )

    try:
        config = build_config(settings)
        versions = lookup_versions(config, [PathData.from_path(path) for path in paths])
    except (SnapversError, OSError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(versions_to_dict(versions)))
        return

    console.print(create_versions_table(versions))
