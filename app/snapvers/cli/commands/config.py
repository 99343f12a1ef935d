"""Settings management commands.

Shows the effective settings and writes the settings file.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from snapvers.cli.types import is_quiet
from snapvers.core.paths import ensure_config_dir, get_settings_path
from snapvers.core.settings import (
    SettingsError,
    SnapversSettings,
    load_effective_settings,
    save_settings,
)
from snapvers.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show and edit snapvers settings.",
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Show effective settings (file plus SNAP_DIR/LOCAL_DIR environment)."""
    try:
        settings = load_effective_settings()
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    table = Table(
        title="Settings",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Key", style="bold")
    table.add_column("Value")

    table.add_row("snap_dir", escape(str(settings.snap_dir)) if settings.snap_dir else "-")
    table.add_row("local_dir", escape(str(settings.local_dir)) if settings.local_dir else "-")
    table.add_row("alt_replicated", str(settings.alt_replicated).lower())
    table.add_row("no_live", str(settings.no_live).lower())
    table.add_row("mode", "user-defined" if settings.is_user_defined else "native")

    console.print(table)
    console.print(f"[dim]Settings file: {escape(str(get_settings_path()))}[/dim]")


@app.command()
def init(
    ctx: typer.Context,
    snap_dir: Annotated[
        Path | None,
        typer.Option("--snap-dir", help="Dataset root holding the snapshots."),
    ] = None,
    local_dir: Annotated[
        Path | None,
        typer.Option("--local-dir", help="Live directory matching --snap-dir."),
    ] = None,
    alt_replicated: Annotated[
        bool,
        typer.Option("--alt-replicated", help="Search replicated datasets by default."),
    ] = False,
    no_live: Annotated[
        bool,
        typer.Option("--no-live", help="Omit live versions by default."),
    ] = False,
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing settings file."),
    ] = False,
) -> None:
    """Write a settings file."""
    settings_path = get_settings_path()
    if settings_path.exists() and not force:
        print_error(f"Settings file already exists: {settings_path} (use --force to overwrite)")
        raise typer.Exit(code=1)

    try:
        settings = SnapversSettings(
            snap_dir=snap_dir.absolute() if snap_dir else None,
            local_dir=local_dir.absolute() if local_dir else None,
            alt_replicated=alt_replicated,
            no_live=no_live,
        )
        ensure_config_dir()
        path = save_settings(settings, settings_path)
    except (SettingsError, RuntimeError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if not is_quiet(ctx):
        print_success(f"Settings written to {path}")
        if not settings.is_user_defined:
            print_info("Datasets will be detected from mounted filesystems.")
