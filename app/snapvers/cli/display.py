"""Shared Rich display functions for versions and deleted files.

Provides table builders and JSON serializers used by the lookup and
deleted commands.
"""

from pathlib import Path

from rich.markup import escape
from rich.table import Table

from snapvers.snapshots.models import PathData
from snapvers.snapshots.versions import Versions
from snapvers.utils.formatting import format_size, format_timestamp


def path_data_to_dict(path_data: PathData) -> dict[str, object]:
    """Serialize a PathData for JSON output."""
    return {
        "path": str(path_data.path),
        "size": path_data.size,
        "modification_time_ns": path_data.modification_time,
        "is_phantom": path_data.is_phantom,
    }


def versions_to_dict(versions: Versions) -> dict[str, list[dict[str, object]]]:
    """Serialize a lookup result for JSON output."""
    return {
        "snapshot_versions": [path_data_to_dict(p) for p in versions.snapshot_versions],
        "live_versions": [path_data_to_dict(p) for p in versions.live_versions],
    }


def _new_table(title: str) -> Table:
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Modified", no_wrap=True)
    table.add_column("Size", justify="right", style="info")
    table.add_column("Path")
    return table


def create_versions_table(versions: Versions) -> Table:
    """Create a Rich table listing snapshot versions followed by live copies.

    Live copies that do not exist are shown as missing.

    Args:
        versions: Lookup result to display.

    Returns:
        Rich Table with one row per version.
    """
    table = _new_table("Versions")

    for snap in versions.snapshot_versions:
        table.add_row(
            format_timestamp(snap.modification_time),
            format_size(snap.size),
            f"[snapshot]{escape(str(snap.path))}[/snapshot]",
        )

    if versions.snapshot_versions and versions.live_versions:
        table.add_section()

    for live in versions.live_versions:
        if live.is_phantom:
            table.add_row(
                "[phantom]missing[/phantom]",
                "-",
                f"[phantom]{escape(str(live.path))}[/phantom]",
            )
        else:
            table.add_row(
                format_timestamp(live.modification_time),
                format_size(live.size),
                f"[live]{escape(str(live.path))}[/live]",
            )

    return table


def create_deleted_table(directory: Path, deleted: list[PathData]) -> Table:
    """Create a Rich table listing files deleted from ``directory``."""
    table = _new_table(f"Deleted from {escape(str(directory))}")
    for path_data in deleted:
        table.add_row(
            format_timestamp(path_data.modification_time),
            format_size(path_data.size),
            f"[deleted]{escape(str(path_data.path))}[/deleted]",
        )
    return table
