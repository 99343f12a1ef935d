"""Deleted file detection.

Compares a live directory with the same directory inside every snapshot
and reports the entries that only survive in snapshots.
"""

import logging
import os
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from snapvers.snapshots.errors import SnapversError
from snapvers.snapshots.models import HIDDEN_SNAPSHOT_DIR, Config, PathData
from snapvers.snapshots.resolver import SearchDirs, get_search_dirs
from snapvers.snapshots.versions import list_snapshot_instances, unique_versions

logger = logging.getLogger(__name__)


def _list_snapshot_dir(path: Path) -> list[os.DirEntry[str]]:
    """List one snapshot's copy of a directory, empty if it is missing or unreadable."""
    try:
        with os.scandir(path) as entries:
            return list(entries)
    except OSError:
        return []


def get_deleted_per_dataset(
    live_dir: Path,
    search_dirs: SearchDirs,
    *,
    max_workers: int | None = None,
) -> list[PathData]:
    """Find entries of ``live_dir`` that only exist in one dataset's snapshots.

    Snapshot entries are indexed by file name; when several snapshots
    hold the same deleted name only one of them is kept before the
    fingerprint deduplication.

    Args:
        live_dir: Live directory to compare against.
        search_dirs: Snapshot root and the directory's path relative to the dataset.
        max_workers: Thread pool size for listing snapshot directories.

    Returns:
        Deleted entries, one per fingerprint, oldest first.

    Raises:
        OSError: If the live directory or the snapshot root cannot be listed.
    """
    hidden_snapshot_root, relative_path = search_dirs

    with os.scandir(live_dir) as entries:
        live_names = {entry.name for entry in entries}

    snapshot_dirs = [snap / relative_path for snap in list_snapshot_instances(hidden_snapshot_root)]
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        listings = list(pool.map(_list_snapshot_dir, snapshot_dirs))

    snapshot_entries: dict[str, os.DirEntry[str]] = {}
    for listing in listings:
        for entry in listing:
            snapshot_entries[entry.name] = entry

    deleted = [
        PathData.from_dir_entry(entry)
        for name, entry in snapshot_entries.items()
        if name not in live_names
    ]
    return unique_versions(path_data for path_data in deleted if not path_data.is_phantom)


def get_deleted(config: Config, live_dir: Path) -> list[PathData]:
    """Find entries deleted from ``live_dir`` that snapshots still hold.

    Searches the immediate dataset and, with ``opt_alt_replicated``, its
    replica too; results from both are merged by fingerprint. A missing
    replica is not an error.

    Args:
        config: Runtime configuration.
        live_dir: Live directory to inspect.

    Returns:
        Deleted entries, oldest first.

    Raises:
        SnapversError: If the directory cannot be mapped to a snapshot root.
        OSError: If the live directory or snapshot root cannot be listed.
    """
    dir_data = PathData.from_path(live_dir)
    search_dirs = get_search_dirs(config, dir_data, directory_contents=True)
    deleted = get_deleted_per_dataset(dir_data.path, search_dirs, max_workers=config.max_workers)

    if not config.opt_alt_replicated:
        return deleted

    try:
        alt_search_dirs = get_search_dirs(
            config, dir_data, for_alt_replicated=True, directory_contents=True
        )
        alt_deleted = get_deleted_per_dataset(
            dir_data.path, alt_search_dirs, max_workers=config.max_workers
        )
    except (SnapversError, OSError) as e:
        logger.debug("Skipping alternate replica search for %s: %s", dir_data.path, e)
        return deleted

    return unique_versions([*deleted, *alt_deleted])


def _walk_live_dirs(root: Path) -> Iterator[Path]:
    """Yield ``root`` and every readable directory below it."""

    def _on_error(error: OSError) -> None:
        logger.warning("Skipping unreadable directory: %s", error.filename)

    for dirpath, dirnames, _ in os.walk(root, onerror=_on_error):
        # Never descend into a visible snapshot directory
        dirnames[:] = sorted(name for name in dirnames if name != HIDDEN_SNAPSHOT_DIR.parts[0])
        yield Path(dirpath)


def iter_deleted(config: Config) -> Iterator[tuple[Path, list[PathData]]]:
    """Report deleted entries for the requested directory.

    Without ``opt_recursive`` only ``config.requested_dir`` (default: the
    current directory) is inspected. With it, every readable directory
    below is inspected as well; subdirectories that fail are logged and
    skipped, while a failure on the requested directory itself propagates.

    Yields:
        (directory, deleted entries) for each directory with deleted entries.
    """
    root = Path(os.path.abspath(config.requested_dir or Path.cwd()))

    deleted = get_deleted(config, root)
    if deleted:
        yield root, deleted

    if not config.opt_recursive:
        return

    for directory in _walk_live_dirs(root):
        if directory == root:
            continue
        try:
            deleted = get_deleted(config, directory)
        except (SnapversError, OSError) as e:
            logger.warning("Skipping %s: %s", directory, e)
            continue
        if deleted:
            yield directory, deleted
