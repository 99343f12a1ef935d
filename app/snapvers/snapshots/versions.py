"""Snapshot version enumeration.

Walks a dataset's hidden snapshot directory, probes the copy of a file
in every snapshot, and reduces the copies to distinct versions ordered
oldest first.
"""

import logging
import os
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import NamedTuple

from snapvers.snapshots.errors import NoVersionsFoundError, SnapversError
from snapvers.snapshots.models import Config, PathData
from snapvers.snapshots.resolver import SearchDirs, get_search_dirs

logger = logging.getLogger(__name__)


class Versions(NamedTuple):
    """Lookup result: distinct snapshot versions and the live copies."""

    snapshot_versions: list[PathData]
    live_versions: list[PathData]


def unique_versions(path_datas: Iterable[PathData]) -> list[PathData]:
    """Collapse entries sharing a fingerprint and sort them by modification time.

    When several entries share ``(modification_time, size)`` any one of
    them may survive; callers must not depend on which.

    Args:
        path_datas: Entries to deduplicate.

    Returns:
        One entry per fingerprint, oldest first.
    """
    by_fingerprint: dict[tuple[int, int], PathData] = {}
    for path_data in path_datas:
        by_fingerprint[path_data.fingerprint] = path_data
    return sorted(by_fingerprint.values(), key=lambda path_data: path_data.modification_time)


def list_snapshot_instances(hidden_snapshot_root: Path) -> list[Path]:
    """List the per-snapshot directories under a hidden snapshot root.

    Raises:
        OSError: If the snapshot root itself cannot be read.
    """
    with os.scandir(hidden_snapshot_root) as entries:
        return [Path(entry.path) for entry in entries]


def get_versions(search_dirs: SearchDirs, *, max_workers: int | None = None) -> list[PathData]:
    """Enumerate the distinct versions of a file across all snapshots.

    Every snapshot is probed for ``relative_path``; snapshots that lack
    the file (it did not exist yet, or was already deleted) produce
    phantoms which are dropped.

    Args:
        search_dirs: Snapshot root and path relative to the dataset.
        max_workers: Thread pool size for probing snapshots.

    Returns:
        Distinct versions, oldest first.

    Raises:
        OSError: If the hidden snapshot root cannot be listed.
    """
    hidden_snapshot_root, relative_path = search_dirs
    candidates = [snap / relative_path for snap in list_snapshot_instances(hidden_snapshot_root)]

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        probed = list(pool.map(PathData.from_path, candidates))

    found = [path_data for path_data in probed if not path_data.is_phantom]
    logger.debug(
        "Found %d of %d snapshot copies under %s", len(found), len(candidates), hidden_snapshot_root
    )
    return unique_versions(found)


def _versions_for_path(config: Config, path_data: PathData) -> list[PathData]:
    """Collect versions of one path from its dataset and, if enabled, its replica."""
    versions = get_versions(get_search_dirs(config, path_data), max_workers=config.max_workers)

    if not config.opt_alt_replicated:
        return versions

    try:
        alt_search_dirs = get_search_dirs(config, path_data, for_alt_replicated=True)
        alt_versions = get_versions(alt_search_dirs, max_workers=config.max_workers)
    except (SnapversError, OSError) as e:
        logger.debug("Skipping alternate replica search for %s: %s", path_data.path, e)
        return versions

    return unique_versions([*versions, *alt_versions])


def lookup_versions(config: Config, path_datas: Sequence[PathData]) -> Versions:
    """Look up snapshot and live versions for one or more live paths.

    Snapshot versions are grouped by input path in input order, each
    group oldest first. A path whose dataset or snapshot root cannot be
    resolved contributes no snapshot versions; the other paths are still
    searched.

    Args:
        config: Runtime configuration.
        path_datas: Live paths as probed by :meth:`PathData.from_path`.

    Returns:
        Versions holding snapshot versions and, unless suppressed, live copies.

    Raises:
        SnapversError: The first resolution failure, if no path could be
            searched and at least one of them exists live.
        OSError: The first unreadable snapshot root, under the same condition.
        NoVersionsFoundError: If no path has a live copy or any snapshot version.
    """
    snapshot_versions: list[PathData] = []
    failures: list[tuple[PathData, SnapversError | OSError]] = []
    for path_data in path_datas:
        try:
            snapshot_versions.extend(_versions_for_path(config, path_data))
        except (SnapversError, OSError) as e:
            logger.debug("Skipping snapshot search for %s: %s", path_data.path, e)
            failures.append((path_data, e))

    existing_failures = [e for path_data, e in failures if not path_data.is_phantom]
    if existing_failures and len(failures) == len(path_datas):
        raise existing_failures[0]

    live_versions = [] if config.opt_no_live_vers else list(path_datas)

    # Nothing live and nothing in snapshots usually means a mistyped file name
    if not snapshot_versions and all(live.is_phantom for live in live_versions):
        raise NoVersionsFoundError

    for path_data, e in failures:
        if not path_data.is_phantom:
            logger.warning("No snapshot versions searched for %s: %s", path_data.path, e)

    return Versions(snapshot_versions, live_versions)
