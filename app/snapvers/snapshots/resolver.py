"""Dataset resolution and snapshot search directory construction.

Maps a live path to the dataset that contains it, optionally to a
replicated copy of that dataset mounted elsewhere, and finally to the
pair of (hidden snapshot root, path relative to the dataset) that the
version enumerator walks.
"""

import logging
from pathlib import Path
from typing import NamedTuple

from snapvers.snapshots.errors import (
    NoAlternateReplicaError,
    NoQualifyingDatasetError,
    PathNotUnderSnapshotRootError,
)
from snapvers.snapshots.models import (
    HIDDEN_SNAPSHOT_DIR,
    Config,
    MountTable,
    PathData,
    UserDefinedSnapPoint,
)

logger = logging.getLogger(__name__)


class SearchDirs(NamedTuple):
    """Where to look for the snapshot copies of one live path."""

    hidden_snapshot_root: Path
    relative_path: Path


def _longest_mount(directory: Path, mounts: MountTable) -> Path | None:
    candidates = [
        entry.mount_point for entry in mounts if directory.is_relative_to(entry.mount_point)
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda mount: (len(str(mount)), str(mount)))


def get_immediate_dataset(path: Path, mounts: MountTable) -> Path:
    """Find the mount point of the dataset containing ``path``.

    Candidates are mount points that prefix the path's parent directory;
    the longest one wins so nested datasets are preferred (``/usr/bin``
    over ``/usr`` over ``/``). Equal lengths fall back to the
    lexicographically largest mount point.

    Args:
        path: Absolute live path.
        mounts: Mount table to search.

    Returns:
        Mount point of the most specific containing dataset.

    Raises:
        NoQualifyingDatasetError: If no mount point prefixes the parent.
    """
    # Path("/").parent is Path("/"), so the root directory is its own parent
    best = _longest_mount(path.parent, mounts)
    if best is None:
        raise NoQualifyingDatasetError(path)

    logger.debug("Immediate dataset for %s is mounted at %s", path, best)
    return best


def get_contents_dataset(directory: Path, mounts: MountTable) -> Path:
    """Find the mount point of the dataset holding the entries of ``directory``.

    Same as :func:`get_immediate_dataset` for any entry inside
    ``directory``: a directory that is itself a mount point resolves to
    its own dataset rather than its parent's.

    Raises:
        NoQualifyingDatasetError: If no mount point prefixes the directory.
    """
    best = _longest_mount(directory, mounts)
    if best is None:
        raise NoQualifyingDatasetError(directory)

    logger.debug("Dataset for entries of %s is mounted at %s", directory, best)
    return best


def get_alt_replicated_dataset(immediate_mount: Path, mounts: MountTable) -> Path:
    """Find a differently mounted replica of the dataset at ``immediate_mount``.

    A replica is recognised by its dataset name ending with the source
    dataset name, e.g. ``tank/rpool`` receiving ``rpool``. The longest
    such name is chosen. This only works from the sending side outward:
    the replica cannot discover its source, and ``dozer/rpool`` replicated
    to ``tank/rpool`` is not recognised.

    Args:
        immediate_mount: Mount point returned by :func:`get_immediate_dataset`.
        mounts: Mount table to search.

    Returns:
        Mount point of the replicated dataset.

    Raises:
        NoAlternateReplicaError: If the source dataset is unknown or no
            replica other than the source itself is mounted.
    """
    datasets_by_mount: dict[Path, str] = {entry.mount_point: entry.dataset for entry in mounts}

    source_dataset = datasets_by_mount.get(immediate_mount)
    if source_dataset is None:
        raise NoAlternateReplicaError(immediate_mount)

    matches = [
        (dataset, mount)
        for mount, dataset in datasets_by_mount.items()
        if dataset.endswith(source_dataset)
    ]
    if not matches:
        raise NoAlternateReplicaError(immediate_mount)

    _, alt_mount = max(matches, key=lambda match: (len(match[0]), match[0]))
    if alt_mount == immediate_mount:
        raise NoAlternateReplicaError(immediate_mount)

    logger.debug("Alternate replica of %s is mounted at %s", immediate_mount, alt_mount)
    return alt_mount


def get_search_dirs(
    config: Config,
    path_data: PathData,
    *,
    for_alt_replicated: bool = False,
    directory_contents: bool = False,
) -> SearchDirs:
    """Build the snapshot search location for a live path.

    For native snap points the relative path is always taken against the
    *immediate* dataset, even when searching a replica: the snapshot tree
    mirrors the original dataset, not the replica's mount location.

    Args:
        config: Runtime configuration holding the snap point.
        path_data: Live path to search versions of.
        for_alt_replicated: Search the replicated dataset instead of the
            immediate one (native snap points only).
        directory_contents: ``path_data`` is a directory whose entries are
            searched; pick the dataset holding those entries.

    Returns:
        SearchDirs for the path.

    Raises:
        NoQualifyingDatasetError: If no dataset contains the path.
        NoAlternateReplicaError: If a replica was requested but none exists.
        PathNotUnderSnapshotRootError: If the path is outside the
            dataset mount point or LOCAL_DIR.
    """
    path = path_data.path
    snap_point = config.snap_point

    if isinstance(snap_point, UserDefinedSnapPoint):
        dataset = snap_point.snap_dir
        prefix = snap_point.local_dir
    else:
        if directory_contents:
            prefix = get_contents_dataset(path, snap_point.mounts)
        else:
            prefix = get_immediate_dataset(path, snap_point.mounts)
        if for_alt_replicated:
            dataset = get_alt_replicated_dataset(prefix, snap_point.mounts)
        else:
            dataset = prefix

    try:
        relative_path = path.relative_to(prefix)
    except ValueError:
        raise PathNotUnderSnapshotRootError(
            path, prefix, user_defined=isinstance(snap_point, UserDefinedSnapPoint)
        ) from None

    search_dirs = SearchDirs(dataset / HIDDEN_SNAPSHOT_DIR, relative_path)
    logger.debug("Search dirs for %s: %s", path, search_dirs)
    return search_dirs
