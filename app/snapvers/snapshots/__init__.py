"""Snapshot version lookup and deleted file detection.

This module resolves live paths to the datasets that hold them, finds
the distinct versions of a file preserved in snapshots, and detects
files that only survive in snapshots.
"""

from snapvers.snapshots.deleted import get_deleted, get_deleted_per_dataset, iter_deleted
from snapvers.snapshots.errors import (
    MountDiscoveryError,
    NoAlternateReplicaError,
    NoQualifyingDatasetError,
    NoVersionsFoundError,
    PathNotUnderSnapshotRootError,
    SnapversError,
)
from snapvers.snapshots.models import (
    HIDDEN_SNAPSHOT_DIR,
    Config,
    MountEntry,
    MountTable,
    NativeSnapPoint,
    PathData,
    SnapPoint,
    UserDefinedSnapPoint,
)
from snapvers.snapshots.mounts import discover_mounts
from snapvers.snapshots.resolver import (
    SearchDirs,
    get_alt_replicated_dataset,
    get_contents_dataset,
    get_immediate_dataset,
    get_search_dirs,
)
from snapvers.snapshots.versions import Versions, get_versions, lookup_versions, unique_versions

__all__ = [
    "HIDDEN_SNAPSHOT_DIR",
    "Config",
    "MountDiscoveryError",
    "MountEntry",
    "MountTable",
    "NativeSnapPoint",
    "NoAlternateReplicaError",
    "NoQualifyingDatasetError",
    "NoVersionsFoundError",
    "PathData",
    "PathNotUnderSnapshotRootError",
    "SearchDirs",
    "SnapPoint",
    "SnapversError",
    "UserDefinedSnapPoint",
    "Versions",
    "discover_mounts",
    "get_alt_replicated_dataset",
    "get_contents_dataset",
    "get_deleted",
    "get_deleted_per_dataset",
    "get_immediate_dataset",
    "get_search_dirs",
    "get_versions",
    "iter_deleted",
    "lookup_versions",
    "unique_versions",
]
