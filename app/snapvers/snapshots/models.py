"""Snapshot domain models.

This module defines the data structures shared by dataset resolution,
version enumeration and deleted-file detection: observed filesystem
entries, the mount table, snapshot location strategies and the runtime
lookup configuration.
"""

import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

# Reserved subpath under a dataset mount point holding one directory per snapshot
HIDDEN_SNAPSHOT_DIR = Path(".zfs") / "snapshot"


@dataclass(frozen=True, slots=True)
class PathData:
    """A single observed filesystem entry, live or inside a snapshot.

    Two PathData values describe the same *version* when their
    fingerprints match, whatever their paths. The fingerprint is
    ``(modification_time, size)``: a cheap approximation that never
    reads file contents, so two different files that share both values
    collapse into one version.

    Attributes:
        path: Absolute, normalized path of the entry.
        size: Size in bytes at observation time (0 for phantoms).
        modification_time: Modification time in nanoseconds since the epoch
            (0 for phantoms). Only comparable within one filesystem.
        is_phantom: True when probing the path failed (no such entry).
    """

    path: Path
    size: int
    modification_time: int
    is_phantom: bool = False

    @property
    def fingerprint(self) -> tuple[int, int]:
        """Version identity key: (modification_time, size)."""
        return (self.modification_time, self.size)

    @classmethod
    def from_path(cls, path: str | os.PathLike[str]) -> "PathData":
        """Probe a path and capture its size and modification time.

        The path is made absolute and normalized without resolving
        symlinks, so mount point prefixes stay intact. Like
        :meth:`from_dir_entry`, a symlink is described by its own metadata,
        never its target's. A failed probe yields a phantom entry instead
        of raising.

        Args:
            path: Path to probe.

        Returns:
            PathData for the path, phantom if it could not be stat'ed.
        """
        absolute = Path(os.path.abspath(path))
        try:
            st = absolute.lstat()
        except OSError:
            return cls(path=absolute, size=0, modification_time=0, is_phantom=True)
        return cls(path=absolute, size=st.st_size, modification_time=st.st_mtime_ns)

    @classmethod
    def from_dir_entry(cls, entry: os.DirEntry[str]) -> "PathData":
        """Build PathData from a directory listing entry without following symlinks."""
        path = Path(entry.path)
        try:
            st = entry.stat(follow_symlinks=False)
        except OSError:
            return cls(path=path, size=0, modification_time=0, is_phantom=True)
        return cls(path=path, size=st.st_size, modification_time=st.st_mtime_ns)


@dataclass(frozen=True, slots=True)
class MountEntry:
    """A dataset and the path it is mounted at.

    Attributes:
        dataset: Dataset identifier (e.g. "rpool/ROOT/ubuntu" or "tank/rpool").
        mount_point: Absolute mount point path.
    """

    dataset: str
    mount_point: Path


@dataclass(frozen=True, slots=True)
class MountTable:
    """Immutable, ordered collection of mounted datasets.

    Built once per request (see ``snapvers.snapshots.mounts``) and passed
    into every resolution call; it is never mutated afterwards.
    """

    entries: tuple[MountEntry, ...] = ()

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str | os.PathLike[str]]]) -> "MountTable":
        """Build a table from (dataset, mount_point) pairs."""
        return cls(tuple(MountEntry(dataset, Path(mount)) for dataset, mount in pairs))

    def __iter__(self) -> Iterator[MountEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True, slots=True)
class NativeSnapPoint:
    """Infer datasets and snapshot directories from the mount table."""

    mounts: MountTable


@dataclass(frozen=True, slots=True)
class UserDefinedSnapPoint:
    """Explicit snapshot and live-tree roots; no mount table inference.

    Attributes:
        snap_dir: Dataset root whose hidden snapshot directory is searched.
        local_dir: Live-tree root that input paths are made relative to.
    """

    snap_dir: Path
    local_dir: Path


SnapPoint = NativeSnapPoint | UserDefinedSnapPoint


@dataclass(frozen=True, slots=True)
class Config:
    """Runtime configuration for a single lookup or deleted-file request.

    Attributes:
        snap_point: Snapshot location strategy.
        requested_dir: Directory targeted by the deleted-file flow.
        opt_alt_replicated: Also search a replicated copy of each dataset.
        opt_no_live_vers: Leave live copies out of lookup results.
        opt_recursive: Descend into subdirectories in the deleted-file flow.
    """

    snap_point: SnapPoint
    requested_dir: Path | None = None
    opt_alt_replicated: bool = False
    opt_no_live_vers: bool = False
    opt_recursive: bool = False
    max_workers: int | None = field(default=None, compare=False)
