"""Tests for snapshot domain models."""

import os
from pathlib import Path

import pytest
from snapvers.snapshots.models import (
    HIDDEN_SNAPSHOT_DIR,
    Config,
    MountEntry,
    MountTable,
    NativeSnapPoint,
    PathData,
    UserDefinedSnapPoint,
)


class TestPathDataFromPath:
    """Tests for PathData.from_path probing."""

    def test_existing_file(self, tmp_path: Path, write_file) -> None:
        """An existing file captures size and nanosecond modification time."""
        path = write_file(tmp_path / "notes.txt", b"hello", 0)

        data = PathData.from_path(path)

        assert data.path == path
        assert data.size == 5
        assert data.modification_time == path.stat().st_mtime_ns
        assert data.is_phantom is False

    def test_missing_file_is_phantom(self, tmp_path: Path) -> None:
        """A path that cannot be stat'ed becomes a phantom, not an exception."""
        data = PathData.from_path(tmp_path / "missing.txt")

        assert data.is_phantom is True
        assert data.size == 0
        assert data.modification_time == 0

    def test_relative_path_is_made_absolute(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Relative paths are resolved against the current directory."""
        monkeypatch.chdir(tmp_path)

        data = PathData.from_path("sub/../file.txt")

        assert data.path == tmp_path / "file.txt"

    def test_symlink_is_not_resolved(self, tmp_path: Path, write_file) -> None:
        """The probed path keeps symlinked components instead of the target."""
        target = write_file(tmp_path / "real" / "f.txt", b"x", 0)
        link = tmp_path / "link"
        link.symlink_to(target.parent)

        data = PathData.from_path(link / "f.txt")

        assert data.path == link / "f.txt"
        assert data.is_phantom is False

    def test_symlink_uses_own_metadata(self, tmp_path: Path, write_file) -> None:
        """A symlinked file is fingerprinted like its directory entry, not its target."""
        target = write_file(tmp_path / "live" / "a.txt", b"live contents", 500)
        snap_dir = tmp_path / ".zfs" / "snapshot" / "s1"
        snap_dir.mkdir(parents=True)
        link = snap_dir / "a.txt"
        link.symlink_to(target)

        data = PathData.from_path(link)
        with os.scandir(snap_dir) as entries:
            (entry,) = list(entries)

        assert data.fingerprint == PathData.from_dir_entry(entry).fingerprint
        assert data.fingerprint != PathData.from_path(target).fingerprint


class TestPathDataFromDirEntry:
    """Tests for PathData.from_dir_entry."""

    def test_from_dir_entry(self, tmp_path: Path, write_file) -> None:
        """Directory entries are converted with their lstat values."""
        path = write_file(tmp_path / "a.bin", b"12345678", 10)

        with os.scandir(tmp_path) as entries:
            (entry,) = list(entries)
        data = PathData.from_dir_entry(entry)

        assert data.path == path
        assert data.size == 8
        assert data.modification_time == path.stat().st_mtime_ns


class TestFingerprint:
    """Tests for version identity."""

    def test_same_fingerprint_ignores_path(self) -> None:
        """Entries with equal mtime and size share a fingerprint whatever the path."""
        a = PathData(Path("/a/file"), size=10, modification_time=100)
        b = PathData(Path("/b/other"), size=10, modification_time=100)

        assert a.fingerprint == b.fingerprint == (100, 10)

    def test_different_size_differs(self) -> None:
        """A size change is a new version even with an identical mtime."""
        a = PathData(Path("/a"), size=10, modification_time=100)
        b = PathData(Path("/a"), size=11, modification_time=100)

        assert a.fingerprint != b.fingerprint

    def test_path_data_is_immutable(self) -> None:
        """PathData is frozen."""
        data = PathData(Path("/a"), size=1, modification_time=1)
        with pytest.raises(AttributeError):
            data.size = 2  # type: ignore[misc]


class TestMountTable:
    """Tests for MountTable construction."""

    def test_from_pairs_preserves_order(self) -> None:
        """from_pairs builds entries in input order."""
        table = MountTable.from_pairs([("rpool", "/"), ("rpool/home", "/home")])

        assert list(table) == [
            MountEntry("rpool", Path("/")),
            MountEntry("rpool/home", Path("/home")),
        ]
        assert len(table) == 2

    def test_empty_table_is_falsy(self) -> None:
        """An empty table evaluates as false."""
        assert not MountTable()


class TestConfig:
    """Tests for runtime Config defaults."""

    def test_defaults(self) -> None:
        """All options are off by default."""
        config = Config(snap_point=NativeSnapPoint(MountTable()))

        assert config.requested_dir is None
        assert config.opt_alt_replicated is False
        assert config.opt_no_live_vers is False
        assert config.opt_recursive is False

    def test_user_defined_snap_point(self) -> None:
        """UserDefinedSnapPoint keeps both roots."""
        snap_point = UserDefinedSnapPoint(Path("/backup"), Path("/home"))

        assert snap_point.snap_dir == Path("/backup")
        assert snap_point.local_dir == Path("/home")

    def test_hidden_snapshot_dir(self) -> None:
        """Snapshots live under .zfs/snapshot."""
        assert HIDDEN_SNAPSHOT_DIR == Path(".zfs/snapshot")
