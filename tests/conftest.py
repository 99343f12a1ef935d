"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules, most of
them building fake datasets with a hidden snapshot directory on disk.
"""

import os
from collections.abc import Callable
from pathlib import Path

import pytest

# Base modification time for fixture files (2024-01-15T10:00:00Z) in nanoseconds
BASE_MTIME_NS = 1_705_312_800 * 1_000_000_000

WriteFile = Callable[[Path, bytes, int], Path]


@pytest.fixture(autouse=True)
def isolated_settings(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> Path:
    """Keep user settings and SNAP_DIR/LOCAL_DIR out of every test."""
    config_home = tmp_path_factory.mktemp("xdg-config")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.delenv("SNAP_DIR", raising=False)
    monkeypatch.delenv("LOCAL_DIR", raising=False)
    return config_home


@pytest.fixture
def write_file() -> WriteFile:
    """Return a helper writing a file with a fixed modification time.

    The helper takes (path, content, mtime offset in seconds) and returns
    the path; parent directories are created as needed.
    """

    def _write(path: Path, content: bytes, offset_seconds: int) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        mtime = BASE_MTIME_NS + offset_seconds * 1_000_000_000
        os.utime(path, ns=(mtime, mtime))
        return path

    return _write


@pytest.fixture
def dataset(tmp_path: Path) -> Path:
    """Create an empty dataset mount point with a hidden snapshot directory."""
    mount = tmp_path / "tank"
    (mount / ".zfs" / "snapshot").mkdir(parents=True)
    return mount


@pytest.fixture
def snapshot(dataset: Path) -> Callable[[str], Path]:
    """Return a helper creating (or returning) a named snapshot root of ``dataset``."""

    def _snapshot(name: str) -> Path:
        root = dataset / ".zfs" / "snapshot" / name
        root.mkdir(parents=True, exist_ok=True)
        return root

    return _snapshot
