"""Mount table discovery.

Builds the table of mounted snapshot-capable datasets, preferring the
``zfs`` command and falling back to ``/proc/mounts`` when it is missing.
"""

import logging
import re
import subprocess
from pathlib import Path

from snapvers.snapshots.errors import MountDiscoveryError
from snapvers.snapshots.models import MountEntry, MountTable
from snapvers.utils.shell import run_command

logger = logging.getLogger(__name__)

PROC_MOUNTS = Path("/proc/mounts")

_SNAPSHOT_FS_TYPES: frozenset[str] = frozenset({"zfs"})
_OCTAL_ESCAPE = re.compile(r"\\([0-7]{3})")


def parse_zfs_list(output: str) -> MountTable:
    """Parse ``zfs list -H -o name,mountpoint`` output.

    Datasets without a usable mount point ("none", "legacy", "-") are
    skipped.

    Args:
        output: Tab-separated command output.

    Returns:
        MountTable in output order.
    """
    entries: list[MountEntry] = []
    for line in output.splitlines():
        parts = line.split("\t")
        if len(parts) != 2:
            continue
        dataset, mount_point = parts[0].strip(), parts[1].strip()
        if not dataset or not mount_point.startswith("/"):
            continue
        entries.append(MountEntry(dataset, Path(mount_point)))
    return MountTable(tuple(entries))


def _unescape_mount_field(value: str) -> str:
    """Decode the octal escapes (e.g. ``\\040`` for space) used in /proc/mounts."""
    return _OCTAL_ESCAPE.sub(lambda match: chr(int(match.group(1), 8)), value)


def parse_proc_mounts(content: str) -> MountTable:
    """Parse /proc/mounts content, keeping snapshot-capable filesystems only.

    Args:
        content: Text in fstab format (device, mount point, type, ...).

    Returns:
        MountTable in file order.
    """
    entries: list[MountEntry] = []
    for line in content.splitlines():
        parts = line.split()
        if len(parts) < 3 or parts[2] not in _SNAPSHOT_FS_TYPES:
            continue
        dataset = _unescape_mount_field(parts[0])
        mount_point = _unescape_mount_field(parts[1])
        entries.append(MountEntry(dataset, Path(mount_point)))
    return MountTable(tuple(entries))


def _mounts_from_zfs() -> MountTable | None:
    try:
        result = run_command(
            ["zfs", "list", "-H", "-t", "filesystem", "-o", "name,mountpoint"],
            timeout=30.0,
        )
    except OSError as e:
        logger.debug("zfs command unavailable: %s", e)
        return None
    except subprocess.TimeoutExpired:
        logger.warning("zfs list timed out")
        return None

    if not result.success:
        logger.warning("zfs list failed: %s", result.stderr.strip())
        return None

    return parse_zfs_list(result.stdout)


def _mounts_from_proc(proc_mounts: Path) -> MountTable | None:
    try:
        return parse_proc_mounts(proc_mounts.read_text())
    except OSError as e:
        logger.debug("Cannot read %s: %s", proc_mounts, e)
        return None


def discover_mounts(proc_mounts: Path = PROC_MOUNTS) -> MountTable:
    """Discover mounted datasets.

    Args:
        proc_mounts: Mount table file used when ``zfs`` is unavailable.

    Returns:
        Non-empty MountTable.

    Raises:
        MountDiscoveryError: If no snapshot-capable dataset is mounted.
    """
    mounts = _mounts_from_zfs()
    if not mounts:
        logger.warning("Falling back to %s for mount discovery", proc_mounts)
        mounts = _mounts_from_proc(proc_mounts)

    if not mounts:
        msg = (
            "No mounted snapshot-capable datasets found. "
            "Specify SNAP_DIR and LOCAL_DIR to search snapshots manually."
        )
        raise MountDiscoveryError(msg)

    logger.debug("Discovered %d mounted datasets", len(mounts))
    return mounts
