"""Exceptions raised while resolving snapshot versions.

Each error carries a human-readable message that points at the most
likely cause (wrong working directory, unmounted replica, typo'd path).
"""

from pathlib import Path


class SnapversError(Exception):
    """Base exception for snapshot resolution errors."""


class NoQualifyingDatasetError(SnapversError):
    """Raised when no mount table entry contains the requested path."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(
            f"Could not identify any qualifying dataset for {path}. "
            "Maybe consider specifying SNAP_DIR and LOCAL_DIR manually?"
        )


class NoAlternateReplicaError(SnapversError):
    """Raised when no replicated copy of a dataset is mounted."""

    def __init__(self, mount_point: Path) -> None:
        self.mount_point = mount_point
        super().__init__(
            f"Unable to detect an alternate replicated mount point for {mount_point}. "
            "Perhaps the replicated filesystem is not mounted?"
        )


class PathNotUnderSnapshotRootError(SnapversError):
    """Raised when a live path does not start with the expected prefix.

    Attributes:
        path: The live path that could not be made relative.
        prefix: The mount point or LOCAL_DIR that was expected to prefix it.
        hint: Suggestion that differs for native and user-defined setups.
    """

    def __init__(self, path: Path, prefix: Path, *, user_defined: bool) -> None:
        self.path = path
        self.prefix = prefix
        if user_defined:
            self.hint = "Perhaps you need to set the LOCAL_DIR value."
        else:
            self.hint = "Perhaps you need to set the SNAP_DIR and LOCAL_DIR values."
        super().__init__(
            f"{path} is not located under {prefix}. "
            f"Are you sure you're in the correct working directory? {self.hint}"
        )


class NoVersionsFoundError(SnapversError):
    """Raised when neither a live nor a snapshot copy exists for any input."""

    def __init__(self) -> None:
        super().__init__(
            "Neither a live copy, nor a snapshot copy of such a file appears to exist. "
            "Please check the file name and try again."
        )


class MountDiscoveryError(SnapversError):
    """Raised when no snapshot-capable mounts could be discovered."""
