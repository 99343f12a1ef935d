"""User settings and runtime configuration assembly.

Settings are stored in ~/.config/snapvers/config.toml and may be
overridden by the SNAP_DIR / LOCAL_DIR environment variables. The
effective settings are turned into the runtime ``Config`` consumed by
the snapshot lookup.
"""

import logging
import os
import tomllib
from collections.abc import Callable, Mapping
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from snapvers.core.paths import get_settings_path
from snapvers.snapshots.models import (
    Config,
    MountTable,
    NativeSnapPoint,
    SnapPoint,
    UserDefinedSnapPoint,
)
from snapvers.snapshots.mounts import discover_mounts

logger = logging.getLogger(__name__)

# Environment variables naming explicit snapshot and live-tree roots
ENV_SNAP_DIR = "SNAP_DIR"
ENV_LOCAL_DIR = "LOCAL_DIR"


class SnapversSettings(BaseModel):
    """Persistent snapvers settings.

    Attributes:
        snap_dir: Dataset root to search snapshots under (disables mount detection).
        local_dir: Live-tree root matching ``snap_dir``.
        alt_replicated: Also search replicated copies of each dataset.
        no_live: Leave live copies out of lookup results.
    """

    model_config = ConfigDict(extra="forbid")

    snap_dir: Annotated[
        Path | None,
        Field(description="Dataset root holding the hidden snapshot directory"),
    ] = None
    local_dir: Annotated[
        Path | None,
        Field(description="Live directory corresponding to snap_dir"),
    ] = None
    alt_replicated: Annotated[
        bool,
        Field(description="Search replicated datasets too"),
    ] = False
    no_live: Annotated[
        bool,
        Field(description="Omit live versions from lookups"),
    ] = False

    @model_validator(mode="after")
    def validate_dirs(self) -> "SnapversSettings":
        """Validate that snap_dir and local_dir are absolute and set together."""
        if (self.snap_dir is None) != (self.local_dir is None):
            msg = "snap_dir and local_dir must be set together"
            raise ValueError(msg)
        for name, value in (("snap_dir", self.snap_dir), ("local_dir", self.local_dir)):
            if value is not None and not value.is_absolute():
                msg = f"{name} must be an absolute path, got {value}"
                raise ValueError(msg)
        return self

    @property
    def is_user_defined(self) -> bool:
        """True when explicit snapshot directories replace mount detection."""
        return self.snap_dir is not None


class SettingsError(Exception):
    """Base exception for settings errors."""


class SettingsNotFoundError(SettingsError):
    """Raised when the settings file is not found."""


class SettingsParseError(SettingsError):
    """Raised when the settings file cannot be parsed."""


def load_settings(path: Path | None = None) -> SnapversSettings:
    """Load settings from a TOML file.

    Args:
        path: Path to the settings file. If None, uses the default path.

    Returns:
        Validated SnapversSettings.

    Raises:
        SettingsNotFoundError: If the file doesn't exist.
        SettingsParseError: If the TOML syntax is invalid.
        SettingsError: If the content doesn't match the schema.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        raise SettingsNotFoundError(f"Settings file not found: {settings_path}")

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SettingsParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read settings: {e}") from e

    try:
        return SnapversSettings.model_validate(data)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings content: {e}") from e


def save_settings(settings: SnapversSettings, path: Path | None = None) -> Path:
    """Save settings to a TOML file atomically.

    Args:
        settings: Settings to save.
        path: Destination. If None, uses the default path.

    Returns:
        Path where the settings were saved.

    Raises:
        SettingsError: If the file cannot be written.
    """
    settings_path = path or get_settings_path()
    settings_path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=settings_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(_settings_to_dict(settings), f)
        os.replace(str(tmp_path), str(settings_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise SettingsError(f"Failed to write settings: {e}") from e

    return settings_path


def _settings_to_dict(settings: SnapversSettings) -> dict[str, object]:
    """Convert settings to a TOML-ready dict, leaving out defaults."""
    result: dict[str, object] = {}
    if settings.snap_dir is not None:
        result["snap_dir"] = str(settings.snap_dir)
    if settings.local_dir is not None:
        result["local_dir"] = str(settings.local_dir)
    if settings.alt_replicated:
        result["alt_replicated"] = True
    if settings.no_live:
        result["no_live"] = True
    return result


def apply_env_overrides(
    settings: SnapversSettings,
    environ: Mapping[str, str] | None = None,
) -> SnapversSettings:
    """Override snap_dir / local_dir from SNAP_DIR / LOCAL_DIR.

    Raises:
        SettingsError: If the overridden settings are invalid.
    """
    env = os.environ if environ is None else environ
    updates: dict[str, str] = {}
    if env.get(ENV_SNAP_DIR):
        updates["snap_dir"] = env[ENV_SNAP_DIR]
    if env.get(ENV_LOCAL_DIR):
        updates["local_dir"] = env[ENV_LOCAL_DIR]

    if not updates:
        return settings

    logger.debug("Applying environment overrides: %s", updates)
    try:
        return SnapversSettings.model_validate({**settings.model_dump(), **updates})
    except ValidationError as e:
        raise SettingsError(f"Invalid {ENV_SNAP_DIR}/{ENV_LOCAL_DIR} environment: {e}") from e


def load_effective_settings(path: Path | None = None) -> SnapversSettings:
    """Load settings from file (defaults if absent) with environment overrides applied.

    Raises:
        SettingsError: If the file or environment holds invalid values.
    """
    try:
        settings = load_settings(path)
    except SettingsNotFoundError:
        settings = SnapversSettings()
    return apply_env_overrides(settings)


def build_config(
    settings: SnapversSettings,
    *,
    requested_dir: Path | None = None,
    recursive: bool = False,
    mounts_factory: Callable[[], MountTable] | None = None,
) -> Config:
    """Assemble the runtime lookup configuration.

    The mount table is only discovered for native snap points.

    Args:
        settings: Effective settings.
        requested_dir: Directory for the deleted-file flow.
        recursive: Walk subdirectories in the deleted-file flow.
        mounts_factory: Callable producing the mount table (default: discover_mounts).

    Returns:
        Config ready for lookup or deleted-file detection.

    Raises:
        MountDiscoveryError: If mount detection finds no datasets.
    """
    snap_point: SnapPoint
    if settings.snap_dir is not None and settings.local_dir is not None:
        snap_point = UserDefinedSnapPoint(settings.snap_dir, settings.local_dir)
    else:
        snap_point = NativeSnapPoint((mounts_factory or discover_mounts)())

    return Config(
        snap_point=snap_point,
        requested_dir=requested_dir,
        opt_alt_replicated=settings.alt_replicated,
        opt_no_live_vers=settings.no_live,
        opt_recursive=recursive,
    )
