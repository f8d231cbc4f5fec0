"""Exception hierarchy raised by services; the CLI layer turns these into exit codes."""
from __future__ import annotations

from pathlib import Path


class VersioningError(Exception):
    """Base error for anything the versioning plugin refuses to do."""


class VersionExistsError(VersioningError):
    def __init__(self, version: str):
        super().__init__(
            f"Version {version} already exists in versions.json. Please use a different version."
        )
        self.version = version


class SnapshotExistsError(VersioningError):
    def __init__(self, path: Path):
        super().__init__(
            f"Snapshot directory {path} already exists but is not listed in versions.json."
            " Remove it or pick a different version."
        )
        self.path = path


class InvalidVersionError(VersioningError, ValueError):
    pass


__all__ = ["InvalidVersionError", "SnapshotExistsError", "VersionExistsError", "VersioningError"]
