"""Version registry (``versions.json``) and drafting of new version snapshots."""
from __future__ import annotations

import logging
import shutil
from pathlib import Path

from docs_versioning.domain.models import NEXT_VERSION, SiteContext, VersioningOptions
from docs_versioning.errors import (
    InvalidVersionError,
    SnapshotExistsError,
    VersionExistsError,
    VersioningError,
)
from docs_versioning.infrastructure.fs import copy_tree, read_json, write_json
from docs_versioning.services.paths import is_within
from docs_versioning.services.sidebar import snapshot_sidebar

logger = logging.getLogger(__name__)


class VersionRegistry:
    """Ordered version ids, most recent first; index 0 is the current version."""

    def __init__(self, path: Path, versions: list[str] | None = None):
        self.path = path
        self.versions: list[str] = list(versions or [])

    @classmethod
    def load(cls, path: Path) -> VersionRegistry:
        if not path.exists():
            return cls(path)
        data = read_json(path)
        if not isinstance(data, list) or not all(isinstance(v, str) for v in data):
            raise VersioningError(f"{path} must contain a JSON array of version strings")
        dupes = sorted({v for v in data if data.count(v) > 1})
        if dupes:
            raise VersioningError(f"Duplicate versions in {path}: {dupes}")
        return cls(path, data)

    @property
    def current(self) -> str | None:
        return self.versions[0] if self.versions else None

    def __contains__(self, version: object) -> bool:
        return version in self.versions

    def __iter__(self):
        return iter(self.versions)

    def __len__(self) -> int:
        return len(self.versions)

    def add(self, version: str) -> None:
        if version in self.versions:
            raise VersionExistsError(version)
        self.versions.insert(0, version)

    def save(self) -> Path:
        return write_json(self.path, self.versions)


def validate_version_name(version: str) -> str:
    name = version.strip()
    if not name:
        raise InvalidVersionError("Version name must not be empty")
    if name in {".", ".."} or "/" in name or "\\" in name:
        raise InvalidVersionError(f"Invalid version name: {version!r}")
    if name == NEXT_VERSION:
        raise InvalidVersionError(f"'{NEXT_VERSION}' is reserved for the unreleased docs")
    return name


def draft_version(
    version: str,
    *,
    context: SiteContext,
    options: VersioningOptions,
    registry: VersionRegistry,
    versioned_dir: Path,
    pages_dir: Path,
) -> Path:
    """Snapshot the source tree as ``version`` and register it.

    Every check runs before the first write so a refused draft leaves no trace;
    a step failing after the copy removes the partial snapshot again.
    """
    name = validate_version_name(version)
    if name in registry:
        raise VersionExistsError(name)
    dest = versioned_dir / name
    if dest.exists():
        raise SnapshotExistsError(dest)

    logger.info("Creating new version %s ...", name)
    source = context.source_dir.resolve()
    exclude = [context.config_dir]
    exclude += [d for d in (versioned_dir, pages_dir) if is_within(d, source)]
    # remove on failure whatever this draft created, including a fresh archive root
    created = dest if versioned_dir.exists() else versioned_dir
    try:
        copy_tree(source, dest, exclude=exclude)
        snapshot_sidebar(context.theme_config, dest)
        if options.on_new_version is not None:
            options.on_new_version(name, dest)
        registry.add(name)
        registry.save()
    except Exception:
        logger.error("Drafting version %s failed, removing %s", name, created)
        shutil.rmtree(created, ignore_errors=True)
        if name in registry:
            registry.versions.remove(name)
        raise
    logger.info("Snapshotted your current docs as version %s", name)
    return dest


__all__ = ["VersionRegistry", "draft_version", "validate_version_name"]
