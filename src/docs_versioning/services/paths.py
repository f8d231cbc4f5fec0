"""Route path rewriting & page classification for versioned docs."""
from __future__ import annotations

import re
from pathlib import Path

from docs_versioning.domain.models import PageKind


def _ensure_slashes(locale_path: str) -> str:
    loc = locale_path or "/"
    if not loc.startswith("/"):
        loc = "/" + loc
    if not loc.endswith("/"):
        loc += "/"
    return loc


def generate_versioned_path(path: str, version: str, locale_path: str = "/") -> str:
    """Insert ``version`` as the first segment after the locale prefix.

    >>> generate_versioned_path("/guide/", "next")
    '/next/guide/'
    >>> generate_versioned_path("/zh/guide/", "next", "/zh/")
    '/zh/next/guide/'
    """
    loc = _ensure_slashes(locale_path)
    if path.startswith(loc):
        return f"{loc}{version}/{path[len(loc):]}"
    if loc != "/" and path == loc.rstrip("/"):
        # locale root written without trailing slash ("/zh")
        return f"{loc}{version}/"
    return f"/{version}/{path.lstrip('/')}"


def strip_version_prefix(path: str, version: str) -> str:
    stripped = re.sub(rf"^/{re.escape(version)}(?=/|$)", "", path)
    return stripped or "/"


def is_within(path: Path, root: Path) -> bool:
    try:
        path.relative_to(root)
    except ValueError:
        return False
    return True


def classify_file(
    file_path: Path,
    *,
    versioned_dir: Path,
    pages_dir: Path,
    source_dir: Path,
) -> PageKind | None:
    # versioned/pages dirs usually live inside the source tree so they win
    if is_within(file_path, versioned_dir):
        return "versioned"
    if is_within(file_path, pages_dir):
        return "unversioned"
    if is_within(file_path, source_dir):
        return "next"
    return None


def version_of_file(file_path: Path, versioned_dir: Path) -> str | None:
    try:
        rel = file_path.relative_to(versioned_dir)
    except ValueError:
        return None
    if len(rel.parts) < 2:
        return None
    return rel.parts[0]


__all__ = [
    "classify_file",
    "generate_versioned_path",
    "is_within",
    "strip_version_prefix",
    "version_of_file",
]
