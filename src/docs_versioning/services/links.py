"""Markdown link conversion aware of versioned route prefixes.

Replaces the host's ``convert-router-link`` plugin: internal source links become
``RouterLink`` targets resolved against the *rewritten* route of the page that
contains them, so a relative link in a ``next`` page stays under ``/next/`` and an
absolute link in an archived version stays inside that version.
"""
from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from pathlib import Path
from urllib.parse import unquote, urljoin

from docs_versioning.domain.models import NEXT_VERSION, RenderedLink
from docs_versioning.services.paths import classify_file, generate_versioned_path, version_of_file

DEFAULT_EXTERNAL_ATTRS = {"target": "_blank", "rel": "noopener noreferrer"}

_EXTERNAL_RE = re.compile(r"^(https?:|mailto:|tel:)", re.I)
_SOURCE_LINK_RE = re.compile(r"(/|\.md|\.html)(#.*)?$")
_INDEX_RE = re.compile(r"^(.*/)?(index|readme)\.md(#.*)?$", re.I)
_MD_RE = re.compile(r"\.md(#.*)?$")


def normalize_source_link(href: str) -> str:
    """``foo/README.md#x`` -> ``foo/#x``; ``foo.md`` -> ``foo.html``; URI-decoded."""
    m = _INDEX_RE.match(href)
    if m:
        to = (m.group(1) or "") + (m.group(3) or "")
        to = to or "./"
    else:
        to = _MD_RE.sub(lambda mm: ".html" + (mm.group(1) or ""), href)
    return unquote(to)


class VersionedLinkConverter:
    def __init__(
        self,
        *,
        source_dir: Path,
        versioned_source_dir: Path,
        pages_source_dir: Path,
        current_version: str | None,
        locales: Iterable[str] = (),
        external_attrs: Mapping[str, str] | None = None,
    ):
        self.source_dir = source_dir.resolve()
        self.versioned_source_dir = versioned_source_dir.resolve()
        self.pages_source_dir = pages_source_dir.resolve()
        self.current_version = current_version
        self.locales = sorted((loc for loc in locales if loc != "/"), key=len, reverse=True)
        self.external_attrs = dict(external_attrs if external_attrs is not None else DEFAULT_EXTERNAL_ATTRS)

    def _locale_of(self, route: str) -> str:
        for loc in self.locales:
            if route.startswith(loc):
                return loc
        return "/"

    def _page_route(self, file_path: Path | None) -> tuple[str | None, str | None]:
        """(rewritten page route, version prefix for absolute links)."""
        if file_path is None:
            return None, None
        file_path = file_path.resolve()
        kind = classify_file(
            file_path,
            versioned_dir=self.versioned_source_dir,
            pages_dir=self.pages_source_dir,
            source_dir=self.source_dir,
        )
        if kind == "versioned":
            version = version_of_file(file_path, self.versioned_source_dir)
            rel = file_path.relative_to(self.versioned_source_dir).as_posix()
            if version is None or version == self.current_version:
                return "/" + rel.split("/", 1)[-1], None
            return "/" + rel, version
        if kind == "unversioned":
            return "/" + file_path.relative_to(self.pages_source_dir).as_posix(), None
        if kind == "next":
            route = "/" + file_path.relative_to(self.source_dir).as_posix()
            return generate_versioned_path(route, NEXT_VERSION, self._locale_of(route)), NEXT_VERSION
        return None, None

    def _to_router_link(self, href: str, file_path: Path | None) -> str:
        to = normalize_source_link(href)
        page_route, prefix = self._page_route(file_path)
        if to.startswith("/"):
            if prefix == NEXT_VERSION:
                return generate_versioned_path(to, prefix, self._locale_of(to))
            if prefix is not None:
                return generate_versioned_path(to, prefix)
            return to
        if page_route is not None:
            return urljoin(page_route, to)
        return to if to.startswith(".") else "./" + to

    def convert(self, attrs: Mapping[str, str], file_path: Path | None = None) -> RenderedLink:
        """Convert the attributes of one markdown ``<a>`` token."""
        href = attrs.get("href")
        if href is None:
            return RenderedLink(attrs=dict(attrs))
        if _EXTERNAL_RE.match(href):
            return RenderedLink(attrs={**attrs, **self.external_attrs})
        if not _SOURCE_LINK_RE.search(href):
            return RenderedLink(attrs=dict(attrs))
        out = {k: v for k, v in attrs.items() if k != "href"}
        out["to"] = self._to_router_link(href, file_path)
        return RenderedLink(tag="RouterLink", attrs=out)

    __call__ = convert


__all__ = ["DEFAULT_EXTERNAL_ATTRS", "VersionedLinkConverter", "normalize_source_link"]
