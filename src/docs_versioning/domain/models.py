"""Domain models (Pydantic) describing the host site and the pages it hands to the plugin."""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field

PageKind = Literal["versioned", "unversioned", "next"]

NEXT_VERSION = "next"
SIDEBAR_SNAPSHOT_FILE = "sidebar.config.json"
VERSIONS_FILE = "versions.json"


# -------------------- Host Site -------------------- #


class SiteContext(BaseModel):
    """What the host knows about the site being built.

    `site_config` is the parsed site config; `theme_config` lives inside it and is
    mutated in place by the `ready` hook.
    """

    source_dir: Path
    config_dir: Path
    site_config: dict[str, Any] = Field(default_factory=dict)

    @property
    def theme_config(self) -> dict[str, Any]:
        return self.site_config.setdefault("theme_config", {})

    @property
    def versions_file(self) -> Path:
        return self.config_dir / VERSIONS_FILE


class VersioningOptions(BaseModel):
    """User options for the plugin (``versioning`` block of the site config)."""

    versioned_source_dir: Path | None = None
    pages_source_dir: Path | None = None
    on_new_version: Callable[[str, Path], None] | None = None

    def resolve_versioned_dir(self, source_dir: Path) -> Path:
        if self.versioned_source_dir is not None:
            return (source_dir / self.versioned_source_dir).resolve()
        return (source_dir / "website" / "versioned_docs").resolve()

    def resolve_pages_dir(self, source_dir: Path) -> Path:
        if self.pages_source_dir is not None:
            return (source_dir / self.pages_source_dir).resolve()
        return (source_dir / "website" / "pages").resolve()


# -------------------- Pages -------------------- #


class PageFile(BaseModel):
    """Extra page file handed back to the host by `additional_pages`."""

    file_path: Path
    relative: str


class Page(BaseModel):
    """Host page record; the plugin fills in the versioning fields."""

    file_path: Path | None = None
    path: str
    regular_path: str
    locale_path: str = "/"
    version: str | None = None
    original_regular_path: str | None = None
    unversioned: bool = False


class AppFile(BaseModel):
    """Client-side enhancement file (name + generated source)."""

    name: str
    content: str


# -------------------- Markdown -------------------- #


class RenderedLink(BaseModel):
    """Result of converting a markdown link token."""

    tag: str = "a"
    attrs: dict[str, str] = Field(default_factory=dict)


@dataclass(slots=True)
class MarkdownChain:
    """Named, ordered markdown plugin registry exposed by the host."""

    plugins: dict[str, Any] = field(default_factory=dict)

    def use(self, name: str, plugin: Any) -> MarkdownChain:
        self.plugins[name] = plugin
        return self

    def delete(self, name: str) -> None:
        self.plugins.pop(name, None)

    def get(self, name: str) -> Any | None:
        return self.plugins.get(name)


__all__ = [
    "NEXT_VERSION",
    "SIDEBAR_SNAPSHOT_FILE",
    "VERSIONS_FILE",
    "AppFile",
    "MarkdownChain",
    "Page",
    "PageFile",
    "PageKind",
    "RenderedLink",
    "SiteContext",
    "VersioningOptions",
]
