"""Versioning plugin: the hook object handed to the host site generator.

Hooks (called by the host in build order):
    * ``ready`` - merge versioned sidebar snapshots into the theme config
    * ``extend_cli`` - register the ``version`` command
    * ``additional_pages`` - versioned docs + unversioned extra pages
    * ``extend_page_data`` - tag pages with a version, rewrite their routes
    * ``enhance_app_files`` - expose the version list to the client app
    * ``chain_markdown`` - swap in the version-aware router-link converter
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import typer

from docs_versioning.domain.models import (
    NEXT_VERSION,
    AppFile,
    MarkdownChain,
    Page,
    PageFile,
    SiteContext,
    VersioningOptions,
)
from docs_versioning.infrastructure.fs import glob_pages
from docs_versioning.infrastructure.templating.engine import render_string
from docs_versioning.services.links import DEFAULT_EXTERNAL_ATTRS, VersionedLinkConverter
from docs_versioning.services.paths import (
    classify_file,
    generate_versioned_path,
    strip_version_prefix,
    version_of_file,
)
from docs_versioning.services.sidebar import (
    current_sidebar_config,
    load_sidebar_snapshot,
    merge_sidebar_config,
    update_sidebar_config,
)
from docs_versioning.services.version_manager import VersionRegistry, draft_version

logger = logging.getLogger(__name__)

PLUGIN_NAME = "docs-versioning"
HOST_LINK_PLUGIN = "convert-router-link"
VERSIONED_LINK_PLUGIN = "convert-router-link-versioned"

VERSIONS_APP_FILE = """\
export default ({ Vue }) => {
  Vue.mixin({
    computed: {
      $versions: () => {{ versions | tojson }}
    }
  })
}
"""


class VersioningPlugin:
    name = PLUGIN_NAME

    def __init__(self, options: VersioningOptions, context: SiteContext):
        self.options = options
        self.context = context
        self.source_dir = context.source_dir.resolve()
        self.versioned_source_dir = options.resolve_versioned_dir(self.source_dir)
        self.pages_source_dir = options.resolve_pages_dir(self.source_dir)
        self.registry = VersionRegistry.load(context.versions_file)

    @property
    def versions(self) -> list[str]:
        return self.registry.versions

    @property
    def current_version(self) -> str | None:
        return self.registry.current

    # ------------------------------ ready ------------------------------ #

    def ready(self) -> None:
        """Read the snapshotted sidebar configs and rewrite them to be versioned."""
        theme = self.context.theme_config
        theme.setdefault("sidebar", {})
        theme.setdefault("locales", {})
        theme["versioned_sidebar"] = {}
        theme["next_sidebar"] = current_sidebar_config(theme)

        next_config = update_sidebar_config(current_sidebar_config(theme), NEXT_VERSION)
        theme["versioned_sidebar"][NEXT_VERSION] = next_config
        merge_sidebar_config(theme, next_config)

        for version in self.versions:
            config = load_sidebar_snapshot(self.versioned_source_dir / version)
            if config is None:
                logger.debug("no sidebar snapshot for version %s", version)
                continue
            if version != self.current_version:
                update_sidebar_config(config, version)
            theme["versioned_sidebar"][version] = config
            merge_sidebar_config(theme, config)

    # ------------------------------- cli ------------------------------- #

    def draft_version(self, version: str) -> Path:
        return draft_version(
            version,
            context=self.context,
            options=self.options,
            registry=self.registry,
            versioned_dir=self.versioned_source_dir,
            pages_dir=self.pages_source_dir,
        )

    def extend_cli(self, cli: typer.Typer) -> None:
        """Register ``version <target_dir> <version>`` bound to this plugin's site."""
        from docs_versioning.cli import run_draft  # local import (cli imports plugin)

        @cli.command("version", help="Draft a new version")
        def version_cmd(target_dir: Path, version: str) -> None:
            if target_dir.resolve() != self.source_dir:
                logger.warning(
                    "Ignoring target dir %s: this site's docs live in %s",
                    target_dir,
                    self.source_dir,
                )
            run_draft(self, version)

    # ------------------------------ pages ------------------------------ #

    def _pages_under(self, root: Path) -> list[PageFile]:
        if not root.is_dir():
            return []
        relatives = glob_pages(root, ignore_dirs=[self.context.config_dir.name])
        return [PageFile(file_path=(root / rel).resolve(), relative=rel) for rel in relatives]

    def additional_pages(self) -> list[PageFile]:
        """Pages from versioned docs plus the unversioned extra pages."""
        return [
            *self._pages_under(self.versioned_source_dir),
            *self._pages_under(self.pages_source_dir),
        ]

    def extend_page_data(self, page: Page) -> None:
        if page.file_path is None:
            return
        file_path = page.file_path.resolve()
        kind = classify_file(
            file_path,
            versioned_dir=self.versioned_source_dir,
            pages_dir=self.pages_source_dir,
            source_dir=self.source_dir,
        )
        if kind == "unversioned":
            page.unversioned = True
            return
        if not self.versions:
            return
        if kind == "versioned":
            version = version_of_file(file_path, self.versioned_source_dir)
            if version is None:
                return
            page.version = version
            page.original_regular_path = page.regular_path
            if version == self.current_version:
                page.path = page.regular_path = strip_version_prefix(page.path, version)
        elif kind == "next":
            page.version = NEXT_VERSION
            page.original_regular_path = page.regular_path
            page.path = page.regular_path = generate_versioned_path(
                page.path, NEXT_VERSION, page.locale_path
            )

    # ---------------------------- client app ---------------------------- #

    def enhance_app_files(self) -> list[AppFile]:
        """Expose the version list to the client app as a global ``$versions``."""
        if not self.versions:
            return []
        content = render_string(VERSIONS_APP_FILE, {"versions": self.versions})
        return [AppFile(name="versions-site-data", content=content)]

    # ----------------------------- markdown ----------------------------- #

    def link_converter(self) -> VersionedLinkConverter:
        site = self.context.site_config
        markdown: dict[str, Any] = site.get("markdown") or {}
        return VersionedLinkConverter(
            source_dir=self.source_dir,
            versioned_source_dir=self.versioned_source_dir,
            pages_source_dir=self.pages_source_dir,
            current_version=self.current_version,
            locales=[loc for loc in (site.get("locales") or {}) if loc != "/"],
            external_attrs={**DEFAULT_EXTERNAL_ATTRS, **(markdown.get("external_links") or {})},
        )

    def chain_markdown(self, chain: MarkdownChain) -> None:
        if not self.versions:
            return
        chain.delete(HOST_LINK_PLUGIN)
        chain.use(VERSIONED_LINK_PLUGIN, self.link_converter())


def create_plugin(options: VersioningOptions | dict[str, Any] | None, context: SiteContext) -> VersioningPlugin:
    if not isinstance(options, VersioningOptions):
        options = VersioningOptions.model_validate(options or {})
    return VersioningPlugin(options, context)


__all__ = ["PLUGIN_NAME", "VersioningPlugin", "create_plugin"]
