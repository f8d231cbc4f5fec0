"""Multi-version documentation plugin (version snapshots, sidebar & link rewriting)."""

from docs_versioning.plugin import VersioningPlugin, create_plugin

__all__ = [
    "VersioningPlugin",
    "create_plugin",
]
