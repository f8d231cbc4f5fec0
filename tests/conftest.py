"""Shared fixtures: a small docs site on disk."""
from __future__ import annotations

from pathlib import Path

import pytest
import yaml

SITE_CONFIG = {
    "locales": {"/": {"lang": "en-US"}, "/zh/": {"lang": "zh-CN"}},
    "theme_config": {
        "sidebar": {"/guide/": ["", "install"]},
        "locales": {"/zh/": {"sidebar": {"/zh/guide/": [""]}}},
    },
}


def write(path: Path, text: str = "# page\n") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("DOCS_VERSIONING_CONFIG_DIR", raising=False)


@pytest.fixture()
def site(tmp_path: Path) -> Path:
    """docs/ tree with config, a couple of guide pages and one unversioned page."""
    root = tmp_path / "docs"
    write(root / ".vuepress" / "config.yaml", yaml.safe_dump(SITE_CONFIG))
    write(root / "README.md")
    write(root / "guide" / "README.md")
    write(root / "guide" / "install.md")
    write(root / "zh" / "guide" / "README.md")
    write(root / "website" / "pages" / "help.md")
    return root.resolve()


@pytest.fixture()
def versioned_site(site: Path) -> Path:
    """``site`` with two archived versions (v2 current) and their sidebar snapshots."""
    versioned = site / "website" / "versioned_docs"
    write(versioned / "v2" / "guide" / "README.md")
    write(versioned / "v1" / "guide" / "README.md")
    write(
        versioned / "v2" / "sidebar.config.json",
        '{"sidebar": {"/guide/": ["", "old"]}, "locales": {}}',
    )
    write(
        versioned / "v1" / "sidebar.config.json",
        '{"sidebar": {"/guide/": [""]}, "locales": {"/zh/": {"sidebar": {"/zh/guide/": [""]}}}}',
    )
    write(site / ".vuepress" / "versions.json", '["v2", "v1"]')
    return site
