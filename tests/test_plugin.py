from pathlib import Path

from docs_versioning.domain.models import MarkdownChain, Page
from docs_versioning.runtime import build_plugin
from docs_versioning.services.links import VersionedLinkConverter


def _page(file_path: Path, path: str, locale_path: str = "/") -> Page:
    return Page(file_path=file_path, path=path, regular_path=path, locale_path=locale_path)


# ----------------------------- extend_page_data ----------------------------- #


def test_current_version_page_loses_prefix(versioned_site):
    plugin = build_plugin(versioned_site)
    page = _page(versioned_site / "website/versioned_docs/v2/guide/README.md", "/v2/guide/")
    plugin.extend_page_data(page)
    assert page.version == "v2"
    assert page.path == page.regular_path == "/guide/"
    assert page.original_regular_path == "/v2/guide/"
    assert page.unversioned is False


def test_older_version_page_keeps_prefix(versioned_site):
    plugin = build_plugin(versioned_site)
    page = _page(versioned_site / "website/versioned_docs/v1/guide/README.md", "/v1/guide/")
    plugin.extend_page_data(page)
    assert page.version == "v1"
    assert page.path == page.regular_path == "/v1/guide/"
    assert page.original_regular_path == "/v1/guide/"


def test_source_page_moves_under_next(versioned_site):
    plugin = build_plugin(versioned_site)
    page = _page(versioned_site / "guide/install.md", "/guide/install.html")
    plugin.extend_page_data(page)
    assert page.version == "next"
    assert page.path == page.regular_path == "/next/guide/install.html"
    assert page.original_regular_path == "/guide/install.html"

    zh = _page(versioned_site / "zh/guide/README.md", "/zh/guide/", locale_path="/zh/")
    plugin.extend_page_data(zh)
    assert zh.path == "/zh/next/guide/"


def test_pages_dir_page_is_unversioned(versioned_site):
    plugin = build_plugin(versioned_site)
    page = _page(versioned_site / "website/pages/help.md", "/help.html")
    plugin.extend_page_data(page)
    assert page.unversioned is True
    assert page.version is None
    assert page.path == page.regular_path == "/help.html"


def test_without_versions_only_pages_are_marked(site):
    plugin = build_plugin(site)
    doc = _page(site / "guide/install.md", "/guide/install.html")
    extra = _page(site / "website/pages/help.md", "/help.html")
    plugin.extend_page_data(doc)
    plugin.extend_page_data(extra)
    assert doc.version is None and doc.path == "/guide/install.html"
    assert extra.unversioned is True


def test_page_without_file_is_ignored(versioned_site):
    plugin = build_plugin(versioned_site)
    page = Page(path="/virtual/", regular_path="/virtual/")
    plugin.extend_page_data(page)
    assert page.version is None and page.path == "/virtual/"


# ---------------------------------- ready ---------------------------------- #


def test_ready_merges_versioned_sidebars(versioned_site):
    (versioned_site / ".vuepress" / "versions.json").write_text('["v2", "v1", "v0"]', encoding="utf-8")
    plugin = build_plugin(versioned_site)
    plugin.ready()
    theme = plugin.context.theme_config

    versioned = theme["versioned_sidebar"]
    assert set(versioned) == {"next", "v2", "v1"}
    assert versioned["next"]["sidebar"] == {"/next/guide/": ["", "install"]}
    assert versioned["next"]["locales"]["/zh/"]["sidebar"] == {"/zh/next/guide/": [""]}
    assert versioned["v2"]["sidebar"] == {"/guide/": ["", "old"]}
    assert versioned["v1"]["sidebar"] == {"/v1/guide/": [""]}
    assert versioned["v1"]["locales"]["/zh/"]["sidebar"] == {"/v1/zh/guide/": [""]}

    assert theme["next_sidebar"]["sidebar"] == {"/guide/": ["", "install"]}
    assert theme["sidebar"] == {
        "/guide/": ["", "old"],
        "/next/guide/": ["", "install"],
        "/v1/guide/": [""],
    }
    assert set(theme["locales"]["/zh/"]["sidebar"]) == {
        "/zh/guide/",
        "/zh/next/guide/",
        "/v1/zh/guide/",
    }


def test_archived_locale_page_route_matches_its_sidebar(site):
    build_plugin(site).draft_version("v1")
    build_plugin(site).draft_version("v2")
    plugin = build_plugin(site)
    plugin.ready()
    theme = plugin.context.theme_config

    file_path = site / "website/versioned_docs/v1/zh/guide/README.md"
    assert file_path.exists()
    page = _page(file_path, "/v1/zh/guide/")
    plugin.extend_page_data(page)

    assert page.version == "v1"
    assert page.path in theme["versioned_sidebar"]["v1"]["locales"]["/zh/"]["sidebar"]
    assert page.path in theme["locales"]["/zh/"]["sidebar"]
    link = plugin.link_converter().convert({"href": "/zh/guide/"}, file_path)
    assert link.attrs["to"] == page.path


def test_ready_without_sidebar_config(tmp_path):
    (tmp_path / "docs").mkdir()
    plugin = build_plugin(tmp_path / "docs")
    plugin.ready()
    theme = plugin.context.theme_config
    assert theme["versioned_sidebar"] == {"next": {"sidebar": {}, "locales": {}}}
    assert theme["sidebar"] == {}


# ----------------------------- additional_pages ----------------------------- #


def test_additional_pages_versioned_first_then_pages(versioned_site):
    pages_dir = versioned_site / "website" / "pages"
    (pages_dir / "comp.vue").write_text("<template/>", encoding="utf-8")
    (pages_dir / "node_modules").mkdir()
    (pages_dir / "node_modules" / "dep.md").write_text("x", encoding="utf-8")
    (pages_dir / "notes.txt").write_text("x", encoding="utf-8")

    pages = build_plugin(versioned_site).additional_pages()
    assert [p.relative for p in pages] == [
        "v1/guide/README.md",
        "v2/guide/README.md",
        "comp.vue",
        "help.md",
    ]
    assert pages[0].file_path == versioned_site / "website/versioned_docs/v1/guide/README.md"


def test_additional_pages_missing_dirs(tmp_path):
    (tmp_path / "docs").mkdir()
    assert build_plugin(tmp_path / "docs").additional_pages() == []


# --------------------------- app files & markdown --------------------------- #


def test_enhance_app_files_exposes_versions(versioned_site):
    files = build_plugin(versioned_site).enhance_app_files()
    assert [f.name for f in files] == ["versions-site-data"]
    assert '$versions: () => ["v2","v1"]' in files[0].content
    assert "Vue.mixin" in files[0].content


def test_enhance_app_files_empty_without_versions(site):
    assert build_plugin(site).enhance_app_files() == []


def test_chain_markdown_swaps_link_converter(versioned_site):
    chain = MarkdownChain().use("convert-router-link", object()).use("anchor", object())
    build_plugin(versioned_site).chain_markdown(chain)
    assert chain.get("convert-router-link") is None
    assert chain.get("anchor") is not None
    converter = chain.get("convert-router-link-versioned")
    assert isinstance(converter, VersionedLinkConverter)
    assert converter.current_version == "v2"
    assert converter.locales == ["/zh/"]
    assert converter.external_attrs == {"target": "_blank", "rel": "noopener noreferrer"}


def test_chain_markdown_external_links_override(versioned_site):
    plugin = build_plugin(versioned_site)
    plugin.context.site_config["markdown"] = {"external_links": {"rel": "noopener"}}
    chain = MarkdownChain()
    plugin.chain_markdown(chain)
    converter = chain.get("convert-router-link-versioned")
    assert converter.external_attrs == {"target": "_blank", "rel": "noopener"}


def test_chain_markdown_noop_without_versions(site):
    original = object()
    chain = MarkdownChain().use("convert-router-link", original)
    build_plugin(site).chain_markdown(chain)
    assert chain.plugins == {"convert-router-link": original}
