"""Sidebar snapshotting and version-prefix remapping.

A sidebar config is the pair of navigation trees a version owns::

    {"sidebar": {"/guide/": [...]}, "locales": {"/zh/": {"sidebar": {...}}}}
"""
from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any

from docs_versioning.domain.models import NEXT_VERSION, SIDEBAR_SNAPSHOT_FILE
from docs_versioning.infrastructure.fs import read_json, write_json
from docs_versioning.services.paths import generate_versioned_path

logger = logging.getLogger(__name__)

_LINK_KEYS = ("path", "link")


def _is_absolute_link(value: Any) -> bool:
    return isinstance(value, str) and value.startswith("/")


def _rewrite_item(item: Any, version: str, locale_path: str) -> Any:
    if _is_absolute_link(item):
        return generate_versioned_path(item, version, locale_path)
    if isinstance(item, list | tuple):
        # [link, title] pair form
        return [_rewrite_item(item[0], version, locale_path), *item[1:]] if item else []
    if isinstance(item, dict):
        out = dict(item)
        for key in _LINK_KEYS:
            if _is_absolute_link(out.get(key)):
                out[key] = generate_versioned_path(out[key], version, locale_path)
        if isinstance(out.get("children"), list):
            out["children"] = [_rewrite_item(c, version, locale_path) for c in out["children"]]
        return out
    return item


def _rewrite_sidebar(sidebar: Any, version: str, locale_path: str = "/", anchor: str = "/") -> dict[str, Any]:
    """Prefix keys & links with ``version``, inserted right after ``anchor``.

    ``anchor`` is the locale for ``next`` and the root for archived versions,
    whose files (and so routes) sit at ``/<version>/<locale>/...``.
    """
    if isinstance(sidebar, list):
        key = generate_versioned_path(locale_path, version, anchor)
        return {key: [_rewrite_item(i, version, anchor) for i in sidebar]}
    if not isinstance(sidebar, dict):
        return {}
    out: dict[str, Any] = {}
    for key, items in sidebar.items():
        new_key = generate_versioned_path(key, version, anchor) if key.startswith("/") else key
        if isinstance(items, list):
            out[new_key] = [_rewrite_item(i, version, anchor) for i in items]
        else:
            out[new_key] = _rewrite_item(items, version, anchor)
    return out


def update_sidebar_config(config: dict[str, Any], version: str) -> dict[str, Any]:
    """Rewrite ``config`` in place so every key & absolute link carries ``version``.

    ``next``: ``/zh/guide/`` -> ``/zh/next/guide/``; archived: ``/zh/guide/`` -> ``/v1/zh/guide/``.
    """
    config["sidebar"] = _rewrite_sidebar(config.get("sidebar") or {}, version)
    locales = config.get("locales") or {}
    for locale_path, locale_cfg in locales.items():
        if isinstance(locale_cfg, dict) and locale_cfg.get("sidebar") is not None:
            anchor = locale_path if version == NEXT_VERSION else "/"
            locale_cfg["sidebar"] = _rewrite_sidebar(
                locale_cfg["sidebar"], version, locale_path, anchor
            )
    config["locales"] = locales
    return config


def current_sidebar_config(theme_config: dict[str, Any]) -> dict[str, Any]:
    """Deep copy of the sidebar parts of ``theme_config``."""
    locales = {
        loc: {"sidebar": cfg["sidebar"]}
        for loc, cfg in (theme_config.get("locales") or {}).items()
        if isinstance(cfg, dict) and cfg.get("sidebar") is not None
    }
    return copy.deepcopy({"sidebar": theme_config.get("sidebar") or {}, "locales": locales})


def snapshot_sidebar(theme_config: dict[str, Any], dest_dir: Path) -> Path:
    path = write_json(dest_dir / SIDEBAR_SNAPSHOT_FILE, current_sidebar_config(theme_config))
    logger.debug("sidebar snapshot written: %s", path)
    return path


def load_sidebar_snapshot(version_dir: Path) -> dict[str, Any] | None:
    path = version_dir / SIDEBAR_SNAPSHOT_FILE
    if not path.exists():
        return None
    data = read_json(path)
    if not isinstance(data, dict):
        raise ValueError(f"Sidebar snapshot root must be an object: {path}")
    data.setdefault("sidebar", {})
    data.setdefault("locales", {})
    return data


def merge_sidebar_config(theme_config: dict[str, Any], config: dict[str, Any]) -> None:
    sidebar = theme_config.get("sidebar")
    if not isinstance(sidebar, dict):
        # array sidebars cannot hold per-version keys; keep it under the root key
        sidebar = {"/": sidebar} if sidebar else {}
        theme_config["sidebar"] = sidebar
    sidebar.update(config.get("sidebar") or {})
    theme_locales = theme_config.setdefault("locales", {})
    for loc, cfg in (config.get("locales") or {}).items():
        target = theme_locales.setdefault(loc, {})
        loc_sidebar = target.get("sidebar")
        if not isinstance(loc_sidebar, dict):
            loc_sidebar = {loc: loc_sidebar} if loc_sidebar else {}
            target["sidebar"] = loc_sidebar
        loc_sidebar.update(cfg.get("sidebar") or {})


__all__ = [
    "current_sidebar_config",
    "load_sidebar_snapshot",
    "merge_sidebar_config",
    "snapshot_sidebar",
    "update_sidebar_config",
]
