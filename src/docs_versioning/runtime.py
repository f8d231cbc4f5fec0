"""Runtime bootstrap: dotenv, logging and loading the host site config."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from docs_versioning.domain.models import SiteContext
from docs_versioning.infrastructure.logging import enable_json_logging, setup_logging
from docs_versioning.plugin import VersioningPlugin, create_plugin

DEFAULT_CONFIG_DIR = ".vuepress"
CONFIG_FILES = ("config.yaml", "config.yml")


def config_dir_name() -> str:
    return os.getenv("DOCS_VERSIONING_CONFIG_DIR", DEFAULT_CONFIG_DIR)


def load_site_config(config_dir: Path) -> dict[str, Any]:
    for name in CONFIG_FILES:
        path = config_dir / name
        if not path.exists():
            continue
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Site config root must be a mapping: {path}")
        return data
    return {}


def load_site(source_dir: Path) -> SiteContext:
    source = Path(source_dir).resolve()
    config_dir = source / config_dir_name()
    return SiteContext(
        source_dir=source,
        config_dir=config_dir,
        site_config=load_site_config(config_dir),
    )


def build_plugin(source_dir: Path) -> VersioningPlugin:
    context = load_site(source_dir)
    return create_plugin(context.site_config.get("versioning"), context)


def bootstrap(*, level: str | None = None, json_logs: bool = False) -> None:
    load_dotenv(override=False)
    if json_logs:
        enable_json_logging()
    else:
        setup_logging(level, json_mode=False)


__all__ = ["bootstrap", "build_plugin", "load_site", "load_site_config"]
