"""File-system helpers (JSON, tree copy, page globbing) isolated from domain logic."""
from __future__ import annotations

import shutil
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import orjson

PAGE_SUFFIXES = (".md", ".vue")
IGNORED_DIR_NAMES = {"node_modules"}


def read_json(path: str | Path) -> Any:
    p = Path(path)
    return orjson.loads(p.read_bytes())


def write_json(path: str | Path, data: Any) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(orjson.dumps(data, option=orjson.OPT_INDENT_2))
    return p


def copy_tree(src: Path, dest: Path, *, exclude: Iterable[Path] = ()) -> Path:
    """Copy ``src`` into ``dest`` skipping any directory listed in ``exclude``.

    ``dest`` itself is always skipped so a destination nested in ``src`` never
    copies into itself.
    """
    skipped = {Path(p).resolve() for p in exclude}
    skipped.add(dest.resolve())

    def _ignore(directory: str, names: list[str]) -> list[str]:
        base = Path(directory).resolve()
        return [n for n in names if (base / n) in skipped]

    shutil.copytree(src, dest, ignore=_ignore)
    return dest


def glob_pages(root: Path, *, ignore_dirs: Iterable[str] = ()) -> list[str]:
    """Relative POSIX paths of every ``.md`` / ``.vue`` file under ``root``, sorted."""
    ignored = IGNORED_DIR_NAMES | set(ignore_dirs)
    out: list[str] = []
    for path in root.rglob("*"):
        if not path.is_file() or path.suffix not in PAGE_SUFFIXES:
            continue
        rel = path.relative_to(root)
        if any(part in ignored for part in rel.parts[:-1]):
            continue
        out.append(rel.as_posix())
    return sorted(out)


__all__ = ["copy_tree", "glob_pages", "read_json", "write_json"]
