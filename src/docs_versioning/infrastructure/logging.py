"""Logging & console helpers for the versioning plugin.

Features:
    * RichHandler based console logging (color, tracebacks)
    * Optional JSON logging mode (machine ingest, CI)
    * Helper utilities (`get_console`, `render_panel`) so service layers avoid
        importing rich directly, keeping presentation concerns centralized.
"""

from __future__ import annotations

import json
import logging
import os

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

_INITIALIZED = False
_JSON_MODE = False
_CONSOLE: Console | None = None


class _JsonHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:  # pragma: no cover - simple
        try:
            data = {
                "level": record.levelname,
                "name": record.name,
                "message": record.getMessage(),
            }
            if record.exc_info:
                data["exc_info"] = logging.Formatter().formatException(record.exc_info)
            print(json.dumps(data, ensure_ascii=False))
        except Exception:  # pragma: no cover
            self.handleError(record)


def setup_logging(level: str | None = None, json_mode: bool | None = None) -> None:
    global _INITIALIZED, _JSON_MODE
    if json_mode is not None and json_mode != _JSON_MODE:
        _JSON_MODE = json_mode
        _INITIALIZED = False
    if _INITIALIZED:
        return
    lvl_name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    lvl = getattr(logging, lvl_name, logging.INFO)
    handler: logging.Handler
    if _JSON_MODE:
        handler = _JsonHandler()
    else:
        handler = RichHandler(rich_tracebacks=True, markup=False, show_path=False)
    logging.basicConfig(level=lvl, handlers=[handler], force=True,
                        format="%(message)s", datefmt="%H:%M:%S")
    _INITIALIZED = True


def enable_json_logging() -> None:
    """Switch to JSON logging (idempotent)."""
    setup_logging(json_mode=True)


def get_console() -> Console:
    """Return the shared rich Console.

    Services should *not* import rich directly; use this accessor to keep
    presentation centralized.
    """
    global _CONSOLE
    if _CONSOLE is None:
        _CONSOLE = Console()
    return _CONSOLE


def render_panel(title: str, body: str, *, style: str = "cyan") -> None:
    """Render a panel to console; plain log line in JSON mode."""
    if _JSON_MODE:
        logging.getLogger("docs_versioning.console").info("%s | %s", title, body)
        return
    get_console().print(Panel.fit(body, title=title, border_style=style))


__all__ = [
    "enable_json_logging",
    "get_console",
    "render_panel",
    "setup_logging",
]
