"""Templating engine abstraction (Jinja2) used to generate client app files.

  * Centralize the Jinja environment so filters are consistent.
  * Compiled templates are cached per source string.
  * `tojson` filter backed by orjson (compact, matches what the client expects).
"""
from __future__ import annotations

from typing import Any

import orjson
from jinja2 import Environment, StrictUndefined, Template

_env = Environment(autoescape=False, undefined=StrictUndefined, keep_trailing_newline=True)


# ---------------------------- Filters ---------------------------- #

def _f_tojson(value: Any, *, indent: int = 0) -> str:
    opt = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(value, option=opt).decode("utf-8")


_env.filters["tojson"] = _f_tojson


# ---------------------------- Render ----------------------------- #
_CACHE: dict[str, Template] = {}


def render_string(source: str, ctx: dict[str, Any]) -> str:
    template = _CACHE.get(source)
    if template is None:
        template = _env.from_string(source)
        _CACHE[source] = template
    return template.render(**ctx)


__all__ = ["render_string"]
