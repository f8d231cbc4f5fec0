"""CLI for drafting and listing documentation versions."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import orjson
import typer
from rich.table import Table

from docs_versioning.domain.models import SIDEBAR_SNAPSHOT_FILE
from docs_versioning.errors import VersioningError
from docs_versioning.infrastructure.logging import get_console, render_panel
from docs_versioning.plugin import VersioningPlugin
from docs_versioning.runtime import bootstrap, build_plugin

logger = logging.getLogger(__name__)

app = typer.Typer(help="Versioned documentation CLI", no_args_is_help=True)


@app.callback()
def init(
    json_logs: Annotated[bool, typer.Option("--json-logs", help="Emit JSON log lines")] = False,
) -> None:
    bootstrap(json_logs=json_logs)


def _load_plugin(target_dir: Path) -> VersioningPlugin:
    try:
        return build_plugin(target_dir)
    except VersioningError as exc:
        logger.error("%s", exc)
        raise typer.Exit(code=1) from exc


def run_draft(plugin: VersioningPlugin, version: str) -> Path:
    """Draft ``version``; refused drafts log an error and exit with code 1."""
    try:
        dest = plugin.draft_version(version)
    except VersioningError as exc:
        logger.error("%s", exc)
        raise typer.Exit(code=1) from exc
    render_panel(
        "version",
        f"Snapshotted your current docs as version {version}\nYou can find them under {dest}",
        style="green",
    )
    return dest


@app.command("version")
def version_cmd(
    target_dir: Annotated[Path, typer.Argument(help="Docs source directory")],
    version: Annotated[str, typer.Argument(help="New version name")],
) -> None:
    """Draft a new version."""
    run_draft(_load_plugin(target_dir), version)


@app.command("versions")
def versions_cmd(
    target_dir: Annotated[Path, typer.Argument(help="Docs source directory")],
    json_out: Annotated[bool, typer.Option("--json", help="Emit JSON list")] = False,
) -> None:
    """List drafted versions, most recent first."""
    plugin = _load_plugin(target_dir)
    if json_out:
        typer.echo(orjson.dumps(plugin.versions).decode("utf-8"))
        return
    cons = get_console()
    if not plugin.versions:
        cons.print("[yellow]No versions drafted yet[/yellow]")
        return
    table = Table(title="Versions")
    for col in ("Version", "Current", "Sidebar Snapshot"):
        table.add_column(col)
    for v in plugin.versions:
        has_snapshot = (plugin.versioned_source_dir / v / SIDEBAR_SNAPSHOT_FILE).exists()
        table.add_row(v, "yes" if v == plugin.current_version else "", "yes" if has_snapshot else "-")
    cons.print(table)


if __name__ == "__main__":  # pragma: no cover
    app()
