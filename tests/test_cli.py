import logging
from pathlib import Path

import orjson
import typer
from typer.testing import CliRunner

from docs_versioning.cli import app
from docs_versioning.infrastructure.logging import setup_logging
from docs_versioning.runtime import build_plugin

runner = CliRunner()


def _registry(site: Path) -> list[str]:
    return orjson.loads((site / ".vuepress" / "versions.json").read_bytes())


def test_version_command_drafts(site):
    result = runner.invoke(app, ["version", str(site), "v1"])
    assert result.exit_code == 0, result.output
    assert _registry(site) == ["v1"]
    assert (site / "website" / "versioned_docs" / "v1" / "guide" / "install.md").exists()


def test_version_command_duplicate_exits_1(site):
    assert runner.invoke(app, ["version", str(site), "v1"]).exit_code == 0
    result = runner.invoke(app, ["version", str(site), "v1"])
    assert result.exit_code == 1
    assert _registry(site) == ["v1"]


def test_version_command_invalid_name(site):
    result = runner.invoke(app, ["version", str(site), "next"])
    assert result.exit_code == 1
    assert not (site / ".vuepress" / "versions.json").exists()


def test_versions_command_json(versioned_site):
    result = runner.invoke(app, ["versions", str(versioned_site), "--json"])
    assert result.exit_code == 0, result.output
    assert orjson.loads(result.stdout) == ["v2", "v1"]


def test_versions_command_table(versioned_site):
    result = runner.invoke(app, ["versions", str(versioned_site)])
    assert result.exit_code == 0, result.output
    assert "v2" in result.stdout and "v1" in result.stdout


def test_broken_registry_exits_1(site):
    (site / ".vuepress" / "versions.json").write_text('"v1"', encoding="utf-8")
    result = runner.invoke(app, ["versions", str(site)])
    assert result.exit_code == 1


def test_extend_cli_registers_version_command(site):
    host = typer.Typer()

    @host.callback()
    def _root() -> None:
        pass

    plugin = build_plugin(site)
    plugin.extend_cli(host)
    result = runner.invoke(host, ["version", str(site), "v1"])
    assert result.exit_code == 0, result.output
    assert _registry(site) == ["v1"]
    assert plugin.versions == ["v1"]


def test_extend_cli_warns_on_foreign_target_dir(site, tmp_path, caplog):
    host = typer.Typer()

    @host.callback()
    def _root() -> None:
        pass

    build_plugin(site).extend_cli(host)
    with caplog.at_level(logging.WARNING, logger="docs_versioning.plugin"):
        result = runner.invoke(host, ["version", str(tmp_path / "elsewhere"), "v1"])
    assert result.exit_code == 0, result.output
    assert any("Ignoring target dir" in r.getMessage() for r in caplog.records)
    assert _registry(site) == ["v1"]


def test_json_logs_flag_switches_handler(versioned_site):
    try:
        result = runner.invoke(app, ["--json-logs", "versions", str(versioned_site), "--json"])
        assert result.exit_code == 0, result.output
        handlers = logging.getLogger().handlers
        assert [type(h).__name__ for h in handlers] == ["_JsonHandler"]
    finally:
        setup_logging(json_mode=False)
