"""Tests for the CLI commands: option parsing, output, errors."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from prism_mcp.cli.app import cli
from prism_mcp.session.manager import PrismSession


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def no_logging_setup() -> Any:
    with patch("prism_mcp.cli.app._configure_logging") as configure:
        yield configure


# ── CLI group ────────────────────────────────────────────────────


class TestCliGroup:
    def test_no_command_shows_help(self, runner: CliRunner) -> None:
        result = runner.invoke(cli)
        assert result.exit_code == 0
        assert "Prismatic CLI tools over MCP" in result.output

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "prism-mcp" in result.output
        assert "0.1.0" in result.output

    def test_help_lists_commands(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "serve" in result.output
        assert "tools" in result.output
        assert "locate" in result.output

    def test_missing_config_file(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--config", "/nope.toml", "tools"])
        assert result.exit_code != 0


# ── tools command ────────────────────────────────────────────────


class TestToolsCommand:
    def test_lists_all(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["tools"])
        assert result.exit_code == 0
        assert "prism_me\n" in result.output
        assert "prism_integrations_flows_test\n" in result.output
        assert "  Test a flow in an integration" in result.output

    def test_toolset_filter(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["tools", "--toolsets", "general"])
        assert result.exit_code == 0
        assert "prism_login" in result.output
        assert "prism_components_list" not in result.output

    def test_unknown_toolset(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["tools", "--toolsets", "general,bogus"])
        assert result.exit_code == 1
        assert "bogus" in result.output

    def test_toolsets_from_config(self, runner: CliRunner, tmp_path: Path) -> None:
        config = tmp_path / "cfg.toml"
        config.write_text('[general]\ntoolsets = ["components"]\n')
        result = runner.invoke(cli, ["--config", str(config), "tools"])
        assert result.exit_code == 0
        assert "prism_components_init" in result.output
        assert "prism_me" not in result.output


# ── serve command ────────────────────────────────────────────────


class TestServeCommand:
    def test_requires_working_directory(
        self, runner: CliRunner, no_logging_setup: Any
    ) -> None:
        result = runner.invoke(cli, ["serve"])
        assert result.exit_code == 1
        assert "Failed to start Prism MCP server" in result.output
        assert "WORKING_DIRECTORY" in result.output

    def test_runs_server(self, runner: CliRunner, no_logging_setup: Any) -> None:
        run = AsyncMock()
        with patch("prism_mcp.mcp.server.run_server", run):
            result = runner.invoke(
                cli,
                ["serve", "-w", "/projects", "--toolsets", "integrations"],
            )
        assert result.exit_code == 0, result.output
        registry, context = run.await_args.args
        assert context.session.working_directory == "/projects"
        assert registry.list_names()[0] == "prism_integrations_list"
        assert "prism_me" not in registry
        assert PrismSession._instance is None

    def test_working_directory_from_env(
        self,
        runner: CliRunner,
        no_logging_setup: Any,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("WORKING_DIRECTORY", "/from-env")
        monkeypatch.setenv("PRISMATIC_URL", "https://stack.example.com/")
        run = AsyncMock()
        with patch("prism_mcp.mcp.server.run_server", run):
            result = runner.invoke(cli, ["serve"])
        assert result.exit_code == 0, result.output
        context = run.await_args.args[1]
        assert context.session.working_directory == "/from-env"
        assert context.session.prismatic_url == "https://stack.example.com/"


# ── locate command ───────────────────────────────────────────────


class TestLocateCommand:
    def test_found(self, runner: CliRunner, no_logging_setup: Any) -> None:
        locate = AsyncMock(return_value="/usr/local/bin/prism")
        with patch("prism_mcp.core.locator.locate_executable", locate):
            result = runner.invoke(cli, ["locate"])
        assert result.exit_code == 0
        assert result.output.strip() == "/usr/local/bin/prism"
        assert locate.await_args.kwargs["force_fallback"] is False
        assert locate.await_args.kwargs["fallback_package"] == "@prismatic-io/prism"

    def test_force_npx(self, runner: CliRunner, no_logging_setup: Any) -> None:
        locate = AsyncMock(return_value="npx --yes @prismatic-io/prism")
        with patch("prism_mcp.core.locator.locate_executable", locate):
            result = runner.invoke(cli, ["locate", "--npx"])
        assert result.exit_code == 0
        assert locate.await_args.kwargs["force_fallback"] is True

    def test_not_found(self, runner: CliRunner, no_logging_setup: Any) -> None:
        locate = AsyncMock(return_value=None)
        with patch("prism_mcp.core.locator.locate_executable", locate):
            result = runner.invoke(cli, ["locate"])
        assert result.exit_code == 1
        assert "Prismatic CLI not found" in result.output
