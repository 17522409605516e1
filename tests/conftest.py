"""Shared test fixtures for prism-mcp."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from prism_mcp.core.errors import CLICommandError
from prism_mcp.core.process import CommandOutput
from prism_mcp.session.manager import PrismSession
from prism_mcp.tools.base import ToolContext

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

_ENV_VARS = (
    "WORKING_DIRECTORY",
    "PRISMATIC_URL",
    "PRISM_PATH",
    "PRISM_MCP_TOOLSETS",
    "PRISM_MCP_CONFIG",
)


class FakeSession:
    """Stand-in for :class:`PrismSession` that never spawns processes.

    Returns canned stdout keyed by subcommand name (the first token).
    Records every call for assertion.
    """

    def __init__(
        self,
        outputs: dict[str, str] | None = None,
        *,
        working_directory: str = "/work",
        failures: dict[str, str] | None = None,
    ) -> None:
        self.working_directory = working_directory
        self.prismatic_url = "https://app.prismatic.io/"
        self._outputs = outputs or {}
        self._failures = failures or {}
        self.calls: list[dict[str, Any]] = []

    async def execute_command(
        self, args: Sequence[str] | str, cwd: str | None = None
    ) -> CommandOutput:
        tokens = [args] if isinstance(args, str) else list(args)
        self.calls.append({"args": tokens, "cwd": cwd})
        key = tokens[0] if tokens else ""
        if key in self._failures:
            raise CLICommandError(self._failures[key])
        return CommandOutput(stdout=self._outputs.get(key, ""), stderr="")

    async def me(self) -> str:
        return (await self.execute_command(["me"])).stdout.strip()

    async def logout(self) -> str:
        return (await self.execute_command(["logout"])).stdout.strip()

    async def version(self) -> str:
        return (await self.execute_command(["--version"])).stdout.strip()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Any:
    """Keep tests clear of the caller's env, config files and session."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)
    PrismSession._instance = None
    yield
    PrismSession._instance = None


@pytest.fixture
def make_session() -> Any:
    """Factory fixture for :class:`FakeSession`."""

    def _make(**kwargs: Any) -> FakeSession:
        return FakeSession(**kwargs)

    return _make


@pytest.fixture
def make_context(make_session: Any) -> Any:
    """Factory fixture for a :class:`ToolContext` around a fake session."""

    def _make(session: FakeSession | None = None, **kwargs: Any) -> ToolContext:
        return ToolContext(session=session or make_session(), **kwargs)  # type: ignore[arg-type]

    return _make
