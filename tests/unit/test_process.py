"""Tests for the process execution helper."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from prism_mcp.core.errors import ProcessExecutionError
from prism_mcp.core.process import CommandOutput, join_args, run_command

pytestmark = pytest.mark.skipif(os.name == "nt", reason="POSIX shell commands")


class TestRunCommand:
    async def test_captures_stdout(self) -> None:
        result = await run_command("echo hello")
        assert isinstance(result, CommandOutput)
        assert result.stdout == "hello\n"
        assert result.stderr == ""

    async def test_captures_stderr(self) -> None:
        result = await run_command("echo oops 1>&2")
        assert result.stdout == ""
        assert result.stderr == "oops\n"

    async def test_non_zero_exit_raises(self) -> None:
        with pytest.raises(ProcessExecutionError) as excinfo:
            await run_command("echo bad 1>&2; exit 3")
        assert excinfo.value.returncode == 3
        assert excinfo.value.stderr == "bad\n"
        assert "exit code 3" in str(excinfo.value)

    async def test_uses_cwd(self, tmp_path: Path) -> None:
        result = await run_command("pwd", cwd=str(tmp_path))
        assert Path(result.stdout.strip()).resolve() == tmp_path.resolve()

    async def test_uses_env(self) -> None:
        env = {**os.environ, "PRISM_TEST_VALUE": "abc"}
        result = await run_command('echo "$PRISM_TEST_VALUE"', env=env)
        assert result.stdout.strip() == "abc"

    async def test_missing_cwd_is_spawn_failure(self, tmp_path: Path) -> None:
        with pytest.raises(ProcessExecutionError) as excinfo:
            await run_command("echo hi", cwd=str(tmp_path / "missing"))
        assert excinfo.value.returncode is None


class TestJoinArgs:
    def test_quotes_spaces(self) -> None:
        assert join_args(["--comment", "two words"]) == "--comment 'two words'"

    def test_plain_tokens(self) -> None:
        assert join_args(["me"]) == "me"
