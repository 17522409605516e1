"""Process execution helper.

Runs a shell command line with asyncio subprocesses and returns the
captured output once the child exits.  This is the only place the
package spawns processes; everything above it goes through
:func:`run_command`.
"""

from __future__ import annotations

import asyncio
import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import TYPE_CHECKING

from prism_mcp.core.errors import ProcessExecutionError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandOutput:
    """Captured output of a finished command."""

    stdout: str
    stderr: str


async def run_command(
    command_line: str,
    *,
    cwd: str | None = None,
    env: Mapping[str, str] | None = None,
) -> CommandOutput:
    """Run *command_line* through the shell and wait for it to finish.

    Args:
        command_line: Fully composed command line.
        cwd: Working directory for the child process.
        env: Complete environment for the child (inherits when ``None``).

    Returns:
        The decoded stdout and stderr.

    Raises:
        ProcessExecutionError: If the process cannot be started or exits
            with a non-zero status.
    """
    logger.debug("Running command: %s (cwd=%s)", command_line, cwd)
    try:
        proc = await asyncio.create_subprocess_shell(
            command_line,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
            env=dict(env) if env is not None else None,
        )
    except OSError as exc:
        raise ProcessExecutionError(command_line, reason=str(exc)) from exc

    raw_stdout, raw_stderr = await proc.communicate()
    stdout = raw_stdout.decode(errors="replace") if raw_stdout else ""
    stderr = raw_stderr.decode(errors="replace") if raw_stderr else ""

    if proc.returncode != 0:
        raise ProcessExecutionError(
            command_line,
            returncode=proc.returncode,
            stdout=stdout,
            stderr=stderr,
        )
    return CommandOutput(stdout=stdout, stderr=stderr)


def join_args(args: Sequence[str]) -> str:
    """Quote argument tokens for the platform shell."""
    if os.name == "nt":
        return subprocess.list2cmdline(list(args))
    return shlex.join(args)
