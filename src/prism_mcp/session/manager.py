"""Prismatic CLI session.

A :class:`PrismSession` owns the working directory, the Prismatic URL,
and the resolved ``prism`` invocation for the lifetime of the server.
At most one session is live per process: :meth:`PrismSession.get_instance`
hands out the shared instance and :meth:`PrismSession.dispose` releases
it.  The server builds the session once at startup and passes it to
the tool registry explicitly, so handlers never reach for the global.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

from prism_mcp.core.errors import (
    CLICommandError,
    CLIError,
    CLINotFoundError,
    CLINotInstalledError,
    ConfigError,
    ProcessExecutionError,
)
from prism_mcp.core.locator import VERSION_FLAG, locate_executable
from prism_mcp.core.process import CommandOutput, join_args, run_command

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping, Sequence

logger = logging.getLogger(__name__)

DEFAULT_PRISMATIC_URL = "https://app.prismatic.io/"
PRISM_EXECUTABLE = "prism"
PRISM_PACKAGE = "@prismatic-io/prism"

WORKING_DIRECTORY_ENV = "WORKING_DIRECTORY"
PRISMATIC_URL_ENV = "PRISMATIC_URL"
PRISM_PATH_ENV = "PRISM_PATH"

# Heuristic: `prism me` prints this when there is no stored token.
NOT_LOGGED_IN_MARKER = "Error: You are not logged"


@dataclass(frozen=True, slots=True)
class LoginStatus:
    """Result of :meth:`PrismSession.is_logged_in`."""

    result: str
    logged_in: bool


class PrismSession:
    """Runs ``prism`` subcommands against one Prismatic instance."""

    _instance: ClassVar[PrismSession | None] = None

    def __init__(
        self,
        working_directory: str,
        prismatic_url: str | None = None,
        *,
        prism_path: str | None = None,
        force_npx: bool = False,
        locator: Callable[..., Awaitable[str | None]] = locate_executable,
        runner: Callable[..., Awaitable[CommandOutput]] = run_command,
    ) -> None:
        if not working_directory:
            msg = "PrismSession requires a working directory"
            raise ConfigError(msg)
        self.working_directory = working_directory
        self.prismatic_url = prismatic_url or DEFAULT_PRISMATIC_URL
        self._path_override = prism_path
        self._force_npx = force_npx
        self._locator = locator
        self._runner = runner
        self._prism_path: str | None = None

    # ── Singleton access ──────────────────────────────────────

    @classmethod
    def get_instance(
        cls,
        working_directory: str | None = None,
        url: str | None = None,
        **kwargs: Any,
    ) -> PrismSession:
        """Return the live session, creating it on first use.

        An existing session keeps its working directory; *url* replaces
        its Prismatic URL in place.

        Raises:
            ConfigError: If no session exists and no working directory is
                given or set in ``WORKING_DIRECTORY``.
        """
        if cls._instance is None:
            workdir = working_directory or os.environ.get(WORKING_DIRECTORY_ENV)
            if not workdir:
                msg = (
                    f"{WORKING_DIRECTORY_ENV} must be provided or set as "
                    f"environment variable. Provided: {working_directory}"
                )
                raise ConfigError(msg)
            cls._instance = cls(
                workdir,
                url or os.environ.get(PRISMATIC_URL_ENV),
                **kwargs,
            )
        elif url:
            cls._instance.prismatic_url = url
        return cls._instance

    def dispose(self) -> None:
        """Forget the resolved path and release the shared instance."""
        self._prism_path = None
        if type(self)._instance is self:
            type(self)._instance = None

    # ── Command execution ─────────────────────────────────────

    @property
    def prism_path(self) -> str | None:
        """The cached invocation string, if resolved."""
        return self._prism_path

    async def resolve_prism_path(self) -> str:
        """Locate ``prism`` once and cache the result.

        Raises:
            CLINotFoundError: If no strategy finds the executable.
        """
        if self._prism_path is None:
            found = await self._locator(
                PRISM_EXECUTABLE,
                fallback_package=PRISM_PACKAGE,
                force_fallback=self._force_npx,
                env_var=PRISM_PATH_ENV,
                override=self._path_override,
                log_prefix="PrismSession",
            )
            if found is None:
                raise CLINotFoundError(PRISM_EXECUTABLE)
            self._prism_path = found
        return self._prism_path

    def _environment(self) -> Mapping[str, str]:
        return {**os.environ, PRISMATIC_URL_ENV: self.prismatic_url}

    @staticmethod
    def _command_prefix(prism_path: str) -> str:
        # A located file path is quoted; a runner invocation such as
        # "npx --yes @prismatic-io/prism" is already a command line.
        if os.path.exists(prism_path):
            return join_args([prism_path])
        return prism_path

    async def _check_installation(self, prism_path: str, cwd: str) -> bool:
        try:
            await self._runner(
                f"{self._command_prefix(prism_path)} {VERSION_FLAG}",
                cwd=cwd,
                env=self._environment(),
            )
        except ProcessExecutionError as exc:
            logger.warning("prism availability check failed: %s", exc)
            return False
        return True

    async def execute_command(
        self,
        args: Sequence[str] | str,
        cwd: str | None = None,
    ) -> CommandOutput:
        """Run a ``prism`` subcommand.

        Args:
            args: Subcommand tokens, quoted before they reach the shell.
                A string is appended to the command line as-is.
            cwd: Working directory override for this call only.

        Returns:
            Untrimmed stdout and stderr.

        Raises:
            CLINotFoundError: If ``prism`` cannot be located.
            CLINotInstalledError: If the availability check fails.
            CLICommandError: If the subcommand fails.
        """
        prism_path = await self.resolve_prism_path()
        workdir = cwd or self.working_directory

        if not await self._check_installation(prism_path, workdir):
            raise CLINotInstalledError(prism_path)

        subcommand = args if isinstance(args, str) else join_args(args)
        command_line = f"{self._command_prefix(prism_path)} {subcommand}"
        try:
            return await self._runner(
                command_line,
                cwd=workdir,
                env=self._environment(),
            )
        except ProcessExecutionError as exc:
            raise CLICommandError(str(exc)) from exc

    # ── Derived operations ────────────────────────────────────

    async def me(self) -> str:
        """Current user profile (``prism me``)."""
        output = await self.execute_command(["me"])
        return output.stdout.strip()

    async def logout(self) -> str:
        output = await self.execute_command(["logout"])
        return output.stdout.strip()

    async def version(self) -> str:
        output = await self.execute_command([VERSION_FLAG])
        return output.stdout.strip()

    async def is_logged_in(self) -> LoginStatus:
        """Best-effort login check.

        Matches ``prism me`` output against a known error phrase, so any
        unrelated output containing that phrase reads as logged out.
        """
        try:
            result = await self.me()
        except CLIError as exc:
            return LoginStatus(result=str(exc), logged_in=False)
        return LoginStatus(
            result=result,
            logged_in=NOT_LOGGED_IN_MARKER not in result,
        )
