"""Executable locator.

Finds a usable invocation for an external program by trying, in order:

    1. An environment variable naming an explicit path (``PRISM_PATH``)
    2. The platform lookup command (``which`` / ``where``)
    3. A zero-install package runner (``npx --yes <package>``)

Each strategy either yields an invocation string or ``None``; failures
are logged and the chain moves on.  The locator itself never raises.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING

from prism_mcp.core.errors import ProcessExecutionError
from prism_mcp.core.process import join_args, run_command

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

VERSION_FLAG = "--version"
PACKAGE_RUNNER = "npx --yes"
# POSIX shells exit 127 when the command itself cannot be found.
COMMAND_NOT_FOUND = 127


def _lookup_command() -> str:
    return "where" if sys.platform == "win32" else "which"


def _is_shell_unavailable(exc: ProcessExecutionError) -> bool:
    """True when the command never started (missing shell or binary)."""
    return exc.returncode in (None, COMMAND_NOT_FOUND)


async def _from_env(
    env_var: str, override: str | None, log_prefix: str
) -> str | None:
    path = override or os.environ.get(env_var)
    if not path:
        return None
    try:
        await run_command(f"{join_args([path])} {VERSION_FLAG}")
    except ProcessExecutionError as exc:
        logger.warning("%s: %s verification failed: %s", log_prefix, env_var, exc)
        return None
    logger.info("%s: Using %s environment variable: %s", log_prefix, env_var, path)
    return path


async def _from_system(name: str, log_prefix: str) -> str | None:
    try:
        output = await run_command(f"{_lookup_command()} {join_args([name])}")
    except ProcessExecutionError as exc:
        if _is_shell_unavailable(exc):
            logger.warning(
                "%s: Shell command failed (%s), trying fallback", log_prefix, exc
            )
        else:
            logger.info("%s: %s not found on PATH", log_prefix, name)
        return None
    lines = output.stdout.splitlines()
    first = lines[0].strip() if lines else ""
    return first or None


async def _from_package_runner(
    name: str, package: str, log_prefix: str
) -> str | None:
    invocation = f"{PACKAGE_RUNNER} {package}"
    logger.info("%s: Attempting npx fallback for %s", log_prefix, name)
    try:
        await run_command(f"{invocation} {VERSION_FLAG}")
    except ProcessExecutionError as exc:
        logger.warning("%s: npx fallback failed: %s", log_prefix, exc)
        return None
    return invocation


async def locate_executable(
    name: str,
    *,
    fallback_package: str | None = None,
    force_fallback: bool = False,
    env_var: str | None = None,
    override: str | None = None,
    log_prefix: str = "locate_executable",
) -> str | None:
    """Resolve an invocation string for *name*.

    Args:
        name: Logical program name, e.g. ``"prism"``.
        fallback_package: Package identifier for the package runner
            strategy.  The strategy is skipped when not given.
        force_fallback: Only try the package runner (requires
            *fallback_package*).
        env_var: Environment variable holding an explicit path.
            Defaults to ``<NAME>_PATH``.
        override: Explicit path that takes the place of *env_var*.
        log_prefix: Prefix for log messages.

    Returns:
        A path or invocation string, or ``None`` if every strategy failed.
    """
    override_var = env_var or f"{name.upper()}_PATH"

    strategies: list[Callable[[], Awaitable[str | None]]] = [
        lambda: _from_env(override_var, override, log_prefix),
        lambda: _from_system(name, log_prefix),
    ]
    if fallback_package:
        package = fallback_package
        strategies.append(lambda: _from_package_runner(name, package, log_prefix))

    if force_fallback and fallback_package:
        strategies = strategies[-1:]

    for strategy in strategies:
        try:
            result = await strategy()
        except Exception:
            logger.exception("%s: Error checking %s path", log_prefix, name)
            continue
        if result:
            logger.info("%s: Found %s at: %s", log_prefix, name, result)
            return result

    return None
