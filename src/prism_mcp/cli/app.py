"""Main CLI application.

Click commands for prism-mcp: serve, tools, locate.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import TYPE_CHECKING

import click

from prism_mcp import __version__
from prism_mcp.config.loader import load_config
from prism_mcp.core.errors import ConfigError, PrismMcpError

if TYPE_CHECKING:
    from prism_mcp.config.schema import LoggingConfig, PrismMcpConfig

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


# ── Helpers ──────────────────────────────────────────────────────


def _error(msg: str) -> None:
    """Print an error message to stderr and exit."""
    click.echo(f"Error: {msg}", err=True)
    sys.exit(1)


def _load_config(
    config_path: str | None,
    *,
    working_directory: str | None = None,
    url: str | None = None,
    toolsets: str | None = None,
) -> PrismMcpConfig:
    """Load config, applying command-line options last."""
    general: dict[str, object] = {}
    if working_directory:
        general["working_directory"] = working_directory
    if url:
        general["prismatic_url"] = url
    if toolsets:
        general["toolsets"] = toolsets
    overrides = {"general": general} if general else None
    try:
        return load_config(path=config_path, overrides=overrides)
    except ConfigError as e:
        _error(str(e))
        raise  # unreachable, keeps mypy happy


def _configure_logging(config: LoggingConfig) -> None:
    """Send log records to stderr (stdout carries MCP traffic)."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.file:
        handlers.append(logging.FileHandler(config.file))
    level = logging.getLevelName(config.level.upper())
    logging.basicConfig(
        level=level if isinstance(level, int) else logging.INFO,
        format=_LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


# ── CLI group ────────────────────────────────────────────────────


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="prism-mcp")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True),
    default=None,
    help="Path to config file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None) -> None:
    """prism-mcp - Prismatic CLI tools over MCP.

    Serves the Prismatic CLI as Model Context Protocol tools.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ── serve ────────────────────────────────────────────────────────


@cli.command()
@click.option(
    "--working-directory",
    "-w",
    default=None,
    help="Directory prism commands run in (default: $WORKING_DIRECTORY).",
)
@click.option(
    "--url",
    default=None,
    help="Prismatic URL (default: $PRISMATIC_URL or https://app.prismatic.io/).",
)
@click.option(
    "--toolsets",
    default=None,
    help="Comma-separated toolsets to expose (general, integrations, components).",
)
@click.pass_context
def serve(
    ctx: click.Context,
    working_directory: str | None,
    url: str | None,
    toolsets: str | None,
) -> None:
    """Start the MCP server on stdio."""
    from prism_mcp.mcp.server import run_server
    from prism_mcp.session.manager import PrismSession
    from prism_mcp.tools.base import ToolContext
    from prism_mcp.tools.prism import build_registry

    config = _load_config(
        ctx.obj["config_path"],
        working_directory=working_directory,
        url=url,
        toolsets=toolsets,
    )
    _configure_logging(config.logging)

    general = config.general
    try:
        session = PrismSession.get_instance(
            general.working_directory,
            general.prismatic_url,
            prism_path=general.prism_path,
            force_npx=general.force_npx,
        )
        registry = build_registry(general.toolsets)
    except PrismMcpError as e:
        _error(f"Failed to start Prism MCP server: {e}")
        return

    context = ToolContext(session=session, build_command=general.build_command)
    try:
        asyncio.run(run_server(registry, context))
    finally:
        session.dispose()


# ── tools ────────────────────────────────────────────────────────


@cli.command()
@click.option(
    "--toolsets",
    default=None,
    help="Comma-separated toolsets to list.",
)
@click.pass_context
def tools(ctx: click.Context, toolsets: str | None) -> None:
    """List the tools the server would expose."""
    from prism_mcp.tools.prism import build_registry

    config = _load_config(ctx.obj["config_path"], toolsets=toolsets)
    try:
        registry = build_registry(config.general.toolsets)
    except ConfigError as e:
        _error(str(e))
        return

    for definition in registry.list_definitions():
        click.echo(f"{definition.name}")
        click.echo(f"  {definition.description}")


# ── locate ───────────────────────────────────────────────────────


@cli.command()
@click.option(
    "--npx",
    "force_npx",
    is_flag=True,
    default=False,
    help="Only try the npx fallback.",
)
@click.pass_context
def locate(ctx: click.Context, force_npx: bool) -> None:
    """Show how the prism executable resolves."""
    from prism_mcp.core.locator import locate_executable
    from prism_mcp.session.manager import (
        PRISM_EXECUTABLE,
        PRISM_PACKAGE,
        PRISM_PATH_ENV,
    )

    config = _load_config(ctx.obj["config_path"])
    _configure_logging(config.logging)

    found = asyncio.run(
        locate_executable(
            PRISM_EXECUTABLE,
            fallback_package=PRISM_PACKAGE,
            force_fallback=force_npx or config.general.force_npx,
            env_var=PRISM_PATH_ENV,
            override=config.general.prism_path,
            log_prefix="locate",
        )
    )
    if found is None:
        _error("Prismatic CLI not found.")
        return
    click.echo(found)
