"""Prismatic CLI tools.

Each handler validates nothing itself (the registry already did),
composes a ``prism`` subcommand from its arguments, runs it through the
session, and returns either a small dict or formatted CLI output.
Failures are re-raised as :class:`ToolError` with the operation named.

Tools are grouped into toolsets so a deployment can expose a subset:

    general       prism_me, prism_login, prism_logout, prism_version
    integrations  prism_integrations_*
    components    prism_components_*
"""

from __future__ import annotations

import functools
import json
import logging
import os
from typing import TYPE_CHECKING, Any

from prism_mcp.core.errors import (
    ConfigError,
    FlowNotFoundError,
    ProcessExecutionError,
    ReplaceWithoutIdError,
    TailTimeoutRequiredError,
    ToolError,
)
from prism_mcp.core.process import run_command
from prism_mcp.tools.base import ToolSpec
from prism_mcp.tools.flags import build_args
from prism_mcp.tools.formatter import FormattedOutput, format_output
from prism_mcp.tools.registry import ToolRegistry
from prism_mcp.tools.schemas import (
    ComponentInitArgs,
    ComponentPublishArgs,
    EmptyArgs,
    FlowListArgs,
    FlowTestArgs,
    IntegrationConvertArgs,
    IntegrationImportArgs,
    IntegrationInitArgs,
    LoginArgs,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

    from prism_mcp.session.manager import PrismSession
    from prism_mcp.tools.base import ToolContext

logger = logging.getLogger(__name__)

TOOLSETS = ("general", "integrations", "components")

# Keys `integrations:flows:list --extended` may use for a flow's test URL.
_FLOW_URL_KEYS = ("testUrl", "webhookUrl", "url")


def _fails_as(action: str) -> Callable[..., Any]:
    """Re-raise handler failures as ``ToolError("Failed to <action>: ...")``."""

    def decorator(
        fn: Callable[[ToolContext, Any], Awaitable[object]],
    ) -> Callable[[ToolContext, Any], Awaitable[object]]:
        @functools.wraps(fn)
        async def wrapper(ctx: ToolContext, args: Any) -> object:
            try:
                return await fn(ctx, args)
            except Exception as exc:
                msg = f"Failed to {action}: {exc}"
                raise ToolError(msg) from exc

        return wrapper

    return decorator


def _resolve_dir(session: PrismSession, directory: str) -> str:
    return os.path.join(session.working_directory, directory)


async def _run_build(ctx: ToolContext, directory: str) -> None:
    """Run the configured build command in *directory*."""
    logger.info("Building %s with %r", directory, ctx.build_command)
    try:
        await run_command(
            ctx.build_command,
            cwd=directory,
            env={**os.environ, "PRISMATIC_URL": ctx.session.prismatic_url},
        )
    except ProcessExecutionError as exc:
        msg = f"Build failed in {directory}: {exc}"
        raise ToolError(msg) from exc


# ── general ──────────────────────────────────────────────────────


@_fails_as("get user info")
async def prism_me(ctx: ToolContext, args: EmptyArgs) -> FormattedOutput:
    return format_output(await ctx.session.me())


@_fails_as("login")
async def prism_login(ctx: ToolContext, args: LoginArgs) -> dict[str, str]:
    command = build_args(
        ["login"],
        {"email": str(args.email), "password": args.password},
    )
    output = await ctx.session.execute_command(command)
    return {"output": output.stdout.strip()}


@_fails_as("logout")
async def prism_logout(ctx: ToolContext, args: EmptyArgs) -> dict[str, str]:
    output = await ctx.session.logout()
    return {"output": output or "Successfully logged out"}


@_fails_as("get CLI version")
async def prism_version(ctx: ToolContext, args: EmptyArgs) -> dict[str, str]:
    return {"version": await ctx.session.version()}


# ── integrations ─────────────────────────────────────────────────


@_fails_as("list integrations")
async def prism_integrations_list(
    ctx: ToolContext, args: EmptyArgs
) -> FormattedOutput:
    command = build_args(["integrations:list"], {"output": "json"})
    output = await ctx.session.execute_command(command)
    return format_output(output.stdout, "integrations")


@_fails_as("initialize integration")
async def prism_integrations_init(
    ctx: ToolContext, args: IntegrationInitArgs
) -> dict[str, str]:
    command = build_args(
        ["integrations:init", args.name],
        {"directory": args.directory},
    )
    output = await ctx.session.execute_command(command)
    return {"output": output.stdout.strip()}


@_fails_as("convert integration")
async def prism_integrations_convert(
    ctx: ToolContext, args: IntegrationConvertArgs
) -> dict[str, str]:
    command = build_args(
        ["integrations:convert"],
        {
            "yamlFile": args.yaml_file,
            "folder": args.folder,
            "registryPrefix": args.registry_prefix,
        },
    )
    output = await ctx.session.execute_command(command)
    return {"output": output.stdout.strip()}


@_fails_as("import integration")
async def prism_integrations_import(
    ctx: ToolContext, args: IntegrationImportArgs
) -> dict[str, str]:
    if args.replace and not args.integration_id:
        raise ReplaceWithoutIdError

    directory = _resolve_dir(ctx.session, args.directory)
    await _run_build(ctx, directory)

    command = build_args(
        ["integrations:import"],
        {"integrationId": args.integration_id, "replace": args.replace},
    )
    output = await ctx.session.execute_command(command, cwd=directory)
    return {"output": output.stdout.strip()}


def _flows_list_args(integration_id: str, columns: str | None = None) -> list[str]:
    return build_args(
        ["integrations:flows:list", integration_id],
        {"extended": True, "columns": columns, "output": "json"},
    )


@_fails_as("list flows")
async def prism_integrations_flows_list(
    ctx: ToolContext, args: FlowListArgs
) -> FormattedOutput:
    output = await ctx.session.execute_command(
        _flows_list_args(args.integration_id, args.columns)
    )
    return format_output(output.stdout, "flows")


async def lookup_flow_url(
    session: PrismSession,
    integration_id: str,
    flow_id: str | None = None,
    flow_name: str | None = None,
) -> str:
    """Find a flow's test URL by listing the integration's flows.

    Raises:
        ToolError: If neither *flow_id* nor *flow_name* is given.
        FlowNotFoundError: If no flow matches or it has no test URL.
    """
    if not flow_id and not flow_name:
        msg = "flowId or flowName is required when flowUrl is not provided"
        raise ToolError(msg)

    output = await session.execute_command(_flows_list_args(integration_id))
    try:
        flows = json.loads(output.stdout)
    except ValueError as exc:
        msg = f"Could not read flows for integration {integration_id}"
        raise FlowNotFoundError(msg) from exc
    if not isinstance(flows, list):
        flows = []

    wanted = flow_id or flow_name
    match = next(
        (
            flow
            for flow in flows
            if isinstance(flow, dict)
            and (
                (flow_id and flow.get("id") == flow_id)
                or (flow_name and flow.get("name") == flow_name)
            )
        ),
        None,
    )
    if match is None:
        msg = f"Flow {wanted!r} not found in integration {integration_id}"
        raise FlowNotFoundError(msg)

    for key in _FLOW_URL_KEYS:
        url = match.get(key)
        if url:
            return str(url)
    msg = f"Flow {wanted!r} has no test URL"
    raise FlowNotFoundError(msg)


def _timeout_flag(timeout: float | None) -> int | float | None:
    if timeout is not None and timeout.is_integer():
        return int(timeout)
    return timeout


@_fails_as("test flow")
async def prism_integrations_flows_test(
    ctx: ToolContext, args: FlowTestArgs
) -> dict[str, str]:
    if (args.tail_logs or args.tail_results) and not args.timeout:
        raise TailTimeoutRequiredError

    if args.flow_url is not None:
        flow_url = args.flow_url
    else:
        if not args.integration_id:
            msg = "integrationId is required when flowUrl is not provided"
            raise ToolError(msg)
        flow_url = await lookup_flow_url(
            ctx.session, args.integration_id, args.flow_id, args.flow_name
        )

    command = build_args(
        [
            "integrations:flows:test",
            "--flow-url",
            flow_url,
            "--jsonl",
            "--succinct",
        ],
        {
            "payload": args.payload,
            "payload-content-type": args.payload_content_type,
            "sync": args.sync,
            "tail-logs": args.tail_logs,
            "tail-results": args.tail_results,
            "timeout": _timeout_flag(args.timeout),
            "result-file": args.result_file,
        },
    )
    output = await ctx.session.execute_command(command)
    return {"output": output.stdout.strip()}


# ── components ───────────────────────────────────────────────────


@_fails_as("list components")
async def prism_components_list(
    ctx: ToolContext, args: EmptyArgs
) -> FormattedOutput:
    command = build_args(["components:list"], {"output": "json"})
    output = await ctx.session.execute_command(command)
    return format_output(output.stdout, "components")


@_fails_as("initialize component")
async def prism_components_init(
    ctx: ToolContext, args: ComponentInitArgs
) -> dict[str, str]:
    command = build_args(
        ["components:init", args.name],
        {"wsdl-path": args.wsdl_path, "open-api-path": args.open_api_path},
    )
    cwd = None
    if args.directory:
        cwd = _resolve_dir(ctx.session, args.directory)
        if not os.path.isdir(cwd):
            msg = f"Directory not found: {cwd}"
            raise ToolError(msg)
    output = await ctx.session.execute_command(command, cwd=cwd)
    return {"output": output.stdout.strip()}


@_fails_as("publish component")
async def prism_components_publish(
    ctx: ToolContext, args: ComponentPublishArgs
) -> dict[str, str]:
    directory = _resolve_dir(ctx.session, args.directory)
    await _run_build(ctx, directory)

    command = build_args(
        ["components:publish", "--no-confirm"],
        {
            "comment": args.comment,
            "customer": args.customer,
            "skip-on-signature-match": args.skip_on_signature_match,
        },
    )
    output = await ctx.session.execute_command(command, cwd=directory)
    return {"output": output.stdout.strip()}


# ── Registration ─────────────────────────────────────────────────


PRISM_TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec(
        name="prism_me",
        description=(
            "Check login status and display current user profile information"
        ),
        args_model=EmptyArgs,
        handler=prism_me,
    ),
    ToolSpec(
        name="prism_login",
        description="Authenticate with Prismatic (requires email and password)",
        args_model=LoginArgs,
        handler=prism_login,
    ),
    ToolSpec(
        name="prism_logout",
        description="Log out of Prismatic",
        args_model=EmptyArgs,
        handler=prism_logout,
    ),
    ToolSpec(
        name="prism_version",
        description="Show the version of the Prismatic CLI in use",
        args_model=EmptyArgs,
        handler=prism_version,
    ),
    ToolSpec(
        name="prism_integrations_list",
        description="List all integrations in your organization",
        args_model=EmptyArgs,
        handler=prism_integrations_list,
        toolset="integrations",
    ),
    ToolSpec(
        name="prism_integrations_init",
        description="Initialize a new Code Native Integration",
        args_model=IntegrationInitArgs,
        handler=prism_integrations_init,
        toolset="integrations",
    ),
    ToolSpec(
        name="prism_integrations_convert",
        description=(
            "Convert a Low-Code Integration's YAML file into a "
            "Code Native Integration"
        ),
        args_model=IntegrationConvertArgs,
        handler=prism_integrations_convert,
        toolset="integrations",
    ),
    ToolSpec(
        name="prism_integrations_import",
        description="Build a Code Native Integration and import it into Prismatic",
        args_model=IntegrationImportArgs,
        handler=prism_integrations_import,
        toolset="integrations",
    ),
    ToolSpec(
        name="prism_integrations_flows_list",
        description="List flows for an integration",
        args_model=FlowListArgs,
        handler=prism_integrations_flows_list,
        toolset="integrations",
    ),
    ToolSpec(
        name="prism_integrations_flows_test",
        description="Test a flow in an integration",
        args_model=FlowTestArgs,
        handler=prism_integrations_flows_test,
        toolset="integrations",
    ),
    ToolSpec(
        name="prism_components_list",
        description="List all components available in your organization",
        args_model=EmptyArgs,
        handler=prism_components_list,
        toolset="components",
    ),
    ToolSpec(
        name="prism_components_init",
        description="Initialize a new Component",
        args_model=ComponentInitArgs,
        handler=prism_components_init,
        toolset="components",
    ),
    ToolSpec(
        name="prism_components_publish",
        description="Build a component and publish it to Prismatic",
        args_model=ComponentPublishArgs,
        handler=prism_components_publish,
        toolset="components",
    ),
)


def validate_toolsets(toolsets: Iterable[str]) -> list[str]:
    """Normalize toolset names.

    Raises:
        ConfigError: On an unknown toolset name.
    """
    names = [t.strip() for t in toolsets if t.strip()]
    unknown = [t for t in names if t not in TOOLSETS]
    if unknown:
        msg = (
            f"Unknown toolset(s): {', '.join(unknown)}. "
            f"Valid toolsets: {', '.join(TOOLSETS)}"
        )
        raise ConfigError(msg)
    return names


def build_registry(toolsets: Iterable[str] | None = None) -> ToolRegistry:
    """Register the Prismatic tools, optionally limited to *toolsets*.

    Raises:
        ConfigError: On an unknown toolset name.
    """
    selected = set(validate_toolsets(toolsets or ())) or set(TOOLSETS)
    registry = ToolRegistry()
    for tool in PRISM_TOOLS:
        if tool.toolset in selected:
            registry.register(tool)
    return registry
