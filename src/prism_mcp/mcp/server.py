"""MCP server exposing the Prismatic tools."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, TextContent, Tool

from prism_mcp import __version__

if TYPE_CHECKING:
    from prism_mcp.tools.base import ToolContext, ToolDefinition, ToolResult
    from prism_mcp.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

SERVER_NAME = "prism-mcp"


def to_mcp_tool(definition: ToolDefinition) -> Tool:
    return Tool(
        name=definition.name,
        description=definition.description,
        inputSchema=definition.input_schema,
    )


def to_call_tool_result(result: ToolResult) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=result.content)],
        isError=result.is_error,
    )


def create_server(registry: ToolRegistry, context: ToolContext) -> Server:
    """Build an MCP server that dispatches calls through *registry*."""
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()  # type: ignore[no-untyped-call, untyped-decorator]
    async def list_tools() -> list[Tool]:
        """List available MCP tools."""
        return [to_mcp_tool(d) for d in registry.list_definitions()]

    # The registry validates arguments itself and reports mismatches
    # as error results.
    @server.call_tool(validate_input=False)  # type: ignore[untyped-decorator]
    async def call_tool(name: str, arguments: dict[str, Any]) -> CallToolResult:
        """Handle tool calls."""
        result = await registry.dispatch(name, arguments, context)
        return to_call_tool_result(result)

    return server


async def run_server(registry: ToolRegistry, context: ToolContext) -> None:
    """Start the MCP server on stdio."""
    server = create_server(registry, context)
    logger.info(
        "Prism MCP server running (%d tools, cwd=%s)",
        len(registry),
        context.session.working_directory,
    )
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )
