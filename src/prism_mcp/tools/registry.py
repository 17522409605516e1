"""Tool registry — maps tool names to validated handlers.

Provides registration, lookup, listing, and dispatch of tools.  The
dispatcher converts every outcome, including unknown tools, invalid
arguments and handler failures, into a :class:`ToolResult` envelope.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from prism_mcp.tools.base import (
    ArgumentError,
    ToolDefinition,
    ToolResult,
    validate_arguments,
)
from prism_mcp.tools.formatter import Raw, Structured

if TYPE_CHECKING:
    from prism_mcp.tools.base import ToolContext, ToolSpec

logger = logging.getLogger(__name__)


def render_result(value: object) -> str:
    """Render a handler's return value as envelope text."""
    if isinstance(value, Structured | Raw):
        return value.render()
    if isinstance(value, str):
        return value
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


class ToolRegistry:
    """Registry for the tools exposed by the server.

    Tools are listed in registration order.
    """

    def __init__(self) -> None:
        self._tools: dict[str, ToolSpec] = {}

    def register(self, tool: ToolSpec) -> None:
        """Register a tool.

        Raises:
            ValueError: If a tool with the same name is already registered.
        """
        if tool.name in self._tools:
            msg = f"Tool already registered: {tool.name}"
            raise ValueError(msg)
        self._tools[tool.name] = tool

    def get(self, name: str) -> ToolSpec:
        """Get a tool by name.

        Raises:
            KeyError: If the tool is not found.
        """
        if name not in self._tools:
            msg = f"Tool not found: {name}"
            raise KeyError(msg)
        return self._tools[name]

    def list_definitions(self) -> list[ToolDefinition]:
        """Return definitions for all registered tools."""
        return [
            ToolDefinition(
                name=t.name,
                description=t.description,
                input_schema=t.args_model.input_schema(),
            )
            for t in self._tools.values()
        ]

    async def dispatch(
        self,
        name: str,
        arguments: dict[str, Any] | None,
        context: ToolContext,
    ) -> ToolResult:
        """Validate arguments, run the tool, and wrap the outcome.

        Never raises: unknown tools, invalid arguments and handler
        failures all come back as a :class:`ToolResult` with
        ``is_error=True``.
        """
        try:
            tool = self.get(name)
        except KeyError:
            logger.warning("Call to unknown tool: %s", name)
            return ToolResult(content=f"Error: Tool not found: {name}", is_error=True)

        args = validate_arguments(tool.args_model, arguments)
        if isinstance(args, ArgumentError):
            logger.info("Rejected arguments for %s: %s", name, args.message)
            return ToolResult(
                content=f"Error: Invalid arguments for {name}: {args.message}",
                is_error=True,
            )

        try:
            value = await tool.handler(context, args)
        except Exception as exc:
            logger.warning("Tool %s failed: %s", name, exc)
            return ToolResult(content=f"Error: {exc}", is_error=True)
        return ToolResult(content=render_result(value))

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def list_names(self) -> list[str]:
        """Return names of all registered tools."""
        return list(self._tools.keys())
