"""Tests for the MCP server binding."""

from __future__ import annotations

from typing import Any

import pytest
from mcp import types

from prism_mcp.mcp.server import (
    SERVER_NAME,
    create_server,
    to_call_tool_result,
    to_mcp_tool,
)
from prism_mcp.tools.base import ToolDefinition, ToolResult
from prism_mcp.tools.prism import build_registry

# ── Conversions ──────────────────────────────────────────────────


class TestConversions:
    def test_to_mcp_tool(self) -> None:
        schema = {"type": "object", "properties": {}}
        tool = to_mcp_tool(ToolDefinition("prism_me", "Who am I", schema))
        assert tool.name == "prism_me"
        assert tool.description == "Who am I"
        assert tool.inputSchema == schema

    def test_success_result(self) -> None:
        result = to_call_tool_result(ToolResult(content='{"a": 1}'))
        assert result.isError is False
        assert len(result.content) == 1
        assert result.content[0].type == "text"
        assert result.content[0].text == '{"a": 1}'

    def test_error_result(self) -> None:
        result = to_call_tool_result(ToolResult(content="Error: boom", is_error=True))
        assert result.isError is True
        assert result.content[0].text == "Error: boom"


# ── Server ───────────────────────────────────────────────────────


class TestServer:
    @pytest.fixture
    def server(self, make_context: Any, make_session: Any) -> Any:
        session = make_session(outputs={"integrations:flows:list": '[{"id":"1"}]'})
        return create_server(build_registry(), make_context(session))

    def test_name(self, server: Any) -> None:
        assert server.name == SERVER_NAME

    def test_registers_handlers(self, server: Any) -> None:
        assert types.ListToolsRequest in server.request_handlers
        assert types.CallToolRequest in server.request_handlers

    async def test_list_tools(self, server: Any) -> None:
        handler = server.request_handlers[types.ListToolsRequest]
        response = await handler(types.ListToolsRequest(method="tools/list"))
        names = [t.name for t in response.root.tools]
        assert "prism_me" in names
        assert "prism_components_publish" in names

    def test_initialization_options(self, server: Any) -> None:
        options = server.create_initialization_options()
        assert options.server_name == SERVER_NAME
        assert options.capabilities.tools is not None
