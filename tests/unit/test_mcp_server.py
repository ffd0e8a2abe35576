"""Tests for the MCP server wiring."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest
from mcp.server import Server
from mcp.types import (
    CallToolRequest,
    CallToolRequestParams,
    ListToolsRequest,
)

from redis_mcp.mcp.dispatcher import Dispatcher
from redis_mcp.mcp.server import _to_tool, create_server
from redis_mcp.tools.definitions import build_registry

# ── Helpers ──────────────────────────────────────────────────────


async def _list_tools(server: Server) -> list[Any]:
    handler = server.request_handlers[ListToolsRequest]
    result = await handler(ListToolsRequest(method="tools/list"))
    return result.root.tools


async def _call_tool(server: Server, name: str, arguments: dict[str, Any] | None) -> Any:
    handler = server.request_handlers[CallToolRequest]
    request = CallToolRequest(
        method="tools/call",
        params=CallToolRequestParams(name=name, arguments=arguments),
    )
    result = await handler(request)
    return result.root


@pytest.fixture
def server(dispatcher: Dispatcher) -> Server:
    return create_server(dispatcher)


# ── Tool schemas ─────────────────────────────────────────────────


class TestToolSchemas:
    """Verify that tool definitions reach MCP unchanged."""

    def test_to_tool(self) -> None:
        definition = build_registry().get("get")
        tool = _to_tool(definition)
        assert tool.name == "get"
        assert tool.description == definition.description
        assert tool.inputSchema == definition.input_schema

    async def test_list_tools(self, server: Server) -> None:
        tools = await _list_tools(server)
        assert len(tools) == 21
        assert [t.name for t in tools] == build_registry().list_names()

    async def test_list_tools_never_touches_redis(self) -> None:
        executor = AsyncMock()
        server = create_server(Dispatcher(build_registry(), executor))
        await _list_tools(server)
        executor.execute.assert_not_called()

    def test_server_identity(self, dispatcher: Dispatcher) -> None:
        server = create_server(dispatcher, name="cache", version="9.9.9")
        assert server.name == "cache"
        assert server.version == "9.9.9"


# ── Tool calls ───────────────────────────────────────────────────


class TestCallTool:
    async def test_success_is_text_content(self, server: Server) -> None:
        result = await _call_tool(server, "set", {"key": "a", "value": "1"})
        assert result.isError is False
        assert result.content[0].type == "text"
        assert result.content[0].text == "Successfully set key: a"

        result = await _call_tool(server, "get", {"key": "a"})
        assert result.content[0].text == "1"

    async def test_absent_key_is_not_an_error(self, server: Server) -> None:
        result = await _call_tool(server, "get", {"key": "missing"})
        assert result.isError is False
        assert result.content[0].text == "Key not found: missing"

    async def test_missing_arguments(self, server: Server) -> None:
        result = await _call_tool(server, "get", None)
        assert result.isError is True
        assert "Invalid arguments: key: Required" in result.content[0].text

    async def test_type_error(self, server: Server) -> None:
        result = await _call_tool(server, "expire", {"key": "k", "seconds": "soon"})
        assert result.isError is True
        assert "Expected number, received string" in result.content[0].text

    async def test_unknown_tool(self, server: Server) -> None:
        result = await _call_tool(server, "flushall", {})
        assert result.isError is True
        assert "Unknown tool: flushall" in result.content[0].text

    async def test_upstream_error(self, server: Server) -> None:
        await _call_tool(server, "set", {"key": "s", "value": "text"})
        result = await _call_tool(server, "lpush", {"key": "s", "value": "x"})
        assert result.isError is True
        assert "WRONGTYPE" in result.content[0].text
