"""MCP server exposing the Redis tools over stdio."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from redis_mcp import __version__
from redis_mcp.tools.base import ToolInvocation

if TYPE_CHECKING:
    from redis_mcp.mcp.dispatcher import Dispatcher
    from redis_mcp.tools.base import ToolDefinition


def _to_tool(definition: ToolDefinition) -> Tool:
    return Tool(
        name=definition.name,
        description=definition.description,
        inputSchema=definition.input_schema,
    )


def create_server(
    dispatcher: Dispatcher,
    name: str = "redis",
    version: str = __version__,
) -> Server:
    """Build an MCP server whose tools are served by *dispatcher*.

    Errors raised by the dispatcher propagate out of ``call_tool``;
    the MCP library reports them to the client as an error result.
    """
    server: Server = Server(name, version=version)

    @server.list_tools()  # type: ignore[no-untyped-call, untyped-decorator]
    async def list_tools() -> list[Tool]:
        """List available MCP tools."""
        return [_to_tool(d) for d in dispatcher.list_tools()]

    # Arguments are validated by the dispatcher, not by JSON Schema.
    @server.call_tool(validate_input=False)  # type: ignore[untyped-decorator]
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle tool calls."""
        result = await dispatcher.dispatch(ToolInvocation(name=name, arguments=arguments))
        return [TextContent(type="text", text=result.text)]

    return server


async def run_server(server: Server) -> None:
    """Serve MCP on stdio until the client disconnects."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )
