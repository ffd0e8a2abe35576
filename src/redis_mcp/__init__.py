"""redis-mcp - Redis command surface exposed as MCP tools."""

__version__ = "0.1.0"
