"""MCP protocol surface: dispatcher and stdio server."""
