"""Exception hierarchy for redis-mcp.

Every module imports from here. The hierarchy is:

    RedisMcpError
    ├── ToolError
    │   ├── UnknownToolError(name)
    │   └── InvalidArgumentsError(path, reason)
    ├── ConnectionStateError
    │   ├── NotConnectedError(state)
    │   └── ReconnectExhaustedError(attempts)
    ├── UpstreamError
    └── ConfigError
"""

from __future__ import annotations


class RedisMcpError(Exception):
    """Base exception for all redis-mcp errors."""


# ─── Tool Errors ──────────────────────────────────────────────


class ToolError(RedisMcpError):
    """Base for errors raised before an invocation reaches Redis."""


class UnknownToolError(ToolError):
    """The invocation names a tool that is not registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class InvalidArgumentsError(ToolError):
    """Argument validation failed. Carries the first offending field path."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid arguments: {path}: {reason}")


# ─── Connection Errors ────────────────────────────────────────


class ConnectionStateError(RedisMcpError):
    """Base for connection lifecycle errors."""


class NotConnectedError(ConnectionStateError):
    """A command was issued while the connection is not usable."""

    def __init__(self, state: str) -> None:
        self.state = state
        super().__init__(f"Not connected to Redis (state: {state})")


class ReconnectExhaustedError(ConnectionStateError):
    """The reconnection budget is spent. Fatal for the process."""

    def __init__(self, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(f"Maximum retries ({attempts}) reached. Giving up.")


# ─── Upstream Errors ──────────────────────────────────────────


class UpstreamError(RedisMcpError):
    """Redis accepted the command but replied with an error."""

    def __init__(self, message: str) -> None:
        self.upstream_message = message
        super().__init__(f"Redis error: {message}")


# ─── Configuration Errors ─────────────────────────────────────


class ConfigError(RedisMcpError):
    """Invalid configuration."""
