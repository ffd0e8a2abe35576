"""Core types, errors, and shared utilities."""

from redis_mcp.core.errors import (
    ConfigError,
    ConnectionStateError,
    InvalidArgumentsError,
    NotConnectedError,
    ReconnectExhaustedError,
    RedisMcpError,
    ToolError,
    UnknownToolError,
    UpstreamError,
)
from redis_mcp.core.retry import (
    ReconnectPolicy,
    compute_delay,
    delay_schedule,
)

__all__ = [
    "ConfigError",
    "ConnectionStateError",
    "InvalidArgumentsError",
    "NotConnectedError",
    "ReconnectExhaustedError",
    "ReconnectPolicy",
    "RedisMcpError",
    "ToolError",
    "UnknownToolError",
    "UpstreamError",
    "compute_delay",
    "delay_schedule",
]
