"""Redis connection lifecycle."""

from redis_mcp.connection.manager import (
    ConnectionEvent,
    ConnectionManager,
    ConnectionState,
    create_client,
)

__all__ = [
    "ConnectionEvent",
    "ConnectionManager",
    "ConnectionState",
    "create_client",
]
