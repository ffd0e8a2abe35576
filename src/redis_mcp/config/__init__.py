"""Configuration loading and validation."""

from redis_mcp.config.loader import load_config
from redis_mcp.config.schema import (
    DEFAULT_REDIS_URL,
    BridgeConfig,
    LoggingConfig,
    ReconnectConfig,
    RedisConfig,
    ServerConfig,
)

__all__ = [
    "DEFAULT_REDIS_URL",
    "BridgeConfig",
    "LoggingConfig",
    "ReconnectConfig",
    "RedisConfig",
    "ServerConfig",
    "load_config",
]
