"""Pydantic models for redis-mcp configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from redis_mcp import __version__

DEFAULT_REDIS_URL = "redis://localhost:6379"
REDIS_URL_SCHEMES = ("redis", "rediss", "unix")


class RedisConfig(BaseModel):
    """Redis connection target."""

    url: str = DEFAULT_REDIS_URL
    socket_timeout: float | None = None
    socket_connect_timeout: float = 5.0

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Reject URLs redis-py cannot connect with."""
        scheme, sep, _ = v.partition("://")
        if not sep or scheme.lower() not in REDIS_URL_SCHEMES:
            schemes = ", ".join(f"{s}://" for s in REDIS_URL_SCHEMES)
            msg = f"Redis URL must start with one of {schemes} (got {v!r})"
            raise ValueError(msg)
        return v


class ReconnectConfig(BaseModel):
    """Reconnection backoff budget."""

    max_retries: int = Field(default=5, ge=0)
    base_delay: float = Field(default=1.0, gt=0)
    max_delay: float = Field(default=30.0, gt=0)


class ServerConfig(BaseModel):
    """Identity advertised to MCP clients."""

    name: str = "redis"
    version: str = __version__


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    file: str = ""


class BridgeConfig(BaseModel):
    """Top-level configuration for redis-mcp."""

    redis: RedisConfig = Field(default_factory=RedisConfig)
    reconnect: ReconnectConfig = Field(default_factory=ReconnectConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
