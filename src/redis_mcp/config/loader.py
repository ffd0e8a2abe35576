"""Layered configuration: defaults, TOML files, then overrides.

Layers, lowest priority first:
    1. Pydantic model defaults
    2. ``$XDG_CONFIG_HOME/redis-mcp/config.toml`` (``~/.config`` if unset)
    3. ``redis-mcp.toml`` in the working directory
    4. The file named by ``$REDIS_MCP_CONFIG`` (must exist)
    5. The file passed to :func:`load_config` (must exist)
    6. Overrides passed to :func:`load_config` (CLI arguments)
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from redis_mcp.core.errors import ConfigError

from .schema import BridgeConfig

ENV_CONFIG_PATH = "REDIS_MCP_CONFIG"
PROJECT_CONFIG_NAME = "redis-mcp.toml"


def _user_config_path() -> Path:
    config_home = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(config_home) / "redis-mcp" / "config.toml"


def _required_file(raw: str | Path, what: str) -> Path:
    path = Path(raw).expanduser()
    if not path.is_file():
        msg = f"{what} not found: {raw}"
        raise ConfigError(msg)
    return path


def _config_layers(explicit: str | Path | None) -> list[Path]:
    """TOML files to merge, lowest priority first.

    Implicit locations are skipped when absent; explicitly named files
    are an error when absent.
    """
    layers = [
        p for p in (_user_config_path(), Path.cwd() / PROJECT_CONFIG_NAME) if p.is_file()
    ]
    env_path = os.environ.get(ENV_CONFIG_PATH)
    if env_path:
        layers.append(_required_file(env_path, f"Config file from {ENV_CONFIG_PATH}"))
    if explicit is not None:
        layers.append(_required_file(explicit, "Config file"))
    return layers


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {path}: {e}"
        raise ConfigError(msg) from e
    except OSError as e:
        msg = f"Cannot read config file {path}: {e}"
        raise ConfigError(msg) from e


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """New dict with *override* laid over *base*; nested tables merge."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = _deep_merge(current, value)
        merged[key] = value
    return merged


def load_config(
    path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> BridgeConfig:
    """Merge every configuration layer and validate the result.

    Raises:
        ConfigError: A named file is missing, a file is not valid TOML,
            or the merged values fail validation.
    """
    data: dict[str, Any] = {}
    for layer in _config_layers(path):
        data = _deep_merge(data, _read_toml(layer))
    data = _deep_merge(data, overrides or {})

    try:
        return BridgeConfig.model_validate(data)
    except ValidationError as e:
        msg = f"Configuration validation failed: {e}"
        raise ConfigError(msg) from e
