"""Main CLI application.

Click commands for redis-mcp: serve, tools.
"""

from __future__ import annotations

import asyncio
import json as json_mod
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from redis_mcp import __version__
from redis_mcp.config.loader import load_config
from redis_mcp.core.errors import ConfigError

if TYPE_CHECKING:
    from redis_mcp.config.schema import BridgeConfig, LoggingConfig

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


# ── Helpers ──────────────────────────────────────────────────────


def _error(msg: str) -> None:
    """Print an error message to stderr and exit."""
    click.echo(f"Error: {msg}", err=True)
    sys.exit(1)


def _load_config(
    config_path: str | None,
    overrides: dict[str, Any] | None = None,
) -> BridgeConfig:
    """Load config with user-friendly error handling."""
    try:
        return load_config(path=config_path, overrides=overrides)
    except ConfigError as e:
        _error(str(e))
        raise  # unreachable, keeps mypy happy


def _configure_logging(config: LoggingConfig) -> None:
    """Log to stderr (stdout carries the MCP stream), plus optional file."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.file:
        path = Path(config.file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path))
    logging.basicConfig(
        level=config.level.upper(),
        format=_LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


# ── CLI group ────────────────────────────────────────────────────


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="redis-mcp")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True),
    default=None,
    help="Path to config file.",
)
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Override the configured log level.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, log_level: str | None) -> None:
    """redis-mcp - Redis commands as MCP tools.

    Serves strings, hashes, lists, sorted sets and pub/sub over stdio.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["log_level"] = log_level
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ── serve ────────────────────────────────────────────────────────


@cli.command()
@click.argument("url", required=False)
@click.pass_context
def serve(ctx: click.Context, url: str | None) -> None:
    """Connect to Redis at URL and serve MCP on stdio.

    URL defaults to the configured redis.url (redis://localhost:6379).
    """
    from redis_mcp.lifecycle import LifecycleController

    overrides: dict[str, Any] = {}
    if url:
        overrides["redis"] = {"url": url}
    if ctx.obj["log_level"]:
        overrides["logging"] = {"level": ctx.obj["log_level"]}

    config = _load_config(ctx.obj["config_path"], overrides)
    _configure_logging(config.logging)

    controller = LifecycleController(config)
    sys.exit(asyncio.run(controller.run()))


# ── tools ────────────────────────────────────────────────────────


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON schemas.")
def tools(as_json: bool) -> None:
    """List the tools this server exposes. Does not contact Redis."""
    from redis_mcp.tools.definitions import build_registry

    definitions = build_registry().list_definitions()
    if as_json:
        payload = [
            {
                "name": d.name,
                "description": d.description,
                "inputSchema": d.input_schema,
            }
            for d in definitions
        ]
        click.echo(json_mod.dumps(payload, indent=2))
        return

    from redis_mcp.cli.display import ToolTableDisplay

    ToolTableDisplay().show(definitions)
