"""Dispatcher — routes one tool invocation to one Redis command.

Per invocation: look up the definition, validate and normalize the
arguments, execute the mapped command on the connection, then render
the reply with the tool's rendering rule. Lookup and validation
failures never reach Redis.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

from redis_mcp.core.errors import UpstreamError
from redis_mcp.tools.base import ToolResult
from redis_mcp.tools.validation import validate_arguments

if TYPE_CHECKING:
    from redis_mcp.tools.base import ToolDefinition, ToolInvocation
    from redis_mcp.tools.registry import SchemaRegistry

logger = logging.getLogger(__name__)


class CommandExecutor(Protocol):
    """Anything that can run a Redis command, e.g. ConnectionManager."""

    async def execute(self, command: str, *args: Any) -> Any: ...


class Dispatcher:
    """Validates, executes and renders tool invocations."""

    def __init__(self, registry: SchemaRegistry, executor: CommandExecutor) -> None:
        self._registry = registry
        self._executor = executor

    @property
    def registry(self) -> SchemaRegistry:
        return self._registry

    def list_tools(self) -> list[ToolDefinition]:
        """Discovery listing. Never touches Redis."""
        return self._registry.list_definitions()

    async def dispatch(self, invocation: ToolInvocation) -> ToolResult:
        """Run one invocation and return its text result.

        Raises:
            UnknownToolError: If no tool has this name.
            InvalidArgumentsError: If the arguments fail validation.
            NotConnectedError: If Redis is not currently reachable.
            UpstreamError: If Redis replied with an error.
        """
        definition = self._registry.get(invocation.name)
        args = validate_arguments(definition, invocation.arguments)
        command, *params = definition.build(args)

        logger.debug("Dispatching %s as %s", invocation.name, command)
        try:
            reply = await self._executor.execute(command, *params)
        except UpstreamError as e:
            logger.warning("Tool %s failed: %s", invocation.name, e)
            raise

        return ToolResult(text=definition.render(args, reply))
