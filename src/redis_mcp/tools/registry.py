"""Schema registry — the one table of tool definitions.

Provides registration, lookup and listing in registration order.
The same definitions back the discovery listing and the dispatcher.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from redis_mcp.core.errors import UnknownToolError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from redis_mcp.tools.base import ToolDefinition


class SchemaRegistry:
    """Registry of immutable :class:`ToolDefinition` records."""

    def __init__(self, definitions: Iterable[ToolDefinition] = ()) -> None:
        self._tools: dict[str, ToolDefinition] = {}
        for definition in definitions:
            self.register(definition)

    def register(self, definition: ToolDefinition) -> None:
        """Register a tool definition.

        Raises:
            ValueError: If a tool with the same name is already registered.
        """
        if definition.name in self._tools:
            msg = f"Tool already registered: {definition.name}"
            raise ValueError(msg)
        self._tools[definition.name] = definition

    def get(self, name: str) -> ToolDefinition:
        """Get a tool definition by name.

        Raises:
            UnknownToolError: If the tool is not registered.
        """
        try:
            return self._tools[name]
        except KeyError:
            raise UnknownToolError(name) from None

    def list_definitions(self) -> list[ToolDefinition]:
        """Return all definitions in registration order."""
        return list(self._tools.values())

    def list_names(self) -> list[str]:
        """Return names of all registered tools."""
        return list(self._tools.keys())

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools
