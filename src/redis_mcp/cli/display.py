"""Rich display for the tool catalogue."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from redis_mcp.tools.base import FieldType

if TYPE_CHECKING:
    from collections.abc import Sequence

    from redis_mcp.tools.base import FieldSpec, ToolDefinition


def _describe_field(spec: FieldSpec) -> str:
    label = spec.name
    if spec.type is FieldType.STRING_OR_ARRAY:
        label += " (one or many)"
    if spec.default is not None:
        label += f" = {spec.default!r}"
    return label


class ToolTableDisplay:
    """Renders tool definitions as a table.

    Accepts an optional :class:`~rich.console.Console` for dependency
    injection in tests.
    """

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def build_table(self, definitions: Sequence[ToolDefinition]) -> Table:
        table = Table(title="Redis MCP tools")
        table.add_column("Tool", style="bold cyan", no_wrap=True)
        table.add_column("Required")
        table.add_column("Optional", style="dim")
        table.add_column("Description")
        for d in definitions:
            required = ", ".join(_describe_field(f) for f in d.fields if f.required)
            optional = ", ".join(_describe_field(f) for f in d.fields if not f.required)
            table.add_row(d.name, required, optional, d.description)
        return table

    def show(self, definitions: Sequence[ToolDefinition]) -> None:
        self._console.print(self.build_table(definitions))
