"""Tool definition types.

A :class:`ToolDefinition` is the single authoritative record for one
tool: its argument fields, how validated arguments become a Redis
command, and how the Redis reply is rendered as text.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    create_model,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


class FieldType(enum.Enum):
    """Argument types accepted by tool schemas."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING_OR_ARRAY = "string_or_array"


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """One named argument of a tool."""

    name: str
    type: FieldType
    description: str = ""
    required: bool = True
    default: Any = None

    def model_field(self) -> tuple[Any, Any]:
        """``(annotation, FieldInfo)`` pair for :func:`pydantic.create_model`."""
        description = self.description or None
        if self.required:
            return _ANNOTATIONS[self.type], Field(description=description)
        return _ANNOTATIONS[self.type], Field(default=self.default, description=description)


# JSON values only; no coercion between types, bool is not a number.
_ANNOTATIONS: dict[FieldType, Any] = {
    FieldType.STRING: StrictStr,
    FieldType.NUMBER: StrictInt | StrictFloat,
    FieldType.BOOLEAN: StrictBool,
    FieldType.STRING_OR_ARRAY: StrictStr | list[StrictStr],
}


class ValidatedArguments(Mapping[str, Any]):
    """Typed argument values bound to one tool.

    Only built by validation, and only when every field passed.
    String-or-array fields hold :class:`~redis_mcp.tools.normalize.Items`.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, Any]) -> None:
        self._values = dict(values)

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ValidatedArguments({self._values!r})"


Command = tuple[Any, ...]


@dataclass(frozen=True, slots=True)
class ToolDefinition:
    """Schema, command mapping and rendering rule for one tool.

    The pydantic ``arguments_model`` is built once from ``fields`` and
    backs both validation and the advertised JSON Schema.
    """

    name: str
    description: str
    fields: tuple[FieldSpec, ...]
    build: Callable[[ValidatedArguments], Command]
    render: Callable[[ValidatedArguments, Any], str]
    arguments_model: type[BaseModel] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        model = create_model(
            f"{self.name}_arguments",
            __config__=ConfigDict(extra="ignore"),
            **{f.name: f.model_field() for f in self.fields},
        )
        object.__setattr__(self, "arguments_model", model)

    @property
    def input_schema(self) -> dict[str, Any]:
        """JSON Schema for the tool's arguments."""
        schema = self.arguments_model.model_json_schema()
        schema.pop("title", None)
        for prop in schema.get("properties", {}).values():
            prop.pop("title", None)
            # Absent optional fields have no value; null itself is rejected.
            if "default" in prop and prop["default"] is None:
                del prop["default"]
        return schema


@dataclass(frozen=True, slots=True)
class ToolInvocation:
    """A request to run a named tool with raw, untrusted arguments."""

    name: str
    arguments: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ToolResult:
    """Text payload returned for a successful invocation."""

    text: str
