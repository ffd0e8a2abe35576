"""Argument validation against a :class:`ToolDefinition`.

Arguments are checked by the tool's pydantic ``arguments_model``.
Validation is all-or-nothing: the first offending field raises
:class:`InvalidArgumentsError` and no :class:`ValidatedArguments` is
produced. Unknown extra fields are ignored.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from redis_mcp.core.errors import InvalidArgumentsError
from redis_mcp.tools.base import FieldType, ValidatedArguments
from redis_mcp.tools.normalize import normalize

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails

    from redis_mcp.tools.base import ToolDefinition

_EXPECTED = {
    FieldType.STRING: "string",
    FieldType.NUMBER: "number",
    FieldType.BOOLEAN: "boolean",
    FieldType.STRING_OR_ARRAY: "string or array of strings",
}


def _json_type(value: Any) -> str:
    """Name of *value*'s JSON type, for error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int | float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list | tuple):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _error_path(error: ErrorDetails) -> str:
    """``field`` or ``field.index``; union member tags are dropped."""
    name, *rest = error["loc"]
    return ".".join([str(name), *(str(part) for part in rest if isinstance(part, int))])


def _first_error(definition: ToolDefinition, exc: ValidationError) -> InvalidArgumentsError:
    errors = exc.errors()
    field_name = errors[0]["loc"][0]
    # A failed union reports once per member; the element error is the useful one.
    candidates = [e for e in errors if e["loc"][0] == field_name]
    error = next((e for e in candidates if "." in _error_path(e)), candidates[0])

    path = _error_path(error)
    if error["type"] == "missing":
        return InvalidArgumentsError(path, "Required")
    if "." in path:
        expected = "string"
    else:
        spec = next(f for f in definition.fields if f.name == field_name)
        expected = _EXPECTED[spec.type]
    received = _json_type(error["input"])
    return InvalidArgumentsError(path, f"Expected {expected}, received {received}")


def validate_arguments(
    definition: ToolDefinition,
    arguments: dict[str, Any] | None,
) -> ValidatedArguments:
    """Bind raw *arguments* to *definition*'s fields.

    Raises:
        InvalidArgumentsError: If a required field is absent or any
            field has the wrong type or shape.
    """
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        msg = f"Expected object, received {_json_type(arguments)}"
        raise InvalidArgumentsError("arguments", msg)

    try:
        model = definition.arguments_model.model_validate(arguments)
    except ValidationError as e:
        raise _first_error(definition, e) from e

    values: dict[str, Any] = {}
    for spec in definition.fields:
        value = getattr(model, spec.name)
        if spec.type is FieldType.STRING_OR_ARRAY and value is not None:
            value = normalize(value)
        values[spec.name] = value
    return ValidatedArguments(values)
