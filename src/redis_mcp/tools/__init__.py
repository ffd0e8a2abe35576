"""Tool schemas, argument normalization and the Redis tool table.

The registry built by :func:`build_registry` is the single source of
truth for both tool discovery and dispatch.
"""

from redis_mcp.tools.base import (
    FieldSpec,
    FieldType,
    ToolDefinition,
    ToolInvocation,
    ToolResult,
    ValidatedArguments,
)
from redis_mcp.tools.definitions import TOOL_DEFINITIONS, build_registry
from redis_mcp.tools.normalize import Items, Shape, normalize
from redis_mcp.tools.registry import SchemaRegistry
from redis_mcp.tools.validation import validate_arguments

__all__ = [
    "TOOL_DEFINITIONS",
    "FieldSpec",
    "FieldType",
    "Items",
    "SchemaRegistry",
    "Shape",
    "ToolDefinition",
    "ToolInvocation",
    "ToolResult",
    "ValidatedArguments",
    "build_registry",
    "normalize",
    "validate_arguments",
]
