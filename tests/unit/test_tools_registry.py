"""Tests for the schema registry."""

from __future__ import annotations

import pytest

from redis_mcp.core.errors import UnknownToolError
from redis_mcp.tools.base import FieldSpec, FieldType, ToolDefinition
from redis_mcp.tools.registry import SchemaRegistry


def _definition(name: str) -> ToolDefinition:
    return ToolDefinition(
        name=name,
        description=f"{name} tool",
        fields=(FieldSpec("key", FieldType.STRING),),
        build=lambda a: ("GET", a["key"]),
        render=lambda a, r: str(r),
    )


class TestRegister:
    def test_register_and_get(self):
        registry = SchemaRegistry()
        definition = _definition("get")
        registry.register(definition)
        assert registry.get("get") is definition
        assert "get" in registry
        assert len(registry) == 1

    def test_duplicate_raises(self):
        registry = SchemaRegistry([_definition("get")])
        with pytest.raises(ValueError, match="already registered"):
            registry.register(_definition("get"))

    def test_duplicate_in_constructor_raises(self):
        with pytest.raises(ValueError, match="already registered"):
            SchemaRegistry([_definition("a"), _definition("a")])


class TestLookup:
    def test_unknown_raises(self):
        registry = SchemaRegistry([_definition("get")])
        with pytest.raises(UnknownToolError, match="Unknown tool: flushall") as exc_info:
            registry.get("flushall")
        assert exc_info.value.name == "flushall"

    def test_lookup_is_case_sensitive(self):
        registry = SchemaRegistry([_definition("get")])
        assert "GET" not in registry
        with pytest.raises(UnknownToolError):
            registry.get("GET")


class TestListing:
    def test_registration_order_kept(self):
        registry = SchemaRegistry([_definition(n) for n in ("zeta", "alpha", "mid")])
        assert registry.list_names() == ["zeta", "alpha", "mid"]
        assert [d.name for d in registry.list_definitions()] == ["zeta", "alpha", "mid"]

    def test_empty(self):
        registry = SchemaRegistry()
        assert registry.list_definitions() == []
        assert len(registry) == 0
