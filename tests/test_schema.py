"""
Tests for the JSON schema sanitizer used before exposing tools to the model.
"""

import copy
from types import SimpleNamespace

import pytest

from user_directory.schema import sanitize_json_schema, tool_to_function


SCHEMAS = [
    None,
    "string",
    42,
    {},
    {"type": "string", "format": "email"},
    {"type": "string", "format": "date-time"},
    {"type": "integer", "format": "int64"},
    {
        "type": "object",
        "properties": {
            "email": {"type": "string", "format": "email"},
            "created": {"type": "string", "format": "date-time"},
            "tags": {"type": "array", "items": {"type": "string", "format": "uuid"}},
            "nested": {
                "type": "object",
                "properties": {"url": {"type": "string", "format": "uri"}},
            },
        },
        "required": ["email"],
    },
]


class TestSanitizeJsonSchema:
    """Format stripping, recursion and purity."""

    @pytest.mark.parametrize("schema", SCHEMAS)
    def test_idempotent(self, schema):
        once = sanitize_json_schema(schema)
        assert sanitize_json_schema(once) == once

    @pytest.mark.parametrize("schema", SCHEMAS)
    def test_does_not_mutate_input(self, schema):
        original = copy.deepcopy(schema)
        sanitize_json_schema(schema)
        assert schema == original

    def test_non_objects_returned_unchanged(self):
        assert sanitize_json_schema(None) is None
        assert sanitize_json_schema("x") == "x"
        assert sanitize_json_schema([1, 2]) == [1, 2]

    @pytest.mark.parametrize("fmt", ["date-time", "enum"])
    def test_allowed_formats_kept(self, fmt):
        assert sanitize_json_schema({"type": "string", "format": fmt}) == {
            "type": "string",
            "format": fmt,
        }

    @pytest.mark.parametrize("fmt", ["email", "uuid", "uri", "ipv4"])
    def test_other_string_formats_removed(self, fmt):
        assert sanitize_json_schema({"type": "string", "format": fmt}) == {"type": "string"}

    def test_non_string_format_kept(self):
        schema = {"type": "number", "format": "double"}
        assert sanitize_json_schema(schema) == schema

    def test_nested_properties(self):
        schema = {"type": "object", "properties": {"a": {"type": "string", "format": "uuid"}}}

        assert sanitize_json_schema(schema) == {
            "type": "object",
            "properties": {"a": {"type": "string"}},
        }

    def test_array_items(self):
        schema = {"type": "array", "items": {"type": "string", "format": "email"}}

        assert sanitize_json_schema(schema) == {"type": "array", "items": {"type": "string"}}

    def test_deep_nesting(self):
        result = sanitize_json_schema(SCHEMAS[-1])

        props = result["properties"]
        assert props["email"] == {"type": "string"}
        assert props["created"]["format"] == "date-time"
        assert props["tags"]["items"] == {"type": "string"}
        assert props["nested"]["properties"]["url"] == {"type": "string"}
        assert result["required"] == ["email"]


class TestToolToFunction:
    """OpenAI-style function definitions built from MCP tools."""

    def test_tool_to_function(self):
        tool = SimpleNamespace(
            name="create-user",
            description="Create a new user in the database",
            inputSchema={
                "type": "object",
                "properties": {"email": {"type": "string", "format": "email"}},
            },
        )

        function = tool_to_function(tool)

        assert function["type"] == "function"
        assert function["function"]["name"] == "create-user"
        assert function["function"]["parameters"]["properties"]["email"] == {"type": "string"}

    def test_missing_description(self):
        tool = SimpleNamespace(name="t", description=None, inputSchema=None)

        function = tool_to_function(tool)["function"]

        assert function["description"] == "No description available"
        assert function["parameters"] == {}
