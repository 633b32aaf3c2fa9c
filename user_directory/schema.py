"""
JSON schema helpers for exposing MCP tools to the LLM provider.
"""

from typing import Any, Dict


# String formats the provider's schema validator accepts
ALLOWED_STRING_FORMATS = frozenset({"date-time", "enum"})


def sanitize_json_schema(schema: Any) -> Any:
    """
    Remove unsupported ``format`` values from string schemas.

    The input is never mutated: mappings on the path from the root to any
    rewritten node are copied, everything else is shared with the original.
    Non-mapping input is returned unchanged.

    Args:
        schema: A JSON-Schema-like node

    Returns:
        The sanitized node
    """
    if not isinstance(schema, dict):
        return schema

    copy = dict(schema)

    if (
        copy.get("type") == "string"
        and "format" in copy
        and copy["format"] not in ALLOWED_STRING_FORMATS
    ):
        del copy["format"]

    properties = copy.get("properties")
    if isinstance(properties, dict):
        copy["properties"] = {
            key: sanitize_json_schema(value) for key, value in properties.items()
        }

    if "items" in copy:
        copy["items"] = sanitize_json_schema(copy["items"])

    return copy


def tool_to_function(tool: Any) -> Dict[str, Any]:
    """
    Build an OpenAI-style function definition for a discovered MCP tool.

    Args:
        tool: MCP Tool descriptor (name, description, inputSchema)
    """
    return {
        "type": "function",
        "function": {
            "name": tool.name,
            "description": tool.description or "No description available",
            "parameters": sanitize_json_schema(tool.inputSchema or {}),
        },
    }
