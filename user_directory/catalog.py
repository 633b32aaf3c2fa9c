"""
Capability catalog for a connected MCP server.

Holds the tools, prompts, resources and resource templates discovered at
startup and turns them into menu choices for the terminal session.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List
from urllib.parse import quote


NO_DESCRIPTION = "No description available"

# Matches {param} placeholders in a URI template
_PLACEHOLDER_RE = re.compile(r"\{([^}]+)\}")

# Characters left unescaped by JavaScript's encodeURIComponent besides [A-Za-z0-9_.-~]
_URI_COMPONENT_SAFE = "!*'()"


class NotFound(Exception):
    """A selected tool, prompt or resource is not in the catalog."""

    def __init__(self, kind: str, key: str):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind.capitalize()} not found: {key}")


@dataclass
class Choice:
    """A single selectable menu entry."""
    name: str
    value: str
    description: str = NO_DESCRIPTION


def template_params(uri_template: str) -> List[str]:
    """Return the placeholder names of a URI template, in order."""
    return _PLACEHOLDER_RE.findall(uri_template)


def expand_uri_template(uri_template: str, values: Dict[str, str]) -> str:
    """
    Substitute percent-encoded values for every ``{param}`` placeholder.

    Args:
        uri_template: Template such as ``users://details/{userId}``
        values: Operator-supplied value for each placeholder

    Raises:
        KeyError: If a placeholder has no value
    """
    return _PLACEHOLDER_RE.sub(
        lambda m: quote(str(values[m.group(1)]), safe=_URI_COMPONENT_SAFE),
        uri_template,
    )


def _describe(descriptor: Any) -> str:
    return getattr(descriptor, "description", None) or NO_DESCRIPTION


def tool_label(tool: Any) -> str:
    """Display label for a tool: its annotation title if present, else its name."""
    annotations = getattr(tool, "annotations", None)
    title = getattr(annotations, "title", None) if annotations is not None else None
    return title or tool.name


@dataclass
class CapabilityCatalog:
    """
    Discovered server capabilities.

    Built once after the handshake; lookups raise NotFound for unknown keys.
    """
    tools: List[Any] = field(default_factory=list)
    prompts: List[Any] = field(default_factory=list)
    resources: List[Any] = field(default_factory=list)
    resource_templates: List[Any] = field(default_factory=list)

    def tool_choices(self) -> List[Choice]:
        return [
            Choice(name=tool_label(tool), value=tool.name, description=_describe(tool))
            for tool in self.tools
        ]

    def prompt_choices(self) -> List[Choice]:
        return [
            Choice(name=prompt.name, value=prompt.name, description=_describe(prompt))
            for prompt in self.prompts
        ]

    def resource_choices(self) -> List[Choice]:
        """Static resources (by URI) followed by resource templates (by URI template)."""
        choices = [
            Choice(name=resource.name, value=str(resource.uri), description=_describe(resource))
            for resource in self.resources
        ]
        choices.extend(
            Choice(name=template.name, value=template.uriTemplate, description=_describe(template))
            for template in self.resource_templates
        )
        return choices

    def find_tool(self, name: str) -> Any:
        for tool in self.tools:
            if tool.name == name:
                return tool
        raise NotFound("tool", name)

    def find_prompt(self, name: str) -> Any:
        for prompt in self.prompts:
            if prompt.name == name:
                return prompt
        raise NotFound("prompt", name)

    def find_resource_uri(self, uri: str) -> str:
        """
        Resolve a selected resource value to a URI or URI template.

        Raises:
            NotFound: If neither a resource nor a template matches
        """
        for resource in self.resources:
            if str(resource.uri) == uri:
                return str(resource.uri)
        for template in self.resource_templates:
            if template.uriTemplate == uri:
                return template.uriTemplate
        raise NotFound("resource", uri)
