"""
Tests for the MCP client: error wrapping, discovery and the stdio transport.

The integration tests launch the real server as a child process, the same
way the terminal client does.
"""

import json
import sys

import pytest
from mcp.shared.exceptions import McpError
from mcp.types import (
    ErrorData,
    ListPromptsResult,
    ListResourcesResult,
    ListToolsResult,
)

from user_directory.mcp.mcp_client import (
    MCPClient,
    MCPError,
    discover_capabilities,
    resource_text,
    tool_result_text,
)


SERVER_COMMAND = [sys.executable, "-m", "user_directory.mcp.mcp_server"]


def leaf_exceptions(exc):
    """Flatten (possibly nested) exception groups raised by a task group."""
    if hasattr(exc, "exceptions"):
        return [leaf for inner in exc.exceptions for leaf in leaf_exceptions(inner)]
    return [exc]


def server_error(message, code=-32602):
    return McpError(ErrorData(code=code, message=message))


class FailingSession:
    """Session whose every request is rejected by the server."""

    async def call_tool(self, name, arguments):
        raise server_error(f"Unknown tool: {name}")

    async def read_resource(self, uri):
        raise server_error(f"Unknown resource: {uri}", code=0)

    async def get_prompt(self, name, arguments):
        raise server_error(f"Unknown prompt: {name}")


class PartialSession:
    """Session where listing resource templates fails."""

    def __init__(self):
        self.listed = []

    async def list_tools(self):
        self.listed.append("tools")
        return ListToolsResult(tools=[])

    async def list_prompts(self):
        self.listed.append("prompts")
        return ListPromptsResult(prompts=[])

    async def list_resources(self):
        self.listed.append("resources")
        return ListResourcesResult(resources=[])

    async def list_resource_templates(self):
        raise server_error("Method not found", code=-32601)


class TestMCPClientErrors:
    """Server-reported errors surface as MCPError."""

    @pytest.fixture
    def client(self):
        client = MCPClient(["unused"])
        client.session = FailingSession()
        return client

    @pytest.mark.anyio
    async def test_call_tool(self, client):
        with pytest.raises(MCPError) as exc_info:
            await client.call_tool("delete-user", {})

        assert exc_info.value.code == -32602
        assert str(exc_info.value) == "MCP Error -32602: Unknown tool: delete-user"
        assert isinstance(exc_info.value.__cause__, McpError)

    @pytest.mark.anyio
    async def test_read_resource(self, client):
        with pytest.raises(MCPError) as exc_info:
            await client.read_resource("users://nope")

        assert str(exc_info.value) == "MCP Error 0: Unknown resource: users://nope"

    @pytest.mark.anyio
    async def test_get_prompt(self, client):
        with pytest.raises(MCPError) as exc_info:
            await client.get_prompt("missing", {})

        assert exc_info.value.message == "Unknown prompt: missing"

    @pytest.mark.anyio
    async def test_not_connected(self):
        with pytest.raises(MCPError) as exc_info:
            await MCPClient(["unused"]).call_tool("create-user", {})

        assert "not connected" in str(exc_info.value)

    def test_empty_command(self):
        with pytest.raises(ValueError):
            MCPClient([])


class TestDiscovery:
    """Startup discovery fails as a whole."""

    @pytest.mark.anyio
    async def test_one_failed_listing_fails_discovery(self):
        session = PartialSession()

        with pytest.raises(Exception) as exc_info:
            await discover_capabilities(session)

        errors = leaf_exceptions(exc_info.value)
        assert len(errors) == 1
        assert isinstance(errors[0], McpError)
        assert errors[0].error.message == "Method not found"


@pytest.mark.integration
class TestStdioClient:
    """Full round trip against the server running as a child process."""

    @pytest.mark.anyio
    async def test_discover_create_and_read(self, users_file, capfd):
        async with MCPClient(SERVER_COMMAND, env={"MCP_USERS_FILE": users_file}) as client:
            catalog = await client.discover()
            created = await client.call_tool(
                "create-user",
                {
                    "name": "Jane Smith",
                    "email": "jane.smith@example.com",
                    "address": "42 Oak Avenue, Shelbyville, USA",
                    "phone": "555-987-6543",
                },
            )
            users = json.loads(resource_text(await client.read_resource("users://all")))

            with pytest.raises(MCPError) as exc_info:
                await client.read_resource("users://nope")

        assert {t.name for t in catalog.tools} == {"create-user", "create-random-user"}
        assert tool_result_text(created) == "User Jane Smith with ID 2 created successfully!"
        assert [u["id"] for u in users] == [1, 2]
        assert "Unknown resource" in str(exc_info.value)
        # Server logs go to its stderr, which the client discards
        assert "Created user" not in capfd.readouterr().err

    @pytest.mark.anyio
    async def test_close_is_idempotent(self, users_file):
        client = MCPClient(SERVER_COMMAND, env={"MCP_USERS_FILE": users_file})
        await client.connect()
        await client.close()
        await client.close()

        assert client.session is None
