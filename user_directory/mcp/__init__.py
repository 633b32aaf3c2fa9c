"""
MCP (Model Context Protocol) Module.

Server and client for the user directory, both built on the official `mcp` SDK.

### MCP Server
Run over stdio (what the terminal client launches):
    python run_servers.py mcp

Or over streamable HTTP:
    python run_servers.py mcp --transport http --port 8080

The server implements:
- resources: users://all, users://details/{userId}
- tools: create-user, create-random-user (uses client sampling)
- prompts: generate-fake-user

### MCP Client
    from user_directory.mcp import MCPClient

    async with MCPClient(command, sampling_callback=agent) as client:
        catalog = await client.discover()
        result = await client.call_tool("create-user", {...})
"""

from .mcp_server import (
    create_server,
    run_server,
    run_http_server,
    extract_json,
)

from .mcp_client import (
    MCPClient,
    MCPError,
    ProtocolError,
    discover_capabilities,
    resource_text,
    tool_result_text,
)

__all__ = [
    # MCP Server
    "create_server",
    "run_server",
    "run_http_server",
    "extract_json",
    # MCP Client
    "MCPClient",
    "MCPError",
    "ProtocolError",
    "discover_capabilities",
    "resource_text",
    "tool_result_text",
]
