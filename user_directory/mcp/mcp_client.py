"""
MCP Client for the user directory server.

Launches the server as a child process and talks to it over stdio using the
official MCP Python SDK. The connection stays open for the whole terminal
session; discovery lists tools, prompts, resources and resource templates
concurrently and fails as a whole if any listing fails.
"""

import json
import os
from contextlib import AsyncExitStack
from typing import Any, Dict, List, Optional

import anyio
from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client
from mcp.shared.exceptions import McpError
from mcp.types import CallToolResult, Implementation, ReadResourceResult

from user_directory.catalog import CapabilityCatalog


CLIENT_INFO = Implementation(name="MCP Client", version="1.0.0")


class MCPError(Exception):
    """
    Exception raised when the MCP server returns a protocol-level error.
    """

    def __init__(self, message: str, code: Optional[int] = None):
        self.code = code
        self.message = message
        super().__init__(f"MCP Error {code}: {message}" if code is not None else message)

    @classmethod
    def from_mcp(cls, error: McpError) -> "MCPError":
        return cls(error.error.message, error.error.code)


class ProtocolError(MCPError):
    """A response from the server did not have the expected shape."""


def tool_result_text(result: CallToolResult) -> str:
    """
    Return the text of the first content block of a tool result.

    Unexpected content is reported as a text line instead of raising.
    """
    if not result.content:
        return "Tool returned no content"
    first = result.content[0]
    if first.type != "text":
        return f"Unexpected tool content type: {first.type}"
    return first.text


def resource_text(result: ReadResourceResult) -> str:
    """
    Return the first text content of a resource, re-indented if it is JSON.

    Raises:
        ProtocolError: If the resource has no text content
    """
    if not result.contents:
        raise ProtocolError("Resource returned no contents")
    text = getattr(result.contents[0], "text", None)
    if text is None:
        raise ProtocolError("Expected text resource contents, got binary data")
    try:
        return json.dumps(json.loads(text), indent=2)
    except json.JSONDecodeError:
        return text


class MCPClient:
    """
    MCP Client that launches the server over stdio and keeps one session open.

    Usage:
        async with MCPClient(command, sampling_callback=cb) as client:
            catalog = await client.discover()
            result = await client.call_tool("create-user", {...})
    """

    def __init__(
        self,
        command: List[str],
        sampling_callback: Any = None,
        env: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize the MCP client.

        Args:
            command: argv used to launch the server process
            sampling_callback: Handler for server-issued sampling requests
            env: Extra environment variables for the server process
        """
        if not command:
            raise ValueError("Server command must not be empty")
        self.command = command
        self.sampling_callback = sampling_callback
        self.env = env
        self.session: Optional[ClientSession] = None
        self._stack: Optional[AsyncExitStack] = None

    async def connect(self) -> None:
        """Start the server process and complete the MCP handshake."""
        if self._stack is not None:
            return
        stack = AsyncExitStack()
        try:
            params = StdioServerParameters(
                command=self.command[0],
                args=self.command[1:],
                env={**os.environ, **self.env} if self.env else None,
            )
            # Server stderr is discarded
            errlog = stack.enter_context(open(os.devnull, "w"))
            read_stream, write_stream = await stack.enter_async_context(
                stdio_client(params, errlog=errlog)
            )
            session = await stack.enter_async_context(
                ClientSession(
                    read_stream,
                    write_stream,
                    sampling_callback=self.sampling_callback,
                    client_info=CLIENT_INFO,
                )
            )
            await session.initialize()
        except BaseException:
            await stack.aclose()
            raise
        self._stack = stack
        self.session = session

    async def close(self) -> None:
        if self._stack is not None:
            await self._stack.aclose()
        self._stack = None
        self.session = None

    async def __aenter__(self) -> "MCPClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _require_session(self) -> ClientSession:
        if self.session is None:
            raise MCPError("Client is not connected")
        return self.session

    async def discover(self) -> CapabilityCatalog:
        """List tools, prompts, resources and resource templates concurrently."""
        return await discover_capabilities(self._require_session())

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> CallToolResult:
        try:
            return await self._require_session().call_tool(name, arguments or {})
        except McpError as e:
            raise MCPError.from_mcp(e) from e

    async def read_resource(self, uri: str) -> ReadResourceResult:
        try:
            return await self._require_session().read_resource(uri)
        except McpError as e:
            raise MCPError.from_mcp(e) from e

    async def get_prompt(self, name: str, arguments: Optional[Dict[str, str]] = None) -> Any:
        try:
            return await self._require_session().get_prompt(name, arguments or {})
        except McpError as e:
            raise MCPError.from_mcp(e) from e


async def discover_capabilities(session: ClientSession) -> CapabilityCatalog:
    """
    Fan out the four listing calls and wait for all of them.

    Any failure cancels the others and propagates.
    """
    results: Dict[str, Any] = {}

    async def fetch(key: str, call) -> None:
        results[key] = await call()

    async with anyio.create_task_group() as tg:
        tg.start_soon(fetch, "tools", session.list_tools)
        tg.start_soon(fetch, "prompts", session.list_prompts)
        tg.start_soon(fetch, "resources", session.list_resources)
        tg.start_soon(fetch, "templates", session.list_resource_templates)

    return CapabilityCatalog(
        tools=list(results["tools"].tools),
        prompts=list(results["prompts"].prompts),
        resources=list(results["resources"].resources),
        resource_templates=list(results["templates"].resourceTemplates),
    )
