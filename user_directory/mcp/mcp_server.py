"""
MCP Server for the user directory, built on the official MCP Python SDK (FastMCP).

Exposes:
- Resources: ``users://all`` and ``users://details/{userId}``
- Tools: ``create-user`` and ``create-random-user`` (the latter asks the
  client for a completion via sampling)
- Prompts: ``generate-fake-user``

The server is built by ``create_server()`` around an explicit UserStore so
several instances (e.g. under test) can coexist in one process.
"""

import json
from typing import Annotated, Any, List, Optional

from loguru import logger
from mcp.server.fastmcp import Context, FastMCP
from mcp.server.fastmcp.prompts import base
from mcp.shared.exceptions import McpError
from mcp.types import SamplingMessage, TextContent, ToolAnnotations
from pydantic import Field

from user_directory.store import StoreError, UserStore


SERVER_NAME = "mcp-server"
SERVER_VERSION = "1.0.0"

RANDOM_USER_MAX_TOKENS = 1024

RANDOM_USER_PROMPT = """Generate a fake random user with only the following fields:
  - name: full name as a string
  - email: valid email address
  - address: full address as a string
  - phone: phone number as a string

Return the result as a pure JSON object (not inside markdown or text). Do not include any extra fields. Example:

{
  "name": "John Doe",
  "email": "john.doe@example.com",
  "address": "1234 Elm Street, Springfield, USA",
  "phone": "555-123-4567"
}"""

FAKE_USER_PROMPT = (
    'Generate a fake user with the name "{name}". Provide the user realistic '
    "details including email, address, and phone number."
)


def _to_json(data: Any) -> str:
    return json.dumps(data, indent=2)


def extract_json(text: str) -> Any:
    """
    Parse model output that may be wrapped in a markdown code fence.

    Only a leading ```` ```json ```` and a trailing ```` ``` ```` are removed;
    anything else that is not valid JSON raises ``json.JSONDecodeError``.
    """
    cleaned = text.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[len("```json"):]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-len("```")]
    return json.loads(cleaned.strip())


def create_server(store: UserStore) -> FastMCP:
    """
    Create the MCP server bound to a user store.

    Args:
        store: Store backing the resources and tools

    Returns:
        A FastMCP instance ready to run on any transport
    """
    mcp = FastMCP(
        SERVER_NAME,
        instructions="""
        User directory MCP Server providing:
        - Listing all users and looking up a user by ID
        - Creating users, either from explicit fields or generated by the client's model
        - A prompt for generating a fake user
        """,
    )
    # FastMCP takes no version argument and would report the SDK version
    mcp._mcp_server.version = SERVER_VERSION

    @mcp.resource(
        "users://all",
        name="users",
        title="Users",
        description="A list of all users in the database",
        mime_type="application/json",
    )
    def all_users() -> str:
        """Return every user as a JSON array."""
        return _to_json(store.list_users())

    @mcp.resource(
        "users://details/{userId}",
        name="user-details",
        title="User Details",
        description="Get user's details from database",
        mime_type="application/json",
    )
    def user_details(userId: str) -> str:
        """Return one user as JSON, or an error object if the ID is unknown."""
        try:
            user_id = int(userId)
        except ValueError:
            user = None
        else:
            user = store.get_user(user_id)

        if user is None:
            return _to_json({"error": "User not found"})
        return _to_json(user)

    @mcp.prompt(
        name="generate-fake-user",
        description="Generate a fake user based on given name",
    )
    def generate_fake_user(name: str) -> List[base.Message]:
        return [base.UserMessage(FAKE_USER_PROMPT.format(name=name))]

    @mcp.tool(
        name="create-user",
        description="Create a new user in the database",
        annotations=ToolAnnotations(
            title="Create User",
            readOnlyHint=False,
            destructiveHint=False,
            idempotentHint=False,
            openWorldHint=True,
        ),
    )
    def create_user(
        name: str,
        email: Annotated[str, Field(json_schema_extra={"format": "email"})],
        address: str,
        phone: str,
    ) -> str:
        """Create a user from explicit fields."""
        try:
            user_id = store.create_user(
                {"name": name, "email": email, "address": address, "phone": phone}
            )
        except StoreError as e:
            logger.warning("create-user failed: {}", e)
            return f"Error creating user: {e}"
        return f"User {name} with ID {user_id} created successfully!"

    @mcp.tool(
        name="create-random-user",
        description="Create a random user with fake data",
        annotations=ToolAnnotations(
            title="Create Random User",
            readOnlyHint=False,
            destructiveHint=False,
            idempotentHint=False,
            openWorldHint=True,
        ),
    )
    async def create_random_user(ctx: Context) -> str:
        """Ask the client's model for a fake user and store it."""
        try:
            result = await ctx.session.create_message(
                messages=[
                    SamplingMessage(
                        role="user",
                        content=TextContent(type="text", text=RANDOM_USER_PROMPT),
                    )
                ],
                max_tokens=RANDOM_USER_MAX_TOKENS,
            )
        except McpError as e:
            logger.warning("Sampling request failed: {}", e)
            return f"Error creating random user: {e}"

        content = result.content
        if content.type != "text":
            return f"Failed to generate user: Expected text content, got {content.type}"

        try:
            fake_user = extract_json(content.text)
            user_id = store.create_user(fake_user)
        except (ValueError, StoreError) as e:
            logger.warning("create-random-user failed: {}", e)
            return f"Error creating random user: {e}"
        return f"Random user created successfully with ID {user_id}!"

    return mcp


def build_default_server(users_file: Optional[str] = None) -> FastMCP:
    """Create a server for the configured users file, seeding it if missing."""
    from user_directory.config import get_settings
    from user_directory.store_setup import ensure_store

    path = users_file or get_settings().users_file
    ensure_store(path)
    return create_server(UserStore(path))


def run_server(users_file: Optional[str] = None):
    """Run the MCP server with stdio transport (default for MCP)."""
    from user_directory.log_config import setup_logging

    setup_logging()
    build_default_server(users_file).run(transport="stdio")


def run_http_server(host: str = "127.0.0.1", port: int = 8080, users_file: Optional[str] = None):
    """Run the MCP server with streamable HTTP transport."""
    import uvicorn
    from user_directory.log_config import setup_logging

    setup_logging()
    # FastMCP.run() doesn't accept host/port directly for streamable-http
    app = build_default_server(users_file).streamable_http_app()
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
