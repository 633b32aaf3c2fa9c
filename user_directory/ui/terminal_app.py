"""
Terminal interface for the user directory client.

A menu loop offering Query / Tools / Resources / Prompts / Exit. The session
starts in CONNECTING, moves to READY once the server handshake and capability
discovery succeed, and stays there until the operator picks Exit.
"""

from enum import Enum
from typing import Any, Dict, Optional, Sequence

import anyio
from loguru import logger

from user_directory.agents import ProviderError, QueryAgent, SamplingAgent
from user_directory.catalog import (
    CapabilityCatalog,
    Choice,
    NotFound,
    expand_uri_template,
    template_params,
)
from user_directory.mcp.mcp_client import MCPError, resource_text, tool_result_text


MENU_OPTIONS = ["Query", "Tools", "Resources", "Prompts", "Exit"]


class SessionState(Enum):
    CONNECTING = "connecting"
    READY = "ready"
    EXITING = "exiting"


class TerminalPrompter:
    """
    Reads operator input from stdin.

    ``input()`` runs in a worker thread so the event loop keeps serving the
    MCP session (e.g. sampling requests) while waiting for the operator.
    """

    async def _read(self, message: str) -> str:
        return await anyio.to_thread.run_sync(input, message)

    async def ask(self, message: str) -> str:
        return (await self._read(f"{message} ")).strip()

    async def confirm(self, message: str, default: bool = True) -> bool:
        hint = "Y/n" if default else "y/N"
        while True:
            answer = (await self._read(f"{message} ({hint}) ")).strip().lower()
            if not answer:
                return default
            if answer in ("y", "yes"):
                return True
            if answer in ("n", "no"):
                return False
            print("Please answer 'y' or 'n'.")

    async def select(self, message: str, choices: Sequence[Any]) -> str:
        """
        Show a numbered menu and return the selected value.

        Args:
            message: Menu title
            choices: Plain strings or Choice entries
        """
        entries = [c if isinstance(c, Choice) else Choice(name=c, value=c, description="") for c in choices]
        print(f"\n{message}")
        for i, entry in enumerate(entries, 1):
            line = f"  {i}. {entry.name}"
            if entry.description:
                line += f" - {entry.description}"
            print(line)

        while True:
            answer = (await self._read("> ")).strip()
            if answer.isdigit() and 1 <= int(answer) <= len(entries):
                return entries[int(answer) - 1].value
            # Accept the label or value typed out in full
            for entry in entries:
                if answer in (entry.name, entry.value):
                    return entry.value
            print(f"Please enter a number between 1 and {len(entries)}.")


class TerminalApp:
    """
    Interactive session over a connected MCP client.
    """

    def __init__(
        self,
        client: Any,
        prompter: Any,
        query_agent: QueryAgent,
        sampling_agent: SamplingAgent,
    ):
        """
        Args:
            client: MCPClient (or compatible) used for all server calls
            prompter: Source of operator input (ask / confirm / select)
            query_agent: Agent answering free-text queries
            sampling_agent: Agent generating text for prompts
        """
        self.client = client
        self.prompter = prompter
        self.query_agent = query_agent
        self.sampling_agent = sampling_agent
        self.catalog: Optional[CapabilityCatalog] = None
        self.state = SessionState.CONNECTING

    async def start(self) -> None:
        """Connect and discover capabilities; any failure aborts startup."""
        self.state = SessionState.CONNECTING
        await self.client.connect()
        self.catalog = await self.client.discover()
        self.state = SessionState.READY
        print("You are connected")

    async def run(self) -> int:
        """
        Run the menu loop until Exit.

        Returns:
            Process exit code (0 on Exit or end of input)
        """
        if self.state is not SessionState.READY:
            await self.start()

        while self.state is SessionState.READY:
            try:
                option = await self.prompter.select("What would you like to do?", MENU_OPTIONS)
                await self.dispatch(option)
            except NotFound as e:
                logger.error("{}", e)
                print(f"\nError: {e}")
            except (ProviderError, MCPError) as e:
                print(f"\nError: {e}")
            except EOFError:
                # stdin closed; treat like Exit
                print("\nInput closed. Goodbye!")
                self.state = SessionState.EXITING
        return 0

    async def dispatch(self, option: str) -> None:
        if option == "Query":
            await self.handle_query()
        elif option == "Tools":
            await self.handle_tools()
        elif option == "Resources":
            await self.handle_resources()
        elif option == "Prompts":
            await self.handle_prompts()
        elif option == "Exit":
            self.state = SessionState.EXITING

    # ---------- Query ----------

    async def handle_query(self) -> None:
        query = await self.prompter.ask("Enter your query:")
        response = await self.query_agent.answer(query, self.catalog.tools)
        print("Query response:", response)

    # ---------- Tools ----------

    async def handle_tools(self) -> None:
        tool_name = await self.prompter.select(
            "Select a tool to execute", self.catalog.tool_choices()
        )
        tool = self.catalog.find_tool(tool_name)
        await self.handle_tool(tool)

    async def handle_tool(self, tool: Any) -> None:
        print(f"Executing tool: {tool.name}")
        args: Dict[str, str] = {}
        properties = (tool.inputSchema or {}).get("properties") or {}
        for key, schema in properties.items():
            value_type = schema.get("type", "string") if isinstance(schema, dict) else "string"
            args[key] = await self.prompter.ask(f"Enter value for {key} ({value_type}):")

        result = await self.client.call_tool(tool.name, args)
        print("Tool response:", tool_result_text(result))

    # ---------- Resources ----------

    async def handle_resources(self) -> None:
        selected = await self.prompter.select(
            "Select a resource to execute", self.catalog.resource_choices()
        )
        uri = self.catalog.find_resource_uri(selected)
        await self.handle_resource(uri)

    async def handle_resource(self, uri: str) -> None:
        print(f"Executing resource: {uri}")
        values: Dict[str, str] = {}
        for param in template_params(uri):
            if param not in values:
                values[param] = await self.prompter.ask(f"Enter value for parameter {param}:")
        final_uri = expand_uri_template(uri, values)

        result = await self.client.read_resource(final_uri)
        print("Resource response:", resource_text(result))

    # ---------- Prompts ----------

    async def handle_prompts(self) -> None:
        prompt_name = await self.prompter.select(
            "Select a prompt to execute", self.catalog.prompt_choices()
        )
        prompt = self.catalog.find_prompt(prompt_name)
        await self.handle_prompt(prompt)

    async def handle_prompt(self, prompt: Any) -> None:
        print(f"Executing prompt: {prompt.name}")
        args: Dict[str, str] = {}
        for arg in prompt.arguments or []:
            args[arg.name] = await self.prompter.ask(f"Enter value for {arg.name}:")

        result = await self.client.get_prompt(prompt.name, args)
        for message in result.messages:
            print("Prompt Response -> ", await self.sampling_agent.run_message(message))
