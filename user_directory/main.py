"""
Main entry point for the user directory MCP client.

Launches the MCP server as a subprocess, discovers its capabilities and runs
the interactive terminal menu.
"""

import argparse
import sys

import anyio
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from user_directory.agents import QueryAgent, SamplingAgent
from user_directory.config import Settings, get_settings
from user_directory.log_config import setup_logging
from user_directory.mcp.mcp_client import MCPClient
from user_directory.store_setup import ensure_store
from user_directory.ui.terminal_app import TerminalApp, TerminalPrompter


def check_environment(settings: Settings) -> bool:
    """Warn when the provider key is missing; AI features fail on first use."""
    if not settings.openai_api_key:
        print("=" * 60)
        print("WARNING: OPENAI_API_KEY environment variable not set.")
        print("Query, random-user and prompt generation will fail until it is.")
        print("=" * 60)
        print("\nTo fix this:")
        print("1. Copy .env.example to .env")
        print("2. Add your OpenAI API key to the .env file")
        print("=" * 60)
        return False
    return True


def check_store(settings: Settings) -> None:
    """Check that the users file exists, create it if not."""
    if ensure_store(settings.users_file):
        print(f"Users file not found. Initialized {settings.users_file}\n")
    else:
        print(f"Users file found: {settings.users_file}")


def build_app(settings: Settings, prompter: TerminalPrompter = None) -> TerminalApp:
    """Wire the MCP client, agents and prompter together."""
    prompter = prompter or TerminalPrompter()
    sampling_agent = SamplingAgent(confirm=prompter.confirm, settings=settings)
    client = MCPClient(
        settings.server_command,
        sampling_callback=sampling_agent,
        env={"MCP_USERS_FILE": settings.users_file},
    )
    query_agent = QueryAgent(client.call_tool, settings=settings)
    return TerminalApp(client, prompter, query_agent, sampling_agent)


async def run_terminal_mode(settings: Settings) -> int:
    """Run the client in interactive terminal mode."""
    app = build_app(settings)
    try:
        return await app.run()
    finally:
        await app.client.close()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Interactive MCP client for the user directory server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m user_directory.main                         Run with default settings
  python -m user_directory.main --users-file users.json Use another users file
  python -m user_directory.main --no-confirm            Run sampling prompts without asking
        """
    )
    parser.add_argument("--users-file", help="Path to the users JSON file")
    parser.add_argument(
        "--no-confirm",
        action="store_true",
        help="Do not ask before sending sampling prompts to the model"
    )
    args = parser.parse_args()

    settings = get_settings()
    if args.users_file:
        settings.users_file = args.users_file
    if args.no_confirm:
        settings.confirm_sampling = False

    setup_logging(settings.log_level)

    print("\nUser Directory MCP Client")
    print("=" * 60)

    check_environment(settings)
    check_store(settings)

    try:
        code = anyio.run(run_terminal_mode, settings)
    except KeyboardInterrupt:
        print("\n\nInterrupted. Goodbye!")
        code = 0
    sys.exit(code)


if __name__ == "__main__":
    main()
