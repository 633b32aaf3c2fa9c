"""
Main entry point for running the user directory components.

This script provides commands to run:
- The MCP server (Model Context Protocol) over stdio or HTTP
- The interactive terminal client
- A reset of the users file to its sample data
"""

import argparse
import os
import sys

# Add project root to path
project_root = os.path.dirname(os.path.abspath(__file__))
if project_root not in sys.path:
    sys.path.insert(0, project_root)


def run_mcp_server(transport: str = "stdio", host: str = "127.0.0.1", port: int = 8080, users_file: str = None):
    """Run the MCP server."""
    from user_directory.mcp.mcp_server import run_server, run_http_server

    if transport == "stdio":
        # stdout carries the protocol; announce on stderr
        print("Starting MCP server with stdio transport...", file=sys.stderr)
        run_server(users_file=users_file)
    elif transport == "http":
        print(f"Starting MCP server with HTTP transport at http://{host}:{port}/mcp")
        run_http_server(host=host, port=port, users_file=users_file)
    else:
        print(f"Unknown transport: {transport}. Use 'stdio' or 'http'")
        sys.exit(1)


def main():
    """Main entry point with CLI argument parsing."""
    parser = argparse.ArgumentParser(
        description="Run the user directory MCP server or its terminal client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run MCP server with stdio (for MCP clients)
  python run_servers.py mcp

  # Run MCP server with HTTP transport
  python run_servers.py mcp --transport http --port 8080

  # Run the interactive client (launches its own stdio server)
  python run_servers.py client

  # Reset the users file to the sample data
  python run_servers.py setup
"""
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # MCP server command
    mcp_parser = subparsers.add_parser("mcp", help="Run the MCP server")
    mcp_parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport type (default: stdio)"
    )
    mcp_parser.add_argument("--host", default="127.0.0.1", help="Host for HTTP transport")
    mcp_parser.add_argument("--port", type=int, default=8080, help="Port for HTTP transport")
    mcp_parser.add_argument("--users-file", help="Path to the users JSON file")

    subparsers.add_parser("client", help="Run the interactive terminal client")
    subparsers.add_parser("setup", help="Reset the users file to sample data")

    args, rest = parser.parse_known_args()

    if args.command == "mcp":
        run_mcp_server(
            transport=args.transport,
            host=args.host,
            port=args.port,
            users_file=args.users_file,
        )
    elif args.command == "client":
        from user_directory.main import main as client_main

        sys.argv = [sys.argv[0], *rest]
        client_main()
    elif args.command == "setup":
        from user_directory.store_setup import main as setup_main

        setup_main()
    else:
        parser.print_help()
        print("\nNo command specified. Use one of: mcp, client, setup")
        sys.exit(1)


if __name__ == "__main__":
    main()
