"""
User directory over the Model Context Protocol.

A FastMCP server exposing a JSON-file backed user list (resources, tools and
a prompt) and an interactive terminal client that can route free-text
queries through an LLM function-calling loop.
"""

__version__ = "1.0.0"
