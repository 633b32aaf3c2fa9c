"""
Agents Module for the user directory client.

Each agent uses LangChain for LLM interactions:
- QueryAgent answers free-text queries by calling MCP tools
- SamplingAgent answers the server's sampling requests
"""

from .base_agent import BaseAgent, ProviderError
from .query_agent import QueryAgent, NO_RESPONSE
from .sampling_agent import SamplingAgent

__all__ = [
    "BaseAgent",
    "ProviderError",
    "QueryAgent",
    "NO_RESPONSE",
    "SamplingAgent",
]
