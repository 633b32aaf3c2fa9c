"""
Base Agent class for the AI bridge.

All agents inherit from this class to get LangChain LLM setup and
logging utilities.
"""

from typing import Any, List, Optional

from langchain_core.messages import HumanMessage
from langchain_openai import ChatOpenAI

from user_directory.config import Settings, get_settings


class ProviderError(Exception):
    """The text-generation provider is not configured or a call failed."""


class BaseAgent:
    """
    Base class for all agents in the system.

    Provides:
    - Lazy LangChain LLM setup (a missing API key only fails on first use)
    - Logging utilities
    """

    def __init__(
        self,
        name: str,
        settings: Optional[Settings] = None,
        llm: Any = None,
    ):
        """
        Initialize the base agent.

        Args:
            name: Agent name used as log prefix
            settings: Runtime settings (read from the environment if omitted)
            llm: Chat model to use instead of building a ChatOpenAI one
        """
        self.name = name
        self.settings = settings or get_settings()
        self._llm = llm
        self._logs: List[str] = []

    @property
    def model_name(self) -> str:
        return self.settings.openai_model

    @property
    def llm(self) -> Any:
        """The chat model, created on first access."""
        if self._llm is None:
            if not self.settings.openai_api_key:
                raise ProviderError(
                    "OPENAI_API_KEY environment variable not set; add it to your .env file"
                )
            self._llm = ChatOpenAI(
                model=self.settings.openai_model,
                temperature=self.settings.temperature,
                api_key=self.settings.openai_api_key,
            )
        return self._llm

    def log(self, message: str) -> None:
        """Add a log entry."""
        log_entry = f"[{self.name}] {message}"
        self._logs.append(log_entry)
        print(log_entry)  # Also print for visibility

    def get_logs(self) -> List[str]:
        """Get all log entries."""
        return self._logs.copy()

    async def generate_text(self, prompt: str) -> str:
        """
        Send a single user prompt to the LLM and return its text.

        Raises:
            ProviderError: If the provider is not configured or the call fails
        """
        llm = self.llm
        try:
            response = await llm.ainvoke([HumanMessage(content=prompt)])
        except Exception as e:
            raise ProviderError(f"Text generation failed: {e}") from e
        return message_text(response)


def message_text(message: Any) -> str:
    """Flatten an AIMessage's content (string or content blocks) to text."""
    content = getattr(message, "content", "")
    if isinstance(content, str):
        return content
    parts = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)
