"""
Sampling Agent - answers server-issued ``sampling/createMessage`` requests.

Every text message in the request is shown to the operator, optionally
confirmed, and sent to the LLM. The generated texts are joined into one
assistant message. Non-text content is skipped, and a message the operator
declines contributes nothing.
"""

from typing import Any, Awaitable, Callable, List, Optional

from mcp.types import (
    INTERNAL_ERROR,
    CreateMessageRequestParams,
    CreateMessageResult,
    ErrorData,
    TextContent,
)

from .base_agent import BaseAgent, ProviderError


ConfirmFn = Callable[[str, bool], Awaitable[bool]]


class SamplingAgent(BaseAgent):
    """
    Bridges MCP sampling requests (and fetched prompts) to the LLM.
    """

    def __init__(self, confirm: Optional[ConfirmFn] = None, **kwargs):
        """
        Args:
            confirm: Coroutine ``(question, default) -> bool`` asked before
                each generation; when omitted every message is run
        """
        super().__init__(name="sampling", **kwargs)
        self.confirm = confirm

    async def run_message(self, message: Any) -> Optional[str]:
        """
        Generate a reply for a single prompt or sampling message.

        Returns:
            The generated text, or None for non-text content or a declined run
        """
        content = message.content
        if getattr(content, "type", None) != "text":
            return None

        print("Prompt -> ", content.text)
        if self.confirm is not None and self.settings.confirm_sampling:
            run = await self.confirm("Would you like to run this prompt?", True)
            if not run:
                return None

        return await self.generate_text(content.text)

    async def create_message(self, params: CreateMessageRequestParams) -> CreateMessageResult:
        texts: List[str] = []
        for message in params.messages:
            text = await self.run_message(message)
            if text is not None:
                texts.append(text)

        return CreateMessageResult(
            role="assistant",
            model=self.model_name,
            stopReason="endTurn",
            content=TextContent(type="text", text="\n".join(texts)),
        )

    async def __call__(self, context: Any, params: CreateMessageRequestParams):
        """``sampling_callback`` entry point for ``ClientSession``."""
        try:
            return await self.create_message(params)
        except ProviderError as e:
            self.log(f"Sampling failed: {e}")
            return ErrorData(code=INTERNAL_ERROR, message=str(e))
