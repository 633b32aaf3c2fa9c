"""
Query Agent - answers free-text queries using the server's tools.

The discovered MCP tools are registered with the model as callable
functions (with sanitized input schemas). Each tool call the model makes is
executed through the MCP client and its text result is fed back, until the
model produces a final answer or the step limit is reached.
"""

from typing import Any, Awaitable, Callable, Dict, List

from langchain_core.messages import HumanMessage, ToolMessage

from user_directory.mcp.mcp_client import tool_result_text
from user_directory.schema import tool_to_function
from .base_agent import BaseAgent, ProviderError, message_text


NO_RESPONSE = "No response generated"

ToolExecutor = Callable[[str, Dict[str, Any]], Awaitable[Any]]


class QueryAgent(BaseAgent):
    """
    Function-calling loop over the MCP tool set.
    """

    def __init__(self, call_tool: ToolExecutor, **kwargs):
        """
        Args:
            call_tool: Coroutine ``(name, arguments) -> CallToolResult``
        """
        super().__init__(name="query", **kwargs)
        self.call_tool = call_tool

    async def answer(self, query: str, tools: List[Any]) -> str:
        """
        Run a query through the model with the tools available.

        Returns:
            The model's final text, else the text of the first tool result,
            else a fixed fallback
        """
        functions = [tool_to_function(tool) for tool in tools]
        llm = self.llm.bind_tools(functions) if functions else self.llm

        messages: List[Any] = [HumanMessage(content=query)]
        tool_results: List[str] = []
        text = ""

        for _ in range(max(1, self.settings.max_tool_steps)):
            try:
                response = await llm.ainvoke(messages)
            except Exception as e:
                raise ProviderError(f"Query failed: {e}") from e
            messages.append(response)
            text = message_text(response)

            tool_calls = getattr(response, "tool_calls", None) or []
            if not tool_calls:
                break

            for call in tool_calls:
                self.log(f"Model called tool '{call['name']}' with {call.get('args', {})}")
                result = await self.call_tool(call["name"], call.get("args") or {})
                result_text = tool_result_text(result)
                tool_results.append(result_text)
                messages.append(ToolMessage(content=result_text, tool_call_id=call["id"]))

        first_result = tool_results[0] if tool_results else ""
        return text or first_result or NO_RESPONSE
