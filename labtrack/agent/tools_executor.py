"""
Tool Executor
=============

Runs the tool calls the model requests in one generation round.

Round protocol:
    1. Parse the tool calls from the model's response
    2. Check every requested name against the request's registry; any
       unknown name fails the whole round before anything runs
    3. Execute the calls one at a time, in the order requested
    4. Return one result per call; a failed call never stops its siblings

Once a tool has started it runs to completion, even if the request that
asked for it is cancelled. A write that has begun is never abandoned halfway.
"""

import asyncio
import json
from dataclasses import dataclass
from typing import Any

from labtrack.tools import ToolRegistry, ToolResult, UnknownToolError
from labtrack.utils.logger import Logger

logger = Logger("ToolExecutor")


@dataclass
class ToolCall:
    """
    A parsed tool call from the model.

    Attributes:
        id: The tool call ID (for matching results)
        name: The tool name
        arguments: Parsed arguments dict
    """
    id: str
    name: str
    arguments: dict[str, Any]
    raw_arguments: str = "{}"

    def to_openai_dict(self) -> dict:
        """This call as it appears in the assistant message that requested it."""
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.raw_arguments}
        }


@dataclass
class ToolCallResult:
    """
    Result of executing a tool call.

    Attributes:
        tool_call_id: The original tool call ID
        name: The tool name
        result: The tool result
    """
    tool_call_id: str
    name: str
    result: ToolResult

    def to_openai_message(self) -> dict:
        """Format as a `tool` role message."""
        return {
            "role": "tool",
            "tool_call_id": self.tool_call_id,
            "content": self.result.to_message()
        }


class ToolExecutor:
    """
    Executes the tool calls of a generation round against a registry.

    Example:
        executor = ToolExecutor()

        tool_calls = executor.parse_tool_calls(response)
        results = await executor.execute_all(registry, tool_calls)

        messages.append(executor.assistant_message(response, tool_calls))
        messages.extend(result.to_openai_message() for result in results)
    """

    def parse_tool_calls(self, response: Any) -> list[ToolCall]:
        """
        Parse tool calls from a chat completion.

        Arguments that are not a JSON object are replaced with {}, which then
        fails validation and is reported back to the model.
        """
        message = response.choices[0].message
        if not message.tool_calls:
            return []

        tool_calls = []
        for tc in message.tool_calls:
            raw_arguments = tc.function.arguments or "{}"
            try:
                arguments = json.loads(raw_arguments)
            except json.JSONDecodeError as e:
                logger.error(f"Failed to parse arguments for {tc.function.name}", e)
                arguments = {}

            if not isinstance(arguments, dict):
                logger.warning(f"Arguments for {tc.function.name} are not an object")
                arguments = {}

            tool_calls.append(ToolCall(
                id=tc.id,
                name=tc.function.name,
                arguments=arguments,
                raw_arguments=raw_arguments
            ))

        logger.debug(f"Parsed {len(tool_calls)} tool calls")
        return tool_calls

    def assistant_message(self, response: Any, tool_calls: list[ToolCall]) -> dict:
        """The assistant message that requested `tool_calls`, for the next round."""
        return {
            "role": "assistant",
            "content": response.choices[0].message.content,
            "tool_calls": [tool_call.to_openai_dict() for tool_call in tool_calls]
        }

    def check_names(self, registry: ToolRegistry, tool_calls: list[ToolCall]) -> None:
        """
        Make sure every requested tool exists.

        Raises:
            UnknownToolError: Naming every requested tool that is missing
        """
        unknown = [tc.name for tc in tool_calls if not registry.has(tc.name)]
        if unknown:
            raise UnknownToolError(unknown, registry.list_names())

    async def execute_one(self, registry: ToolRegistry, tool_call: ToolCall) -> ToolCallResult:
        """
        Execute a single tool call.

        The execution is shielded: cancelling the caller does not cancel a
        tool that has already started.
        """
        logger.info(f"Executing tool: {tool_call.name}")
        logger.debug(f"Arguments for {tool_call.name}", tool_call.arguments)

        task = asyncio.ensure_future(registry.execute(tool_call.name, tool_call.arguments))
        result = await asyncio.shield(task)

        if result.success:
            logger.debug(f"Tool {tool_call.name} succeeded")
        else:
            logger.warning(f"Tool {tool_call.name} failed: {result.error}")

        return ToolCallResult(
            tool_call_id=tool_call.id,
            name=tool_call.name,
            result=result
        )

    async def execute_all(
        self,
        registry: ToolRegistry,
        tool_calls: list[ToolCall]
    ) -> list[ToolCallResult]:
        """
        Execute the calls of one round sequentially.

        Returns:
            One ToolCallResult per call, in the same order

        Raises:
            UnknownToolError: If any requested name is missing; nothing runs
        """
        self.check_names(registry, tool_calls)

        results = []
        for tool_call in tool_calls:
            results.append(await self.execute_one(registry, tool_call))
        return results
