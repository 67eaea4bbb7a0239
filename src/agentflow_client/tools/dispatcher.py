"""Execution of remote tool calls against the tool registry.

The dispatcher scans agent responses for remote_tool_call blocks, runs the
matching handlers and wraps every outcome in a tool-role message that can be
sent back to the agent service on the next turn.
"""

import asyncio
import inspect
import logging
from typing import Any

from agentflow_client.messages.types import Message, RemoteToolCallBlock, ToolResultBlock
from agentflow_client.tools.registry import ToolDescriptor, ToolRegistry

logger = logging.getLogger(__name__)


def _failed_result(call_id: str, error_message: str) -> Message:
    block = ToolResultBlock(
        call_id=call_id,
        output={"error": error_message},
        status="failed",
        is_error=True,
    )
    return Message.tool_message([block])


class ToolDispatcher:
    """Runs remote tool calls using the handlers of a ToolRegistry.

    Attributes:
        registry: The registry shared with the owning client
    """

    def __init__(self, registry: ToolRegistry | None = None) -> None:
        self.registry = registry if registry is not None else ToolRegistry()

    def register(self, descriptor: ToolDescriptor) -> None:
        self.registry.register(descriptor)

    def list_descriptors(self) -> list[dict[str, Any]]:
        return self.registry.list_descriptors()

    def list_for_node(self, node: str) -> list[ToolDescriptor]:
        return self.registry.list_for_node(node)

    async def execute_batch(self, messages: list[Message]) -> list[Message]:
        """Execute every remote tool call found in the given messages.

        Calls are collected in message order, then block order. Handlers run
        concurrently; the returned tool messages follow the order of the
        calls. A missing tool or a failing handler produces a failed result
        for that call only.

        Args:
            messages: Agent response messages to scan

        Returns:
            list[Message]: One single-block tool message per tool call
        """
        calls = [call for message in messages for call in message.remote_tool_calls()]
        if not calls:
            return []

        logger.debug(f"Executing {len(calls)} remote tool call(s)")
        results = await asyncio.gather(*(self._execute_call(call) for call in calls))
        return list(results)

    async def _execute_call(self, call: RemoteToolCallBlock) -> Message:
        descriptor = self.registry.get(call.name)
        if descriptor is None:
            logger.warning(f"Remote tool call for unknown tool: {call.name}")
            return _failed_result(call.id, f"Tool '{call.name}' not found")

        try:
            result = descriptor.handler(call.args)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            error_message = str(e) or type(e).__name__
            logger.warning(f"Tool '{call.name}' failed: {error_message}")
            return _failed_result(call.id, error_message)

        logger.debug(f"Tool '{call.name}' completed (call_id={call.id})")
        block = ToolResultBlock(
            call_id=call.id,
            output=result,
            status="completed",
            is_error=False,
        )
        return Message.tool_message([block])
