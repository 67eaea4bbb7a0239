"""Shared skeleton of the buffered and streaming turn controllers."""

import logging
from typing import Any

from agentflow_client.messages.serializer import serialize_messages
from agentflow_client.messages.types import Message
from agentflow_client.models.invoke import InvokeRequest
from agentflow_client.runs.types import RunAccumulator
from agentflow_client.tools.dispatcher import ToolDispatcher
from agentflow_client.transport.http import AgentFlowTransport

logger = logging.getLogger(__name__)


class TurnController:
    """Base class for controllers that drive the remote tool-call loop.

    Each run sends the caller's messages, executes any remote tool calls in
    the response, sends the results back and repeats until a response has no
    tool calls or the recursion limit is reached. Iterations are strictly
    sequential.

    Attributes:
        transport: Transport used for every turn
        dispatcher: Executes remote tool calls; without one, a response with
            tool calls ends the run
    """

    def __init__(
        self,
        transport: AgentFlowTransport,
        dispatcher: ToolDispatcher | None = None,
    ) -> None:
        self.transport = transport
        self.dispatcher = dispatcher

    @staticmethod
    def _check_recursion_limit(recursion_limit: int) -> None:
        if recursion_limit < 1:
            raise ValueError(f"recursion_limit must be at least 1, got {recursion_limit}")

    @staticmethod
    def _build_request(
        iteration: int,
        pending: list[dict[str, Any]],
        initial_state: dict[str, Any] | None,
        config: dict[str, Any] | None,
        recursion_limit: int,
        response_granularity: str | None,
    ) -> InvokeRequest:
        return InvokeRequest(
            messages=pending,
            initial_state=initial_state if iteration == 1 else None,
            config=config,
            recursion_limit=recursion_limit,
            response_granularity=response_granularity,
        )

    async def _resolve_tool_calls(
        self,
        accumulator: RunAccumulator,
        messages: list[Message],
        has_tool_calls: bool,
    ) -> list[dict[str, Any]] | None:
        """Run the tool calls of a response and prepare the next turn.

        Args:
            accumulator: The run's accumulator; tool results are appended
            messages: Response messages of the current iteration
            has_tool_calls: Whether the messages contain remote tool calls

        Returns:
            The serialized tool results to send next, or None when the run is
            done
        """
        if not has_tool_calls:
            logger.debug("No remote tool calls found, finishing")
            return None
        if self.dispatcher is None:
            logger.debug("Remote tool calls found but no dispatcher attached, finishing")
            return None

        results = await self.dispatcher.execute_batch(messages)
        logger.debug(f"Executed {len(results)} tool call(s)")
        accumulator.record_tool_results(results)
        return serialize_messages(results)

    @staticmethod
    def _finish(accumulator: RunAccumulator, pending: list[dict[str, Any]] | None) -> None:
        if pending is not None:
            accumulator.recursion_limit_reached = True
            logger.warning(f"Recursion limit of {accumulator.recursion_limit} reached")
        logger.info(
            f"Run completed after {accumulator.iterations} iteration(s), "
            f"{len(accumulator.all_messages)} message(s)"
        )
