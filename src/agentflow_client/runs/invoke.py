"""Buffered tool-call loop against POST /v1/graph/invoke."""

import inspect
import logging
from typing import Any

from agentflow_client.messages.serializer import serialize_messages
from agentflow_client.messages.types import Message, has_remote_tool_calls
from agentflow_client.runs.base import TurnController
from agentflow_client.runs.types import (
    InvokeCallback,
    InvokePartialResult,
    InvokeResponse,
    InvokeResult,
    RunAccumulator,
)

logger = logging.getLogger(__name__)

INVOKE_PATH = "/v1/graph/invoke"


class InvokeController(TurnController):
    """Runs the tool-call loop with one buffered response per turn."""

    async def run(
        self,
        messages: list[Message],
        *,
        initial_state: dict[str, Any] | None = None,
        config: dict[str, Any] | None = None,
        recursion_limit: int = 25,
        response_granularity: str | None = None,
        on_partial_result: InvokeCallback | None = None,
    ) -> InvokeResult:
        """Invoke the graph, executing remote tool calls until it finishes.

        The observer, if given, receives one InvokePartialResult per iteration
        and is awaited before the loop continues, so it sees iterations in
        order and never races the next request.

        Args:
            messages: Initial conversation messages
            initial_state: Agent state sent with the first turn only
            config: Graph configuration sent with every turn
            recursion_limit: Maximum number of turns
            response_granularity: Response detail level requested from the server
            on_partial_result: Optional per-iteration observer (sync or async)

        Returns:
            InvokeResult: Last turn's messages, full history and iteration count

        Raises:
            ValueError: If recursion_limit is below 1
            AgentFlowError: If any turn fails; the run is aborted and tool
                handlers that already ran are not rolled back
        """
        self._check_recursion_limit(recursion_limit)
        logger.debug(f"Starting invoke with recursion_limit: {recursion_limit}")

        accumulator = RunAccumulator(recursion_limit=recursion_limit, all_messages=list(messages))
        pending: list[dict[str, Any]] | None = serialize_messages(messages)

        # recursion_limit >= 1, so the first turn always runs
        while True:
            iteration = accumulator.next_iteration()
            logger.debug(f"Iteration {iteration}/{recursion_limit}")

            request = self._build_request(
                iteration, pending, initial_state, config, recursion_limit, response_granularity
            )
            payload = await self.transport.request_json(
                "POST",
                INVOKE_PATH,
                json_body=request.to_payload(),
                fallback_message="Invoke request failed",
            )
            response = InvokeResponse.from_dict(payload)
            accumulator.record_response(response.messages)

            has_tool_calls = has_remote_tool_calls(response.messages)

            if on_partial_result is not None:
                partial = InvokePartialResult(
                    iteration=iteration,
                    messages=tuple(response.messages),
                    all_messages=tuple(accumulator.all_messages),
                    has_tool_calls=has_tool_calls,
                    is_final=not has_tool_calls,
                    meta=response.meta,
                    state=response.state,
                    context=response.context,
                    summary=response.summary,
                )
                outcome = on_partial_result(partial)
                if inspect.isawaitable(outcome):
                    await outcome

            pending = await self._resolve_tool_calls(accumulator, response.messages, has_tool_calls)
            if pending is None or not accumulator.can_continue:
                break

        self._finish(accumulator, pending)
        return InvokeResult(
            messages=accumulator.last_messages,
            all_messages=accumulator.all_messages,
            iterations=accumulator.iterations,
            recursion_limit_reached=accumulator.recursion_limit_reached,
            meta=response.meta,
            state=response.state,
            context=response.context,
            summary=response.summary,
        )
