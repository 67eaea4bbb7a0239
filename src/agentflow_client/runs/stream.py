"""Streaming tool-call loop against POST /v1/graph/stream."""

import logging
from contextlib import aclosing
from typing import Any, AsyncIterator

from agentflow_client.errors import FrameDecodeError
from agentflow_client.messages.serializer import serialize_messages
from agentflow_client.messages.types import Message, has_remote_tool_calls
from agentflow_client.runs.base import TurnController
from agentflow_client.runs.types import RunAccumulator, StreamChunk

logger = logging.getLogger(__name__)

STREAM_PATH = "/v1/graph/stream"


class StreamController(TurnController):
    """Runs the tool-call loop over NDJSON frame streams.

    Every frame is yielded to the caller as soon as it is decoded. Frames that
    carry a message are also collected, and tool calls are looked for only
    after the iteration's stream has ended, because a remote_tool_call block
    can arrive in any frame. The caller therefore sees all frames of an
    iteration before the controller decides whether another one follows.
    """

    async def run(
        self,
        messages: list[Message],
        *,
        initial_state: dict[str, Any] | None = None,
        config: dict[str, Any] | None = None,
        recursion_limit: int = 25,
        response_granularity: str | None = None,
    ) -> AsyncIterator[StreamChunk]:
        """Stream the graph, executing remote tool calls between iterations.

        Args:
            messages: Initial conversation messages
            initial_state: Agent state sent with the first turn only
            config: Graph configuration sent with every turn
            recursion_limit: Maximum number of turns
            response_granularity: Response detail level requested from the server

        Yields:
            StreamChunk: Every frame of every iteration, in arrival order

        Raises:
            ValueError: If recursion_limit is below 1
            AgentFlowError: If any turn fails, including malformed frames
        """
        self._check_recursion_limit(recursion_limit)
        logger.debug(f"Starting stream with recursion_limit: {recursion_limit}")

        accumulator = RunAccumulator(recursion_limit=recursion_limit, all_messages=list(messages))
        pending: list[dict[str, Any]] | None = serialize_messages(messages)

        while pending is not None and accumulator.can_continue:
            iteration = accumulator.next_iteration()
            logger.debug(f"Stream iteration {iteration}/{recursion_limit}")

            request = self._build_request(
                iteration, pending, initial_state, config, recursion_limit, response_granularity
            )
            iteration_messages: list[Message] = []
            frame_count = 0

            frames = self.transport.stream_json_lines(
                STREAM_PATH,
                request.to_payload(),
                fallback_message="Stream request failed",
            )
            async with aclosing(frames):
                async for frame in frames:
                    if not isinstance(frame, dict):
                        raise FrameDecodeError("Stream frame is not a JSON object", line=repr(frame))
                    chunk = StreamChunk.from_dict(frame)
                    frame_count += 1
                    if chunk.message is not None:
                        iteration_messages.append(chunk.message)
                    yield chunk

            logger.debug(
                f"Iteration {iteration} streamed {frame_count} frame(s), "
                f"{len(iteration_messages)} message(s)"
            )
            accumulator.record_response(iteration_messages)
            pending = await self._resolve_tool_calls(
                accumulator,
                iteration_messages,
                has_remote_tool_calls(iteration_messages),
            )

        self._finish(accumulator, pending)
