"""Thread state and message endpoints.

Each function sends one request and returns the parsed response envelope
(``{"data": ..., "metadata": ...}``).
"""

import logging
from typing import Any

from agentflow_client.messages.types import Message
from agentflow_client.transport.http import AgentFlowTransport

logger = logging.getLogger(__name__)


async def update_thread_state(
    transport: AgentFlowTransport,
    thread_id: str | int,
    state: dict[str, Any],
    config: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Replace the stored agent state of a thread."""
    logger.debug(f"Updating thread state for thread {thread_id}")
    return await transport.request_json(
        "PUT",
        f"/v1/threads/{thread_id}/state",
        json_body={"config": config or {}, "state": state},
        fallback_message="Thread state update failed",
    )


async def clear_thread_state(transport: AgentFlowTransport, thread_id: str | int) -> dict[str, Any]:
    logger.debug(f"Clearing thread state for thread {thread_id}")
    return await transport.request_json(
        "DELETE",
        f"/v1/threads/{thread_id}/state",
        fallback_message="Thread state clear failed",
    )


async def thread_message(
    transport: AgentFlowTransport,
    thread_id: str | int,
    message_id: str | int,
) -> Message:
    """Fetch a single message of a thread.

    Args:
        transport: The client's transport
        thread_id: Thread identifier
        message_id: Message identifier

    Returns:
        Message: The parsed message
    """
    logger.debug(f"Fetching message {message_id} of thread {thread_id}")
    response = await transport.request_json(
        "GET",
        f"/v1/threads/{thread_id}/messages/{message_id}",
        fallback_message="Thread message fetch failed",
    )
    return Message.from_dict(response.get("data") or {})


async def checkpoint_messages(
    transport: AgentFlowTransport,
    thread_id: str | int,
    search: str | None = None,
    offset: int | None = None,
    limit: int | None = None,
) -> list[Message]:
    """List the checkpointed messages of a thread.

    Args:
        transport: The client's transport
        thread_id: Thread identifier
        search: Optional text filter
        offset: Optional pagination offset
        limit: Optional page size

    Returns:
        list[Message]: The thread's messages
    """
    logger.debug(f"Fetching checkpoint messages for thread {thread_id}")
    response = await transport.request_json(
        "GET",
        f"/v1/threads/{thread_id}/messages",
        params={"search": search, "offset": offset, "limit": limit},
        fallback_message="Checkpoint messages fetch failed",
    )
    data = response.get("data") or {}
    return [Message.from_dict(item) for item in data.get("messages") or []]
