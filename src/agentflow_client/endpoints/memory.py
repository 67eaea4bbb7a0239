"""Memory store endpoints."""

import logging
from typing import Any

from agentflow_client.transport.http import AgentFlowTransport

logger = logging.getLogger(__name__)


def _memory_path(memory_id: str) -> str:
    return f"/v1/store/memories/{memory_id}"


async def get_memory(
    transport: AgentFlowTransport,
    memory_id: str,
    config: dict[str, Any] | None = None,
    options: dict[str, Any] | None = None,
) -> dict[str, Any]:
    logger.debug(f"Fetching memory with ID: {memory_id}")
    return await transport.request_json(
        "POST",
        _memory_path(memory_id),
        json_body={"config": config or {}, "options": options or {}},
        fallback_message="Get memory request failed",
    )


async def update_memory(
    transport: AgentFlowTransport,
    memory_id: str,
    content: str,
    metadata: dict[str, Any] | None = None,
    config: dict[str, Any] | None = None,
    options: dict[str, Any] | None = None,
) -> dict[str, Any]:
    logger.debug(f"Updating memory with ID: {memory_id}")
    body: dict[str, Any] = {
        "config": config or {},
        "options": options or {},
        "content": content,
    }
    if metadata:
        body["metadata"] = metadata
    return await transport.request_json(
        "PUT",
        _memory_path(memory_id),
        json_body=body,
        fallback_message="Update memory request failed",
    )


async def delete_memory(
    transport: AgentFlowTransport,
    memory_id: str,
    config: dict[str, Any] | None = None,
    options: dict[str, Any] | None = None,
) -> dict[str, Any]:
    logger.debug(f"Deleting memory with ID: {memory_id}")
    return await transport.request_json(
        "DELETE",
        _memory_path(memory_id),
        json_body={"config": config or {}, "options": options or {}},
        fallback_message="Delete memory request failed",
    )
