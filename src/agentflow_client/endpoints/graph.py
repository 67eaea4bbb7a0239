"""Graph control endpoints: ping, graph info, stop, fix and remote tool setup."""

import logging
from typing import Any

from agentflow_client.models.tools import RemoteTool
from agentflow_client.transport.http import AgentFlowTransport

logger = logging.getLogger(__name__)


async def ping(transport: AgentFlowTransport) -> dict[str, Any]:
    return await transport.request_json("GET", "/v1/ping", fallback_message="Ping failed")


async def graph(transport: AgentFlowTransport) -> dict[str, Any]:
    """Fetch the graph structure (nodes, edges and info)."""
    return await transport.request_json("GET", "/v1/graph", fallback_message="Graph fetch failed")


async def stop_graph(
    transport: AgentFlowTransport,
    thread_id: str | int,
    config: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Ask the server to stop the run executing on a thread."""
    logger.info(f"Stopping graph execution for thread {thread_id}")
    body: dict[str, Any] = {"thread_id": thread_id}
    if config:
        body["config"] = config
    return await transport.request_json(
        "POST", "/v1/graph/stop", json_body=body, fallback_message="Stop graph request failed"
    )


async def fix_graph(
    transport: AgentFlowTransport,
    thread_id: str | int,
    config: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Remove messages with empty tool calls from a thread's state.

    This cleans up tool call messages left incomplete by a failed or
    interrupted run.
    """
    logger.info(f"Fixing graph state for thread {thread_id}")
    body: dict[str, Any] = {"thread_id": thread_id}
    if config:
        body["config"] = config
    return await transport.request_json(
        "POST", "/v1/graph/fix", json_body=body, fallback_message="Fix graph request failed"
    )


async def setup_graph(transport: AgentFlowTransport, tools: list[RemoteTool]) -> dict[str, Any]:
    """Register remote tool definitions with the server.

    Args:
        transport: The client's transport
        tools: Tool definitions, usually taken from the client's registry

    Returns:
        dict: The response envelope
    """
    logger.info(f"Setting up {len(tools)} remote tool(s)")
    return await transport.request_json(
        "POST",
        "/v1/graph/setup",
        json_body={"tools": [tool.model_dump() for tool in tools]},
        fallback_message="Graph setup failed",
    )
