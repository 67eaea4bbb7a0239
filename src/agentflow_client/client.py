"""AgentFlowClient: the public entry point of the package.

The client owns the settings, the HTTP transport and the tool registry, and
wires them into the invoke/stream controllers and the endpoint wrappers.
"""

import logging
from typing import Any, AsyncIterator

import httpx

from agentflow_client.config import AgentFlowSettings, ResponseGranularity
from agentflow_client.endpoints import graph as graph_api
from agentflow_client.endpoints import memory, threads
from agentflow_client.messages.types import Message
from agentflow_client.runs.invoke import InvokeController
from agentflow_client.runs.stream import StreamController
from agentflow_client.runs.types import InvokeCallback, InvokeResult, StreamChunk
from agentflow_client.tools.dispatcher import ToolDispatcher
from agentflow_client.tools.registry import ToolDescriptor, ToolRegistry
from agentflow_client.transport.http import AgentFlowTransport

logger = logging.getLogger(__name__)


class AgentFlowClient:
    """Async client for an AgentFlow agent-graph server.

    Settings come from an explicit AgentFlowSettings instance, or are loaded
    from AGENTFLOW_* environment variables with keyword overrides applied.
    The client can be used as an async context manager to close its HTTP
    connections on exit.

    Attributes:
        settings: The effective client settings
        tools: The registry of locally executable tools
        transport: HTTP transport shared by all calls

    Example:
        >>> async with AgentFlowClient(base_url="http://localhost:8000") as client:
        ...     client.register_tool(ToolDescriptor(name="add", handler=add))
        ...     result = await client.invoke([Message.text_message("1 + 2?")])
    """

    def __init__(
        self,
        settings: AgentFlowSettings | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        **overrides: Any,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Optional settings; when omitted they are loaded from the
                environment with `overrides` applied
            http_client: Optional pre-configured httpx.AsyncClient
            **overrides: Individual settings (base_url, auth_token, timeout, ...)
        """
        if settings is None:
            settings = AgentFlowSettings(**overrides)
        elif overrides:
            settings = settings.model_copy(update=overrides)
        self.settings = settings
        self.transport = AgentFlowTransport(settings, http_client=http_client)
        self.tools = ToolRegistry()
        self._dispatcher = ToolDispatcher(self.tools)
        logger.info(f"AgentFlowClient initialized for {settings.normalized_base_url}")

    async def __aenter__(self) -> "AgentFlowClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self.transport.aclose()

    # --- Tools ---------------------------------------------------------------

    def register_tool(self, descriptor: ToolDescriptor) -> None:
        """Register a tool the agent may ask the client to execute.

        A tool registered under an existing name replaces the earlier one.
        """
        self._dispatcher.register(descriptor)

    def all_tools(self) -> list[dict[str, Any]]:
        """Get all registered tools in OpenAI-compatible format."""
        return self._dispatcher.list_descriptors()

    def tools_for_node(self, node: str) -> list[ToolDescriptor]:
        return self._dispatcher.list_for_node(node)

    # --- Runs ----------------------------------------------------------------

    async def invoke(
        self,
        messages: list[Message],
        *,
        initial_state: dict[str, Any] | None = None,
        config: dict[str, Any] | None = None,
        recursion_limit: int | None = None,
        response_granularity: ResponseGranularity | None = None,
        on_partial_result: InvokeCallback | None = None,
    ) -> InvokeResult:
        """Invoke the graph and execute remote tool calls until it finishes.

        Args:
            messages: Initial conversation messages
            initial_state: Agent state sent with the first turn
            config: Graph configuration (thread_id, ...)
            recursion_limit: Maximum turns; defaults to settings.recursion_limit
            response_granularity: Defaults to settings.response_granularity
            on_partial_result: Optional observer called after every turn

        Returns:
            InvokeResult: The final turn, the full history and the turn count
        """
        controller = InvokeController(self.transport, self._dispatcher)
        return await controller.run(
            messages,
            initial_state=initial_state,
            config=config,
            recursion_limit=self.settings.recursion_limit if recursion_limit is None else recursion_limit,
            response_granularity=response_granularity or self.settings.response_granularity,
            on_partial_result=on_partial_result,
        )

    def stream(
        self,
        messages: list[Message],
        *,
        initial_state: dict[str, Any] | None = None,
        config: dict[str, Any] | None = None,
        recursion_limit: int | None = None,
        response_granularity: ResponseGranularity | None = None,
    ) -> AsyncIterator[StreamChunk]:
        """Stream the graph, executing remote tool calls between turns.

        Nothing is sent until the returned iterator is consumed.

        Args:
            messages: Initial conversation messages
            initial_state: Agent state sent with the first turn
            config: Graph configuration (thread_id, ...)
            recursion_limit: Maximum turns; defaults to settings.recursion_limit
            response_granularity: Defaults to settings.response_granularity

        Returns:
            AsyncIterator[StreamChunk]: Every frame of every turn
        """
        controller = StreamController(self.transport, self._dispatcher)
        return controller.run(
            messages,
            initial_state=initial_state,
            config=config,
            recursion_limit=self.settings.recursion_limit if recursion_limit is None else recursion_limit,
            response_granularity=response_granularity or self.settings.response_granularity,
        )

    # --- Graph ---------------------------------------------------------------

    async def ping(self) -> dict[str, Any]:
        return await graph_api.ping(self.transport)

    async def graph(self) -> dict[str, Any]:
        return await graph_api.graph(self.transport)

    async def stop_graph(self, thread_id: str | int, config: dict[str, Any] | None = None) -> dict[str, Any]:
        return await graph_api.stop_graph(self.transport, thread_id, config)

    async def fix_graph(self, thread_id: str | int, config: dict[str, Any] | None = None) -> dict[str, Any]:
        return await graph_api.fix_graph(self.transport, thread_id, config)

    async def setup_graph(self) -> dict[str, Any]:
        """Send every registered tool's definition to the server."""
        return await graph_api.setup_graph(self.transport, self.tools.remote_tools())

    # --- Threads -------------------------------------------------------------

    async def update_thread_state(
        self,
        thread_id: str | int,
        state: dict[str, Any],
        config: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        return await threads.update_thread_state(self.transport, thread_id, state, config)

    async def clear_thread_state(self, thread_id: str | int) -> dict[str, Any]:
        return await threads.clear_thread_state(self.transport, thread_id)

    async def thread_message(self, thread_id: str | int, message_id: str | int) -> Message:
        return await threads.thread_message(self.transport, thread_id, message_id)

    async def checkpoint_messages(
        self,
        thread_id: str | int,
        search: str | None = None,
        offset: int | None = None,
        limit: int | None = None,
    ) -> list[Message]:
        return await threads.checkpoint_messages(self.transport, thread_id, search, offset, limit)

    # --- Memory --------------------------------------------------------------

    async def get_memory(
        self,
        memory_id: str,
        config: dict[str, Any] | None = None,
        options: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        return await memory.get_memory(self.transport, memory_id, config, options)

    async def update_memory(
        self,
        memory_id: str,
        content: str,
        metadata: dict[str, Any] | None = None,
        config: dict[str, Any] | None = None,
        options: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        return await memory.update_memory(self.transport, memory_id, content, metadata, config, options)

    async def delete_memory(
        self,
        memory_id: str,
        config: dict[str, Any] | None = None,
        options: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        return await memory.delete_memory(self.transport, memory_id, config, options)
