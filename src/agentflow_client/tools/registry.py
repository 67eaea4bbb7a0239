"""Registry of tools the client can execute on behalf of the agent service."""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from agentflow_client.models.tools import RemoteTool, ToolFunction, ToolParameters, ToolSpec

logger = logging.getLogger(__name__)

ToolHandler = Callable[[dict[str, Any]], Awaitable[Any] | Any]


@dataclass(frozen=True)
class ToolDescriptor:
    """A tool's metadata bundled with the handler that implements it.

    Attributes:
        name: Unique tool name, matched against remote tool calls
        handler: Callable receiving the argument bag; may be async
        description: Description shown to the model
        parameters: JSON schema of the argument bag
        node: Graph node the tool belongs to
    """

    name: str
    handler: ToolHandler
    description: str | None = None
    parameters: dict[str, Any] | None = None
    node: str | None = None

    def to_spec(self) -> ToolSpec:
        return ToolSpec(
            function=ToolFunction(
                name=self.name,
                description=self.description or f"Execute {self.name}",
                parameters=self.parameters or ToolParameters().model_dump(),
            )
        )


class ToolRegistry:
    """Mutable store of ToolDescriptors, indexed by name and by node.

    A registry is created with its client and changed only through
    register(). Runs in progress do not take a snapshot: every lookup sees
    the registry as it is at that moment, so a tool registered while a run is
    executing becomes visible to that run's next iteration.
    """

    def __init__(self, tools: list[ToolDescriptor] | None = None) -> None:
        self._tools: dict[str, ToolDescriptor] = {}
        self._tools_by_node: dict[str, dict[str, ToolDescriptor]] = {}
        for descriptor in tools or []:
            self.register(descriptor)

    def register(self, descriptor: ToolDescriptor) -> None:
        """Register a tool, replacing any tool with the same name.

        Args:
            descriptor: The tool to register
        """
        previous = self._tools.get(descriptor.name)
        if previous is not None:
            logger.debug(f"Replacing registered tool: {descriptor.name}")
            if previous.node is not None:
                self._tools_by_node.get(previous.node, {}).pop(previous.name, None)

        self._tools[descriptor.name] = descriptor
        if descriptor.node is not None:
            self._tools_by_node.setdefault(descriptor.node, {})[descriptor.name] = descriptor

        logger.info(f"Registered tool '{descriptor.name}' (node={descriptor.node})")

    def get(self, name: str) -> ToolDescriptor | None:
        return self._tools.get(name)

    def list_descriptors(self) -> list[dict[str, Any]]:
        """Get all tools in OpenAI-compatible wire format."""
        return [descriptor.to_spec().model_dump() for descriptor in self._tools.values()]

    def list_for_node(self, node: str) -> list[ToolDescriptor]:
        """Get the tools registered for a node, or an empty list."""
        return list(self._tools_by_node.get(node, {}).values())

    def remote_tools(self) -> list[RemoteTool]:
        """Get every tool as a setup entry for the graph endpoint."""
        remote_tools = []
        for descriptor in self._tools.values():
            function = descriptor.to_spec().function
            remote_tools.append(
                RemoteTool(
                    node_name=descriptor.node or "",
                    name=function.name,
                    description=function.description,
                    parameters=function.parameters,
                )
            )
        return remote_tools

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
