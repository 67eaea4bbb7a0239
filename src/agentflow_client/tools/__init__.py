"""Tool registration and execution layer.

This package provides the registry of locally executable tools and the
dispatcher that runs the remote tool calls found in agent responses.
"""

from agentflow_client.tools.dispatcher import ToolDispatcher
from agentflow_client.tools.registry import ToolDescriptor, ToolHandler, ToolRegistry

__all__ = ["ToolDescriptor", "ToolHandler", "ToolRegistry", "ToolDispatcher"]
