"""agentflow-client: Async Python client for AgentFlow agent-graph servers.

This package provides buffered and streaming graph runs that execute remote
tool calls locally, plus wrappers for the thread, graph and memory endpoints.
"""

from agentflow_client.client import AgentFlowClient
from agentflow_client.config import AgentFlowSettings
from agentflow_client.errors import AgentFlowError
from agentflow_client.messages import Message
from agentflow_client.runs import InvokePartialResult, InvokeResult, StreamChunk
from agentflow_client.tools import ToolDescriptor

__version__ = "0.1.0"

__all__ = [
    "AgentFlowClient",
    "AgentFlowSettings",
    "AgentFlowError",
    "Message",
    "ToolDescriptor",
    "InvokePartialResult",
    "InvokeResult",
    "StreamChunk",
    "__version__",
]
