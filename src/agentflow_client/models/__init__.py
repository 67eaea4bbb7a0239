"""Pydantic models for API request and response schemas."""

from agentflow_client.models.invoke import InvokeMetadata, InvokeRequest, ResponseMetadata
from agentflow_client.models.tools import RemoteTool, ToolFunction, ToolParameters, ToolSpec

__all__ = [
    "InvokeRequest",
    "InvokeMetadata",
    "ResponseMetadata",
    "ToolParameters",
    "ToolFunction",
    "ToolSpec",
    "RemoteTool",
]
