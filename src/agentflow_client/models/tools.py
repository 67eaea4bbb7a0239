"""Pydantic models for tool descriptors sent to the agent service."""

from typing import Any

from pydantic import BaseModel, Field


class ToolParameters(BaseModel):
    """JSON schema of a tool's argument bag."""

    type: str = "object"
    properties: dict[str, Any] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)


class ToolFunction(BaseModel):
    name: str
    description: str
    parameters: dict[str, Any]


class ToolSpec(BaseModel):
    """OpenAI-compatible function tool descriptor."""

    type: str = "function"
    function: ToolFunction


class RemoteTool(BaseModel):
    """Tool registration entry for POST /v1/graph/setup."""

    node_name: str = Field(description="Graph node that may call the tool")
    name: str = Field(description="Tool name")
    description: str = Field(description="Tool description shown to the model")
    parameters: dict[str, Any] = Field(description="JSON schema of the arguments")
