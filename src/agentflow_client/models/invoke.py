"""Pydantic models for the graph invoke and stream endpoints.

This module defines the request payload shared by POST /v1/graph/invoke and
POST /v1/graph/stream, and the metadata blocks found in their responses.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class InvokeRequest(BaseModel):
    """Request body for one turn against the graph endpoints.

    The tool execution loop builds one of these per iteration; initial_state
    is only sent on the first iteration.
    """

    messages: list[dict[str, Any]] = Field(
        description="Serialized messages for this turn",
    )
    initial_state: dict[str, Any] | None = Field(
        default=None,
        description="Initial agent state, sent on the first turn only",
    )
    config: dict[str, Any] | None = Field(
        default=None,
        description="Graph configuration (thread_id, user, ...)",
    )
    recursion_limit: int = Field(
        default=25,
        ge=1,
        description="Maximum number of turns for this run",
    )
    response_granularity: Literal["full", "partial", "low"] | None = Field(
        default=None,
        description="How much state the server includes in each response",
    )

    def to_payload(self) -> dict[str, Any]:
        """Get the JSON body with unset optional fields left out."""
        return self.model_dump(exclude_none=True)


class InvokeMetadata(BaseModel):
    """Thread metadata returned with each invoke response."""

    is_new_thread: bool = Field(default=False, description="Whether the server created the thread")
    thread_id: str | int = Field(default="", description="Thread identifier")

    model_config = ConfigDict(extra="allow")


class ResponseMetadata(BaseModel):
    """Envelope metadata attached to every API response."""

    request_id: str = Field(default="", description="Server request id")
    timestamp: str | float = Field(default="", description="ISO 8601 or Unix timestamp")
    message: str = Field(default="", description="Human-readable status message")

    model_config = ConfigDict(extra="allow")
