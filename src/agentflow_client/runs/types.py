"""Data types for multi-turn graph runs.

This module defines the parsed turn response, the per-run accumulator, the
snapshots handed to progress observers, the final invoke result and the
frames yielded by the streaming endpoint.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable

from agentflow_client.messages.types import Message
from agentflow_client.models.invoke import InvokeMetadata, ResponseMetadata


def _parse_context(raw: Any) -> list[Message] | None:
    if not isinstance(raw, list):
        return None
    return [Message.from_dict(item) for item in raw if isinstance(item, dict)]


@dataclass
class InvokeResponse:
    """One parsed response from POST /v1/graph/invoke."""

    messages: list[Message]
    meta: InvokeMetadata
    metadata: ResponseMetadata
    state: dict[str, Any] | None = None
    context: list[Message] | None = None
    summary: str | None = None

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "InvokeResponse":
        data = payload.get("data") or {}
        return cls(
            messages=[Message.from_dict(item) for item in data.get("messages") or []],
            meta=InvokeMetadata.model_validate(data.get("meta") or {}),
            metadata=ResponseMetadata.model_validate(payload.get("metadata") or {}),
            state=data.get("state"),
            context=_parse_context(data.get("context")),
            summary=data.get("summary"),
        )


@dataclass
class RunAccumulator:
    """Bookkeeping for a single controller run.

    Attributes:
        recursion_limit: Maximum number of turns for the run
        iterations: Number of turns started so far
        all_messages: Input, response and tool result messages in arrival order
        last_messages: Messages of the most recent response
        recursion_limit_reached: Set when the run stops with tool calls pending
    """

    recursion_limit: int
    iterations: int = 0
    all_messages: list[Message] = field(default_factory=list)
    last_messages: list[Message] = field(default_factory=list)
    recursion_limit_reached: bool = False

    @property
    def can_continue(self) -> bool:
        return self.iterations < self.recursion_limit

    def next_iteration(self) -> int:
        self.iterations += 1
        return self.iterations

    def record_response(self, messages: list[Message]) -> None:
        self.last_messages = list(messages)
        self.all_messages.extend(messages)

    def record_tool_results(self, results: list[Message]) -> None:
        self.all_messages.extend(results)


@dataclass(frozen=True)
class InvokePartialResult:
    """Snapshot of one iteration, handed to the progress observer.

    Attributes:
        iteration: 1-based iteration index
        messages: This iteration's response messages
        all_messages: Every message of the run so far, excluding the tool
            results of this iteration (they do not exist yet)
        has_tool_calls: Whether the response asked for remote tool calls
        is_final: True when no further iteration follows from this response
    """

    iteration: int
    messages: tuple[Message, ...]
    all_messages: tuple[Message, ...]
    has_tool_calls: bool
    is_final: bool
    meta: InvokeMetadata
    state: dict[str, Any] | None = None
    context: list[Message] | None = None
    summary: str | None = None


InvokeCallback = Callable[[InvokePartialResult], Awaitable[None] | None]


@dataclass
class InvokeResult:
    """Outcome of a complete invoke run.

    Attributes:
        messages: Response messages of the last iteration
        all_messages: The input messages followed by every response and tool
            result message of the run
        iterations: Number of iterations performed
        recursion_limit_reached: True if the run stopped with tool calls pending
    """

    messages: list[Message]
    all_messages: list[Message]
    iterations: int
    recursion_limit_reached: bool
    meta: InvokeMetadata = field(default_factory=InvokeMetadata)
    state: dict[str, Any] | None = None
    context: list[Message] | None = None
    summary: str | None = None


class StreamEventType(str, Enum):
    """Known values of a stream frame's event field."""

    MESSAGE = "message"
    UPDATES = "updates"
    STATE = "state"
    ERROR = "error"


@dataclass
class StreamChunk:
    """One frame of the NDJSON stream returned by POST /v1/graph/stream."""

    event: str
    message: Message | None = None
    state: dict[str, Any] | None = None
    data: Any = None
    thread_id: str | int | None = None
    run_id: str | None = None
    metadata: dict[str, Any] | None = None
    timestamp: float | str | None = None

    @classmethod
    def from_dict(cls, frame: dict[str, Any]) -> "StreamChunk":
        message = frame.get("message")
        return cls(
            event=frame.get("event", ""),
            message=Message.from_dict(message) if isinstance(message, dict) else None,
            state=frame.get("state"),
            data=frame.get("data"),
            thread_id=frame.get("thread_id"),
            run_id=frame.get("run_id"),
            metadata=frame.get("metadata"),
            timestamp=frame.get("timestamp"),
        )
