"""Multi-turn graph runs with local tool execution.

This package provides the buffered (invoke) and streaming (stream) turn
controllers and the result types they produce.
"""

from agentflow_client.runs.invoke import INVOKE_PATH, InvokeController
from agentflow_client.runs.stream import STREAM_PATH, StreamController
from agentflow_client.runs.types import (
    InvokeCallback,
    InvokePartialResult,
    InvokeResponse,
    InvokeResult,
    RunAccumulator,
    StreamChunk,
    StreamEventType,
)

__all__ = [
    # Controllers
    "InvokeController",
    "StreamController",
    "INVOKE_PATH",
    "STREAM_PATH",
    # Result types
    "InvokeCallback",
    "InvokePartialResult",
    "InvokeResponse",
    "InvokeResult",
    "RunAccumulator",
    "StreamChunk",
    "StreamEventType",
]
