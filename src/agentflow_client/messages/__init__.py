"""Message data model and wire serialization.

This package provides the content-block dataclasses exchanged with the agent
service and the serializer that prepares messages for each request.
"""

from agentflow_client.messages.serializer import (
    NEW_MESSAGE_ID,
    clean_content,
    serialize_message,
    serialize_messages,
)
from agentflow_client.messages.types import (
    AnnotationBlock,
    AnnotationRef,
    AudioBlock,
    ContentBlock,
    DataBlock,
    DocumentBlock,
    ErrorBlock,
    ImageBlock,
    MediaRef,
    Message,
    ReasoningBlock,
    RemoteToolCallBlock,
    TextBlock,
    TokenUsages,
    ToolCallBlock,
    ToolResultBlock,
    UnknownBlock,
    VideoBlock,
    block_from_dict,
    has_remote_tool_calls,
)

__all__ = [
    # Core classes
    "Message",
    "ContentBlock",
    "MediaRef",
    "AnnotationRef",
    "TokenUsages",
    # Content blocks
    "TextBlock",
    "ImageBlock",
    "AudioBlock",
    "VideoBlock",
    "DocumentBlock",
    "DataBlock",
    "ToolCallBlock",
    "RemoteToolCallBlock",
    "ToolResultBlock",
    "ReasoningBlock",
    "AnnotationBlock",
    "ErrorBlock",
    "UnknownBlock",
    # Helpers
    "block_from_dict",
    "has_remote_tool_calls",
    "clean_content",
    "serialize_message",
    "serialize_messages",
    "NEW_MESSAGE_ID",
]
