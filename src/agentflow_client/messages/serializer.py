"""Conversion of messages to the request wire format."""

from dataclasses import fields, is_dataclass
from typing import Any

from agentflow_client.messages.types import ContentBlock, Message, TextBlock, UnknownBlock

# Tells the server to assign a fresh message id
NEW_MESSAGE_ID = 0


def _to_wire(value: Any) -> Any:
    """Convert a block or nested reference, dropping unset dataclass fields.

    Only dataclass fields are pruned. Plain dicts such as tool arguments and
    outputs are passed through as they are, null values included.
    """
    if isinstance(value, UnknownBlock):
        return dict(value.raw)
    if is_dataclass(value) and not isinstance(value, type):
        converted = {}
        for f in fields(value):
            item = getattr(value, f.name)
            if item is None or (isinstance(item, (list, tuple)) and not item):
                continue
            converted[f.name] = _to_wire(item)
        return converted
    if isinstance(value, (list, tuple)):
        return [_to_wire(item) for item in value]
    return value


def clean_content(content: list[ContentBlock]) -> str | list[dict[str, Any]]:
    """Convert content blocks to their wire representation.

    A single text block collapses to its bare text. Otherwise each block becomes
    a dict with None values and empty lists left out, at every level of nested
    media and annotation references. Blocks of unrecognized types are sent back
    exactly as they were received.

    Args:
        content: The message's content blocks

    Returns:
        The bare text, or the list of cleaned block dicts
    """
    if len(content) == 1 and isinstance(content[0], TextBlock):
        return content[0].text

    return [_to_wire(block) for block in content]


def serialize_message(message: Message) -> dict[str, Any]:
    """Serialize a Message for API transmission.

    Args:
        message: The message to serialize

    Returns:
        dict: Wire-format message with role, content, message_id and any
        non-empty optional fields
    """
    serialized: dict[str, Any] = {
        "role": message.role,
        "content": clean_content(message.content),
        "message_id": message.message_id
        if message.message_id is not None
        else NEW_MESSAGE_ID,
    }

    if message.tools_calls:
        serialized["tools_calls"] = message.tools_calls
    if message.metadata:
        serialized["metadata"] = message.metadata

    return serialized


def serialize_messages(messages: list[Message]) -> list[dict[str, Any]]:
    return [serialize_message(message) for message in messages]
