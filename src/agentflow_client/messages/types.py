"""Data types for conversation messages and their content blocks.

This module defines the message structure exchanged with the agent service.
A message carries an ordered list of typed content blocks (text, media,
tool calls, tool results, reasoning, ...). Blocks are plain dataclasses whose
``type`` field is fixed per class and used as the discriminator on the wire.
"""

import json
import logging
import time
from dataclasses import dataclass, field, fields
from typing import Any, Literal

logger = logging.getLogger(__name__)

Role = Literal["user", "assistant", "system", "tool"]


def _known_fields(cls: type, data: dict[str, Any]) -> dict[str, Any]:
    """Keep only the keys that are init fields of the given dataclass."""
    names = {f.name for f in fields(cls) if f.init}
    return {key: value for key, value in data.items() if key in names}


@dataclass
class MediaRef:
    """Reference to a media payload by URL, file id or inline base64 data."""

    kind: Literal["url", "file_id", "data"] = "url"
    url: str | None = None
    file_id: str | None = None
    data_base64: str | None = None
    mime_type: str | None = None
    size_bytes: int | None = None
    sha256: str | None = None
    filename: str | None = None
    width: int | None = None
    height: int | None = None
    duration_ms: int | None = None
    page: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MediaRef":
        return cls(**_known_fields(cls, data))


@dataclass
class AnnotationRef:
    """Citation target for text and annotation blocks."""

    url: str | None = None
    file_id: str | None = None
    page: int | None = None
    index: int | None = None
    title: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AnnotationRef":
        return cls(**_known_fields(cls, data))


@dataclass
class TextBlock:
    type: str = field(default="text", init=False)
    text: str = ""
    annotations: list[AnnotationRef] = field(default_factory=list)


@dataclass
class ImageBlock:
    type: str = field(default="image", init=False)
    media: MediaRef = field(default_factory=MediaRef)
    alt_text: str | None = None
    bbox: list[float] | None = None


@dataclass
class AudioBlock:
    type: str = field(default="audio", init=False)
    media: MediaRef = field(default_factory=MediaRef)
    transcript: str | None = None
    sample_rate: int | None = None
    channels: int | None = None


@dataclass
class VideoBlock:
    type: str = field(default="video", init=False)
    media: MediaRef = field(default_factory=MediaRef)
    thumbnail: MediaRef | None = None


@dataclass
class DocumentBlock:
    type: str = field(default="document", init=False)
    media: MediaRef = field(default_factory=MediaRef)
    pages: list[int] | None = None
    excerpt: str | None = None


@dataclass
class DataBlock:
    type: str = field(default="data", init=False)
    mime_type: str = ""
    data_base64: str | None = None
    media: MediaRef | None = None


@dataclass
class ToolCallBlock:
    """A tool call executed by the agent service itself."""

    type: str = field(default="tool_call", init=False)
    id: str = ""
    name: str = ""
    args: dict[str, Any] = field(default_factory=dict)
    tool_type: str | None = None


@dataclass
class RemoteToolCallBlock:
    """A tool call the agent service asks the client to execute locally."""

    type: str = field(default="remote_tool_call", init=False)
    id: str = ""
    name: str = ""
    args: dict[str, Any] = field(default_factory=dict)
    tool_type: str = "remote"


@dataclass
class ToolResultBlock:
    """Outcome of a tool call, correlated to the call by call_id."""

    type: str = field(default="tool_result", init=False)
    call_id: str = ""
    output: Any = None
    is_error: bool = False
    status: Literal["completed", "failed"] | None = None


@dataclass
class ReasoningBlock:
    type: str = field(default="reasoning", init=False)
    summary: str = ""
    details: list[str] | None = None


@dataclass
class AnnotationBlock:
    type: str = field(default="annotation", init=False)
    kind: Literal["citation", "note"] = "citation"
    refs: list[AnnotationRef] = field(default_factory=list)
    spans: list[tuple[int, int]] | None = None


@dataclass
class ErrorBlock:
    type: str = field(default="error", init=False)
    message: str = ""
    code: str | None = None
    data: dict[str, Any] | None = None


@dataclass
class UnknownBlock:
    """A block whose type this client does not model, kept as received.

    The raw dictionary is sent back unchanged when the message is serialized.
    """

    type: str = ""
    raw: dict[str, Any] = field(default_factory=dict)


ContentBlock = (
    TextBlock
    | ImageBlock
    | AudioBlock
    | VideoBlock
    | DocumentBlock
    | DataBlock
    | ToolCallBlock
    | RemoteToolCallBlock
    | ToolResultBlock
    | ReasoningBlock
    | AnnotationBlock
    | ErrorBlock
    | UnknownBlock
)

BLOCK_TYPES: dict[str, type] = {
    "text": TextBlock,
    "image": ImageBlock,
    "audio": AudioBlock,
    "video": VideoBlock,
    "document": DocumentBlock,
    "data": DataBlock,
    "tool_call": ToolCallBlock,
    "remote_tool_call": RemoteToolCallBlock,
    "tool_result": ToolResultBlock,
    "reasoning": ReasoningBlock,
    "annotation": AnnotationBlock,
    "error": ErrorBlock,
}


def block_from_dict(data: dict[str, Any]) -> ContentBlock:
    """Convert a wire-format dictionary to the matching content block.

    Args:
        data: Block data as a dictionary, discriminated by its "type" key

    Returns:
        The content block dataclass instance, or an UnknownBlock wrapping the
        raw data when the type is not recognized
    """
    block_type = data.get("type")
    block_cls = BLOCK_TYPES.get(block_type)  # type: ignore[arg-type]
    if block_cls is None:
        logger.debug(f"Keeping unrecognized content block type: {block_type}")
        return UnknownBlock(type=str(block_type), raw=dict(data))

    kwargs = _known_fields(block_cls, data)

    # Some servers send the argument bag of a remote call as "arguments"
    if block_cls is RemoteToolCallBlock and "args" not in data and "arguments" in data:
        kwargs["args"] = data["arguments"]

    for key in ("media", "thumbnail"):
        if isinstance(kwargs.get(key), dict):
            kwargs[key] = MediaRef.from_dict(kwargs[key])
    for key in ("annotations", "refs"):
        if isinstance(kwargs.get(key), list):
            kwargs[key] = [
                AnnotationRef.from_dict(ref) if isinstance(ref, dict) else ref
                for ref in kwargs[key]
            ]

    return block_cls(**kwargs)


@dataclass
class TokenUsages:
    completion_tokens: int = 0
    prompt_tokens: int = 0
    total_tokens: int = 0
    reasoning_tokens: int = 0
    cache_creation_input_tokens: int = 0
    cache_read_input_tokens: int = 0
    image_tokens: int | None = 0
    audio_tokens: int | None = 0


@dataclass
class Message:
    """A single conversation message.

    Attributes:
        role: Author of the message (user, assistant, system or tool)
        content: Ordered content blocks
        message_id: Server-assigned id; None until the server assigns one
        delta: True for partial streaming messages
        tools_calls: Pending tool-call references reported by the server
        timestamp: Creation time as a Unix timestamp
        metadata: Free-form metadata
        usages: Token usage reported by the server
        raw: Raw provider payload, if the server includes it
    """

    role: Role
    content: list[ContentBlock] = field(default_factory=list)
    message_id: str | int | None = None
    delta: bool = False
    tools_calls: list[dict[str, Any]] | None = None
    timestamp: float = field(default_factory=time.time)
    metadata: dict[str, Any] = field(default_factory=dict)
    usages: TokenUsages | None = None
    raw: dict[str, Any] | None = None

    @classmethod
    def text_message(
        cls,
        content: str,
        role: Role = "user",
        message_id: str | int | None = None,
    ) -> "Message":
        return cls(role=role, content=[TextBlock(text=content)], message_id=message_id)

    @classmethod
    def tool_message(
        cls,
        content: list[ContentBlock],
        message_id: str | int | None = None,
        meta: dict[str, Any] | None = None,
    ) -> "Message":
        return cls(
            role="tool",
            content=content,
            message_id=message_id,
            metadata=meta or {},
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Message":
        """Build a Message from its wire representation.

        String content is treated as a single text block.

        Args:
            data: Message data as a dictionary

        Returns:
            Message: The parsed message
        """
        raw_content = data.get("content") or []
        if isinstance(raw_content, str):
            content: list[ContentBlock] = [TextBlock(text=raw_content)]
        else:
            content = [block_from_dict(block) for block in raw_content]

        usages = data.get("usages")
        return cls(
            role=data.get("role", "assistant"),
            content=content,
            message_id=data.get("message_id"),
            delta=bool(data.get("delta", False)),
            tools_calls=data.get("tools_calls"),
            timestamp=data.get("timestamp") or time.time(),
            metadata=data.get("metadata") or {},
            usages=TokenUsages(**_known_fields(TokenUsages, usages))
            if isinstance(usages, dict)
            else None,
            raw=data.get("raw"),
        )

    def text(self) -> str:
        """Concatenate text blocks and tool result outputs."""
        parts = []
        for block in self.content:
            if isinstance(block, TextBlock):
                parts.append(block.text)
            elif isinstance(block, ToolResultBlock):
                output = block.output
                parts.append(output if isinstance(output, str) else json.dumps(output))
        return "".join(parts)

    def attach_media(
        self,
        media: MediaRef,
        as_type: Literal["image", "audio", "video", "document"],
    ) -> None:
        if as_type == "image":
            block: ContentBlock = ImageBlock(media=media)
        elif as_type == "audio":
            block = AudioBlock(media=media)
        elif as_type == "video":
            block = VideoBlock(media=media)
        elif as_type == "document":
            block = DocumentBlock(media=media)
        else:
            raise ValueError(f"Unsupported media type: {as_type}")
        self.content.append(block)

    def remote_tool_calls(self) -> list[RemoteToolCallBlock]:
        return [block for block in self.content if isinstance(block, RemoteToolCallBlock)]

    @property
    def has_remote_tool_calls(self) -> bool:
        return any(isinstance(block, RemoteToolCallBlock) for block in self.content)


def has_remote_tool_calls(messages: list[Message]) -> bool:
    """Check whether any message asks the client to execute a tool."""
    return any(message.has_remote_tool_calls for message in messages)
