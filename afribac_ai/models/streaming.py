"""
Streaming event schemas for the AI command endpoint.

Defines the typed events written to the UI message stream. Every event
serializes to the JSON object the editor client expects
(``{"type": "data-toolName", "data": "edit"}`` and so on).

Dependencies: pydantic
System role: Streaming protocol schemas
"""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class StreamEventType(str, Enum):
    """Server-to-client event types."""

    TOOL_NAME = "data-toolName"
    COMMENT = "data-comment"
    TEXT_START = "text-start"
    TEXT_DELTA = "text-delta"
    TEXT_END = "text-end"
    ERROR = "error"


class CommentStatus(str, Enum):
    """Lifecycle of the comment stream."""

    STREAMING = "streaming"
    FINISHED = "finished"


class CommentResult(BaseModel):
    """
    A single review comment anchored to a document block.

    Attributes:
        block_id: Id of the first block the comment refers to
        content: Minimal original excerpt being commented on
        comment: Short comment or explanation
    """

    model_config = ConfigDict(populate_by_name=True)

    block_id: str = Field(
        alias="blockId",
        description="The id of the starting block. If the comment spans multiple blocks, use the id of the first block.",
    )
    content: str = Field(
        description="The original document fragment to be commented on. Multiple blocks are separated by a blank line.",
    )
    comment: str = Field(description="A brief comment or explanation for this fragment.")


class StreamEvent(BaseModel):
    """Base streaming event model."""

    model_config = ConfigDict(populate_by_name=True)

    type: StreamEventType

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return self.model_dump(mode="json", by_alias=True)


class ToolNameEvent(StreamEvent):
    """Announces the tool that will run; ``data`` may be a raw unknown value."""

    type: Literal[StreamEventType.TOOL_NAME] = StreamEventType.TOOL_NAME
    data: str


class CommentEventData(BaseModel):
    """Payload of a comment event; ``comment`` is None on the final sentinel."""

    comment: CommentResult | None
    status: CommentStatus


class CommentEvent(StreamEvent):
    """One streamed comment, or the finished sentinel."""

    type: Literal[StreamEventType.COMMENT] = StreamEventType.COMMENT
    id: str
    data: CommentEventData


class TextStartEvent(StreamEvent):
    """Opens a text part."""

    type: Literal[StreamEventType.TEXT_START] = StreamEventType.TEXT_START
    id: str


class TextDeltaEvent(StreamEvent):
    """Appends text to an open text part."""

    type: Literal[StreamEventType.TEXT_DELTA] = StreamEventType.TEXT_DELTA
    id: str
    delta: str


class TextEndEvent(StreamEvent):
    """Closes a text part."""

    type: Literal[StreamEventType.TEXT_END] = StreamEventType.TEXT_END
    id: str


class ErrorEvent(StreamEvent):
    """Terminal error reported after streaming has started."""

    type: Literal[StreamEventType.ERROR] = StreamEventType.ERROR
    error_text: str = Field(alias="errorText")
