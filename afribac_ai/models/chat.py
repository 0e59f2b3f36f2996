"""
Chat message schemas.

Client-owned chat history replayed on every AI request. Messages follow the
UI message shape (role + ordered parts); a plain ``content`` string is
accepted as a single text part.

Dependencies: pydantic
System role: Chat history contracts
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class MessagePart(BaseModel):
    """Single content part of a chat message."""

    model_config = ConfigDict(extra="allow")

    type: str = Field(description="Part type, e.g. 'text'")
    text: str | None = Field(default=None, description="Text content for text parts")


class ChatMessage(BaseModel):
    """
    One chat message in the client session.

    Attributes:
        id: Client-side message identifier
        role: Message author role
        parts: Ordered content parts
        content: Shorthand for a single text part
    """

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    role: Literal["user", "assistant", "system"] = "user"
    parts: list[MessagePart] = Field(default_factory=list)
    content: str | None = None

    @property
    def text(self) -> str:
        """Concatenated text of all text parts (or ``content``)."""
        texts = [part.text for part in self.parts if part.type == "text" and part.text]
        if texts:
            return "".join(texts)
        return self.content or ""


def coerce_message_content(content: Any) -> str:
    """Flatten LangChain message content (str or list of blocks) to text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            item if isinstance(item, str) else (item.get("text", "") if isinstance(item, dict) else str(item))
            for item in content
        )
    return str(content)
