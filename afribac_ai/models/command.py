"""
AI command request schemas.

Request body for ``POST /api/ai/command``: the editor snapshot, the chat
history and optional model/provider hints.

Dependencies: pydantic
System role: AI command API contracts
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from afribac_ai.models.chat import ChatMessage
from afribac_ai.models.editor import EditorRange


class CommandContext(BaseModel):
    """Editor snapshot sent with a command request."""

    model_config = ConfigDict(populate_by_name=True)

    children: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Editor document value (Slate JSON nodes)",
    )
    selection: EditorRange | None = Field(default=None, description="Current editor selection")
    tool_name: str | None = Field(
        default=None,
        alias="toolName",
        description="Explicit tool to run: generate, edit or comment",
    )


class CommandRequest(BaseModel):
    """Request schema for AI command calls."""

    ctx: CommandContext
    messages: list[ChatMessage] = Field(default_factory=list)
    model: str | None = Field(default=None, description="Model name, optionally '<provider>/<name>'")
    provider: str | None = Field(default=None, description="Preferred provider: openai or gemini")


class ErrorResponse(BaseModel):
    """Error body returned before streaming starts."""

    error: str
    details: str | None = None
