"""
Copilot schemas.

Request/response schemas for inline autocompletion.

Dependencies: pydantic
System role: Copilot API contracts
"""

from pydantic import BaseModel, Field


class CopilotRequest(BaseModel):
    """Request schema for copilot completions."""

    prompt: str = Field(description="Text to continue")
    system: str | None = Field(default=None, description="Optional system instructions")
    model: str | None = Field(default=None, description="Model name, optionally '<provider>/<name>'")
    provider: str | None = Field(default=None, description="Preferred provider: openai or gemini")


class CopilotResponse(BaseModel):
    """Response schema for copilot completions."""

    text: str
    provider: str
    model: str
