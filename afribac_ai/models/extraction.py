"""
Extraction schemas.

Request schema for turning scanned page images into HTML.

Dependencies: pydantic
System role: Extraction API contracts
"""

from pydantic import BaseModel, ConfigDict, Field


class ExtractionRequest(BaseModel):
    """Request schema for page image extraction."""

    model_config = ConfigDict(populate_by_name=True)

    images: list[str] = Field(
        default_factory=list,
        description="Page images as base64 strings or data URLs",
    )
    image_urls: list[str] = Field(
        default_factory=list,
        alias="imageUrls",
        description="Page images to download",
    )
    model: str | None = Field(default=None, description="Model name, optionally '<provider>/<name>'")
    provider: str | None = Field(default=None, description="Preferred provider: openai or gemini")
