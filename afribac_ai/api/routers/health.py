"""
Health check API endpoints.

Routes: GET /health

Dependencies: afribac_ai.configs
System role: Health check HTTP API
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from afribac_ai.api.deps import get_settings_dependency
from afribac_ai.configs import Settings


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str
    providers: list[str] = Field(default_factory=list, description="Providers with a configured key")


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_settings_dependency)) -> HealthResponse:
    """Basic health check, listing the providers that can serve requests."""
    providers = []
    if settings.ai.has_gemini_key:
        providers.append("gemini")
    if settings.ai.has_openai_key:
        providers.append("openai")
    return HealthResponse(status="healthy", message="Server Healthy", providers=providers)
