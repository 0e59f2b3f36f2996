"""API routers."""

from .ai_command import router as ai_command_router
from .ai_copilot import router as ai_copilot_router
from .ai_extract import router as ai_extract_router
from .health import router as health_router

__all__ = [
    "ai_command_router",
    "ai_copilot_router",
    "ai_extract_router",
    "health_router",
]
