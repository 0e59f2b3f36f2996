"""
API routes module.

FastAPI routers for all HTTP endpoints.
"""

from fastapi import APIRouter

from .routers import (
    ai_command_router,
    ai_copilot_router,
    ai_extract_router,
    health_router,
)

api_router = APIRouter()

# Include all routers
api_router.include_router(health_router)
api_router.include_router(ai_command_router)
api_router.include_router(ai_copilot_router)
api_router.include_router(ai_extract_router)

__all__ = ["api_router"]
