"""
FastAPI application entry point.

Initializes FastAPI app, registers routers, adds middleware, and configures lifespan.

Dependencies: fastapi, afribac_ai.api, afribac_ai.observability, afribac_ai.configs
System role: Application initialization and configuration
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from afribac_ai import __version__
from afribac_ai.api import api_router
from afribac_ai.api.deps import get_service_cache
from afribac_ai.configs import get_settings
from afribac_ai.observability.logger import configure_logging
from afribac_ai.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    """
    settings = get_settings()

    # Startup
    configure_logging(settings.log_level)
    logger.info("Application startup: logging configured", extra={"environment": settings.environment})

    if not settings.ai.has_any_key:
        logger.warning("No AI provider key configured; AI endpoints will answer 401")

    cache = get_service_cache()
    _ = cache.model_factory
    logger.info("Service cache pre-warmed")

    yield

    # Shutdown
    cache.clear()
    logger.info("Application shutdown: service cache cleared")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    app = FastAPI(
        title="Afribac AI API",
        description="AI assistant for the Afribac rich-text editor",
        version=__version__,
        lifespan=lifespan,
    )

    # Added last runs first: correlation id is set before request logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Correlation-ID", "x-vercel-ai-ui-message-stream"],
    )

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "afribac_ai.main:app",
        host="localhost",
        port=8082,
        reload=True,
    )
