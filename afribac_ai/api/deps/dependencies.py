"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: fastapi, afribac_ai.configs, afribac_ai.core, afribac_ai.observability
System role: DI container for service injection
"""

from functools import lru_cache

from fastapi import Depends

from afribac_ai.configs import Settings, get_settings
from afribac_ai.core.copilot import CopilotService
from afribac_ai.core.extraction import ExtractionService
from afribac_ai.core.providers import ChatModelFactory


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self) -> None:
        self._model_factory: ChatModelFactory | None = None

    @property
    def model_factory(self) -> ChatModelFactory:
        """Get cached chat model factory."""
        if self._model_factory is None:
            from afribac_ai.observability.langfuse_tracer import get_langfuse_callbacks

            settings = get_settings()
            self._model_factory = ChatModelFactory(
                settings=settings.ai,
                callbacks=get_langfuse_callbacks(settings.observability),
            )
        return self._model_factory

    def clear(self) -> None:
        """Clear all cached instances."""
        self._model_factory = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_model_factory(cache: ServiceCache = Depends(get_service_cache)) -> ChatModelFactory:
    """
    Get the shared chat model factory.

    Args:
        cache: Service cache (injected via Depends)

    Returns:
        ChatModelFactory: Factory bound to the configured provider keys
    """
    return cache.model_factory


def get_copilot_service(
    model_factory: ChatModelFactory = Depends(get_model_factory),
) -> CopilotService:
    """
    Get copilot service instance.

    Args:
        model_factory: Chat model factory (injected via Depends)

    Returns:
        CopilotService: Copilot service instance
    """
    return CopilotService(model_factory=model_factory)


def get_extraction_service(
    model_factory: ChatModelFactory = Depends(get_model_factory),
) -> ExtractionService:
    """
    Get extraction service instance.

    Args:
        model_factory: Chat model factory (injected via Depends)

    Returns:
        ExtractionService: Extraction service instance
    """
    return ExtractionService(model_factory=model_factory)
