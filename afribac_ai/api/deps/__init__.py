"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    ServiceCache,
    get_copilot_service,
    get_extraction_service,
    get_model_factory,
    get_service_cache,
    get_settings_dependency,
)

__all__ = [
    "ServiceCache",
    "get_copilot_service",
    "get_extraction_service",
    "get_model_factory",
    "get_service_cache",
    "get_settings_dependency",
]
