"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
All config modules support environment variable mapping with validation.
"""

from afribac_ai.configs.ai_providers import AIProviderSettings
from afribac_ai.configs.observability import ObservabilitySettings
from afribac_ai.configs.settings import Settings, get_settings

__all__ = ["AIProviderSettings", "ObservabilitySettings", "Settings", "get_settings"]
