"""
Chat provider selection.

Provides the provider/model decision table and the LangChain chat model
factory built on top of it.
"""

from afribac_ai.core.providers.model_factory import ChatModelFactory
from afribac_ai.core.providers.resolution import (
    Provider,
    ProviderResolution,
    resolve_provider,
)

__all__ = ["ChatModelFactory", "Provider", "ProviderResolution", "resolve_provider"]
