"""
Langfuse tracing integration.

Builds the LangChain callback handlers that report chat model runs to
Langfuse. Tracing is opt-in: nothing is attached unless it is enabled and
both keys are configured.

Dependencies: langfuse, afribac_ai.configs
System role: Tracing for model calls
"""

import logging

from langchain_core.callbacks import BaseCallbackHandler
from langfuse import Langfuse
from langfuse.langchain import CallbackHandler

from afribac_ai.configs.observability import ObservabilitySettings

logger = logging.getLogger(__name__)


def tracing_configured(settings: ObservabilitySettings) -> bool:
    """Whether tracing is enabled and both keys are present."""
    return bool(settings.enable_tracing and settings.public_key and settings.secret_key)


def get_langfuse_callbacks(settings: ObservabilitySettings) -> list[BaseCallbackHandler]:
    """
    Callback handlers to attach to chat models.

    Args:
        settings: Langfuse settings

    Returns:
        list[BaseCallbackHandler]: One Langfuse handler, or empty when tracing is off
    """
    if not tracing_configured(settings):
        logger.debug("Langfuse tracing disabled")
        return []

    # Registers the client the handler reports through
    Langfuse(
        public_key=settings.public_key,
        secret_key=settings.secret_key,
        host=settings.host,
    )
    logger.info("Langfuse tracing enabled", extra={"langfuse_host": settings.host})
    return [CallbackHandler(public_key=settings.public_key)]
