"""
Chat model factory.

Builds LangChain chat models for a resolved provider using the configured
API keys. Gemini models come from langchain_google_genai, OpenAI models
from langchain_openai.

Dependencies: langchain_google_genai, langchain_openai, afribac_ai.configs
System role: Provider-specific model construction
"""

import logging
from typing import Any

from langchain_core.callbacks import BaseCallbackHandler
from langchain_core.language_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI

from afribac_ai.configs.ai_providers import AIProviderSettings
from afribac_ai.core.exceptions import ConfigurationError
from afribac_ai.core.providers.resolution import Provider, ProviderResolution

logger = logging.getLogger(__name__)


class ChatModelFactory:
    """
    Creates chat models for resolved providers.

    One factory is shared per process; every call returns a fresh model
    so requests never share model state.
    """

    def __init__(
        self,
        settings: AIProviderSettings,
        callbacks: list[BaseCallbackHandler] | None = None,
    ) -> None:
        """
        Initialize factory with provider settings.

        Args:
            settings: Provider keys and default models
            callbacks: Optional LangChain callbacks attached to every model
        """
        self._settings = settings
        self._callbacks = callbacks or []

    @property
    def settings(self) -> AIProviderSettings:
        return self._settings

    def model_name(self, resolution: ProviderResolution) -> str:
        """Concrete model name for a resolution, defaults applied."""
        return resolution.model_name(
            default_gemini=self._settings.default_gemini_model,
            default_openai=self._settings.default_openai_model,
        )

    def create(
        self,
        resolution: ProviderResolution,
        temperature: float | None = None,
        max_output_tokens: int | None = None,
    ) -> BaseChatModel:
        """
        Create a chat model for the resolved provider.

        Args:
            resolution: Provider and optional model name
            temperature: Sampling temperature (provider default when None)
            max_output_tokens: Output token cap (provider default when None)

        Returns:
            BaseChatModel: Configured LangChain chat model

        Raises:
            ConfigurationError: If the provider has no API key
        """
        model_name = self.model_name(resolution)
        kwargs: dict[str, Any] = {"model": model_name}
        if temperature is not None:
            kwargs["temperature"] = temperature
        if self._callbacks:
            kwargs["callbacks"] = self._callbacks

        logger.debug(
            "Creating chat model",
            extra={"provider": resolution.provider.value, "model": model_name},
        )

        if resolution.provider is Provider.GEMINI:
            if not self._settings.has_gemini_key:
                raise ConfigurationError(details={"provider": resolution.provider.value})
            if max_output_tokens is not None:
                kwargs["max_output_tokens"] = max_output_tokens
            return ChatGoogleGenerativeAI(
                google_api_key=self._settings.google_generative_ai_api_key,
                **kwargs,
            )

        if not self._settings.has_openai_key:
            raise ConfigurationError(details={"provider": resolution.provider.value})
        if max_output_tokens is not None:
            kwargs["max_tokens"] = max_output_tokens
        return ChatOpenAI(api_key=self._settings.openai_api_key, **kwargs)
