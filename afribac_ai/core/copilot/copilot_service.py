"""
Copilot service.

Short inline completions for the editor: one model call with a small
output budget, resolved against the same provider rules as the command
pipeline and bounded by a timeout.

Dependencies: langchain_core, afribac_ai.core.providers, afribac_ai.observability
System role: Inline autocompletion
"""

import asyncio
import logging
import time

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from afribac_ai.core.exceptions import ConfigurationError
from afribac_ai.core.providers import ChatModelFactory, ProviderResolution, resolve_provider
from afribac_ai.models.chat import coerce_message_content
from afribac_ai.models.copilot import CopilotRequest, CopilotResponse
from afribac_ai.observability.usage import AIServiceType, AIUsageStatus, log_ai_usage

logger = logging.getLogger(__name__)


class CopilotService:
    """Generates inline completions."""

    def __init__(self, model_factory: ChatModelFactory) -> None:
        """
        Initialize copilot service.

        Args:
            model_factory: Builds chat models for resolved providers
        """
        self._factory = model_factory

    def resolve(self, request: CopilotRequest) -> ProviderResolution:
        """
        Resolve provider and model for a request.

        Raises:
            ConfigurationError: If no provider key is configured
        """
        settings = self._factory.settings
        if not settings.has_any_key:
            raise ConfigurationError()
        return resolve_provider(
            model=request.model,
            provider=request.provider,
            has_gemini_key=settings.has_gemini_key,
            has_openai_key=settings.has_openai_key,
        )

    async def complete(self, request: CopilotRequest) -> CopilotResponse:
        """
        Complete the request prompt.

        Args:
            request: Prompt, optional system text and model hints

        Returns:
            CopilotResponse: Completion text with the provider and model used

        Raises:
            ConfigurationError: If no provider key is configured
            TimeoutError: If the model does not answer within the configured timeout
        """
        settings = self._factory.settings
        resolution = self.resolve(request)
        model_name = self._factory.model_name(resolution)
        model = self._factory.create(
            resolution,
            temperature=settings.copilot_temperature,
            max_output_tokens=settings.copilot_max_output_tokens,
        )

        messages: list[BaseMessage] = []
        if request.system:
            messages.append(SystemMessage(content=request.system))
        messages.append(HumanMessage(content=request.prompt))

        logger.info(
            "Copilot completion",
            extra={
                "provider": resolution.provider.value,
                "model": model_name,
                "fell_back": resolution.fell_back,
                "prompt_length": len(request.prompt),
            },
        )

        start = time.perf_counter()
        try:
            result = await asyncio.wait_for(
                model.ainvoke(messages),
                timeout=settings.copilot_timeout_seconds,
            )
        except asyncio.TimeoutError:
            log_ai_usage(
                AIServiceType.COPILOT,
                resolution.provider.value,
                model_name,
                AIUsageStatus.TIMEOUT,
                prompt_summary=request.prompt,
                processing_time_ms=(time.perf_counter() - start) * 1000,
            )
            raise
        except Exception as e:
            log_ai_usage(
                AIServiceType.COPILOT,
                resolution.provider.value,
                model_name,
                AIUsageStatus.ERROR,
                prompt_summary=request.prompt,
                error_message=str(e),
                processing_time_ms=(time.perf_counter() - start) * 1000,
            )
            raise

        log_ai_usage(
            AIServiceType.COPILOT,
            resolution.provider.value,
            model_name,
            AIUsageStatus.SUCCESS,
            prompt_summary=request.prompt,
            usage=getattr(result, "usage_metadata", None),
            processing_time_ms=(time.perf_counter() - start) * 1000,
        )
        return CopilotResponse(
            text=coerce_message_content(result.content),
            provider=resolution.provider.value,
            model=model_name,
        )
