"""
AI command API endpoint.

Routes:
- POST /ai/command - Run the editor assistant and stream UI message events (SSE)

Dependencies: afribac_ai.core.ai_command, afribac_ai.core.providers
System role: AI command HTTP API with streaming
"""

import json
import logging
import time
from collections.abc import AsyncGenerator
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse

from afribac_ai.api.deps import get_model_factory
from afribac_ai.core.ai_command import CommandPipeline
from afribac_ai.core.exceptions import ConfigurationError
from afribac_ai.core.providers import ChatModelFactory, ProviderResolution, resolve_provider
from afribac_ai.models.command import CommandRequest, ErrorResponse
from afribac_ai.models.streaming import ErrorEvent, StreamEvent
from afribac_ai.observability.log_utils import log_exception_with_context
from afribac_ai.observability.usage import AIServiceType, AIUsageStatus, log_ai_usage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])

SSE_DONE = "[DONE]"

UI_MESSAGE_STREAM_HEADERS = {
    "x-vercel-ai-ui-message-stream": "v1",
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Disable nginx buffering
}


def format_sse(payload: dict[str, Any] | str) -> str:
    """Frame one SSE ``data:`` message."""
    data = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
    return f"data: {data}\n\n"


def _prompt_summary(request: CommandRequest) -> str | None:
    for message in reversed(request.messages):
        if message.role == "user" and message.text:
            return message.text
    return None


@router.post(
    "/command",
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def ai_command(
    request: CommandRequest,
    model_factory: ChatModelFactory = Depends(get_model_factory),
):
    """Run an AI command against the editor snapshot.

    Flow:
    1. Reject the request when no provider key is configured (401)
    2. Resolve provider and model, build the pipeline
    3. Pull the first event (tool announcement); failures so far are 500
    4. Stream the remaining events as SSE, ending with ``[DONE]``

    SSE Format:
        data: {"type": "data-toolName", "data": "comment"}

        data: {"type": "data-comment", "id": "...", "data": {"comment": {...}, "status": "streaming"}}

        data: {"type": "text-delta", "id": "...", "delta": "..."}

        data: [DONE]

    Args:
        request: Editor context, chat history and model hints
        model_factory: Injected ChatModelFactory

    Returns:
        StreamingResponse: SSE stream of UI message events, or a JSON error
    """
    settings = model_factory.settings
    if not settings.has_any_key:
        logger.warning("AI command rejected: no provider key configured")
        return JSONResponse(
            status_code=401,
            content=ErrorResponse(error=ConfigurationError().message).model_dump(exclude_none=True),
        )

    resolution = resolve_provider(
        model=request.model,
        provider=request.provider,
        has_gemini_key=settings.has_gemini_key,
        has_openai_key=settings.has_openai_key,
    )
    model_name = model_factory.model_name(resolution)
    logger.info(
        "AI command received",
        extra={
            "provider": resolution.provider.value,
            "model": model_name,
            "fell_back": resolution.fell_back,
            "tool_name_param": request.ctx.tool_name,
            "message_count": len(request.messages),
        },
    )

    start = time.perf_counter()
    try:
        model = model_factory.create(resolution, temperature=settings.command_temperature)
        events = CommandPipeline(model).run(request.ctx, request.messages)
        first = await anext(events)
    except Exception as e:
        log_exception_with_context(
            logger,
            "AI command failed before streaming",
            e,
            provider=resolution.provider.value,
            model=model_name,
        )
        log_ai_usage(
            AIServiceType.COMMAND,
            resolution.provider.value,
            model_name,
            AIUsageStatus.ERROR,
            prompt_summary=_prompt_summary(request),
            error_message=str(e),
            processing_time_ms=(time.perf_counter() - start) * 1000,
        )
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Failed to process AI request", details=str(e)).model_dump(),
        )

    return StreamingResponse(
        _event_stream(first, events, request, resolution, model_name, start),
        media_type="text/event-stream",
        headers=UI_MESSAGE_STREAM_HEADERS,
    )


async def _event_stream(
    first: StreamEvent,
    events: AsyncGenerator[StreamEvent, None],
    request: CommandRequest,
    resolution: ProviderResolution,
    model_name: str,
    start: float,
) -> AsyncGenerator[str, None]:
    """Generate SSE frames from the pipeline events."""
    status = AIUsageStatus.SUCCESS
    error_message = None
    event_count = 1
    tool_name = first.to_dict().get("data")

    try:
        yield format_sse(first.to_dict())
        try:
            async for event in events:
                event_count += 1
                yield format_sse(event.to_dict())
        except Exception as e:
            status = AIUsageStatus.ERROR
            error_message = str(e)
            log_exception_with_context(
                logger,
                "AI command failed while streaming",
                e,
                provider=resolution.provider.value,
                model=model_name,
                event_count=event_count,
            )
            yield format_sse(ErrorEvent(error_text=error_message).to_dict())

        yield format_sse(SSE_DONE)
    finally:
        await events.aclose()
        log_ai_usage(
            AIServiceType.COMMAND,
            resolution.provider.value,
            model_name,
            status,
            prompt_summary=_prompt_summary(request),
            error_message=error_message,
            processing_time_ms=(time.perf_counter() - start) * 1000,
            metadata={"tool_name": tool_name, "event_count": event_count},
        )
