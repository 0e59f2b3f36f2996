"""
AI extraction API endpoint.

Routes:
- POST /ai/extract - Stream the HTML extracted from page images (plain text)

Dependencies: afribac_ai.core.extraction
System role: Page extraction HTTP API with streaming
"""

import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse

from afribac_ai.api.deps import get_extraction_service
from afribac_ai.core.exceptions import ConfigurationError, ImageInputError
from afribac_ai.core.extraction import ExtractionService
from afribac_ai.models.command import ErrorResponse
from afribac_ai.models.extraction import ExtractionRequest
from afribac_ai.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump(exclude_none=True))


@router.post(
    "/extract",
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def ai_extract(
    request: ExtractionRequest,
    extraction_service: ExtractionService = Depends(get_extraction_service),
):
    """Extract HTML from scanned page images.

    Flow:
    1. Reject the request when no provider key is configured (401)
    2. Gather inline and downloaded images; none usable is a 400
    3. Pull the first HTML chunk; failures so far are 500
    4. Stream the remaining chunks as plain text

    Args:
        request: Inline images, image URLs and model hints
        extraction_service: Injected ExtractionService

    Returns:
        StreamingResponse: HTML text stream, or a JSON error
    """
    try:
        resolution = extraction_service.resolve(request)
    except ConfigurationError as e:
        logger.warning("Extraction rejected: no provider key configured")
        return _error(401, e.message)

    try:
        images = await extraction_service.collect_images(request)
    except ImageInputError as e:
        logger.warning("Extraction rejected: no usable image", extra={"reason": e.message})
        return _error(400, e.message)

    chunks = extraction_service.stream_html(images, resolution)
    try:
        first = await anext(chunks, "")
    except Exception as e:
        log_exception_with_context(
            logger,
            "Extraction failed before streaming",
            e,
            provider=resolution.provider.value,
            image_count=len(images),
        )
        return _error(500, "Erreur interne du serveur")

    return StreamingResponse(
        _text_stream(first, chunks),
        media_type="text/plain; charset=utf-8",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


async def _text_stream(first: str, chunks: AsyncGenerator[str, None]) -> AsyncGenerator[str, None]:
    """Relay HTML chunks; a failure after the first chunk ends the stream."""
    try:
        if first:
            yield first
        async for chunk in chunks:
            yield chunk
    except Exception as e:
        # Status and headers are already sent
        log_exception_with_context(logger, "Extraction failed while streaming", e)
    finally:
        await chunks.aclose()
