"""
AI copilot API endpoint.

Routes:
- POST /ai/copilot - Short inline completion

Dependencies: afribac_ai.core.copilot
System role: Copilot HTTP API
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from afribac_ai.api.deps import get_copilot_service
from afribac_ai.core.copilot import CopilotService
from afribac_ai.core.exceptions import ConfigurationError
from afribac_ai.models.command import ErrorResponse
from afribac_ai.models.copilot import CopilotRequest, CopilotResponse
from afribac_ai.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post(
    "/copilot",
    response_model=CopilotResponse,
    responses={401: {"model": ErrorResponse}, 408: {"description": "Completion timed out"}, 500: {"model": ErrorResponse}},
)
async def ai_copilot(
    request: CopilotRequest,
    copilot_service: CopilotService = Depends(get_copilot_service),
):
    """Complete the text before the editor cursor.

    Args:
        request: Prompt, optional system text and model hints
        copilot_service: Injected CopilotService

    Returns:
        CopilotResponse: Completion with the provider and model used

    Raises:
        401: No provider key configured
        408: Completion exceeded the configured timeout
        500: Processing error
    """
    try:
        return await copilot_service.complete(request)
    except ConfigurationError as e:
        logger.warning("Copilot rejected: no provider key configured")
        return JSONResponse(status_code=401, content=ErrorResponse(error=e.message).model_dump(exclude_none=True))
    except asyncio.TimeoutError:
        logger.warning("Copilot completion timed out", extra={"prompt_length": len(request.prompt)})
        return Response(status_code=408)
    except Exception as e:
        log_exception_with_context(logger, "Copilot completion failed", e, prompt_length=len(request.prompt))
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Failed to process AI request").model_dump(exclude_none=True),
        )
