"""
AI usage logging.

Writes one structured log record per AI request: which service ran, on
which provider and model, how it ended and how long it took. Recording
usage must never break the request, so ``log_ai_usage`` swallows its own
failures.

Dependencies: logging (stdlib), afribac_ai.observability.log_utils
System role: Usage accounting for AI endpoints
"""

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

from afribac_ai.observability.log_utils import safe_log_value

PROMPT_SUMMARY_MAX_LENGTH = 200

usage_logger = logging.getLogger("afribac_ai.usage")


class AIServiceType(str, Enum):
    """AI endpoints that report usage."""

    COMMAND = "command"
    COPILOT = "copilot"
    EXTRACTION = "extraction"


class AIUsageStatus(str, Enum):
    """Outcome of an AI request."""

    SUCCESS = "success"
    ERROR = "error"
    TIMEOUT = "timeout"


def calculate_total_tokens(input_tokens: int | None, output_tokens: int | None) -> int | None:
    """Sum of input and output tokens, or None if either is unknown."""
    if input_tokens is not None and output_tokens is not None:
        return input_tokens + output_tokens
    return None


def log_ai_usage(
    service_type: AIServiceType,
    provider: str,
    model_name: str,
    status: AIUsageStatus,
    *,
    prompt_summary: str | None = None,
    error_message: str | None = None,
    usage: Mapping[str, Any] | None = None,
    processing_time_ms: float | None = None,
    metadata: dict[str, Any] | None = None,
    logger: logging.Logger | None = None,
) -> None:
    """
    Record one AI request.

    Args:
        service_type: Endpoint that served the request
        provider: Provider that served the request
        model_name: Concrete model name
        status: How the request ended
        prompt_summary: Prompt text, truncated to 200 characters
        error_message: Error text for failed requests
        usage: Token counts (LangChain ``usage_metadata`` shape)
        processing_time_ms: Wall time of the request
        metadata: Extra context
        logger: Target logger (``afribac_ai.usage`` by default)
    """
    log = logger or usage_logger
    try:
        usage = usage or {}
        input_tokens = usage.get("input_tokens")
        output_tokens = usage.get("output_tokens")
        total_tokens = usage.get("total_tokens") or calculate_total_tokens(input_tokens, output_tokens)

        record = {
            "service_type": AIServiceType(service_type).value,
            "provider": provider,
            "model_name": model_name,
            "status": AIUsageStatus(status).value,
            "prompt_summary": prompt_summary[:PROMPT_SUMMARY_MAX_LENGTH] if prompt_summary else None,
            "error_message": safe_log_value(error_message) if error_message else None,
            "input_tokens": input_tokens,
            "output_tokens": output_tokens,
            "total_tokens": total_tokens,
            "processing_time_ms": round(processing_time_ms, 2) if processing_time_ms is not None else None,
            "usage_metadata": {key: safe_log_value(val) for key, val in (metadata or {}).items()},
        }
        level = logging.INFO if record["status"] == AIUsageStatus.SUCCESS.value else logging.WARNING
        log.log(level, "AI usage", extra=record)
    except Exception as e:
        # Usage accounting never fails the request
        log.error(
            "Failed to log AI usage",
            extra={"error_type": type(e).__name__, "error_msg": str(e)},
        )
