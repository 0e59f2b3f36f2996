"""
Observability module.

Provides structured logging, correlation ID tracking, AI usage logging and
Langfuse tracing.
"""

from afribac_ai.observability.correlation import get_correlation_id, set_correlation_id
from afribac_ai.observability.logger import configure_logging
from afribac_ai.observability.usage import AIServiceType, AIUsageStatus, log_ai_usage

__all__ = [
    "AIServiceType",
    "AIUsageStatus",
    "configure_logging",
    "get_correlation_id",
    "log_ai_usage",
    "set_correlation_id",
]
