"""
Streaming comment generation.

Streams a JSON array of comments from the model and yields each element
once it is complete. An element counts as complete when the next one has
started or the stream has ended; each is validated as a CommentResult.

Dependencies: langchain_core, pydantic
System role: Structured array streaming for the comment tool
"""

import logging
from collections.abc import AsyncIterator
from typing import Any

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage
from langchain_core.output_parsers import JsonOutputParser
from pydantic import ValidationError

from afribac_ai.core.exceptions import ModelOutputError
from afribac_ai.models.streaming import CommentResult

logger = logging.getLogger(__name__)


def _as_items(parsed: Any) -> list[Any] | None:
    """Accept a bare array or an object wrapping it under ``comments``; None otherwise."""
    if isinstance(parsed, list):
        return parsed
    if isinstance(parsed, dict) and isinstance(parsed.get("comments"), list):
        return parsed["comments"]
    return None


def _validate(item: Any, index: int) -> CommentResult:
    try:
        return CommentResult.model_validate(item)
    except ValidationError as e:
        raise ModelOutputError(
            "Model returned an invalid comment",
            output_preview=str(item)[:200],
            details={"index": index, "errors": e.error_count()},
        ) from e


async def stream_comments(model: BaseChatModel, prompt: str) -> AsyncIterator[CommentResult]:
    """
    Stream comments for a rendered comment prompt.

    Args:
        model: Chat model
        prompt: Rendered comment prompt

    Yields:
        CommentResult: Comments in the order the model produced them

    Raises:
        ModelOutputError: If the reply never parses as a comment array, or
            a completed element does not match the schema
    """
    chain = model | JsonOutputParser()
    emitted = 0
    parsed: Any = None
    items: list[Any] = []

    async for parsed in chain.astream([HumanMessage(content=prompt)]):
        items = _as_items(parsed) or []
        # The last element may still be growing
        while emitted < len(items) - 1:
            yield _validate(items[emitted], emitted)
            emitted += 1

    # Partial parsing never raises; non-JSON text simply yields nothing
    if _as_items(parsed) is None:
        raise ModelOutputError(
            "Model did not return a comment array",
            output_preview=None if parsed is None else str(parsed)[:200],
            details={"comment_count": emitted},
        )

    while emitted < len(items):
        yield _validate(items[emitted], emitted)
        emitted += 1

    logger.debug("Comment stream complete", extra={"comment_count": emitted})
