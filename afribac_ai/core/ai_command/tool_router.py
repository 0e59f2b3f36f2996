"""
Tool router.

Resolves which tool a command request runs: an explicit, valid tool name
is trusted as is; otherwise one structured classification call asks the
model to pick among the tools allowed for the current selection state.

Dependencies: langchain_core, pydantic, afribac_ai.core.ai_command
System role: Tool selection for the AI command pipeline
"""

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Literal

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage
from pydantic import BaseModel, Field, create_model

from afribac_ai.core.ai_command.command_prompts import get_choose_tool_prompt
from afribac_ai.core.ai_command.prompt_builder import build_structured_prompt
from afribac_ai.core.ai_command.tool_names import ToolName, allowed_tools, parse_tool_name
from afribac_ai.models.chat import ChatMessage, coerce_message_content


@dataclass(frozen=True)
class ToolResolution:
    """
    Outcome of tool routing.

    Attributes:
        raw: Value announced to the client (model output when classified)
        tool: Tool to run, or None when the classifier answered outside
            the allowed set
        classified: Whether a classification call was made
    """

    raw: str
    tool: ToolName | None
    classified: bool


def tool_choice_schema(allowed: Sequence[ToolName]) -> type[BaseModel]:
    """
    Build the classification output schema for one request.

    Args:
        allowed: Tools the answer may name

    Returns:
        type[BaseModel]: Model with a single ``tool`` field restricted to
        the allowed values
    """
    choices = Literal[tuple(tool.value for tool in allowed)]
    return create_model(
        "ToolChoice",
        __doc__="Outil à exécuter pour la dernière demande de l’utilisateur.",
        tool=(choices, Field(description="Une des valeurs autorisées")),
    )


def normalize_classifier_output(text: str) -> str:
    """Strip whitespace, quotes and code ticks around a classifier answer."""
    return text.strip().strip("\"'`«» .").strip()


def raw_classifier_answer(message: Any) -> str:
    """
    Recover the answer from a classification reply that failed validation.

    Looks at the ``tool`` argument of the first tool call, then at a JSON
    object in the message text, then at the text itself.
    """
    if message is None:
        return ""
    for call in getattr(message, "tool_calls", None) or []:
        value = (call.get("args") or {}).get("tool")
        if value is not None:
            return str(value)

    text = coerce_message_content(getattr(message, "content", ""))
    try:
        payload = json.loads(text)
    except ValueError:
        return text
    if isinstance(payload, dict) and payload.get("tool") is not None:
        return str(payload["tool"])
    return text


class ToolRouter:
    """Chooses the tool for one command request."""

    def __init__(self, model: BaseChatModel, logger: logging.Logger | None = None) -> None:
        """
        Initialize router.

        Args:
            model: Chat model used for classification
            logger: Logger for routing decisions (module logger by default)
        """
        self._model = model
        self._logger = logger or logging.getLogger(__name__)

    async def resolve(
        self,
        tool_name_param: str | None,
        is_selecting: bool,
        messages: Sequence[ChatMessage],
    ) -> ToolResolution:
        """
        Resolve the tool for a request.

        Args:
            tool_name_param: Tool name sent by the client, if any
            is_selecting: Whether a range is selected in the editor
            messages: Chat history

        Returns:
            ToolResolution: Tool to announce and run
        """
        explicit = parse_tool_name(tool_name_param)
        if explicit is not None:
            self._logger.info("Using explicit tool", extra={"tool_name": explicit.value})
            return ToolResolution(raw=explicit.value, tool=explicit, classified=False)

        if tool_name_param:
            self._logger.warning(
                "Invalid tool name provided, classifying instead",
                extra={"tool_name_param": str(tool_name_param)[:50]},
            )

        return await self.classify(is_selecting, messages)

    async def classify(self, is_selecting: bool, messages: Sequence[ChatMessage]) -> ToolResolution:
        """
        Ask the model to pick a tool.

        The request is constrained to a schema listing only the allowed
        tools. A reply that fails validation is not fatal: its raw value
        is announced as returned and only selects a tool when it is one of
        the allowed values.
        """
        allowed = allowed_tools(is_selecting)
        prompt = build_structured_prompt(get_choose_tool_prompt(messages, allowed))
        chain = self._model.with_structured_output(tool_choice_schema(allowed), include_raw=True)

        result = await chain.ainvoke([HumanMessage(content=prompt)])
        parsed = result.get("parsed")
        if parsed is not None:
            tool = ToolName(parsed.tool)
            self._logger.info(
                "Classified tool",
                extra={"tool_name": tool.value, "is_selecting": is_selecting},
            )
            return ToolResolution(raw=tool.value, tool=tool, classified=True)

        raw = normalize_classifier_output(raw_classifier_answer(result.get("raw")))
        tool = parse_tool_name(raw.lower())
        if tool not in allowed:
            self._logger.warning(
                "Classifier returned a value outside the allowed tools",
                extra={
                    "raw_tool_name": raw[:50],
                    "allowed": [item.value for item in allowed],
                    "parsing_error": str(result.get("parsing_error"))[:200],
                },
            )
            return ToolResolution(raw=raw, tool=None, classified=True)

        self._logger.info(
            "Classified tool from unstructured reply",
            extra={"tool_name": tool.value, "is_selecting": is_selecting},
        )
        return ToolResolution(raw=tool.value, tool=tool, classified=True)
