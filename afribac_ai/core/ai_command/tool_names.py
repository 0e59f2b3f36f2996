"""
AI command tool names.

Closed set of tools the command pipeline can run.

Dependencies: None (pure domain layer)
System role: Tool identity for routing and dispatch
"""

from enum import Enum
from typing import Any


class ToolName(str, Enum):
    """Tools the editor assistant can run."""

    GENERATE = "generate"
    EDIT = "edit"
    COMMENT = "comment"


def parse_tool_name(value: Any) -> ToolName | None:
    """Return the ToolName for ``value``, or None when it is not one."""
    if isinstance(value, ToolName):
        return value
    if not isinstance(value, str):
        return None
    try:
        return ToolName(value)
    except ValueError:
        return None


def allowed_tools(is_selecting: bool) -> tuple[ToolName, ...]:
    """Tools the classifier may choose; ``edit`` needs a selection."""
    if is_selecting:
        return (ToolName.GENERATE, ToolName.EDIT, ToolName.COMMENT)
    return (ToolName.GENERATE, ToolName.COMMENT)
