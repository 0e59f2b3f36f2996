"""AI command pipeline: tool routing, prompts and streamed tool output."""

from afribac_ai.core.ai_command.pipeline import CommandEventStream, CommandPhase, CommandPipeline
from afribac_ai.core.ai_command.tool_names import ToolName, allowed_tools, parse_tool_name
from afribac_ai.core.ai_command.tool_router import ToolResolution, ToolRouter

__all__ = [
    "CommandEventStream",
    "CommandPhase",
    "CommandPipeline",
    "ToolName",
    "ToolResolution",
    "ToolRouter",
    "allowed_tools",
    "parse_tool_name",
]
