"""Inline copilot completions."""

from afribac_ai.core.copilot.copilot_service import CopilotService

__all__ = ["CopilotService"]
