"""
API and domain schemas.

Pydantic models for chat messages, editor context, command/copilot/extraction
requests and the UI message stream events.
"""
