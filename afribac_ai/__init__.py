"""
Afribac AI command service.

FastAPI backend for the Afribac editor assistant: tool routing, prompt
construction and streaming for the generate/edit/comment tools, plus the
inline copilot completion endpoint.
"""

__version__ = "0.1.0"
