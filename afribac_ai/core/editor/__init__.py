"""
Editor context extraction.

Read-only view over the editor snapshot sent by the client and its
Markdown serialization with selection and block-id markup.
"""

from afribac_ai.core.editor.markdown import (
    SELECTION_CLOSE,
    SELECTION_OPEN,
    get_markdown,
    get_markdown_with_block_ids,
    get_markdown_with_selection,
)
from afribac_ai.core.editor.snapshot import EditorSnapshot

__all__ = [
    "EditorSnapshot",
    "SELECTION_CLOSE",
    "SELECTION_OPEN",
    "get_markdown",
    "get_markdown_with_block_ids",
    "get_markdown_with_selection",
]
