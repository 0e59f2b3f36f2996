"""
Markdown joiner for streamed text.

Holds back streamed text while an inline Markdown construct is still open
(bold/italic asterisks, inline code, link text or target) so the editor
never receives half a construct in one delta.

Dependencies: None
System role: Text delta smoothing for the generate/edit tools
"""

import re

DEFAULT_MAX_BUFFER = 120

_LINK_OPEN = re.compile(r"\[[^\]]*$")
_LINK_TARGET_OPEN = re.compile(r"\]\([^)]*$")


def has_open_construct(text: str) -> bool:
    """
    Whether the last line of ``text`` ends inside an inline construct.

    Args:
        text: Buffered text

    Returns:
        bool: True if a ``**``, ``*``, backtick or link is left open
    """
    line = text.rsplit("\n", 1)[-1]
    if line.count("`") % 2:
        return True
    # Inline code content is literal
    line = re.sub(r"`[^`]*`", "", line)
    if line.count("**") % 2:
        return True
    if line.replace("**", "").count("*") % 2:
        return True
    return bool(_LINK_OPEN.search(line) or _LINK_TARGET_OPEN.search(line))


class MarkdownJoiner:
    """
    Buffers text deltas until inline Markdown is balanced.

    Text is released as soon as the buffer holds no open construct, on a
    newline, or when the buffer exceeds ``max_buffer`` characters.
    """

    def __init__(self, max_buffer: int = DEFAULT_MAX_BUFFER) -> None:
        self._buffer = ""
        self._max_buffer = max_buffer

    def push(self, text: str) -> str:
        """
        Add a delta.

        Args:
            text: Streamed text chunk

        Returns:
            str: Text ready to emit (empty while buffering)
        """
        self._buffer += text
        if text.endswith("\n") or len(self._buffer) >= self._max_buffer:
            return self.flush()
        if has_open_construct(self._buffer):
            return ""
        return self.flush()

    def flush(self) -> str:
        """Release everything buffered."""
        released, self._buffer = self._buffer, ""
        return released
