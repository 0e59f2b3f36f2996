"""
Editor selection schemas.

Slate-style points and ranges as sent by the rich-text editor.

Dependencies: pydantic
System role: Editor selection contracts
"""

from pydantic import BaseModel, Field


class EditorPoint(BaseModel):
    """Position inside a text leaf: node path plus character offset."""

    path: list[int] = Field(description="Path to the text leaf from the document root")
    offset: int = Field(default=0, ge=0, description="Character offset in the leaf")

    def sort_key(self) -> tuple[tuple[int, ...], int]:
        return tuple(self.path), self.offset


class EditorRange(BaseModel):
    """Selection range; anchor and focus may be in either order."""

    anchor: EditorPoint
    focus: EditorPoint

    @property
    def is_collapsed(self) -> bool:
        return self.anchor.sort_key() == self.focus.sort_key()

    @property
    def start(self) -> EditorPoint:
        if self.anchor.sort_key() <= self.focus.sort_key():
            return self.anchor
        return self.focus

    @property
    def end(self) -> EditorPoint:
        if self.anchor.sort_key() <= self.focus.sort_key():
            return self.focus
        return self.anchor
