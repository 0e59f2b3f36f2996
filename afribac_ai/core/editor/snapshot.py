"""
Editor snapshot.

Immutable view over the document value and selection sent by the
rich-text editor. Top-level nodes are blocks; selection points address
text leaves by path.

Dependencies: afribac_ai.models.editor
System role: Editor state queries for prompt construction
"""

from collections.abc import Iterator, Sequence
from typing import Any

from afribac_ai.models.editor import EditorPoint, EditorRange

Node = dict[str, Any]
Path = tuple[int, ...]


def iter_text_leaves(node: Node, path: Path) -> Iterator[tuple[Path, Node]]:
    """Yield ``(path, leaf)`` for every text leaf under ``node`` in document order."""
    if "text" in node:
        yield path, node
        return
    for index, child in enumerate(node.get("children") or []):
        yield from iter_text_leaves(child, path + (index,))


class EditorSnapshot:
    """
    Read-only editor state for one request.

    The only derived state is produced by ``add_selection``, which returns
    a new snapshot and never touches this one. That snapshot is flagged
    ``block_selected``: its selection stands for the whole cursor block,
    even when the block is empty and the range itself is collapsed.
    """

    def __init__(
        self,
        children: Sequence[Node],
        selection: EditorRange | None = None,
        block_selected: bool = False,
    ) -> None:
        self._children = tuple(children)
        self._selection = selection
        self._block_selected = block_selected and selection is not None

    @property
    def children(self) -> tuple[Node, ...]:
        return self._children

    @property
    def selection(self) -> EditorRange | None:
        return self._selection

    @property
    def block_selected(self) -> bool:
        """True for the block-wide selection made by ``add_selection``."""
        return self._block_selected

    def has_selection_markup(self) -> bool:
        """Whether serialization places ``<Selection>`` markers."""
        return self.is_expanded() or self._block_selected

    def block(self, index: int) -> Node | None:
        """Top-level block at ``index``, or None when out of range."""
        if 0 <= index < len(self._children):
            return self._children[index]
        return None

    def block_id(self, index: int) -> str:
        """Block identity used in ``<block id>`` markup; falls back to the index."""
        block = self.block(index)
        if block is not None and block.get("id") is not None:
            return str(block["id"])
        return str(index)

    def is_expanded(self) -> bool:
        """True when a non-empty range is selected."""
        return self._selection is not None and not self._selection.is_collapsed

    def is_multi_blocks(self) -> bool:
        """True when the selection spans more than one top-level block."""
        if self._selection is None:
            return False
        start, end = self._selection.start, self._selection.end
        if not start.path or not end.path:
            return False
        return start.path[0] != end.path[0]

    def selected_block_indexes(self) -> range:
        """Indexes of the top-level blocks touched by the selection."""
        if self._selection is None:
            return range(0)
        start, end = self._selection.start, self._selection.end
        if not start.path or not end.path:
            return range(0)
        first = max(start.path[0], 0)
        last = min(end.path[0], len(self._children) - 1)
        return range(first, last + 1)

    def add_selection(self) -> "EditorSnapshot":
        """
        Expand a collapsed cursor to cover its whole block.

        Returns this snapshot unchanged when there is no selection, when a
        range is already selected, or when the cursor block has no text
        leaf. An empty block yields a collapsed range, still flagged as
        block-wide.

        Returns:
            EditorSnapshot: Snapshot with a synthetic block-wide selection
        """
        if self._selection is None or self.is_expanded() or self._block_selected:
            return self
        cursor = self._selection.anchor
        if not cursor.path:
            return self
        block = self.block(cursor.path[0])
        if block is None:
            return self

        leaves = list(iter_text_leaves(block, (cursor.path[0],)))
        if not leaves:
            return self
        first_path, _ = leaves[0]
        last_path, last_leaf = leaves[-1]
        selection = EditorRange(
            anchor=EditorPoint(path=list(first_path), offset=0),
            focus=EditorPoint(path=list(last_path), offset=len(last_leaf.get("text", ""))),
        )
        return EditorSnapshot(self._children, selection, block_selected=True)
