"""
Markdown serialization of editor snapshots.

Converts Slate/Plate JSON nodes to Markdown (with MDX tags for marks and
elements Markdown cannot express), optionally inserting ``<Selection>``
markers at the selection boundaries and wrapping top-level blocks in
``<block id="...">`` spans.

Dependencies: afribac_ai.core.editor.snapshot
System role: Context extraction for AI prompts
"""

from collections.abc import Sequence

from afribac_ai.core.editor.snapshot import EditorSnapshot, Node, Path, iter_text_leaves
from afribac_ai.models.editor import EditorRange

SELECTION_OPEN = "<Selection>"
SELECTION_CLOSE = "</Selection>"

# Applied innermost first
MARK_WRAPPERS: tuple[tuple[str, str, str], ...] = (
    ("code", "`", "`"),
    ("italic", "_", "_"),
    ("bold", "**", "**"),
    ("strikethrough", "~~", "~~"),
    ("underline", "<u>", "</u>"),
    ("highlight", "<mark>", "</mark>"),
    ("subscript", "<sub>", "</sub>"),
    ("superscript", "<sup>", "</sup>"),
    ("kbd", "<kbd>", "</kbd>"),
)

HEADING_LEVELS = {f"h{level}": level for level in range(1, 7)}

INLINE_TYPES = frozenset({"a", "inline_equation", "mention", "date"})


def _is_inline(node: Node) -> bool:
    return "text" in node or node.get("type") in INLINE_TYPES


def _wrap_marks(text: str, leaf: Node) -> str:
    """Wrap leaf text in its marks, keeping edge whitespace outside."""
    core = text.strip()
    if not core:
        return text
    leading = text[: len(text) - len(text.lstrip())]
    trailing = text[len(text.rstrip()):]
    for key, opening, closing in MARK_WRAPPERS:
        if leaf.get(key):
            core = f"{opening}{core}{closing}"
    return f"{leading}{core}{trailing}"


class MarkdownSerializer:
    """
    Serializes editor nodes to Markdown.

    When a selection is given, ``<Selection>`` and ``</Selection>`` are
    inserted at its start and end points. A collapsed selection is only
    marked with ``mark_collapsed``, as an empty ``<Selection></Selection>``.
    """

    def __init__(self, selection: EditorRange | None = None, mark_collapsed: bool = False) -> None:
        self._start: Path | None = None
        self._end: Path | None = None
        self._start_offset = 0
        self._end_offset = 0
        if selection is not None and (mark_collapsed or not selection.is_collapsed):
            self._start = tuple(selection.start.path)
            self._start_offset = selection.start.offset
            self._end = tuple(selection.end.path)
            self._end_offset = selection.end.offset

    # Leaves

    def _marked_text(self, leaf: Node, path: Path) -> str:
        text = leaf.get("text", "")
        inserts: list[tuple[int, str]] = []
        if path == self._end:
            inserts.append((min(self._end_offset, len(text)), SELECTION_CLOSE))
        if path == self._start:
            inserts.append((min(self._start_offset, len(text)), SELECTION_OPEN))
        # Highest offset first keeps the lower offsets valid; on a tie the
        # close marker goes in first so the open marker lands before it
        for offset, marker in sorted(inserts, key=lambda item: item[0], reverse=True):
            text = text[:offset] + marker + text[offset:]
        return text

    def serialize_leaf(self, leaf: Node, path: Path) -> str:
        return _wrap_marks(self._marked_text(leaf, path), leaf)

    def plain_text(self, node: Node, path: Path) -> str:
        """Raw text of a node (no marks), selection markers included."""
        return "".join(self._marked_text(leaf, leaf_path) for leaf_path, leaf in iter_text_leaves(node, path))

    # Inline content

    def serialize_inline(self, node: Node, path: Path) -> str:
        if "text" in node:
            return self.serialize_leaf(node, path)

        node_type = node.get("type")
        if node_type == "inline_equation":
            return f"${node.get('texExpression', '')}$"
        if node_type == "mention":
            return f"@{node.get('value', '')}"
        if node_type == "date":
            return f"<date>{node.get('date', '')}</date>"

        inner = self.serialize_inline_children(node, path)
        if node_type == "a":
            return f"[{inner}]({node.get('url', '')})"
        return inner

    def serialize_inline_children(self, node: Node, path: Path) -> str:
        return "".join(
            self.serialize_inline(child, path + (index,))
            for index, child in enumerate(node.get("children") or [])
        )

    # Blocks

    def serialize_children(self, node: Node, path: Path) -> str:
        """Inline children as one line, block children as separate blocks."""
        children = node.get("children") or []
        if all(_is_inline(child) for child in children):
            return self.serialize_inline_children(node, path)
        return self.serialize_blocks(children, path)

    def serialize_blocks(self, nodes: Sequence[Node], base_path: Path = (), indexes: Sequence[int] | None = None) -> str:
        """
        Serialize sibling blocks.

        Args:
            nodes: Sibling block nodes
            base_path: Path of their parent
            indexes: Optional subset of sibling indexes to render

        Returns:
            str: Blocks joined by blank lines (list items by single newlines)
        """
        prefixes = list_prefixes(nodes)
        selected = range(len(nodes)) if indexes is None else indexes
        parts: list[str] = []
        previous_was_list = False
        for index in selected:
            rendered = self.serialize_block(nodes[index], base_path + (index,), prefixes[index])
            is_list = prefixes[index] is not None
            if parts:
                parts.append("\n" if is_list and previous_was_list else "\n\n")
            parts.append(rendered)
            previous_was_list = is_list
        return "".join(parts)

    def serialize_block(self, node: Node, path: Path, list_prefix: str | None = None) -> str:
        node_type = node.get("type", "p")

        if list_prefix is not None:
            return list_prefix + self.serialize_children(node, path)

        if node_type in HEADING_LEVELS:
            return "#" * HEADING_LEVELS[node_type] + " " + self.serialize_inline_children(node, path)

        if node_type == "blockquote":
            content = self.serialize_children(node, path)
            return "\n".join(f"> {line}" if line else ">" for line in content.split("\n"))

        if node_type == "code_block":
            lines = [
                self.plain_text(line, path + (index,))
                for index, line in enumerate(node.get("children") or [])
            ]
            return f"```{node.get('lang') or ''}\n" + "\n".join(lines) + "\n```"

        if node_type == "hr":
            return "---"

        if node_type == "img":
            alt = node.get("alt") or ""
            return f"![{alt}]({node.get('url', '')})"

        if node_type == "equation":
            return f"$$\n{node.get('texExpression', '')}\n$$"

        if node_type == "table":
            return self.serialize_table(node, path)

        if node_type == "callout":
            return f"<callout>{self.serialize_children(node, path)}</callout>"

        if node_type == "toc":
            return "<toc />"

        if node_type == "column_group":
            columns = [
                "<column>\n" + self.serialize_children(column, path + (index,)) + "\n</column>"
                for index, column in enumerate(node.get("children") or [])
            ]
            return "<column_group>\n" + "\n".join(columns) + "\n</column_group>"

        return self.serialize_children(node, path)

    def serialize_table(self, node: Node, path: Path) -> str:
        rows: list[list[str]] = []
        for row_index, row in enumerate(node.get("children") or []):
            cells = []
            for cell_index, cell in enumerate(row.get("children") or []):
                cell_path = path + (row_index, cell_index)
                text = self.serialize_children(cell, cell_path)
                cells.append(text.replace("\n\n", "<br />").replace("|", "\\|"))
            rows.append(cells)
        if not rows:
            return ""

        width = max(len(row) for row in rows)
        rows = [row + [""] * (width - len(row)) for row in rows]
        lines = ["| " + " | ".join(rows[0]) + " |", "|" + "|".join(["---"] * width) + "|"]
        lines.extend("| " + " | ".join(row) + " |" for row in rows[1:])
        return "\n".join(lines)


def list_prefixes(nodes: Sequence[Node]) -> list[str | None]:
    """
    Compute list item prefixes for indent-based list blocks.

    Blocks carrying ``listStyleType`` render as list items; ``decimal``
    lists are numbered per indent level, restarting after any non-list
    block. Other blocks get None.
    """
    prefixes: list[str | None] = []
    counters: dict[int, int] = {}
    for node in nodes:
        style = node.get("listStyleType")
        if not style:
            counters.clear()
            prefixes.append(None)
            continue

        indent = max(int(node.get("indent") or 1), 1)
        for deeper in [level for level in counters if level > indent]:
            del counters[deeper]
        pad = "  " * (indent - 1)

        if style == "decimal":
            number = int(node.get("listStart") or counters.get(indent, 0) + 1)
            counters[indent] = number
            prefixes.append(f"{pad}{number}. ")
        elif style == "todo":
            counters.pop(indent, None)
            prefixes.append(f"{pad}- [{'x' if node.get('checked') else ' '}] ")
        else:
            counters.pop(indent, None)
            prefixes.append(f"{pad}- ")
    return prefixes


def get_markdown(snapshot: EditorSnapshot) -> str:
    """Whole document as Markdown, without selection markup."""
    return MarkdownSerializer().serialize_blocks(snapshot.children)


def get_markdown_with_selection(snapshot: EditorSnapshot) -> str:
    """
    Markdown of the selected blocks.

    - No selection, or a collapsed cursor: the whole document, unmarked.
    - Selection spanning several blocks: those blocks in full, unmarked,
      since the whole span is the unit being worked on.
    - Selection inside one block: that block with ``<Selection>`` markers.
    - Block-wide selection of an empty block: ``<Selection></Selection>``.
    """
    if not snapshot.has_selection_markup():
        return get_markdown(snapshot)

    indexes = snapshot.selected_block_indexes()
    if snapshot.is_multi_blocks():
        return MarkdownSerializer().serialize_blocks(snapshot.children, indexes=indexes)
    serializer = MarkdownSerializer(snapshot.selection, mark_collapsed=snapshot.block_selected)
    return serializer.serialize_blocks(snapshot.children, indexes=indexes)


def get_markdown_with_block_ids(snapshot: EditorSnapshot) -> str:
    """
    Whole document as ``<block id="...">`` spans.

    An expanded selection is marked with ``<Selection>`` markers, opening
    in its first block and closing in its last.
    """
    selection = snapshot.selection if snapshot.is_expanded() else None
    serializer = MarkdownSerializer(selection)
    prefixes = list_prefixes(snapshot.children)
    return "\n".join(
        f'<block id="{snapshot.block_id(index)}">'
        f"{serializer.serialize_block(node, (index,), prefixes[index])}</block>"
        for index, node in enumerate(snapshot.children)
    )
