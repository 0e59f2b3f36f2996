"""
Test suite for editor snapshot queries and Markdown extraction.

Tests selection state, block-wide cursor expansion, Markdown serialization
of common blocks and the selection / block id renderings used in prompts.

System role: Verification of editor context extraction
"""

from afribac_ai.core.editor import (
    EditorSnapshot,
    get_markdown,
    get_markdown_with_block_ids,
    get_markdown_with_selection,
)
from conftest import paragraph, text_range


def _cell(text: str) -> dict:
    return {"type": "td", "children": [paragraph(text)]}


class TestEditorSnapshot:
    """Test suite for EditorSnapshot selection queries."""

    def test_no_selection_should_not_be_expanded(self, sample_document) -> None:
        """Test a snapshot without selection is neither expanded nor multi-block."""
        # Arrange
        snapshot = EditorSnapshot(sample_document, None)

        # Assert
        assert snapshot.is_expanded() is False
        assert snapshot.is_multi_blocks() is False

    def test_collapsed_cursor_should_not_be_expanded(self, sample_document) -> None:
        """Test a collapsed cursor is not an expanded selection."""
        # Arrange
        snapshot = EditorSnapshot(sample_document, text_range(([0, 0], 2), ([0, 0], 2)))

        # Assert
        assert snapshot.is_expanded() is False

    def test_selection_across_blocks_should_be_multi_block(self, sample_document) -> None:
        """Test a backwards selection across blocks is expanded and multi-block."""
        # Arrange
        snapshot = EditorSnapshot(sample_document, text_range(([1, 0], 3), ([0, 0], 1)))

        # Assert
        assert snapshot.is_expanded() is True
        assert snapshot.is_multi_blocks() is True
        assert list(snapshot.selected_block_indexes()) == [0, 1]

    def test_block_id_should_fall_back_to_index(self) -> None:
        """Test blocks without id use their index."""
        # Arrange
        snapshot = EditorSnapshot([paragraph("a", "x"), paragraph("b")])

        # Assert
        assert snapshot.block_id(0) == "x"
        assert snapshot.block_id(1) == "1"

    def test_add_selection_should_expand_cursor_to_block(self, sample_document) -> None:
        """Test a collapsed cursor becomes a block-wide selection."""
        # Arrange
        snapshot = EditorSnapshot(sample_document, text_range(([0, 1], 2), ([0, 1], 2)))

        # Act
        expanded = snapshot.add_selection()

        # Assert
        assert expanded is not snapshot
        assert expanded.selection.start.path == [0, 0]
        assert expanded.selection.start.offset == 0
        assert expanded.selection.end.path == [0, 1]
        assert expanded.selection.end.offset == len("Niger")

    def test_add_selection_should_not_mutate_original(self, sample_document) -> None:
        """Test the original snapshot keeps its collapsed cursor."""
        # Arrange
        snapshot = EditorSnapshot(sample_document, text_range(([1, 0], 4), ([1, 0], 4)))

        # Act
        snapshot.add_selection()

        # Assert
        assert snapshot.selection.is_collapsed
        assert snapshot.selection.anchor.offset == 4

    def test_add_selection_on_empty_block_should_flag_block_selection(self) -> None:
        """Test an empty cursor block yields a collapsed but block-wide selection."""
        # Arrange
        snapshot = EditorSnapshot([paragraph("Intro"), paragraph("")], text_range(([1, 0], 0), ([1, 0], 0)))

        # Act
        selected = snapshot.add_selection()

        # Assert
        assert selected.selection.is_collapsed
        assert selected.block_selected is True
        assert selected.is_expanded() is False
        assert selected.has_selection_markup() is True
        assert snapshot.block_selected is False
        assert get_markdown_with_selection(selected) == "<Selection></Selection>"
        assert get_markdown_with_selection(snapshot) == "Intro\n\n"

    def test_add_selection_should_keep_expanded_or_missing_selection(self, sample_document) -> None:
        """Test add_selection is a no-op without a cursor or with a range."""
        # Arrange
        empty = EditorSnapshot(sample_document, None)
        ranged = EditorSnapshot(sample_document, text_range(([0, 0], 0), ([0, 0], 2)))

        # Assert
        assert empty.add_selection() is empty
        assert ranged.add_selection() is ranged


class TestGetMarkdown:
    """Test suite for Markdown serialization."""

    def test_should_serialize_marks_and_headings(self, sample_document) -> None:
        """Test bold leaves and headings render as Markdown."""
        # Act
        markdown = get_markdown(EditorSnapshot(sample_document))

        # Assert
        assert markdown == "Le fleuve **Niger**\n\n## Histoire"

    def test_marks_should_keep_edge_whitespace_outside(self) -> None:
        """Test leading and trailing spaces stay outside mark delimiters."""
        # Arrange
        doc = [{"type": "p", "children": [{"text": "a"}, {"text": " gras ", "bold": True}, {"text": "b"}]}]

        # Act
        markdown = get_markdown(EditorSnapshot(doc))

        # Assert
        assert markdown == "a **gras** b"

    def test_should_number_decimal_lists_and_indent_nested_items(self) -> None:
        """Test indent lists render as numbered and nested bullet items."""
        # Arrange
        doc = [
            {"type": "p", "listStyleType": "decimal", "indent": 1, "children": [{"text": "Un"}]},
            {"type": "p", "listStyleType": "decimal", "indent": 1, "children": [{"text": "Deux"}]},
            {"type": "p", "listStyleType": "disc", "indent": 2, "children": [{"text": "Sous"}]},
            paragraph("Fin"),
        ]

        # Act
        markdown = get_markdown(EditorSnapshot(doc))

        # Assert
        assert markdown == "1. Un\n2. Deux\n  - Sous\n\nFin"

    def test_should_serialize_links_code_blocks_and_tables(self) -> None:
        """Test links, code blocks and tables."""
        # Arrange
        doc = [
            {
                "type": "p",
                "children": [
                    {"text": "Voir "},
                    {"type": "a", "url": "https://afribac.org", "children": [{"text": "le site"}]},
                ],
            },
            {
                "type": "code_block",
                "lang": "python",
                "children": [{"type": "code_line", "children": [{"text": "x = 1"}]}],
            },
            {
                "type": "table",
                "children": [
                    {"type": "tr", "children": [_cell("A"), _cell("B")]},
                    {"type": "tr", "children": [_cell("1"), _cell("2")]},
                ],
            },
        ]

        # Act
        markdown = get_markdown(EditorSnapshot(doc))

        # Assert
        assert markdown == (
            "Voir [le site](https://afribac.org)\n\n"
            "```python\nx = 1\n```\n\n"
            "| A | B |\n|---|---|\n| 1 | 2 |"
        )


class TestSelectionMarkdown:
    """Test suite for selection and block id renderings."""

    def test_single_block_selection_should_insert_markers(self, sample_document) -> None:
        """Test markers wrap the selected text inside its block only."""
        # Arrange
        snapshot = EditorSnapshot(sample_document, text_range(([0, 0], 3), ([0, 0], 9)))

        # Act
        markdown = get_markdown_with_selection(snapshot)

        # Assert
        assert markdown == "Le <Selection>fleuve</Selection> **Niger**"

    def test_multi_block_selection_should_render_blocks_without_markers(self, sample_document) -> None:
        """Test a multi-block selection renders the whole blocks unmarked."""
        # Arrange
        snapshot = EditorSnapshot(sample_document, text_range(([0, 0], 3), ([1, 0], 4)))

        # Act
        markdown = get_markdown_with_selection(snapshot)

        # Assert
        assert markdown == "Le fleuve **Niger**\n\n## Histoire"

    def test_no_selection_should_render_whole_document(self, sample_document) -> None:
        """Test without a range the whole document is rendered."""
        # Act
        markdown = get_markdown_with_selection(EditorSnapshot(sample_document, None))

        # Assert
        assert markdown == get_markdown(EditorSnapshot(sample_document))

    def test_block_ids_should_wrap_every_top_level_block(self, sample_document) -> None:
        """Test every block is wrapped in its <block id> span."""
        # Act
        markdown = get_markdown_with_block_ids(EditorSnapshot(sample_document, None))

        # Assert
        assert markdown == '<block id="b1">Le fleuve **Niger**</block>\n<block id="b2">## Histoire</block>'

    def test_block_ids_should_mark_expanded_selection(self, sample_document) -> None:
        """Test an expanded selection is marked inside the block spans."""
        # Arrange
        snapshot = EditorSnapshot(sample_document, text_range(([0, 0], 3), ([1, 0], 4)))

        # Act
        markdown = get_markdown_with_block_ids(snapshot)

        # Assert
        assert '<block id="b1">Le <Selection>fleuve **Niger**</block>' in markdown
        assert '<block id="b2">## Hist</Selection>oire</block>' in markdown
