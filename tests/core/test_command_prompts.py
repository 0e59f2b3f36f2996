"""
Test suite for AI command prompts.

Tests the classification, comment, generate and edit prompt specs built
from an editor snapshot and chat history.

System role: Verification of tool prompt construction
"""

import pytest

from afribac_ai.core.ai_command.command_prompts import (
    get_choose_tool_prompt,
    get_comment_prompt,
    get_edit_prompt,
    get_generate_prompt,
    get_tool_prompt,
)
from afribac_ai.core.ai_command.prompt_builder import OutputFormatting
from afribac_ai.core.ai_command.tool_names import ToolName, allowed_tools
from afribac_ai.core.editor import EditorSnapshot
from afribac_ai.core.exceptions import EditSelectionRequiredError
from conftest import paragraph, text_range, user_message


@pytest.fixture
def messages():
    return [user_message("Améliore ce passage")]


class TestChooseToolPrompt:
    """Test suite for the classification prompt."""

    def test_should_list_only_allowed_values(self, messages) -> None:
        """Test the allowed values rule reflects the selection state."""
        # Act
        spec = get_choose_tool_prompt(messages, allowed_tools(is_selecting=False))

        # Assert
        assert spec.rules.startswith('- Valeurs autorisées : "generate", "comment".')
        assert spec.history == "USER: Améliore ce passage"
        assert spec.background_data is None

    def test_selection_should_allow_edit(self, messages) -> None:
        """Test edit is allowed when selecting."""
        # Act
        spec = get_choose_tool_prompt(messages, allowed_tools(is_selecting=True))

        # Assert
        assert '"generate", "edit", "comment"' in spec.rules


class TestCommentPrompt:
    """Test suite for the comment prompt."""

    def test_background_should_use_block_ids(self, sample_document, messages) -> None:
        """Test the document is sent as <block id> spans."""
        # Act
        spec = get_comment_prompt(EditorSnapshot(sample_document), messages)

        # Assert
        assert spec.background_data.startswith('<block id="b1">')
        assert spec.output_formatting is None
        assert spec.prefilled_response is None


class TestGeneratePrompt:
    """Test suite for the generate prompt."""

    def test_cursor_block_should_be_selected(self, sample_document, messages) -> None:
        """Test a collapsed cursor selects its whole block in the background."""
        # Arrange
        snapshot = EditorSnapshot(sample_document, text_range(([1, 0], 2), ([1, 0], 2)))

        # Act
        spec = get_generate_prompt(snapshot, messages)

        # Assert
        assert spec.background_data == "## <Selection>Histoire</Selection>"

    def test_empty_cursor_block_should_carry_empty_selection_anchor(self, messages) -> None:
        """Test a cursor on an empty line still sends a <Selection> anchor."""
        # Arrange
        children = [paragraph("Intro sur le Niger.", "b1"), paragraph("", "b2")]
        snapshot = EditorSnapshot(children, text_range(([1, 0], 0), ([1, 0], 0)))

        # Act
        spec = get_generate_prompt(snapshot, messages)

        # Assert
        assert spec.background_data == "<Selection></Selection>"

    def test_no_selection_should_send_whole_document(self, sample_document, messages) -> None:
        """Test without a cursor the whole document is the background."""
        # Act
        spec = get_generate_prompt(EditorSnapshot(sample_document), messages)

        # Assert
        assert spec.background_data == "Le fleuve **Niger**\n\n## Histoire"


class TestEditPrompt:
    """Test suite for the edit prompt."""

    def test_without_selection_should_raise(self, sample_document, messages) -> None:
        """Test edit requires a selection."""
        # Act / Assert
        with pytest.raises(EditSelectionRequiredError):
            get_edit_prompt(EditorSnapshot(sample_document), messages, is_selecting=False)

    def test_single_block_should_prefill_text_before_selection(self, sample_document, messages) -> None:
        """Test the text before <Selection> becomes the prefilled response."""
        # Arrange
        snapshot = EditorSnapshot(sample_document, text_range(([0, 0], 3), ([0, 0], 9)))

        # Act
        spec = get_edit_prompt(snapshot, messages, is_selecting=True)

        # Assert
        assert spec.background_data == "Le <Selection>fleuve</Selection> **Niger**"
        assert spec.prefilled_response == "Le "
        assert spec.output_formatting is OutputFormatting.MARKDOWN

    def test_multi_block_should_replace_whole_span(self, sample_document, messages) -> None:
        """Test a multi-block selection has no prefilled response."""
        # Arrange
        snapshot = EditorSnapshot(sample_document, text_range(([0, 0], 3), ([1, 0], 4)))

        # Act
        spec = get_edit_prompt(snapshot, messages, is_selecting=True)

        # Assert
        assert spec.background_data == "Le fleuve **Niger**\n\n## Histoire"
        assert spec.prefilled_response is None
        assert spec.output_formatting is OutputFormatting.MARKDOWN

    def test_dispatch_should_use_snapshot_selection_state(self, sample_document, messages) -> None:
        """Test get_tool_prompt routes edit with the snapshot's selection state."""
        # Arrange
        snapshot = EditorSnapshot(sample_document, text_range(([0, 0], 0), ([0, 0], 2)))

        # Act
        spec = get_tool_prompt(ToolName.EDIT, snapshot, messages)

        # Assert
        assert spec.prefilled_response == ""
