"""
Test suite for the tool router.

Tests explicit tool names, schema-constrained classification calls, the
allowed set per selection state and classifier answers outside that set.

System role: Verification of tool routing
"""

import pytest
from langchain_core.messages import AIMessage
from pydantic import ValidationError

from afribac_ai.core.ai_command import ToolName, ToolRouter, allowed_tools
from afribac_ai.core.ai_command.tool_router import (
    normalize_classifier_output,
    raw_classifier_answer,
    tool_choice_schema,
)
from conftest import RecordingChatModel, user_message

MESSAGES = [user_message("Écris une introduction")]


class TestToolRouterExplicit:
    """Test suite for explicit tool names."""

    async def test_valid_tool_should_skip_classification(self) -> None:
        """Test an explicit valid tool is used without any model call."""
        # Arrange
        model = RecordingChatModel(responses=["comment"])
        router = ToolRouter(model)

        # Act
        resolution = await router.resolve("generate", is_selecting=False, messages=MESSAGES)

        # Assert
        assert resolution.tool is ToolName.GENERATE
        assert resolution.classified is False
        assert model.calls == []

    async def test_invalid_tool_should_fall_back_to_classification(self) -> None:
        """Test an unknown tool name triggers one classification call."""
        # Arrange
        model = RecordingChatModel(responses=["comment"])
        router = ToolRouter(model)

        # Act
        resolution = await router.resolve("summarize", is_selecting=False, messages=MESSAGES)

        # Assert
        assert resolution.tool is ToolName.COMMENT
        assert resolution.classified is True
        assert len(model.calls) == 1


class TestToolRouterClassification:
    """Test suite for classification calls."""

    async def test_no_tool_should_classify_once(self) -> None:
        """Test a missing tool name makes exactly one classification call."""
        # Arrange
        model = RecordingChatModel(responses=["generate"])
        router = ToolRouter(model)

        # Act
        resolution = await router.resolve(None, is_selecting=False, messages=MESSAGES)

        # Assert
        assert resolution.tool is ToolName.GENERATE
        assert len(model.calls) == 1

    async def test_allowed_set_should_exclude_edit_without_selection(self) -> None:
        """Test the classification prompt omits edit when nothing is selected."""
        # Arrange
        model = RecordingChatModel(responses=["generate"])

        # Act
        await ToolRouter(model).resolve(None, is_selecting=False, messages=MESSAGES)

        # Assert
        prompt = model.prompts()[0]
        assert 'Valeurs autorisées : "generate", "comment".' in prompt
        assert "USER: Écris une introduction" in prompt

    async def test_allowed_set_should_include_edit_with_selection(self) -> None:
        """Test the classification prompt offers edit when selecting."""
        # Arrange
        model = RecordingChatModel(responses=["edit"])

        # Act
        resolution = await ToolRouter(model).resolve(None, is_selecting=True, messages=MESSAGES)

        # Assert
        assert 'Valeurs autorisées : "generate", "edit", "comment".' in model.prompts()[0]
        assert resolution.tool is ToolName.EDIT

    async def test_disallowed_answer_should_select_no_tool(self) -> None:
        """Test edit without a selection is announced but selects nothing."""
        # Arrange
        model = RecordingChatModel(responses=["edit"])

        # Act
        resolution = await ToolRouter(model).resolve(None, is_selecting=False, messages=MESSAGES)

        # Assert
        assert resolution.raw == "edit"
        assert resolution.tool is None

    async def test_unknown_answer_should_keep_raw_value(self) -> None:
        """Test an answer outside the enum is kept verbatim."""
        # Arrange
        model = RecordingChatModel(responses=["translate"])

        # Act
        resolution = await ToolRouter(model).resolve(None, is_selecting=True, messages=MESSAGES)

        # Assert
        assert resolution.raw == "translate"
        assert resolution.tool is None

    async def test_quoted_answer_should_be_normalized(self) -> None:
        """Test quotes and whitespace around the answer are ignored."""
        # Arrange
        model = RecordingChatModel(responses=[' "Comment"\n'])

        # Act
        resolution = await ToolRouter(model).resolve(None, is_selecting=False, messages=MESSAGES)

        # Assert
        assert resolution.tool is ToolName.COMMENT
        assert resolution.raw == "comment"


def test_normalize_classifier_output_should_strip_wrappers() -> None:
    """Test code ticks, quotes and periods are stripped."""
    assert normalize_classifier_output("`generate`.") == "generate"
    assert normalize_classifier_output("« edit »") == "edit"


class TestToolRouterStructuredOutput:
    """Test suite for the schema-constrained classification request."""

    def test_schema_should_accept_only_allowed_tools(self) -> None:
        """Test the per-request schema rejects tools outside the allowed set."""
        # Arrange
        schema = tool_choice_schema(allowed_tools(is_selecting=False))

        # Act / Assert
        assert schema.model_validate({"tool": "comment"}).tool == "comment"
        with pytest.raises(ValidationError):
            schema.model_validate({"tool": "edit"})

    def test_schema_should_list_allowed_values(self) -> None:
        """Test the JSON schema exposes the allowed values as an enum."""
        # Act
        json_schema = tool_choice_schema(allowed_tools(is_selecting=True)).model_json_schema()

        # Assert
        assert json_schema["properties"]["tool"]["enum"] == ["generate", "edit", "comment"]

    async def test_plain_text_reply_should_fall_back_to_raw_value(self) -> None:
        """Test a reply without a tool call is read from its text."""
        # Arrange
        model = RecordingChatModel(responses=["comment"], text_only=True)

        # Act
        resolution = await ToolRouter(model).resolve(None, is_selecting=False, messages=MESSAGES)

        # Assert
        assert resolution.tool is ToolName.COMMENT
        assert resolution.classified is True

    async def test_plain_text_outside_enum_should_select_no_tool(self) -> None:
        """Test an unstructured answer outside the enum is announced verbatim."""
        # Arrange
        model = RecordingChatModel(responses=["résumer"], text_only=True)

        # Act
        resolution = await ToolRouter(model).resolve(None, is_selecting=True, messages=MESSAGES)

        # Assert
        assert resolution.raw == "résumer"
        assert resolution.tool is None


def test_raw_classifier_answer_should_read_json_text() -> None:
    """Test a JSON object in the reply text yields its tool value."""
    assert raw_classifier_answer(AIMessage(content='{"tool": "translate"}')) == "translate"
    assert raw_classifier_answer(AIMessage(content="generate")) == "generate"
    assert raw_classifier_answer(None) == ""
