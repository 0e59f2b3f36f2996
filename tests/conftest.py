"""
Shared test fixtures and configuration for entire test suite.

Provides: recording fake chat model, provider settings, model factory stub,
editor document builders
Dependencies: pytest, langchain_core
System role: Test infrastructure and fixture management
"""

from typing import Any

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_core.messages import AIMessage
from langchain_core.outputs import ChatGeneration, ChatResult
from pydantic import Field

from afribac_ai.configs.ai_providers import AIProviderSettings
from afribac_ai.core.providers import ChatModelFactory, ProviderResolution
from afribac_ai.models.chat import ChatMessage
from afribac_ai.models.editor import EditorPoint, EditorRange


class RecordingChatModel(FakeListChatModel):
    """
    FakeListChatModel that records the messages of every call.

    Supports tool binding: while tools are bound, a non-streaming call
    answers with one tool call to the first tool, carrying the next
    response as its ``tool`` argument. With ``text_only`` the response is
    returned as plain text instead, as a model ignoring the tool would.
    """

    calls: list[Any] = Field(default_factory=list)
    text_only: bool = False

    def bind_tools(self, tools, *, tool_choice=None, **kwargs):
        return self.bind(tools=list(tools))

    def _call(self, messages, stop=None, run_manager=None, **kwargs):
        self.calls.append(list(messages))
        return super()._call(messages, stop=stop, run_manager=run_manager, **kwargs)

    def _generate(self, messages, stop=None, run_manager=None, tools=None, **kwargs):
        text = self._call(messages, stop=stop, run_manager=run_manager, **kwargs)
        if not tools or self.text_only:
            message = AIMessage(content=text)
        else:
            message = AIMessage(
                content="",
                tool_calls=[{"name": tools[0].__name__, "args": {"tool": text}, "id": f"call_{len(self.calls)}"}],
            )
        return ChatResult(generations=[ChatGeneration(message=message)])

    def _stream(self, messages, stop=None, run_manager=None, **kwargs):
        self.calls.append(list(messages))
        yield from super()._stream(messages, stop=stop, run_manager=run_manager, **kwargs)

    async def _astream(self, messages, stop=None, run_manager=None, **kwargs):
        self.calls.append(list(messages))
        async for chunk in super()._astream(messages, stop=stop, run_manager=run_manager, **kwargs):
            yield chunk

    def prompts(self) -> list[str]:
        """Text of the last message of every call."""
        return [call[-1].content for call in self.calls]


class StubModelFactory(ChatModelFactory):
    """Model factory returning a preset model and recording its arguments."""

    def __init__(self, settings: AIProviderSettings, model: Any) -> None:
        super().__init__(settings)
        self.model = model
        self.created: list[dict[str, Any]] = []

    def create(
        self,
        resolution: ProviderResolution,
        temperature: float | None = None,
        max_output_tokens: int | None = None,
    ):
        self.created.append({
            "resolution": resolution,
            "temperature": temperature,
            "max_output_tokens": max_output_tokens,
        })
        return self.model


def make_provider_settings(gemini: str | None = "test-gemini-key", openai: str | None = None, **overrides) -> AIProviderSettings:
    """Provider settings with explicit keys, independent of the environment."""
    return AIProviderSettings(
        _env_file=None,
        google_generative_ai_api_key=gemini,
        openai_api_key=openai,
        **overrides,
    )


def paragraph(text: str, block_id: str | None = None, **marks) -> dict[str, Any]:
    """Single-leaf paragraph block."""
    node: dict[str, Any] = {"type": "p", "children": [{"text": text, **marks}]}
    if block_id is not None:
        node["id"] = block_id
    return node


def text_range(anchor: tuple[list[int], int], focus: tuple[list[int], int]) -> EditorRange:
    """Build an editor range from ``(path, offset)`` pairs."""
    return EditorRange(
        anchor=EditorPoint(path=anchor[0], offset=anchor[1]),
        focus=EditorPoint(path=focus[0], offset=focus[1]),
    )


def user_message(text: str) -> ChatMessage:
    """User chat message with one text part."""
    return ChatMessage(role="user", parts=[{"type": "text", "text": text}])


@pytest.fixture
def gemini_settings() -> AIProviderSettings:
    """Provider settings with only a Gemini key."""
    return make_provider_settings(gemini="test-gemini-key", openai=None)


@pytest.fixture
def no_key_settings() -> AIProviderSettings:
    """Provider settings without any key."""
    return make_provider_settings(gemini=None, openai=None)


@pytest.fixture
def sample_document() -> list[dict[str, Any]]:
    """Two-block document: a paragraph with bold text and a heading."""
    return [
        {
            "type": "p",
            "id": "b1",
            "children": [{"text": "Le fleuve "}, {"text": "Niger", "bold": True}],
        },
        {"type": "h2", "id": "b2", "children": [{"text": "Histoire"}]},
    ]
