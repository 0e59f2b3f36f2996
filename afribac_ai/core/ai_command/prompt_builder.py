"""
Structured prompt builder.

Renders a PromptSpec into the single instruction string sent to the model.
Section order is fixed: task, rules, examples, background data, history,
output formatting, prefilled response. Optional sections that are absent
are left out entirely.

Dependencies: afribac_ai.models.chat
System role: Prompt assembly for the AI command tools
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from afribac_ai.models.chat import ChatMessage


class OutputFormatting(str, Enum):
    """Output format instructions appended to a prompt."""

    MARKDOWN = "markdown"


OUTPUT_FORMATTING_INSTRUCTIONS: dict[OutputFormatting, str] = {
    OutputFormatting.MARKDOWN: (
        "Réponds en Markdown (MDX accepté). "
        "N’entoure pas la réponse de blocs de code et n’ajoute aucun commentaire autour."
    ),
}


@dataclass(frozen=True)
class PromptSpec:
    """
    Value object describing one model prompt.

    Attributes:
        task: What the model must do
        rules: Constraints, one per line
        examples: Few-shot examples, oldest first
        history: Rendered conversation history
        background_data: Document context the model may use
        output_formatting: Output format instructions
        prefilled_response: Text the model's answer is appended to
    """

    task: str
    rules: str
    examples: tuple[str, ...] = field(default_factory=tuple)
    history: str = ""
    background_data: str | None = None
    output_formatting: OutputFormatting | None = None
    prefilled_response: str | None = None


def _section(tag: str, body: str, intro: str | None = None) -> str:
    # Only newlines are trimmed; a prefill's trailing space is significant
    content = body.strip("\n")
    block = f"<{tag}>\n{content}\n</{tag}>"
    return f"{intro}\n{block}" if intro else block


def build_structured_prompt(spec: PromptSpec) -> str:
    """
    Render a prompt spec into one instruction string.

    Args:
        spec: Prompt configuration

    Returns:
        str: Sections separated by blank lines, in fixed order
    """
    sections = [_section("task", spec.task), _section("rules", spec.rules)]

    if spec.examples:
        rendered = "\n".join(f"<example>\n{example.strip()}\n</example>" for example in spec.examples)
        sections.append(_section("examples", rendered, "Voici des exemples de demandes et de réponses attendues :"))

    if spec.background_data is not None:
        sections.append(
            _section(
                "backgroundData",
                spec.background_data,
                "Voici les données de contexte à utiliser pour répondre :",
            )
        )

    if spec.history:
        sections.append(_section("history", spec.history, "Voici l’historique de la conversation :"))

    if spec.output_formatting is not None:
        sections.append(
            _section("outputFormatting", OUTPUT_FORMATTING_INSTRUCTIONS[spec.output_formatting])
        )

    if spec.prefilled_response is not None:
        sections.append(
            _section(
                "prefilledResponse",
                spec.prefilled_response,
                "Ta réponse sera ajoutée directement après ce texte, continue-le sans le répéter :",
            )
        )

    return "\n\n".join(sections)


def format_text_from_messages(messages: Sequence[ChatMessage], limit: int | None = None) -> str:
    """
    Render chat history as ``USER:`` / ``ASSISTANT:`` lines.

    Args:
        messages: Chat history, oldest first
        limit: Keep only the most recent ``limit`` messages

    Returns:
        str: One line per message with text; empty when there is none
    """
    recent = list(messages)[-limit:] if limit else list(messages)
    lines = []
    for message in recent:
        text = message.text.strip()
        if not text:
            continue
        role = "ASSISTANT" if message.role == "assistant" else "USER"
        if message.role == "system":
            role = "SYSTEM"
        lines.append(f"{role}: {text}")
    return "\n".join(lines)
