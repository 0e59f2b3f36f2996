"""
AI command pipeline.

Orchestrates one command request: resolve the tool, announce it, then run
the tool body and stream its output as typed UI message events.

Per request: Init -> ToolResolved -> Executing -> Finished. The tool
announcement is always the first event; the comment tool always ends with
its finished sentinel. No retries: any failure propagates to the caller.

Dependencies: langchain_core, afribac_ai.core.ai_command, afribac_ai.core.editor
System role: Stream orchestration for the editor assistant
"""

import logging
import uuid
from collections.abc import AsyncGenerator, Callable, Sequence
from enum import Enum

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage

from afribac_ai.core.ai_command.command_prompts import get_tool_prompt
from afribac_ai.core.ai_command.comment_stream import stream_comments
from afribac_ai.core.ai_command.markdown_joiner import MarkdownJoiner
from afribac_ai.core.ai_command.prompt_builder import build_structured_prompt
from afribac_ai.core.ai_command.tool_names import ToolName, parse_tool_name
from afribac_ai.core.ai_command.tool_router import ToolRouter
from afribac_ai.core.editor import EditorSnapshot
from afribac_ai.core.exceptions import EditSelectionRequiredError, StreamProtocolError
from afribac_ai.models.chat import ChatMessage, coerce_message_content
from afribac_ai.models.command import CommandContext
from afribac_ai.models.streaming import (
    CommentEvent,
    CommentEventData,
    CommentStatus,
    StreamEvent,
    TextDeltaEvent,
    TextEndEvent,
    TextStartEvent,
    ToolNameEvent,
)


def new_event_id() -> str:
    """Generate a fresh event identifier."""
    return uuid.uuid4().hex


class CommandPhase(str, Enum):
    """Lifecycle of one command stream."""

    INIT = "init"
    TOOL_RESOLVED = "tool_resolved"
    EXECUTING = "executing"
    FINISHED = "finished"


class CommandEventStream:
    """
    Guards the event order of one command stream.

    ``announce`` must come first and only once; body events are accepted
    until ``finish``; nothing is accepted afterwards.
    """

    def __init__(self) -> None:
        self.phase = CommandPhase.INIT

    def announce(self, tool_name: str) -> ToolNameEvent:
        if self.phase is not CommandPhase.INIT:
            raise StreamProtocolError("Tool already announced", phase=self.phase.value)
        self.phase = CommandPhase.TOOL_RESOLVED
        return ToolNameEvent(data=tool_name)

    def emit(self, event: StreamEvent) -> StreamEvent:
        if self.phase is CommandPhase.INIT:
            raise StreamProtocolError("Tool must be announced before output", phase=self.phase.value)
        if self.phase is CommandPhase.FINISHED:
            raise StreamProtocolError("Stream already finished", phase=self.phase.value)
        self.phase = CommandPhase.EXECUTING
        return event

    def finish(self) -> None:
        if self.phase is CommandPhase.INIT:
            raise StreamProtocolError("Cannot finish before the tool is announced", phase=self.phase.value)
        self.phase = CommandPhase.FINISHED


class CommandPipeline:
    """
    Runs AI command requests against one chat model.

    The model is used for classification (when needed) and for the tool
    body; a fresh pipeline is built per request.
    """

    def __init__(
        self,
        model: BaseChatModel,
        logger: logging.Logger | None = None,
        id_factory: Callable[[], str] = new_event_id,
    ) -> None:
        """
        Initialize pipeline.

        Args:
            model: Chat model serving this request
            logger: Logger (module logger by default)
            id_factory: Generates comment and text part ids
        """
        self._model = model
        self._logger = logger or logging.getLogger(__name__)
        self._id_factory = id_factory
        self._router = ToolRouter(model, logger=self._logger)

    def run(
        self,
        ctx: CommandContext,
        messages: Sequence[ChatMessage],
    ) -> AsyncGenerator[StreamEvent, None]:
        """
        Validate a request and return its event stream.

        Preconditions are checked here, before any model call: an explicit
        ``edit`` without a selection raises immediately.

        Args:
            ctx: Editor snapshot and optional tool name
            messages: Chat history

        Returns:
            AsyncGenerator[StreamEvent, None]: Tool announcement, then tool output

        Raises:
            EditSelectionRequiredError: If ``edit`` is requested without a selection
        """
        snapshot = EditorSnapshot(ctx.children, ctx.selection)
        is_selecting = snapshot.is_expanded()

        if parse_tool_name(ctx.tool_name) is ToolName.EDIT and not is_selecting:
            self._logger.warning("Edit requested without a selection")
            raise EditSelectionRequiredError(details={"tool_name": ToolName.EDIT.value})

        self._logger.info(
            "Command accepted",
            extra={
                "tool_name_param": ctx.tool_name,
                "is_selecting": is_selecting,
                "message_count": len(messages),
            },
        )
        return self._execute(snapshot, is_selecting, ctx.tool_name, list(messages))

    async def _execute(
        self,
        snapshot: EditorSnapshot,
        is_selecting: bool,
        tool_name_param: str | None,
        messages: list[ChatMessage],
    ) -> AsyncGenerator[StreamEvent, None]:
        stream = CommandEventStream()

        resolution = await self._router.resolve(tool_name_param, is_selecting, messages)
        yield stream.announce(resolution.raw)

        if resolution.tool is None:
            self._logger.warning("No tool selected, nothing to run", extra={"raw_tool_name": resolution.raw})
        else:
            async for event in self._run_tool(resolution.tool, snapshot, messages):
                yield stream.emit(event)

        stream.finish()
        self._logger.info("Command finished", extra={"tool_name": resolution.raw})

    def _run_tool(
        self,
        tool: ToolName,
        snapshot: EditorSnapshot,
        messages: list[ChatMessage],
    ) -> AsyncGenerator[StreamEvent, None]:
        prompt = build_structured_prompt(get_tool_prompt(tool, snapshot, messages))
        if tool is ToolName.COMMENT:
            return self._comment(prompt)
        if tool is ToolName.EDIT or tool is ToolName.GENERATE:
            return self._text(prompt)
        raise ValueError(f"Unsupported tool: {tool!r}")

    async def _comment(self, prompt: str) -> AsyncGenerator[StreamEvent, None]:
        count = 0
        async for comment in stream_comments(self._model, prompt):
            count += 1
            yield CommentEvent(
                id=self._id_factory(),
                data=CommentEventData(comment=comment, status=CommentStatus.STREAMING),
            )

        self._logger.info("Comments streamed", extra={"comment_count": count})
        yield CommentEvent(
            id=self._id_factory(),
            data=CommentEventData(comment=None, status=CommentStatus.FINISHED),
        )

    async def _text(self, prompt: str) -> AsyncGenerator[StreamEvent, None]:
        part_id = self._id_factory()
        joiner = MarkdownJoiner()
        yield TextStartEvent(id=part_id)

        # Single synthetic user message, no tools bound
        async for chunk in self._model.astream([HumanMessage(content=prompt)]):
            text = coerce_message_content(chunk.content)
            if not text:
                continue
            ready = joiner.push(text)
            if ready:
                yield TextDeltaEvent(id=part_id, delta=ready)

        rest = joiner.flush()
        if rest:
            yield TextDeltaEvent(id=part_id, delta=rest)
        yield TextEndEvent(id=part_id)
