"""Pytest configuration and shared fixtures."""
import asyncio
from collections.abc import Sequence
from typing import Any

import pytest

from mcptodo.chat import ChatCallback, ChatMessage, LogLevel
from mcptodo.llm import LLMResponse, ResponseClient, ResponseItem, ResponseStreamEvent, StreamingResponse
from mcptodo.llm.models import COMPLETED_EVENT, TEXT_DELTA_EVENT
from mcptodo.tools import McpToolRegistration

SYSTEM_PROMPT = "You manage to-do list items."
SUGGESTION_PROMPT = "Suggest follow-up questions."


def delta(text: str) -> ResponseStreamEvent:
    return ResponseStreamEvent(type=TEXT_DELTA_EVENT, delta=text)


def completed(usage: dict[str, int] | None = None) -> ResponseStreamEvent:
    return ResponseStreamEvent(type=COMPLETED_EVENT, response_id="resp_1", usage=usage)


class FakeResponseClient(ResponseClient):
    """In-memory response client driven by scripted streams.

    Each stream script is a list of steps: a ResponseStreamEvent is yielded,
    an asyncio.Event is awaited, an Exception is raised.
    """

    def __init__(self, streams: Sequence[Sequence[Any]] = (), responses: Sequence[Any] = ()):
        self.streams = [list(script) for script in streams]
        self.responses = list(responses)
        self.response_gate: asyncio.Event | None = None
        self.stream_calls: list[dict[str, Any]] = []
        self.response_calls: list[dict[str, Any]] = []
        self.active_streams = 0
        self.max_active_streams = 0
        self.closed = False

    @property
    def model(self) -> str:
        return "fake-model"

    async def create_response(
        self,
        items: Sequence[ResponseItem],
        tools: Sequence[dict[str, Any]] | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        self.response_calls.append({"items": list(items), "tools": tools})
        if self.response_gate is not None:
            await self.response_gate.wait()
        result = self.responses.pop(0) if self.responses else ""
        if isinstance(result, Exception):
            raise result
        return LLMResponse(content=result, model=self.model)

    async def create_response_stream(
        self,
        items: Sequence[ResponseItem],
        tools: Sequence[dict[str, Any]] | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        self.stream_calls.append({"items": list(items), "tools": tools})
        script = self.streams.pop(0) if self.streams else [completed()]
        return StreamingResponse(self._run(script))

    async def _run(self, script: list[Any]):
        self.active_streams += 1
        self.max_active_streams = max(self.max_active_streams, self.active_streams)
        try:
            for step in script:
                if isinstance(step, asyncio.Event):
                    await step.wait()
                elif isinstance(step, Exception):
                    raise step
                else:
                    yield step
        finally:
            self.active_streams -= 1

    async def close(self) -> None:
        self.closed = True


class RecordingCallback(ChatCallback):
    """Records every callback invocation as (name, payload)."""

    def __init__(self):
        self.events: list[tuple[str, Any]] = []

    def names(self) -> list[str]:
        return [name for name, _ in self.events]

    def on_message_added(self, message: ChatMessage) -> None:
        self.events.append(("message_added", message))

    def on_response_started(self, message: ChatMessage) -> None:
        self.events.append(("response_started", message))

    def on_message_changed(self, message: ChatMessage) -> None:
        self.events.append(("message_changed", message.text))

    def on_response_cancelled(self, message: ChatMessage) -> None:
        self.events.append(("response_cancelled", message))

    def on_response_failed(self, message: ChatMessage, error: BaseException) -> None:
        self.events.append(("response_failed", (message, error)))

    def on_suggestions_changed(self, suggestions: list[str]) -> None:
        self.events.append(("suggestions_changed", suggestions))

    def on_conversation_reset(self) -> None:
        self.events.append(("conversation_reset", None))

    def on_error(self, error: BaseException) -> None:
        self.events.append(("error", error))

    def log(self, level: LogLevel, component: str, message: str) -> None:
        self.events.append(("log", (level, component, message)))


async def wait_for(predicate, attempts: int = 1000) -> None:
    """Yield to the event loop until predicate() holds."""
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


@pytest.fixture
def todo_tool():
    """Return an MCP tool registration for a local to-do server."""
    return McpToolRegistration(
        server_label="TodoList",
        server_url="http://localhost:5000/mcp",
        token="test-token",
    )


@pytest.fixture
def callback():
    """Return a recording callback."""
    return RecordingCallback()


async def settle_suggestions(session) -> None:
    """Wait for the session's suggestion request, if one is still running."""
    pending = session.suggestion_generator.pending
    if pending is not None:
        await pending
