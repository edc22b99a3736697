from collections.abc import AsyncIterator
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Responses API stream event types the chat loop cares about
TEXT_DELTA_EVENT = "response.output_text.delta"
COMPLETED_EVENT = "response.completed"
INCOMPLETE_EVENT = "response.incomplete"
FAILED_EVENT = "response.failed"
ERROR_EVENT = "error"

TERMINAL_EVENTS = frozenset({COMPLETED_EVENT, INCOMPLETE_EVENT})


class ChatRole(str, Enum):
    """Role of a message author."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ResponseItem(BaseModel):
    """A conversation item in the shape sent to the model API."""

    model_config = ConfigDict(frozen=True)

    role: ChatRole = Field(description="Role of the item author")
    content: str = Field(default="", description="Text content of the item")

    @classmethod
    def system(cls, content: str) -> "ResponseItem":
        return cls(role=ChatRole.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "ResponseItem":
        return cls(role=ChatRole.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> "ResponseItem":
        return cls(role=ChatRole.ASSISTANT, content=content)


class ResponseStreamEvent(BaseModel):
    """Normalized representation of a streaming response event."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(description="Event type as reported by the model API")
    delta: str | None = Field(default=None, description="Text fragment for delta events")
    response_id: str | None = Field(default=None, description="Response id, when known")
    usage: dict[str, int] | None = Field(default=None, description="Token usage on completion")

    @property
    def is_text_delta(self) -> bool:
        return self.type == TEXT_DELTA_EVENT and bool(self.delta)

    @property
    def is_terminal(self) -> bool:
        return self.type in TERMINAL_EVENTS


class StreamingResponse:
    """Wrapper for streaming responses that captures completion info.

    Acts as an async iterator of normalized events while storing the
    response id and token usage reported by the terminal event.

    Usage:
        stream = await client.create_response_stream(items)
        async for event in stream:
            if event.is_text_delta:
                print(event.delta, end="")
        print(stream.usage)
    """

    def __init__(self, async_iter: AsyncIterator[ResponseStreamEvent]):
        """Initialize with an async iterator of events.

        Args:
            async_iter: Async iterator yielding normalized events
        """
        self._iter = async_iter
        self._usage: dict[str, int] | None = None
        self._response_id: str | None = None

    @property
    def usage(self) -> dict[str, int] | None:
        """Get token usage info (available after the terminal event)."""
        return self._usage

    @property
    def response_id(self) -> str | None:
        """Get the response id (available once the model reported it)."""
        return self._response_id

    def __aiter__(self) -> "StreamingResponse":
        return self

    async def __anext__(self) -> ResponseStreamEvent:
        event = await self._iter.__anext__()
        if event.response_id:
            self._response_id = event.response_id
        if event.usage is not None:
            self._usage = event.usage
        return event

    async def aclose(self) -> None:
        """Close the underlying iterator, releasing the HTTP stream."""
        aclose = getattr(self._iter, "aclose", None)
        if aclose is not None:
            await aclose()


class LLMResponse(BaseModel):
    """Non-streaming response from the model API."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(description="Generated output text")
    model: str = Field(description="Model that generated the response")
    usage: dict[str, int] | None = Field(
        default=None,
        description="Token usage information"
    )

    @classmethod
    def from_usage(cls, content: str, model: str, usage: Any) -> "LLMResponse":
        """Build a response, extracting token counts from an SDK usage object."""
        return cls(content=content, model=model, usage=usage_to_dict(usage))


def usage_to_dict(usage: Any) -> dict[str, int] | None:
    """Convert a Responses API usage object to a plain dict."""
    if usage is None:
        return None
    return {
        "prompt_tokens": getattr(usage, "input_tokens", 0) or 0,
        "completion_tokens": getattr(usage, "output_tokens", 0) or 0,
        "total_tokens": getattr(usage, "total_tokens", 0) or 0,
    }
