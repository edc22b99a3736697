"""Follow-up question suggestions.

Hides how suggestions are requested (reduced context, instruction prompt)
and parsed, and keeps at most one suggestion request in flight.
"""

import asyncio
from collections.abc import Sequence

from ..llm import ChatRole, ResponseClient, ResponseItem
from .callbacks import ChatCallback, LogLevel
from .models import ChatMessage

MAX_CONTEXT_MESSAGES = 5
MAX_SUGGESTIONS = 3


def reduce_items(
    items: Sequence[ResponseItem],
    limit: int = MAX_CONTEXT_MESSAGES
) -> list[ResponseItem]:
    """Reduce a conversation to the context needed for suggestions.

    Keeps every leading system item plus the last ``limit`` non-empty
    user/assistant items, in their original order.
    """
    leading_system: list[ResponseItem] = []
    for item in items:
        if item.role != ChatRole.SYSTEM:
            break
        leading_system.append(item)

    dialogue = [
        item for item in items
        if item.role in (ChatRole.USER, ChatRole.ASSISTANT) and item.content
    ]
    recent = dialogue[-limit:] if limit > 0 else []
    return leading_system + recent


def parse_suggestions(text: str, limit: int = MAX_SUGGESTIONS) -> list[str]:
    """Split model output into suggestions: one per non-blank line."""
    lines = (line.strip() for line in text.replace("\r", "\n").split("\n"))
    return [line for line in lines if line][:limit]


class SuggestionGenerator:
    """Speculatively requests follow-up questions after each assistant turn.

    Hidden design decisions:
    - Context reduction before the request
    - Output parsing
    - Cancel-then-replace handling of the background request
    """

    def __init__(
        self,
        client: ResponseClient,
        prompt: str | None = None,
        callback: ChatCallback | None = None,
        max_context_messages: int = MAX_CONTEXT_MESSAGES,
        max_suggestions: int = MAX_SUGGESTIONS,
    ):
        """Initialize the generator.

        Args:
            client: Response client used for the suggestion request
            prompt: Instruction appended to the reduced context
                (or loaded from prompts/suggestions.txt)
            callback: Receives suggestion updates and errors
            max_context_messages: User/assistant messages kept as context
            max_suggestions: Maximum suggestions kept from the output
        """
        if prompt is None:
            from ..prompts import get_suggestion_prompt
            prompt = get_suggestion_prompt()

        self._client = client
        self._prompt = prompt
        self._callback = callback or ChatCallback()
        self._max_context_messages = max_context_messages
        self._max_suggestions = max_suggestions
        self._suggestions: list[str] = []
        self._task: asyncio.Task[None] | None = None

    @property
    def suggestions(self) -> list[str]:
        return list(self._suggestions)

    @property
    def pending(self) -> asyncio.Task[None] | None:
        """The in-flight suggestion request, if any."""
        if self._task is not None and not self._task.done():
            return self._task
        return None

    def set_callback(self, callback: ChatCallback) -> None:
        self._callback = callback

    def cancel(self) -> None:
        """Cancel the in-flight request without touching current suggestions."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def clear(self) -> None:
        """Drop current suggestions and cancel any in-flight request."""
        self.cancel()
        if self._suggestions:
            self._suggestions = []
            self._callback.on_suggestions_changed([])

    def update(self, messages: Sequence[ChatMessage]) -> asyncio.Task[None]:
        """Start regenerating suggestions in the background.

        Any previous request is cancelled first. Errors are reported through
        the callback; the returned task never raises except on cancellation.
        """
        self.cancel()
        self._task = asyncio.create_task(self._update(list(messages)))
        return self._task

    async def _update(self, messages: list[ChatMessage]) -> None:
        try:
            suggestions = await self.generate(messages)
        except asyncio.CancelledError:
            self._callback.log(LogLevel.DEBUG, "Suggest", "Suggestion request cancelled")
            raise
        except Exception as e:
            self._callback.log(LogLevel.ERROR, "Suggest", f"Suggestion request failed: {e}")
            self._callback.on_error(e)
            return

        self._suggestions = suggestions
        self._callback.log(LogLevel.DEBUG, "Suggest", f"Received {len(suggestions)} suggestion(s)")
        self._callback.on_suggestions_changed(list(suggestions))

    async def generate(self, messages: Sequence[ChatMessage]) -> list[str]:
        """Request suggestions for a conversation and parse the output.

        Args:
            messages: Conversation messages, oldest first

        Returns:
            Up to ``max_suggestions`` suggestion strings
        """
        items = reduce_items(
            [message.to_item() for message in messages],
            limit=self._max_context_messages,
        )
        items.append(ResponseItem.user(self._prompt))

        self._callback.log(LogLevel.DEBUG, "Suggest", f"Requesting suggestions with {len(items)} item(s)")
        response = await self._client.create_response(items)
        return parse_suggestions(response.content, limit=self._max_suggestions)
