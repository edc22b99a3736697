"""Chat session: the per-turn request/stream/commit loop.

Hides the ordering of conversation mutations, the cancellation of
superseded responses, and when suggestions are regenerated.
"""

import asyncio
from collections.abc import Sequence

from ..llm import ResponseClient
from ..tools import McpToolRegistration
from .callbacks import ChatCallback, LogLevel
from .conversation import Conversation
from .models import ChatMessage
from .suggestions import SuggestionGenerator


def _preview(text: str, limit: int = 50) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


class ChatSession:
    """One conversation with the model, as seen by one UI session.

    At most one main response is in flight at a time: starting a new turn
    cancels the previous one, and its partial text is kept in history.

    Example:
        session = ChatSession(client, tools=[todo_tool])
        reply = await session.submit("Give me list of to do.")
        print(reply.text)
    """

    def __init__(
        self,
        client: ResponseClient,
        tools: Sequence[McpToolRegistration] = (),
        system_prompt: str | None = None,
        suggestions: SuggestionGenerator | None = None,
        callback: ChatCallback | None = None,
    ):
        """Initialize the session.

        Args:
            client: Response client shared across sessions
            tools: Tool registrations attached to every main request
            system_prompt: Fixed system prompt (or loaded from prompts/system.txt)
            suggestions: Suggestion generator run after each completed turn
            callback: Receives state changes for rendering
        """
        if system_prompt is None:
            from ..prompts import get_system_prompt
            system_prompt = get_system_prompt()

        self._client = client
        self._tools = tuple(tools)
        self._tool_params = [tool.to_tool_param() for tool in self._tools]
        self._callback = callback or ChatCallback()
        self._suggestions = suggestions
        if self._suggestions is not None and callback is not None:
            self._suggestions.set_callback(callback)

        self._conversation = Conversation(system_prompt)
        self._current_message: ChatMessage | None = None
        self._current_task: asyncio.Task[ChatMessage] | None = None

    @property
    def conversation(self) -> Conversation:
        return self._conversation

    @property
    def messages(self) -> list[ChatMessage]:
        return self._conversation.messages

    @property
    def current_message(self) -> ChatMessage | None:
        """The in-flight assistant message, if a response is pending."""
        return self._current_message

    @property
    def is_responding(self) -> bool:
        return self._current_task is not None and not self._current_task.done()

    @property
    def suggestion_generator(self) -> SuggestionGenerator | None:
        return self._suggestions

    @property
    def suggestions(self) -> list[str]:
        return self._suggestions.suggestions if self._suggestions is not None else []

    async def submit(self, text: str) -> ChatMessage | None:
        """Send a user message and stream the assistant's reply.

        Args:
            text: User input; blank input is ignored

        Returns:
            The finalized assistant message, or None if the input was blank
            or the response was superseded before it completed

        Raises:
            Exception: Transport or model errors from the response stream
        """
        text = text.strip()
        if not text:
            return None

        self.cancel_response()

        user_message = ChatMessage.user(text)
        self._conversation.add(user_message)
        self._callback.on_message_added(user_message)
        if self._suggestions is not None:
            self._suggestions.clear()

        message = ChatMessage.assistant()
        self._current_message = message
        self._callback.on_response_started(message)
        self._callback.log(LogLevel.INFO, "Chat", f"Sending: '{_preview(text)}'")

        task = asyncio.create_task(self._stream_response(message))
        self._current_task = task

        try:
            return await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            return None
        except Exception as e:
            self._callback.log(LogLevel.ERROR, "LLM", f"Response failed: {e}")
            self._callback.on_response_failed(message, e)
            raise

    async def select_suggestion(self, text: str) -> ChatMessage | None:
        """Send a selected suggestion exactly like typed input."""
        return await self.submit(text)

    async def _stream_response(self, message: ChatMessage) -> ChatMessage:
        stream = await self._client.create_response_stream(
            self._conversation.items,
            tools=self._tool_params,
        )

        response_text = ""
        try:
            async for event in stream:
                if event.is_text_delta:
                    response_text += event.delta
                    message.append(event.delta)
                    self._callback.on_message_changed(message)
                elif event.is_terminal:
                    break
                else:
                    self._callback.log(LogLevel.DEBUG, "LLM", f"Ignored event: {event.type}")
        finally:
            await stream.aclose()

        message.content = [response_text]
        self._conversation.add(message)
        self._current_message = None
        self._callback.on_message_added(message)

        usage = stream.usage
        if usage:
            self._callback.log(
                LogLevel.INFO,
                "LLM",
                f"Response {stream.response_id or '(no id)'} complete "
                f"({usage['prompt_tokens']}/{usage['completion_tokens']} tokens)",
            )

        if self._suggestions is not None:
            self._suggestions.update(self._conversation.messages)

        return message

    def cancel_response(self) -> None:
        """Cancel the in-flight response.

        The in-flight message is committed even when it has no text yet, so
        every user message in history is followed by an assistant message.
        """
        message = self._current_message
        task = self._current_task
        self._current_message = None
        self._current_task = None

        if message is not None:
            self._conversation.add(message)
            self._callback.on_message_added(message)
            self._callback.log(LogLevel.INFO, "Chat", f"Kept partial response ({len(message.text)} chars)")
            self._callback.on_response_cancelled(message)

        if task is not None and not task.done():
            task.cancel()

    def reset(self) -> None:
        """Start over with only the system prompt and no suggestions."""
        self.cancel_response()
        self._conversation.reset()
        if self._suggestions is not None:
            self._suggestions.clear()
        self._callback.on_conversation_reset()
        self._callback.log(LogLevel.INFO, "Chat", "Conversation reset")

    def dispose(self) -> None:
        """Cancel every in-flight operation of this session."""
        if self._current_task is not None and not self._current_task.done():
            self._current_task.cancel()
        self._current_task = None
        if self._suggestions is not None:
            self._suggestions.cancel()
