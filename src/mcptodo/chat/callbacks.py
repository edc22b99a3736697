"""Callback interface between a chat session and its user interface.

Hides how a UI learns about session state changes. Every method is a
no-op here; UIs override the ones they render.
"""

from enum import IntEnum

from .models import ChatMessage


class LogLevel(IntEnum):
    """Trace log severity, ordered so a threshold filters by comparison."""

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    @classmethod
    def from_string(cls, name: str) -> "LogLevel":
        """Parse a level name case-insensitively, falling back to DEBUG."""
        return cls.__members__.get(name.strip().upper(), cls.DEBUG)


class ChatCallback:
    """Receives session updates on the event loop that runs the session."""

    def on_message_added(self, message: ChatMessage) -> None:
        """A message was committed to the conversation."""

    def on_response_started(self, message: ChatMessage) -> None:
        """An in-flight assistant message was created."""

    def on_message_changed(self, message: ChatMessage) -> None:
        """The in-flight assistant message received a text delta."""

    def on_response_cancelled(self, message: ChatMessage) -> None:
        """The in-flight response was superseded or cancelled.

        ``message`` has already been committed to the conversation.
        """

    def on_response_failed(self, message: ChatMessage, error: BaseException) -> None:
        """The response stream raised; ``message`` stays pending."""

    def on_suggestions_changed(self, suggestions: list[str]) -> None:
        """The suggestion set was replaced (an empty list means cleared)."""

    def on_conversation_reset(self) -> None:
        """The conversation was reset to the system prompt."""

    def on_error(self, error: BaseException) -> None:
        """A background operation failed."""

    def log(self, level: LogLevel, component: str, message: str) -> None:
        """Trace log entry.

        Args:
            level: Severity of the entry
            component: Source component name
            message: Log message
        """
