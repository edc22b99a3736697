"""Chat session callback for the TUI.

Hides the details of how the TUI receives updates from the chat session.
Uses thread-safe methods to update the UI if called from worker threads.
"""

import threading
from typing import TYPE_CHECKING, Any

from ..chat import ChatCallback, ChatMessage, LogLevel
from .config import NOTIFY_ERROR

if TYPE_CHECKING:
    from textual.app import App

    from .widgets import ChatHistoryWidget, DebugPanel, SuggestionsBar


class TUICallback(ChatCallback):
    """Routes session updates to the chat history, suggestions bar and log panel."""

    def __init__(
        self,
        chat: "ChatHistoryWidget",
        suggestions_bar: "SuggestionsBar",
        log_panel: "DebugPanel",
        app: "App | None" = None
    ) -> None:
        self.chat = chat
        self.suggestions_bar = suggestions_bar
        self.log_panel = log_panel
        self.app = app

    def _call_thread_safe(self, func: Any, *args: Any, **kwargs: Any) -> None:
        """Call a function in a thread-safe manner for UI updates."""
        if self.app is not None and self.app._thread_id != threading.get_ident():
            self.app.call_from_thread(func, *args, **kwargs)
        else:
            func(*args, **kwargs)

    def on_message_added(self, message: ChatMessage) -> None:
        self._call_thread_safe(self.chat.show_message, message)

    def on_response_started(self, message: ChatMessage) -> None:
        self._call_thread_safe(self.chat.show_message, message, streaming=True)

    def on_message_changed(self, message: ChatMessage) -> None:
        self._call_thread_safe(self.chat.show_message, message, streaming=True)

    def on_response_cancelled(self, message: ChatMessage) -> None:
        self._call_thread_safe(self.chat.show_message, message)

    def on_response_failed(self, message: ChatMessage, error: BaseException) -> None:
        self._call_thread_safe(self.chat.show_message, message)

    def on_suggestions_changed(self, suggestions: list[str]) -> None:
        self._call_thread_safe(self.suggestions_bar.set_suggestions, suggestions)

    def on_conversation_reset(self) -> None:
        self._call_thread_safe(self.chat.clear_history)
        self._call_thread_safe(self.suggestions_bar.set_suggestions, [])

    def on_error(self, error: BaseException) -> None:
        self._call_thread_safe(self.log_panel.error, "TUI", f"Exception: {error}")
        if self.app is not None:
            self._call_thread_safe(
                self.app.notify, f"Error: {str(error)[:80]}", severity="error", timeout=NOTIFY_ERROR
            )

    def log(self, level: LogLevel, component: str, message: str) -> None:
        self._call_thread_safe(self.log_panel.write_entry, component, message, level)
