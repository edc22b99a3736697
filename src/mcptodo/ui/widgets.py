"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Chat message rendering and live updates of the streaming message
- Suggestion buttons
- Input history management
- Log rendering and level filtering
"""

from datetime import datetime

from rich.markdown import Markdown as RichMarkdown
from rich.text import Text
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Click
from textual.message import Message
from textual.widgets import Button, Input, RichLog, Static

from ..chat import ChatMessage, LogLevel
from ..llm import ChatRole
from .config import (
    INPUT_HISTORY_MAX_SIZE,
    LOG_MAX_MESSAGE_LENGTH,
    LOG_TIMESTAMP_FORMAT,
    NOTIFY_SHORT,
    EMPTY_REPLY_PLACEHOLDER,
    STREAMING_PLACEHOLDER,
)


class MessageBubble(Vertical):
    """A chat message that re-renders as its message changes.

    Clicking the bubble copies the message text to the clipboard.
    """

    def __init__(self, message: ChatMessage, *args, **kwargs) -> None:
        role_class = "user-message" if message.role == ChatRole.USER else "assistant-message"
        timestamp = message.timestamp.strftime("%H:%M:%S")
        prefix = "> You" if message.role == ChatRole.USER else "< Assistant"
        header = Static(f"{prefix} [{timestamp}]", classes="message-header", markup=False)
        self._content = Static(classes="message-content")
        super().__init__(header, self._content, *args, classes=f"chat-message {role_class}", **kwargs)
        self._message = message
        self.refresh_message(streaming=message.role == ChatRole.ASSISTANT and not message.text)

    @property
    def message(self) -> ChatMessage:
        return self._message

    def refresh_message(self, streaming: bool = False) -> None:
        """Re-render the message content."""
        text = self._message.text
        if self._message.role == ChatRole.USER:
            self._content.update(Text(text))
        elif text:
            self._content.update(RichMarkdown(text))
        else:
            placeholder = STREAMING_PLACEHOLDER if streaming else EMPTY_REPLY_PLACEHOLDER
            self._content.update(Text(placeholder, style="dim"))
        self.set_class(streaming, "-streaming")

    def on_click(self, event: Click) -> None:
        event.stop()
        self.app.copy_to_clipboard(self._message.text)
        self.app.notify("Copied to clipboard", timeout=NOTIFY_SHORT)


class ChatHistoryWidget(VerticalScroll):
    """Scrollable chat history keyed by message identity."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Conversation history"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._bubbles: dict[ChatMessage, MessageBubble] = {}

    def show_message(self, message: ChatMessage, streaming: bool = False) -> None:
        """Render a message, or re-render it if it is already shown.

        System messages are never displayed.
        """
        if message.role == ChatRole.SYSTEM:
            return

        bubble = self._bubbles.get(message)
        if bubble is None:
            bubble = MessageBubble(message)
            self._bubbles[message] = bubble
            self.mount(bubble)
            self.border_subtitle = f"{len(self._bubbles)} messages"
        bubble.refresh_message(streaming=streaming)
        self.scroll_end(animate=False)

    def get_last_response(self) -> str | None:
        """Get the last assistant response."""
        for message in reversed(list(self._bubbles)):
            if message.role == ChatRole.ASSISTANT and message.text:
                return message.text
        return None

    def clear_history(self) -> None:
        self._bubbles.clear()
        self.remove_children()
        self.border_subtitle = "Conversation history"


class SuggestionsBar(Horizontal):
    """Row of follow-up question buttons."""

    class Selected(Message):
        """Message sent when the user picks a suggestion."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def on_mount(self) -> None:
        self.display = False

    def set_suggestions(self, suggestions: list[str]) -> None:
        """Replace the shown suggestions (an empty list hides the bar)."""
        self.remove_children()
        if suggestions:
            self.mount_all(
                Button(text, name=text, classes="suggestion-btn")
                for text in suggestions
            )
        self.display = bool(suggestions)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.name:
            self.post_message(self.Selected(event.button.name))


class HistoryInput(Input):
    """Input widget with command history support.

    Use Up/Down arrow keys to navigate through history.
    """

    BINDINGS = [
        Binding("up", "history_previous", show=False),
        Binding("down", "history_next", show=False),
    ]

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1
        self._current_input: str = ""

    def action_history_previous(self) -> None:
        if not self._history:
            return
        if self._history_index == -1:
            self._current_input = self.value
            self._history_index = len(self._history) - 1
        elif self._history_index > 0:
            self._history_index -= 1
        self.value = self._history[self._history_index]
        self.cursor_position = len(self.value)

    def action_history_next(self) -> None:
        if self._history_index == -1:
            return
        if self._history_index < len(self._history) - 1:
            self._history_index += 1
            self.value = self._history[self._history_index]
        else:
            self._history_index = -1
            self.value = self._current_input
        self.cursor_position = len(self.value)

    def add_to_history(self, command: str) -> None:
        if command and (not self._history or self._history[-1] != command):
            self._history.append(command)
            del self._history[:-INPUT_HISTORY_MAX_SIZE]
        self._history_index = -1
        self._current_input = ""


class ChatInputBar(Horizontal):
    """Chat input bar with a history-aware input and a Send button."""

    class Submitted(Message):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def compose(self):
        yield HistoryInput(placeholder="Ask about your to-do list...", id="chat-input")
        yield Button("Send", id="send-btn", variant="success").with_tooltip("Submit message (Enter)")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self._submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            event.stop()
            self._submit()

    def _submit(self) -> None:
        text_input = self.query_one("#chat-input", HistoryInput)
        value = text_input.value.strip()
        if value:
            text_input.add_to_history(value)
            text_input.value = ""
            self.post_message(self.Submitted(value))

    def focus_input(self) -> None:
        self.query_one("#chat-input", HistoryInput).focus()


class DebugPanel(RichLog):
    """Log panel for real-time session tracing with level filtering.

    Hidden by default, shown with --log-level flag or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    LEVEL_COLORS = {
        LogLevel.DEBUG: "dim white",
        LogLevel.INFO: "cyan",
        LogLevel.WARNING: "yellow",
        LogLevel.ERROR: "red",
    }

    COMPONENT_COLORS = {
        "TUI": "cyan",
        "Chat": "green",
        "LLM": "magenta",
        "Suggest": "bright_yellow",
        "Tool": "bright_cyan",
    }

    def __init__(self, *args, log_level: LogLevel = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=True,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> LogLevel:
        return self._log_level

    @log_level.setter
    def log_level(self, level: LogLevel) -> None:
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {self._log_level.name}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        self.display = False

    def write_entry(self, component: str, message: str, level: LogLevel = LogLevel.DEBUG) -> None:
        """Add a log entry if it meets the current level threshold."""
        if level < self._log_level:
            return

        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."

        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        level_color = self.LEVEL_COLORS.get(level, "white")
        comp_color = self.COMPONENT_COLORS.get(component, "white")

        line = Text.from_markup(
            f"[dim]{timestamp}[/] [{level_color}]{level.name:<5}[/] "
            f"[{comp_color}]\\[{component}][/] "
        )
        line.append(message)
        self.write(line)

    def debug(self, component: str, message: str) -> None:
        self.write_entry(component, message, LogLevel.DEBUG)

    def info(self, component: str, message: str) -> None:
        self.write_entry(component, message, LogLevel.INFO)

    def error(self, component: str, message: str) -> None:
        self.write_entry(component, message, LogLevel.ERROR)

    def show(self) -> None:
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        self.display = False
        self._update_subtitle()

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True
