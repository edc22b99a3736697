"""Main Textual TUI application.

Orchestrates the UI components and hands user actions to the chat session.
"""

import asyncio
import contextlib
from collections.abc import Sequence

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header

from ..chat import ChatSession, LogLevel, SuggestionGenerator
from ..llm import ResponseClient
from ..tools import McpToolRegistration
from .callbacks import TUICallback
from .config import NOTIFY_ERROR, NOTIFY_SHORT
from .styles import APP_CSS
from .themes import TODO_NIGHT
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel, SuggestionsBar


class McpTodoApp(App):
    """Textual TUI for chatting with the to-do list assistant."""

    CSS = APP_CSS
    TITLE = "MCP To-Do"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+k", "reset_conversation", "New Chat"),
        Binding("escape", "cancel_response", "Cancel"),
        Binding("ctrl+r", "copy_last_response", "Copy Response"),
        Binding("ctrl+d", "toggle_log", "Log"),
    ]

    def __init__(
        self,
        client: ResponseClient,
        tools: Sequence[McpToolRegistration] = (),
        log_level: str | None = None,
        system_prompt: str | None = None,
    ) -> None:
        super().__init__()
        self._client = client
        self._tools = tuple(tools)
        self._log_level = log_level
        self._system_prompt = system_prompt
        self._session: ChatSession | None = None

    @property
    def session(self) -> ChatSession | None:
        return self._session

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield ChatHistoryWidget(id="chat-history")
        yield SuggestionsBar(id="suggestions")
        yield DebugPanel(id="debug-panel")
        yield ChatInputBar(id="chat-input-bar")
        yield Footer()

    def on_mount(self) -> None:
        self.register_theme(TODO_NIGHT)
        self.theme = "todo-night"

        log_panel = self.query_one("#debug-panel", DebugPanel)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            log_panel.info("TUI", f"Log panel enabled with level: {self._log_level.upper()}")

        callback = TUICallback(
            chat=self.query_one("#chat-history", ChatHistoryWidget),
            suggestions_bar=self.query_one("#suggestions", SuggestionsBar),
            log_panel=log_panel,
            app=self,
        )
        self._session = ChatSession(
            self._client,
            tools=self._tools,
            system_prompt=self._system_prompt,
            suggestions=SuggestionGenerator(self._client, callback=callback),
            callback=callback,
        )

        tool_labels = ", ".join(tool.server_label for tool in self._tools) or "no tools"
        self.sub_title = f"{self._client.model} | {tool_labels}"
        for tool in self._tools:
            log_panel.info("Tool", f"Registered MCP server '{tool.server_label}' at {tool.server_url}")

        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def on_unmount(self) -> None:
        if self._session is not None:
            self._session.dispose()

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        self._send(event.value)

    def on_suggestions_bar_selected(self, event: SuggestionsBar.Selected) -> None:
        self._send(event.value, from_suggestion=True)

    @work(group="chat", exit_on_error=False)
    async def _send(self, text: str, from_suggestion: bool = False) -> None:
        """Run one chat turn as a background async worker.

        The session cancels any previous turn itself, so workers are not
        exclusive.
        """
        if self._session is None:
            return

        try:
            if from_suggestion:
                reply = await self._session.select_suggestion(text)
            else:
                reply = await self._session.submit(text)
        except Exception as e:
            self._report_error(e)
            return

        if reply is not None:
            self.query_one("#debug-panel", DebugPanel).debug("TUI", f"Turn complete ({len(reply.text)} chars)")

    def _report_error(self, error: Exception) -> None:
        self.query_one("#debug-panel", DebugPanel).error("TUI", f"Exception: {error}")
        self.notify(f"Error: {str(error)[:80]}", severity="error", timeout=NOTIFY_ERROR)

    def action_reset_conversation(self) -> None:
        if self._session is not None:
            self._session.reset()
        self.notify("Conversation reset", timeout=NOTIFY_SHORT)
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def action_cancel_response(self) -> None:
        if self._session is not None and self._session.is_responding:
            self._session.cancel_response()
            self.notify("Response cancelled", severity="warning", timeout=NOTIFY_SHORT)

    def action_copy_last_response(self) -> None:
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        response = chat.get_last_response()
        if response:
            self.copy_to_clipboard(response)
            self.notify("Response copied", timeout=NOTIFY_SHORT)
        else:
            self.notify("No response to copy", severity="warning", timeout=NOTIFY_SHORT)

    def action_toggle_log(self) -> None:
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=NOTIFY_SHORT)


async def run_textual_tui(
    client: ResponseClient,
    tools: Sequence[McpToolRegistration] = (),
    log_level: str | None = None,
    system_prompt: str | None = None,
) -> None:
    """Run the Textual TUI.

    Args:
        client: Response client for the model API
        tools: MCP tool registrations attached to chat requests
        log_level: Log level for panel (debug/info/warning/error), None to hide
        system_prompt: Override for the packaged system prompt
    """
    app = McpTodoApp(
        client=client,
        tools=tools,
        log_level=log_level,
        system_prompt=system_prompt,
    )
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        with contextlib.suppress(RuntimeError):
            await client.close()
