"""Terminal UI module for mcptodo.

Provides a Textual-based TUI for chatting with the to-do list assistant.

Module structure (each module hides a design decision):
- widgets.py: Custom widgets (message bubbles, suggestions, input history, log panel)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palettes and theme configuration
- callbacks.py: Session integration (how the TUI receives updates)
- app.py: Application orchestration (user interaction flow)
"""

from .app import McpTodoApp, run_textual_tui
from .callbacks import TUICallback
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel, SuggestionsBar

__all__ = [
    "ChatHistoryWidget",
    "ChatInputBar",
    "DebugPanel",
    "McpTodoApp",
    "SuggestionsBar",
    "TUICallback",
    "run_textual_tui",
]
