"""CSS for the TUI: a chat column with suggestions, log and input below."""

APP_CSS = """
Screen {
    layout: vertical;
}

#chat-history, #debug-panel {
    background: $panel;
    padding: 0 1;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
}

#chat-history {
    height: 1fr;
    border: round $primary 60%;
    border-title-color: $primary;

    &:focus-within {
        border: round $primary;
    }
}

#debug-panel {
    height: 10;
    border: round $warning 60%;
    border-title-color: $warning;
}

.chat-message {
    height: auto;
    margin-bottom: 1;
    padding: 0 2;
}

.message-header {
    text-style: bold;
}

.user-message {
    border-left: tall $success;

    & .message-header {
        color: $success;
    }
}

.assistant-message {
    border-left: tall $secondary;

    & .message-header {
        color: $secondary;
    }

    &.-streaming {
        border-left: tall $warning;
    }
}

#suggestions {
    height: auto;
    padding: 0 1;
}

.suggestion-btn {
    margin-right: 1;
    border: tall $accent 60%;
    color: $accent;
}

ChatInputBar {
    height: 5;
    padding: 0 1;
    border: round $primary 60%;
}

#chat-input {
    width: 1fr;
    border: none;
}

#send-btn {
    width: 10;
}
"""
