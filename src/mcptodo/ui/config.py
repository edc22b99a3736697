"""Display constants for the TUI."""

INPUT_HISTORY_MAX_SIZE = 100

LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500

# Assistant bubble text before the first delta, and after a reply that never produced text
STREAMING_PLACEHOLDER = "..."
EMPTY_REPLY_PLACEHOLDER = "(no response)"

# Toast timeouts in seconds
NOTIFY_SHORT = 2
NOTIFY_ERROR = 5
