from .callbacks import ChatCallback, LogLevel
from .conversation import Conversation
from .models import ChatMessage
from .session import ChatSession
from .suggestions import SuggestionGenerator, parse_suggestions, reduce_items

__all__ = [
    "ChatCallback",
    "ChatMessage",
    "ChatSession",
    "Conversation",
    "LogLevel",
    "SuggestionGenerator",
    "parse_suggestions",
    "reduce_items",
]
