"""Data models for chat sessions.

Hides the internal representation of chat messages.
"""

from dataclasses import dataclass, field
from datetime import datetime

from ..llm.models import ChatRole, ResponseItem


@dataclass(eq=False)
class ChatMessage:
    """A chat message made of ordered text segments.

    Compared by identity: the in-flight assistant message is tracked as a
    specific object while the streaming loop mutates it.
    """

    role: ChatRole
    content: list[str] = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def text(self) -> str:
        return "".join(self.content)

    def append(self, segment: str) -> None:
        """Append a streamed text segment."""
        self.content.append(segment)

    def to_item(self) -> ResponseItem:
        """Convert to the item shape sent to the model API."""
        return ResponseItem(role=self.role, content=self.text)

    @classmethod
    def system(cls, text: str) -> "ChatMessage":
        return cls(ChatRole.SYSTEM, [text])

    @classmethod
    def user(cls, text: str) -> "ChatMessage":
        return cls(ChatRole.USER, [text])

    @classmethod
    def assistant(cls, text: str = "") -> "ChatMessage":
        return cls(ChatRole.ASSISTANT, [text] if text else [])
