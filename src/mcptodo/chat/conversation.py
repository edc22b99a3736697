from collections.abc import Iterator

from ..llm.models import ResponseItem
from .models import ChatMessage


class Conversation:
    """Ordered chat transcript with its parallel model-context item list.

    The first message is always the system prompt. Every message appended
    here is appended to the item list too, so both stay in 1:1 sync.
    """

    def __init__(self, system_prompt: str):
        self._system_prompt = system_prompt
        self._messages: list[ChatMessage] = []
        self._items: list[ResponseItem] = []
        self.reset()

    @property
    def system_prompt(self) -> str:
        return self._system_prompt

    @property
    def messages(self) -> list[ChatMessage]:
        """Snapshot of the transcript, oldest first."""
        return list(self._messages)

    @property
    def items(self) -> list[ResponseItem]:
        """Snapshot of the model-context items, oldest first."""
        return list(self._items)

    def add(self, message: ChatMessage) -> None:
        """Append a finished message to the transcript and the item list."""
        self._messages.append(message)
        self._items.append(message.to_item())

    def reset(self) -> None:
        """Drop everything except a fresh system prompt."""
        self._messages.clear()
        self._items.clear()
        self.add(ChatMessage.system(self._system_prompt))

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(list(self._messages))
