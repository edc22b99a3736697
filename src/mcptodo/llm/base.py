from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from .models import LLMResponse, ResponseItem, StreamingResponse


class ResponseStreamError(RuntimeError):
    """Raised when the model API reports a failure inside a response stream."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.code = code


class ResponseClient(ABC):
    """Abstract base class for model response clients.

    This module hides the design decision of which model API is used.
    Implementations must handle provider-specific details like:
    - API client setup and authentication
    - Conversion of conversation items to the wire format
    - Normalization of streaming events

    Supports async context manager protocol for proper resource cleanup:
        async with client:
            response = await client.create_response(items)
        # Automatically cleaned up
    """

    @property
    @abstractmethod
    def model(self) -> str:
        """Model or deployment name requests are bound to."""

    @abstractmethod
    async def create_response(
        self,
        items: Sequence[ResponseItem],
        tools: Sequence[dict[str, Any]] | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Generate a complete response.

        Args:
            items: Conversation items forming the model context
            tools: Tool descriptors in the model API's wire format
            **kwargs: Provider-specific parameters

        Returns:
            LLMResponse containing the output text and metadata

        Raises:
            Exception: Provider-specific errors during generation
        """

    @abstractmethod
    async def create_response_stream(
        self,
        items: Sequence[ResponseItem],
        tools: Sequence[dict[str, Any]] | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        """Generate a streaming response.

        Args:
            items: Conversation items forming the model context
            tools: Tool descriptors in the model API's wire format
            **kwargs: Provider-specific parameters

        Returns:
            StreamingResponse yielding normalized events in order,
            ending with a terminal event

        Raises:
            ResponseStreamError: If the stream reports a failure
            Exception: Provider-specific transport errors
        """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or credentials."""

    async def __aenter__(self) -> "ResponseClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
