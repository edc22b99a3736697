from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from typing import Any

from openai import AsyncOpenAI

from ...config import DEFAULT_DEPLOYMENT_NAME
from ..base import ResponseClient, ResponseStreamError
from ..models import (
    ERROR_EVENT,
    FAILED_EVENT,
    TERMINAL_EVENTS,
    TEXT_DELTA_EVENT,
    LLMResponse,
    ResponseItem,
    ResponseStreamEvent,
    StreamingResponse,
    usage_to_dict,
)

ApiKey = str | Callable[[], Awaitable[str]]


def _items_to_responses_format(items: Sequence[ResponseItem]) -> list[dict[str, str]]:
    """Convert conversation items to Responses API input format.

    The Responses API takes an array of messages with roles:
    - 'system' for instructions
    - 'user' for user messages
    - 'assistant' for previous model responses

    Returns:
        List of message dicts with 'role' and 'content' keys
    """
    return [{"role": item.role.value, "content": item.content} for item in items]


def _normalize_event(event: Any) -> ResponseStreamEvent | None:
    """Convert an SDK stream event to a normalized event.

    Raises:
        ResponseStreamError: For 'error' and 'response.failed' events
    """
    event_type = getattr(event, "type", None)
    if not isinstance(event_type, str):
        return None

    if event_type == ERROR_EVENT:
        code = getattr(event, "code", None)
        raise ResponseStreamError(
            getattr(event, "message", None) or "Response stream error",
            code=str(code) if code is not None else None,
        )

    response = getattr(event, "response", None)

    if event_type == FAILED_EVENT:
        error = getattr(response, "error", None)
        code = getattr(error, "code", None)
        raise ResponseStreamError(
            getattr(error, "message", None) or "Response failed",
            code=str(code) if code is not None else None,
        )

    delta = getattr(event, "delta", None) if event_type == TEXT_DELTA_EVENT else None
    response_id = getattr(response, "id", None)
    usage = usage_to_dict(getattr(response, "usage", None)) if event_type in TERMINAL_EVENTS else None

    return ResponseStreamEvent(
        type=event_type,
        delta=delta if isinstance(delta, str) else None,
        response_id=response_id if isinstance(response_id, str) else None,
        usage=usage,
    )


class OpenAIResponseClient(ResponseClient):
    """OpenAI Responses API client implementation.

    Hidden design decisions:
    - OpenAI API client initialization
    - Conversation item format conversion
    - Stream event normalization and failure mapping
    - Ownership of the ambient credential, when one is used
    """

    def __init__(
        self,
        api_key: ApiKey | None = None,
        model: str = DEFAULT_DEPLOYMENT_NAME,
        base_url: str | None = None,
        client: AsyncOpenAI | None = None,
        credential: Any | None = None,
        **client_kwargs: Any
    ):
        """Initialize the client.

        Args:
            api_key: API key, or an async callable returning a bearer token
            model: Model or deployment name requests are bound to
            base_url: Optional custom API base URL
            client: Pre-built AsyncOpenAI client (api_key/base_url are ignored)
            credential: Async credential to close together with the client
            **client_kwargs: Additional kwargs for AsyncOpenAI client
        """
        self._model = model
        self._client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            **client_kwargs
        )
        self._credential = credential

    @property
    def model(self) -> str:
        return self._model

    @property
    def client(self) -> AsyncOpenAI:
        """The underlying SDK client."""
        return self._client

    @property
    def base_url(self) -> str:
        return str(self._client.base_url)

    def _request_params(
        self,
        items: Sequence[ResponseItem],
        tools: Sequence[dict[str, Any]] | None,
        **kwargs: Any
    ) -> dict[str, Any]:
        request_params: dict[str, Any] = {
            "model": self._model,
            "input": _items_to_responses_format(items),
        }
        if tools:
            request_params["tools"] = list(tools)
        request_params.update(kwargs)
        return request_params

    async def create_response(
        self,
        items: Sequence[ResponseItem],
        tools: Sequence[dict[str, Any]] | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Generate a complete response using the Responses API.

        Args:
            items: Conversation items
            tools: Tool descriptors (e.g. hosted MCP servers)
            **kwargs: Additional Responses API parameters

        Returns:
            LLMResponse with the aggregated output text
        """
        request_params = self._request_params(items, tools, **kwargs)
        response = await self._client.responses.create(**request_params)

        return LLMResponse.from_usage(
            content=response.output_text or "",
            model=getattr(response, "model", None) or self._model,
            usage=getattr(response, "usage", None),
        )

    async def create_response_stream(
        self,
        items: Sequence[ResponseItem],
        tools: Sequence[dict[str, Any]] | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        """Generate a streaming response using the Responses API.

        The request is issued when the returned stream is first iterated.

        Args:
            items: Conversation items
            tools: Tool descriptors (e.g. hosted MCP servers)
            **kwargs: Additional Responses API parameters

        Returns:
            StreamingResponse yielding normalized events
        """
        request_params = self._request_params(items, tools, stream=True, **kwargs)
        return StreamingResponse(self._stream_generator(request_params))

    async def _stream_generator(
        self,
        request_params: dict[str, Any]
    ) -> AsyncIterator[ResponseStreamEvent]:
        """Internal generator that normalizes Responses API stream events."""
        stream = await self._client.responses.create(**request_params)
        try:
            async for event in stream:
                normalized = _normalize_event(event)
                if normalized is not None:
                    yield normalized
        finally:
            await stream.close()

    async def close(self) -> None:
        """Close the OpenAI client and the credential it was built with."""
        await self._client.close()
        if self._credential is not None:
            await self._credential.close()
