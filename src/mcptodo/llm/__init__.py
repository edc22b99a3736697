from .base import ResponseClient, ResponseStreamError
from .factory import build_response_client, normalize_endpoint, parse_connection_string
from .models import ChatRole, LLMResponse, ResponseItem, ResponseStreamEvent, StreamingResponse
from .providers import OpenAIResponseClient

__all__ = [
    "ResponseClient",
    "ResponseStreamError",
    "build_response_client",
    "normalize_endpoint",
    "parse_connection_string",
    "ChatRole",
    "LLMResponse",
    "ResponseItem",
    "ResponseStreamEvent",
    "StreamingResponse",
    "OpenAIResponseClient",
]
