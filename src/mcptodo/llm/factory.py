from typing import Any
from urllib.parse import urlparse

from azure.identity.aio import (
    DefaultAzureCredential,
    ManagedIdentityCredential,
    get_bearer_token_provider,
)

from ..config import ConfigurationError, OpenAISettings
from .providers import OpenAIResponseClient

AZURE_OPENAI_HOST_SUFFIX = ".openai.azure.com"
AZURE_OPENAI_API_PATH = "/openai/v1/"
COGNITIVE_SERVICES_SCOPE = "https://cognitiveservices.azure.com/.default"

MISSING_CONFIGURATION_MESSAGE = (
    "Missing configuration. Provide either OPENAI_CONNECTION_STRING, "
    "or OPENAI_ENDPOINT and OPENAI_API_KEY, or OPENAI_API_KEY alone."
)


def parse_connection_string(connection_string: str) -> dict[str, str]:
    """Parse a semicolon-delimited ``key=value`` connection string.

    Keys are case-insensitive (returned lower-cased). Values are trimmed and
    surrounding quotes removed. Empty segments are skipped.

    Examples:
        >>> parse_connection_string("Endpoint=https://x.openai.azure.com/;Key=abc")
        {'endpoint': 'https://x.openai.azure.com/', 'key': 'abc'}

    Raises:
        ConfigurationError: If a segment has no '=' or an empty key
    """
    parts: dict[str, str] = {}
    for segment in connection_string.split(";"):
        segment = segment.strip()
        if not segment:
            continue

        key, sep, value = segment.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ConfigurationError(f"Malformed connection string segment: '{segment}'")

        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            value = value[1:-1]
        parts[key.lower()] = value

    return parts


def normalize_endpoint(endpoint: str) -> tuple[str, bool]:
    """Normalize an endpoint URL.

    Strips whitespace and trailing slashes. Azure OpenAI endpoints get the
    v1 API path appended, which also makes credential-based auth eligible.

    Returns:
        Tuple of (normalized URL, is_azure)
    """
    trimmed = endpoint.strip().rstrip("/")
    if not trimmed:
        raise ConfigurationError("Endpoint must not be empty.")

    host = urlparse(trimmed).hostname or ""
    is_azure = host.lower().endswith(AZURE_OPENAI_HOST_SUFFIX)
    if is_azure:
        return f"{trimmed}{AZURE_OPENAI_API_PATH}", True
    return trimmed, False


def _create_credential(settings: OpenAISettings) -> Any:
    """Create the ambient credential: developer chain or managed identity."""
    if settings.development:
        return DefaultAzureCredential()
    return ManagedIdentityCredential(client_id=settings.azure_client_id)


def _build_for_endpoint(
    endpoint: str,
    api_key: str | None,
    settings: OpenAISettings,
    missing_key_message: str,
    **client_kwargs: Any
) -> OpenAIResponseClient:
    base_url, is_azure = normalize_endpoint(endpoint)

    if api_key:
        return OpenAIResponseClient(
            api_key=api_key,
            model=settings.deployment_name,
            base_url=base_url,
            **client_kwargs
        )

    if not is_azure:
        raise ConfigurationError(missing_key_message)

    credential = _create_credential(settings)
    token_provider = get_bearer_token_provider(credential, COGNITIVE_SERVICES_SCOPE)
    return OpenAIResponseClient(
        api_key=token_provider,
        model=settings.deployment_name,
        base_url=base_url,
        credential=credential,
        **client_kwargs
    )


def build_response_client(settings: OpenAISettings, **client_kwargs: Any) -> OpenAIResponseClient:
    """Build a response client from layered configuration.

    This factory function hides how credentials and endpoints are resolved.

    Resolution order:
        1. Connection string ('Endpoint=...;Key=...')
        2. Explicit endpoint plus API key
        3. Endpoint only, using an ambient Azure credential (Azure endpoints only)
        4. API key only, against the default public OpenAI API

    Args:
        settings: Model endpoint settings
        **client_kwargs: Additional kwargs for the AsyncOpenAI client

    Returns:
        Response client bound to ``settings.deployment_name``

    Raises:
        ConfigurationError: If no usable combination of endpoint, key or
            credential is configured
    """
    client_kwargs.setdefault("max_retries", 0)

    if settings.connection_string:
        parts = parse_connection_string(settings.connection_string)
        endpoint = parts.get("endpoint", "").strip()
        if not endpoint:
            raise ConfigurationError("Missing Endpoint in connection string.")
        return _build_for_endpoint(
            endpoint,
            parts.get("key", "").strip() or None,
            settings,
            "Missing Key in connection string.",
            **client_kwargs
        )

    if settings.endpoint:
        return _build_for_endpoint(
            settings.endpoint,
            settings.api_key,
            settings,
            "Missing API key in configuration.",
            **client_kwargs
        )

    if settings.api_key:
        return OpenAIResponseClient(
            api_key=settings.api_key,
            model=settings.deployment_name,
            **client_kwargs
        )

    raise ConfigurationError(MISSING_CONFIGURATION_MESSAGE)
