"""Settings loading from the process environment.

Hides which environment variable names map to which setting, and how
service-discovery style URLs are resolved.
"""

import os
from collections.abc import Mapping

from .models import AppSettings, ConfigurationError, McpServerSettings, OpenAISettings

SERVICE_DISCOVERY_SCHEME = "https+http://"


def _first(environ: Mapping[str, str], *names: str) -> str | None:
    """Return the first non-blank value among the given variable names."""
    for name in names:
        value = environ.get(name)
        if value and value.strip():
            return value
    return None


def resolve_service_url(url: str, environ: Mapping[str, str] | None = None) -> str:
    """Resolve a service URL, expanding the ``https+http://`` discovery scheme.

    Plain ``http://`` and ``https://`` URLs are returned unchanged. For
    ``https+http://<app>/<path>`` the HTTPS endpoint published for ``<app>``
    is preferred, falling back to the HTTP one.

    Environment variables:
        services__<app>__https__0: HTTPS endpoint of <app>
        services__<app>__http__0: HTTP endpoint of <app>

    Raises:
        ConfigurationError: If the scheme is unsupported or no endpoint is published
    """
    env = os.environ if environ is None else environ
    url = url.strip()

    if url.startswith(("http://", "https://")):
        return url

    if url.startswith(SERVICE_DISCOVERY_SCHEME):
        remainder = url[len(SERVICE_DISCOVERY_SCHEME):]
        app_name, _, path = remainder.partition("/")
        resolved = _first(
            env,
            f"services__{app_name}__https__0",
            f"services__{app_name}__http__0",
        )
        if resolved is None:
            raise ConfigurationError(
                f"No endpoint published for service '{app_name}'. "
                f"Set services__{app_name}__https__0 or services__{app_name}__http__0."
            )
        resolved = resolved.strip().rstrip("/")
        return f"{resolved}/{path}" if path else resolved

    raise ConfigurationError(
        f"Invalid URL format: {url}. Expected format: 'https+http://appname' or 'http://appname'."
    )


def load_settings(environ: Mapping[str, str] | None = None) -> AppSettings:
    """Load application settings from environment variables.

    Args:
        environ: Mapping to read from (defaults to ``os.environ``)

    Returns:
        Validated application settings

    Environment variables:
        OPENAI_CONNECTION_STRING: 'Endpoint=...;Key=...' (or ConnectionStrings__openai)
        OPENAI_ENDPOINT: Model API endpoint
        OPENAI_API_KEY: Model API key
        OPENAI_DEPLOYMENT_NAME: Model/deployment name (default: gpt-5-mini)
        AZURE_CLIENT_ID: User-assigned managed identity client id
        MCPTODO_ENVIRONMENT: Development or Production (default: Development)
        MCP_SERVER_URL: MCP server base URL
        MCP_SERVER_TOKEN: MCP server bearer token
        MCP_SERVER_LABEL: Tool server label (default: TodoList)
    """
    env = os.environ if environ is None else environ

    environment = (env.get("MCPTODO_ENVIRONMENT") or "Development").strip().lower()

    openai_settings = OpenAISettings(
        connection_string=_first(env, "OPENAI_CONNECTION_STRING", "ConnectionStrings__openai"),
        endpoint=env.get("OPENAI_ENDPOINT"),
        api_key=env.get("OPENAI_API_KEY"),
        deployment_name=env.get("OPENAI_DEPLOYMENT_NAME"),
        azure_client_id=env.get("AZURE_CLIENT_ID"),
        development=environment != "production",
    )

    mcp_url = env.get("MCP_SERVER_URL")
    if mcp_url and mcp_url.strip():
        mcp_url = resolve_service_url(mcp_url, env)

    mcp_settings = McpServerSettings(
        url=mcp_url,
        token=env.get("MCP_SERVER_TOKEN"),
        label=env.get("MCP_SERVER_LABEL"),
    )

    return AppSettings(openai=openai_settings, mcp=mcp_settings)
