from .loader import load_settings, resolve_service_url
from .models import (
    DEFAULT_DEPLOYMENT_NAME,
    DEFAULT_MCP_SERVER_LABEL,
    AppSettings,
    ConfigurationError,
    McpServerSettings,
    OpenAISettings,
)

__all__ = [
    "DEFAULT_DEPLOYMENT_NAME",
    "DEFAULT_MCP_SERVER_LABEL",
    "AppSettings",
    "ConfigurationError",
    "McpServerSettings",
    "OpenAISettings",
    "load_settings",
    "resolve_service_url",
]
