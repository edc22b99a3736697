"""Provider factory functions for CLI.

Centralizes creation of settings, the response client and the MCP tool
registration from environment variables. Hides configuration details from
command implementations.
"""

import typer
from rich.console import Console

from ..config import AppSettings, ConfigurationError, load_settings
from ..llm import OpenAIResponseClient, build_response_client
from ..tools import McpToolRegistration, build_mcp_tool

# Default console for output
_console = Console()


def _fail(con: Console, error: ConfigurationError) -> typer.Exit:
    con.print(f"[red]Configuration error: {error}[/red]")
    return typer.Exit(code=1)


def get_settings(console: Console | None = None) -> AppSettings:
    """Load settings from environment variables.

    Raises:
        typer.Exit: If a setting is malformed
    """
    con = console or _console
    try:
        return load_settings()
    except ConfigurationError as e:
        raise _fail(con, e) from e


def get_response_client(settings: AppSettings, console: Console | None = None) -> OpenAIResponseClient:
    """Create the response client from settings.

    Args:
        settings: Loaded application settings
        console: Optional Rich console for output

    Returns:
        Response client bound to the configured deployment

    Raises:
        typer.Exit: If no usable endpoint, key or credential is configured

    Environment variables:
        OPENAI_CONNECTION_STRING: 'Endpoint=...;Key=...' connection string
        OPENAI_ENDPOINT: Model API endpoint
        OPENAI_API_KEY: Model API key
        OPENAI_DEPLOYMENT_NAME: Model/deployment name (default: gpt-5-mini)
    """
    con = console or _console
    try:
        return build_response_client(settings.openai)
    except ConfigurationError as e:
        raise _fail(con, e) from e


def get_mcp_tool(settings: AppSettings, console: Console | None = None) -> McpToolRegistration:
    """Create the MCP tool registration from settings.

    Raises:
        typer.Exit: If the MCP server URL or token is missing

    Environment variables:
        MCP_SERVER_URL: MCP server base URL
        MCP_SERVER_TOKEN: MCP server bearer token
        MCP_SERVER_LABEL: Tool server label (default: TodoList)
    """
    con = console or _console
    try:
        return build_mcp_tool(settings.mcp)
    except ConfigurationError as e:
        raise _fail(con, e) from e
