"""Settings models.

These models define the configuration the client needs at startup,
independent of where the values come from (environment, .env file, tests).
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_DEPLOYMENT_NAME = "gpt-5-mini"
DEFAULT_MCP_SERVER_LABEL = "TodoList"


class ConfigurationError(ValueError):
    """Raised when required configuration is missing or malformed."""


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class OpenAISettings(BaseModel):
    """Connection settings for the language-model endpoint."""

    model_config = ConfigDict(frozen=True)

    connection_string: str | None = Field(
        default=None,
        description="Semicolon-delimited 'Endpoint=...;Key=...' connection string"
    )
    endpoint: str | None = Field(default=None, description="Explicit endpoint URL")
    api_key: str | None = Field(default=None, description="Explicit API key")
    deployment_name: str = Field(
        default=DEFAULT_DEPLOYMENT_NAME,
        description="Model or deployment name requests are bound to"
    )
    azure_client_id: str | None = Field(
        default=None,
        description="Client id of a user-assigned managed identity"
    )
    development: bool = Field(
        default=True,
        description="Use the developer credential chain instead of managed identity"
    )

    @field_validator("connection_string", "endpoint", "api_key", "azure_client_id", mode="before")
    @classmethod
    def _strip_optional(cls, value: str | None) -> str | None:
        return _blank_to_none(value)

    @field_validator("deployment_name", mode="before")
    @classmethod
    def _default_deployment(cls, value: str | None) -> str:
        return _blank_to_none(value) or DEFAULT_DEPLOYMENT_NAME


class McpServerSettings(BaseModel):
    """Settings for the remote MCP server registered as a tool."""

    model_config = ConfigDict(frozen=True)

    url: str | None = Field(default=None, description="MCP server base URL")
    token: str | None = Field(default=None, description="Bearer token sent to the MCP server")
    label: str = Field(default=DEFAULT_MCP_SERVER_LABEL, description="Tool server label")

    @field_validator("url", "token", mode="before")
    @classmethod
    def _strip_optional(cls, value: str | None) -> str | None:
        return _blank_to_none(value)

    @field_validator("label", mode="before")
    @classmethod
    def _default_label(cls, value: str | None) -> str:
        return _blank_to_none(value) or DEFAULT_MCP_SERVER_LABEL


class AppSettings(BaseModel):
    """Complete application settings."""

    model_config = ConfigDict(frozen=True)

    openai: OpenAISettings = Field(default_factory=OpenAISettings)
    mcp: McpServerSettings = Field(default_factory=McpServerSettings)
