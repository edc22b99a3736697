"""Hosted MCP server tool registration.

Hides the wire shape of the Responses API hosted-MCP tool. The model API
calls the MCP server itself; this client only declares it.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..config import DEFAULT_MCP_SERVER_LABEL, ConfigurationError, McpServerSettings

MCP_ENDPOINT_PATH = "/mcp"


class ApprovalPolicy(str, Enum):
    """Whether tool calls need explicit user confirmation."""

    NEVER = "never"
    ALWAYS = "always"


class McpToolRegistration(BaseModel):
    """An MCP server declared as a tool on every model request."""

    model_config = ConfigDict(frozen=True)

    server_label: str = Field(default=DEFAULT_MCP_SERVER_LABEL, description="Label the model sees")
    server_url: str = Field(description="MCP endpoint URL")
    token: str = Field(repr=False, description="Bearer token for the MCP server")
    approval_policy: ApprovalPolicy = Field(default=ApprovalPolicy.NEVER)

    def to_tool_param(self) -> dict[str, Any]:
        """Convert to the Responses API tool format."""
        return {
            "type": "mcp",
            "server_label": self.server_label,
            "server_url": self.server_url,
            "headers": {"Authorization": f"Bearer {self.token}"},
            "require_approval": self.approval_policy.value,
        }


def mcp_endpoint_url(base_url: str) -> str:
    """Append the MCP endpoint path to a server base URL, once."""
    trimmed = base_url.strip().rstrip("/")
    if trimmed.endswith(MCP_ENDPOINT_PATH):
        return trimmed
    return f"{trimmed}{MCP_ENDPOINT_PATH}"


def build_mcp_tool(
    settings: McpServerSettings,
    approval_policy: ApprovalPolicy = ApprovalPolicy.NEVER
) -> McpToolRegistration:
    """Build the MCP tool registration from settings.

    Raises:
        ConfigurationError: If the server URL or bearer token is missing
    """
    if not settings.url:
        raise ConfigurationError("Missing MCP server URL. Set MCP_SERVER_URL.")
    if not settings.token:
        raise ConfigurationError("Missing MCP server token. Set MCP_SERVER_TOKEN.")

    return McpToolRegistration(
        server_label=settings.label,
        server_url=mcp_endpoint_url(settings.url),
        token=settings.token,
        approval_policy=approval_policy,
    )
