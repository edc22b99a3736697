from .mcp import ApprovalPolicy, McpToolRegistration, build_mcp_tool, mcp_endpoint_url

__all__ = [
    "ApprovalPolicy",
    "McpToolRegistration",
    "build_mcp_tool",
    "mcp_endpoint_url",
]
