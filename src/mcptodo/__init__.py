"""
mcptodo: a chat client that lets a hosted language model manage a to-do
list through a remote Model Context Protocol (MCP) server.

Each module hides a specific design decision: configuration sources,
model API access, tool registration, session orchestration, and the
user interfaces built on top of them.
"""

__version__ = "0.1.0"

from .chat import ChatCallback, ChatMessage, ChatSession, SuggestionGenerator
from .config import AppSettings, ConfigurationError, load_settings
from .llm import ChatRole, ResponseClient, build_response_client
from .tools import McpToolRegistration, build_mcp_tool

__all__ = [
    "AppSettings",
    "ChatCallback",
    "ChatMessage",
    "ChatRole",
    "ChatSession",
    "ConfigurationError",
    "McpToolRegistration",
    "ResponseClient",
    "SuggestionGenerator",
    "build_mcp_tool",
    "build_response_client",
    "load_settings",
]
