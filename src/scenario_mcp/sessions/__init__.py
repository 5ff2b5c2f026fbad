"""Session routing and the per-session MCP handler."""

from .sessions_protocol import McpResponse, McpSession
from .sessions_router import SessionCollisionError, SessionRouter, SessionTable

__all__ = [
    "McpResponse",
    "McpSession",
    "SessionCollisionError",
    "SessionRouter",
    "SessionTable",
]
