"""MCP (Model Context Protocol) layer.

This package contains:
- Tool definitions for tools/list
- JSON-RPC 2.0 helpers
- Shared-secret authorization policy
- The protocol dispatcher and the SSE session transport

Note: the dispatcher and transport depend on the engine, which itself reads
the tool definitions from here. Import them directly:
    from unx_mcp.mcp.dispatcher import ProtocolDispatcher
    from unx_mcp.mcp.transport import router
"""

from .auth import METHOD_AUTH_POLICY, AuthGuard, extract_credential
from .jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    SERVER_ERROR,
    UNAUTHORIZED,
    error_code,
    jsonrpc_error,
    jsonrpc_response,
)
from .tool_defs import TOOL_DEFINITIONS

__all__ = [
    # Tool definitions
    "TOOL_DEFINITIONS",
    # Authorization
    "AuthGuard",
    "METHOD_AUTH_POLICY",
    "extract_credential",
    # JSON-RPC helpers
    "jsonrpc_response",
    "jsonrpc_error",
    "error_code",
    "PARSE_ERROR",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "INVALID_PARAMS",
    "INTERNAL_ERROR",
    "SERVER_ERROR",
    "UNAUTHORIZED",
]
