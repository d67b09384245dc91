"""JSON-RPC 2.0 envelope helpers for the MCP transports.

See: https://www.jsonrpc.org/specification
"""

from typing import Any


def jsonrpc_response(id: Any, result: Any) -> dict:
    """Create a JSON-RPC 2.0 success response."""
    return {"jsonrpc": "2.0", "id": id, "result": result}


def jsonrpc_error(id: Any, code: int, message: str) -> dict:
    """Create a JSON-RPC 2.0 error response.

    Error codes used by this server:
        -32700: Parse error (body is not JSON)
        -32600: Invalid request (not an object / no method)
        -32601: Method not found
        -32602: Invalid params (unknown tool or bad arguments)
        -32603: Internal error (unexpected handler failure)
        -32000: Server error (backing store fault or timeout)
        -32001: Unauthorized (tools/call without a valid credential)

    Args:
        id: Request ID (None when it could not be read)
        code: Error code (negative integer)
        message: Human-readable error message

    Returns:
        JSON-RPC 2.0 error response dict
    """
    return {"jsonrpc": "2.0", "id": id, "error": {"code": code, "message": message}}


def error_code(envelope: dict | None) -> int | None:
    """Return the error code of an envelope, or None for success/no body."""
    if not envelope or "error" not in envelope:
        return None
    return envelope["error"].get("code")


# Standard JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
SERVER_ERROR = -32000
UNAUTHORIZED = -32001
