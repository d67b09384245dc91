"""FastAPI dependency injection functions.

This module contains shared dependencies for the MCP endpoints:
- Credential extraction (Authorization / X-API-Key / api_key query)
- Access to the process-wide dispatcher and SSE session registry
- Mapping of JSON-RPC error codes to HTTP status codes
"""

import logging
from typing import Annotated

from fastapi import Header, Query
from fastapi import Request as FastAPIRequest

from ..mcp.auth import extract_credential
from ..mcp.jsonrpc import (
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    UNAUTHORIZED,
    error_code,
)

logger = logging.getLogger(__name__)

# JSON-RPC error code -> HTTP status on the stateless transport
HTTP_STATUS_BY_ERROR = {
    UNAUTHORIZED: 401,
    METHOD_NOT_FOUND: 404,
    INVALID_REQUEST: 400,
    PARSE_ERROR: 400,
}


async def get_credential(
    authorization: Annotated[str | None, Header()] = None,
    x_api_key: Annotated[str | None, Header(alias="X-API-Key")] = None,
    api_key: Annotated[str | None, Query()] = None,
) -> str | None:
    """Extract the shared-secret credential, wherever the client put it."""
    return extract_credential(authorization, x_api_key, api_key)


def get_dispatcher(request: FastAPIRequest):
    """Return the ProtocolDispatcher built during application startup."""
    return request.app.state.dispatcher


def get_sessions(request: FastAPIRequest):
    """Return the SSE SessionRegistry built during application startup."""
    return request.app.state.sessions


def get_client_ip(request: FastAPIRequest) -> str | None:
    """Extract client IP from X-Forwarded-For header or direct connection."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return None


def http_status_for(envelope: dict | None) -> int:
    """HTTP status for a single response envelope."""
    return HTTP_STATUS_BY_ERROR.get(error_code(envelope), 200)
