"""JSON-RPC method router shared by both MCP transports.

One decoded message in, one envelope out (or None for notifications). The
dispatcher holds no per-message or per-connection state, so a single instance
serves every request and every SSE session concurrently.
"""

import logging
from typing import Any

from .. import __version__
from ..config import Settings
from ..engine.handlers import HandlerContext, ToolArgumentError
from ..engine.registry import ToolRegistry
from ..repository import CourseRepository, RepositoryError
from .auth import AuthGuard
from .jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    SERVER_ERROR,
    UNAUTHORIZED,
    jsonrpc_error,
    jsonrpc_response,
)

logger = logging.getLogger(__name__)


class ProtocolDispatcher:
    """
    Route MCP methods: initialize, notifications/*, ping, tools/list, tools/call.

    Authorization is looked up per method in the guard's policy; a rejected
    call returns before any repository access. Every handler failure is
    turned into a JSON-RPC error object here and never reaches the transport.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        repository: CourseRepository,
        guard: AuthGuard,
        settings: Settings,
    ):
        self.registry = registry
        self.guard = guard
        self.settings = settings
        self.context = HandlerContext(repository=repository, settings=settings)

    def server_capabilities(self) -> dict:
        return {
            "protocolVersion": self.settings.protocol_version,
            "capabilities": {"tools": {"listChanged": False}},
            "serverInfo": {"name": self.settings.server_name, "version": __version__},
        }

    async def dispatch(self, message: Any, credential: str | None = None) -> dict | None:
        """Handle one JSON-RPC message.

        Args:
            message: Decoded JSON body (expected to be an object)
            credential: Secret presented by the transport, if any

        Returns:
            Response envelope, or None when the message is a notification
        """
        if not isinstance(message, dict):
            return jsonrpc_error(None, INVALID_REQUEST, "Invalid request: expected a JSON object")

        id = message.get("id")
        method = message.get("method")
        params = message.get("params") or {}

        if not isinstance(method, str) or not method:
            return jsonrpc_error(id, INVALID_REQUEST, "Invalid request: missing method")

        logger.info(f"Received method: {method}")

        if self.guard.requires_auth(method) and not self.guard.is_authorized(credential):
            logger.warning(f"Unauthorized {method} request rejected")
            return jsonrpc_error(id, UNAUTHORIZED, "Unauthorized")

        if method == "initialize":
            return jsonrpc_response(id, self.server_capabilities())
        if method.startswith("notifications/"):
            return None
        if method == "ping":
            return jsonrpc_response(id, {})
        if method == "tools/list":
            return jsonrpc_response(id, {"tools": self.registry.list_tools()})
        if method == "tools/call":
            return await self._call_tool(id, params)

        logger.warning(f"Method not found: {method}")
        return jsonrpc_error(id, METHOD_NOT_FOUND, f"Method not found: {method}")

    async def _call_tool(self, id: Any, params: Any) -> dict:
        if not isinstance(params, dict):
            return jsonrpc_error(id, INVALID_PARAMS, "Invalid params: expected an object")

        tool_name = params.get("name")
        arguments = params.get("arguments") or {}

        if not isinstance(tool_name, str):
            return jsonrpc_error(id, INVALID_PARAMS, "Invalid params: tool name must be a string")

        tool = self.registry.get(tool_name)
        if tool is None:
            logger.warning(f"Tool not found: {tool_name}")
            return jsonrpc_error(id, INVALID_PARAMS, f"Tool not found: {tool_name}")
        if not isinstance(arguments, dict):
            return jsonrpc_error(id, INVALID_PARAMS, f"Invalid arguments for {tool_name}")

        logger.info(f"Executing tool: {tool_name}")
        try:
            result = await tool.handler(arguments, self.context)
        except ToolArgumentError as e:
            return jsonrpc_error(id, INVALID_PARAMS, str(e))
        except RepositoryError as e:
            logger.error(f"Backing store error in {tool_name}: {e}", exc_info=True)
            return jsonrpc_error(id, SERVER_ERROR, str(e))
        except Exception as e:
            logger.error(f"Unexpected error in {tool_name}: {e}", exc_info=True)
            return jsonrpc_error(id, INTERNAL_ERROR, str(e) or type(e).__name__)

        return jsonrpc_response(id, {"content": [{"type": "text", "text": result.text}]})
