"""MCP transports: stateless HTTP POST and Server-Sent Events sessions.

Both transports hand raw messages to the same ProtocolDispatcher.

    POST /mcp                      stateless JSON-RPC (single or batch)
    GET  /sse                      open an event stream (credential required)
    POST /messages?session_id=...  deliver a message to an open stream

An SSE session is only a delivery channel: a queue of outgoing envelopes and
the credential presented when the stream was opened.
"""

import asyncio
import json
import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from dataclasses import dataclass, field
from typing import Annotated, Any
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from fastapi.responses import JSONResponse, StreamingResponse

from ..api.deps import get_client_ip, get_credential, get_dispatcher, get_sessions, http_status_for
from .dispatcher import ProtocolDispatcher
from .jsonrpc import INVALID_REQUEST, PARSE_ERROR, jsonrpc_error

logger = logging.getLogger(__name__)

router = APIRouter()

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Disable nginx buffering
}


@dataclass
class SSESession:
    id: str
    credential: str | None
    queue: asyncio.Queue = field(default_factory=asyncio.Queue)


class SessionRegistry:
    """Open SSE sessions by id.

    Each session queue holds at most `max_pending` undelivered envelopes.
    """

    def __init__(self, max_pending: int = 100):
        self.max_pending = max_pending
        self._sessions: dict[str, SSESession] = {}

    def open(self, credential: str | None) -> SSESession:
        session = SSESession(
            id=uuid4().hex,
            credential=credential,
            queue=asyncio.Queue(maxsize=self.max_pending),
        )
        self._sessions[session.id] = session
        logger.info(f"SSE session {session.id[:8]} connected")
        return session

    def get(self, session_id: str) -> SSESession | None:
        return self._sessions.get(session_id)

    def close(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is not None:
            logger.info(f"SSE session {session_id[:8]} disconnected")

    def __len__(self) -> int:
        return len(self._sessions)


def format_sse(event: str, data: str) -> str:
    return f"event: {event}\ndata: {data}\n\n"


async def sse_event_generator(
    session: SSESession,
    sessions: SessionRegistry,
    endpoint: str,
    is_disconnected: Callable[[], Awaitable[bool]],
    keepalive_seconds: float,
) -> AsyncGenerator[str, None]:
    """
    Generate Server-Sent Events for one MCP session.

    Yields:
    - endpoint: where the client must POST its messages (sent once)
    - message: one JSON-RPC envelope per dispatched request
    - keepalive comments while the queue is idle
    """
    yield format_sse("endpoint", endpoint)
    try:
        while not await is_disconnected():
            try:
                envelope = await asyncio.wait_for(session.queue.get(), timeout=keepalive_seconds)
            except TimeoutError:
                yield ": keepalive\n\n"
                continue
            yield format_sse("message", json.dumps(envelope, ensure_ascii=False, default=str))
    finally:
        sessions.close(session.id)


async def _read_json(request: Request) -> tuple[Any, JSONResponse | None]:
    try:
        return await request.json(), None
    except Exception:
        return None, JSONResponse(jsonrpc_error(None, PARSE_ERROR, "Parse error"), status_code=400)


async def dispatch_body(
    dispatcher: ProtocolDispatcher, body: Any, credential: str | None
) -> list[dict] | dict | None:
    """Dispatch a single message or a batch; notifications produce nothing."""
    if isinstance(body, list):
        if not body:
            return jsonrpc_error(None, INVALID_REQUEST, "Invalid request: empty batch")
        responses = [await dispatcher.dispatch(message, credential) for message in body]
        return [r for r in responses if r is not None]
    return await dispatcher.dispatch(body, credential)


# ============ STATELESS TRANSPORT ============


@router.post("/mcp", tags=["MCP"])
async def mcp_endpoint(
    request: Request,
    dispatcher: Annotated[ProtocolDispatcher, Depends(get_dispatcher)],
    credential: Annotated[str | None, Depends(get_credential)],
):
    """
    Stateless MCP endpoint (JSON-RPC over HTTP POST).

    initialize and tools/list are open; tools/call requires
    `Authorization: Bearer <secret>` (or X-API-Key). Unauthorized calls get
    HTTP 401, unknown methods HTTP 404, notifications HTTP 204.
    """
    body, parse_error = await _read_json(request)
    if parse_error:
        return parse_error

    result = await dispatch_body(dispatcher, body, credential)
    if isinstance(result, list):
        return JSONResponse(result) if result else Response(status_code=204)
    if result is None:
        return Response(status_code=204)
    return JSONResponse(result, status_code=http_status_for(result))


# ============ SSE TRANSPORT ============


@router.get("/sse", tags=["MCP", "SSE"])
async def sse_endpoint(
    request: Request,
    dispatcher: Annotated[ProtocolDispatcher, Depends(get_dispatcher)],
    sessions: Annotated[SessionRegistry, Depends(get_sessions)],
    credential: Annotated[str | None, Depends(get_credential)],
):
    """
    Open an MCP event stream.

    The credential (X-API-Key header, api_key query parameter or bearer
    token) is checked before the stream opens; it is then presented on behalf
    of the session for every message posted to it.
    """
    if not dispatcher.guard.is_authorized(credential):
        logger.warning(f"SSE connection rejected from {get_client_ip(request)}: invalid credential")
        raise HTTPException(status_code=401, detail="Unauthorized")

    session = sessions.open(credential)
    endpoint = f"{request.scope.get('root_path', '')}/messages?session_id={session.id}"

    return StreamingResponse(
        sse_event_generator(
            session,
            sessions,
            endpoint,
            request.is_disconnected,
            request.app.state.settings.sse_keepalive_seconds,
        ),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@router.post("/messages", tags=["MCP", "SSE"])
async def sse_message_endpoint(
    request: Request,
    dispatcher: Annotated[ProtocolDispatcher, Depends(get_dispatcher)],
    sessions: Annotated[SessionRegistry, Depends(get_sessions)],
    session_id: str = Query(..., description="Session id from the endpoint event"),
):
    """Deliver one message (or batch) to an open SSE session; replies go on the stream."""
    session = sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")

    body, parse_error = await _read_json(request)
    if parse_error:
        return parse_error

    result = await dispatch_body(dispatcher, body, session.credential)
    for envelope in result if isinstance(result, list) else [result]:
        if envelope is None:
            continue
        try:
            session.queue.put_nowait(envelope)
        except asyncio.QueueFull:
            logger.warning(f"SSE session {session.id[:8]} has {session.queue.qsize()} undelivered messages")
            raise HTTPException(status_code=503, detail="Session queue is full") from None

    return Response(content="Accepted", status_code=202)
