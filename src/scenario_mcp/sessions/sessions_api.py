"""HTTP routes for the MCP endpoint and the health probe."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, Response

from .. import __version__
from .sessions_protocol import PARSE_ERROR, SERVER_ERROR, SESSION_HEADER, McpSession, rpc_error
from .sessions_router import SessionRouter

router = APIRouter(tags=["mcp"])
logger = logging.getLogger(__name__)


def get_session_router(request: Request) -> SessionRouter[McpSession]:
    """Fetch the session router from application state."""
    try:
        return request.app.state.session_router  # type: ignore[attr-defined]
    except AttributeError as exc:
        raise RuntimeError("SessionRouter is not configured") from exc


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy", "version": __version__}


@router.post("/mcp")
async def handle_mcp(
    request: Request,
    sessions: SessionRouter[McpSession] = Depends(get_session_router),
) -> Response:
    """Route the JSON-RPC body to the session named by ``mcp-session-id``."""
    session_id = request.headers.get(SESSION_HEADER)
    handler = sessions.route_for(session_id)

    raw = await request.body()
    try:
        message = json.loads(raw)
    except ValueError:
        logger.warning("mcp.parse_error", extra={"session_id": session_id})
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=rpc_error(None, PARSE_ERROR, "Parse error: Invalid JSON"),
        )

    try:
        outcome = await handler.handle_request(message)
    except Exception as exc:
        logger.exception("mcp.request_error", extra={"session_id": session_id})
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc)},
        )

    if outcome.body is None:
        return Response(status_code=outcome.status_code, headers=outcome.headers)
    return JSONResponse(
        status_code=outcome.status_code, content=outcome.body, headers=outcome.headers
    )


@router.api_route("/mcp", methods=["GET", "DELETE"])
async def mcp_method_not_allowed() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        content=rpc_error(None, SERVER_ERROR, "Method not allowed."),
        headers={"Allow": "POST"},
    )


__all__ = ["get_session_router", "router"]
