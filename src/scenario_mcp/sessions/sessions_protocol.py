"""Per-session Model Context Protocol handler (JSON-RPC 2.0 over HTTP).

Each session owns one :class:`McpSession`. The handler starts uninitialised;
the ``initialize`` request makes it generate its session id and hand it to the
``on_session_initialized`` callback, which registers the handler in the
routing table. Responses are plain JSON, there is no SSE streaming.
"""

from __future__ import annotations

import json
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Literal

import structlog
from pydantic import BaseModel, ConfigDict, ValidationError

from ..exceptions import ScenarioError
from ..operations.operations_errors import InvalidParamsError, UnknownOperationError
from ..operations.operations_registry import ToolRegistry

logger = structlog.get_logger(__name__)

SESSION_HEADER = "mcp-session-id"
LATEST_PROTOCOL_VERSION = "2025-06-18"
SUPPORTED_PROTOCOL_VERSIONS = ("2025-06-18", "2025-03-26", "2024-11-05")

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
SERVER_ERROR = -32000


class JsonRpcMessage(BaseModel):
    """Inbound JSON-RPC request or notification."""

    model_config = ConfigDict(extra="allow")

    jsonrpc: Literal["2.0"]
    method: str
    id: int | str | None = None
    params: dict[str, Any] | None = None

    @property
    def is_notification(self) -> bool:
        return "id" not in self.model_fields_set


@dataclass(slots=True)
class McpResponse:
    """HTTP-level outcome of handling one inbound body."""

    status_code: int
    body: Any = None
    headers: dict[str, str] = field(default_factory=dict)


def rpc_error(request_id: Any, code: int, message: str, data: Any = None) -> dict[str, Any]:
    error: dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": "2.0", "id": request_id, "error": error}


def rpc_result(request_id: Any, result: Any) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "result": result}


def _text_content(payload: Any, *, is_error: bool = False) -> dict[str, Any]:
    result: dict[str, Any] = {
        "content": [{"type": "text", "text": json.dumps(payload, indent=2, default=str)}]
    }
    if is_error:
        result["isError"] = True
    return result


class McpSession:
    """Stateful protocol object exclusively owned by one session."""

    def __init__(
        self,
        *,
        tools: ToolRegistry,
        on_session_initialized: Callable[[str], None],
        server_name: str = "scenario",
        server_version: str = "0.0.0",
        session_id_generator: Callable[[], str] | None = None,
    ) -> None:
        self._tools = tools
        self._on_session_initialized = on_session_initialized
        self._server_info = {"name": server_name, "version": server_version}
        self._generate_id = session_id_generator or (lambda: str(uuid.uuid4()))
        self.session_id: str | None = None
        self.protocol_version: str | None = None

    @property
    def initialized(self) -> bool:
        return self.session_id is not None

    async def handle_request(self, message: Any) -> McpResponse:
        """Process a single JSON-RPC message or a batch."""

        if isinstance(message, list):
            return await self._handle_batch(message)
        status_code, body = await self._handle_message(message)
        return McpResponse(status_code=status_code, body=body, headers=self._headers())

    async def _handle_batch(self, messages: list[Any]) -> McpResponse:
        if not messages:
            return McpResponse(400, rpc_error(None, INVALID_REQUEST, "Invalid Request: empty batch"))
        bodies: list[Any] = []
        for message in messages:
            status_code, body = await self._handle_message(message)
            if status_code == 400 and not self.initialized:
                return McpResponse(status_code, body, self._headers())
            if body is not None:
                bodies.append(body)
        if not bodies:
            return McpResponse(202, None, self._headers())
        return McpResponse(200, bodies, self._headers())

    async def _handle_message(self, raw: Any) -> tuple[int, Any]:
        if isinstance(raw, dict) and "method" not in raw and ("result" in raw or "error" in raw):
            # client response to a server request; nothing to answer
            return 202, None
        try:
            message = JsonRpcMessage.model_validate(raw)
        except ValidationError as exc:
            request_id = raw.get("id") if isinstance(raw, dict) else None
            errors = exc.errors(include_url=False, include_context=False)
            return 400, rpc_error(request_id, INVALID_REQUEST, "Invalid Request", errors)

        if message.method == "initialize":
            return self._initialize(message)
        if not self.initialized:
            return 400, rpc_error(message.id, SERVER_ERROR, "Bad Request: Server not initialized")
        if message.is_notification:
            return 202, None

        if message.method == "ping":
            return 200, rpc_result(message.id, {})
        if message.method == "tools/list":
            return 200, rpc_result(message.id, {"tools": self._tools.descriptors()})
        if message.method == "tools/call":
            return 200, await self._call_tool(message)
        return 200, rpc_error(message.id, METHOD_NOT_FOUND, f"Method not found: {message.method}")

    def _initialize(self, message: JsonRpcMessage) -> tuple[int, Any]:
        if self.initialized:
            return 400, rpc_error(
                message.id, INVALID_REQUEST, "Invalid Request: Server already initialized"
            )
        requested = (message.params or {}).get("protocolVersion")
        version = requested if requested in SUPPORTED_PROTOCOL_VERSIONS else LATEST_PROTOCOL_VERSION

        session_id = self._generate_id()
        self._on_session_initialized(session_id)
        self.session_id = session_id
        self.protocol_version = version
        return 200, rpc_result(
            message.id,
            {
                "protocolVersion": version,
                "capabilities": {"tools": {"listChanged": False}},
                "serverInfo": self._server_info,
            },
        )

    async def _call_tool(self, message: JsonRpcMessage) -> dict[str, Any]:
        params = message.params or {}
        name = params.get("name")
        if not isinstance(name, str) or not name:
            return rpc_error(message.id, INVALID_PARAMS, "tools/call requires a tool name")
        arguments = params.get("arguments") or {}
        if not isinstance(arguments, dict):
            return rpc_error(message.id, INVALID_PARAMS, "tools/call arguments must be an object")

        log = logger.bind(session_id=self.session_id, tool=name)
        try:
            result = await self._tools.dispatch(name, arguments)
        except (UnknownOperationError, InvalidParamsError) as exc:
            log.warning("sessions.tool.rejected", error=str(exc))
            return rpc_error(message.id, INVALID_PARAMS, str(exc))
        except ScenarioError as exc:
            log.warning(
                "sessions.tool.failed",
                stage=exc.stage.value if exc.stage else None,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return rpc_result(message.id, _text_content(exc.to_payload(), is_error=True))
        log.info("sessions.tool.completed")
        return rpc_result(message.id, _text_content(result))

    def _headers(self) -> dict[str, str]:
        if self.session_id is None:
            return {}
        return {SESSION_HEADER: self.session_id}


__all__ = [
    "LATEST_PROTOCOL_VERSION",
    "McpResponse",
    "McpSession",
    "SESSION_HEADER",
    "SUPPORTED_PROTOCOL_VERSIONS",
]
