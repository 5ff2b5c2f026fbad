from __future__ import annotations

import json

import pytest

from scenario_mcp.exceptions import FailureStage
from scenario_mcp.jobs.jobs_errors import JobTimeoutError
from scenario_mcp.operations.operations_registry import ToolRegistry
from scenario_mcp.operations.operations_requests import GetAssetRequest, ListModelsRequest
from scenario_mcp.sessions.sessions_protocol import (
    LATEST_PROTOCOL_VERSION,
    SESSION_HEADER,
    McpSession,
)

pytestmark = pytest.mark.unit


def build_session(registered: list[str] | None = None) -> McpSession:
    registry = ToolRegistry()

    async def list_models(request: ListModelsRequest):
        return [{"id": "m1", "pageSize": request.page_size}]

    async def get_asset(request: GetAssetRequest):
        error = JobTimeoutError(request.asset_id, 120_500, 120_000)
        error.stage = FailureStage.POLLING
        raise error

    registry.register("list_models", "List models.", ListModelsRequest, list_models)
    registry.register("get_asset", "Get asset.", GetAssetRequest, get_asset)
    sink = registered if registered is not None else []
    return McpSession(
        tools=registry,
        on_session_initialized=sink.append,
        server_version="1.0.0",
        session_id_generator=lambda: "sess-1",
    )


def rpc(method: str, params=None, request_id=1):
    message = {"jsonrpc": "2.0", "method": method, "id": request_id}
    if params is not None:
        message["params"] = params
    return message


INIT = rpc("initialize", {"protocolVersion": "2025-03-26", "capabilities": {}})


@pytest.mark.asyncio
async def test_initialize_registers_and_returns_header() -> None:
    registered: list[str] = []
    session = build_session(registered)

    response = await session.handle_request(INIT)

    assert response.status_code == 200
    assert response.headers == {SESSION_HEADER: "sess-1"}
    assert response.body["result"]["protocolVersion"] == "2025-03-26"
    assert response.body["result"]["serverInfo"] == {"name": "scenario", "version": "1.0.0"}
    assert registered == ["sess-1"]
    assert session.initialized


@pytest.mark.asyncio
async def test_unsupported_protocol_version_negotiates_latest() -> None:
    session = build_session()

    response = await session.handle_request(rpc("initialize", {"protocolVersion": "1999-01-01"}))

    assert response.body["result"]["protocolVersion"] == LATEST_PROTOCOL_VERSION


@pytest.mark.asyncio
async def test_requests_before_initialize_are_rejected() -> None:
    registered: list[str] = []
    session = build_session(registered)

    response = await session.handle_request(rpc("tools/list"))

    assert response.status_code == 400
    assert response.body["error"]["code"] == -32000
    assert response.headers == {}
    assert registered == []


@pytest.mark.asyncio
async def test_second_initialize_is_rejected() -> None:
    registered: list[str] = []
    session = build_session(registered)
    await session.handle_request(INIT)

    response = await session.handle_request(rpc("initialize", {}, request_id=2))

    assert response.status_code == 400
    assert response.body["error"]["code"] == -32600
    assert registered == ["sess-1"]


@pytest.mark.asyncio
async def test_notifications_are_accepted_without_body() -> None:
    session = build_session()
    await session.handle_request(INIT)

    response = await session.handle_request(
        {"jsonrpc": "2.0", "method": "notifications/initialized"}
    )

    assert response.status_code == 202
    assert response.body is None


@pytest.mark.asyncio
async def test_tools_list_and_ping() -> None:
    session = build_session()
    await session.handle_request(INIT)

    listing = await session.handle_request(rpc("tools/list", request_id=2))
    ping = await session.handle_request(rpc("ping", request_id=3))

    assert [tool["name"] for tool in listing.body["result"]["tools"]] == ["list_models", "get_asset"]
    assert ping.body == {"jsonrpc": "2.0", "id": 3, "result": {}}


@pytest.mark.asyncio
async def test_tool_call_returns_json_text_content() -> None:
    session = build_session()
    await session.handle_request(INIT)

    response = await session.handle_request(
        rpc("tools/call", {"name": "list_models", "arguments": {"pageSize": 500}}, request_id=4)
    )

    result = response.body["result"]
    assert "isError" not in result
    assert result["content"][0]["type"] == "text"
    assert json.loads(result["content"][0]["text"]) == [{"id": "m1", "pageSize": 100}]


@pytest.mark.asyncio
async def test_tool_failure_is_structured_error_result() -> None:
    session = build_session()
    await session.handle_request(INIT)

    response = await session.handle_request(
        rpc("tools/call", {"name": "get_asset", "arguments": {"assetId": "j9"}}, request_id=5)
    )

    result = response.body["result"]
    assert result["isError"] is True
    error = json.loads(result["content"][0]["text"])["error"]
    assert error["stage"] == "polling"
    assert error["type"] == "JobTimeoutError"
    assert error["details"] == {"jobId": "j9", "elapsedMs": 120_500, "deadlineMs": 120_000}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "params",
    [
        {"name": "paint", "arguments": {}},
        {"name": "get_asset", "arguments": {}},
        {"arguments": {}},
        {"name": "list_models", "arguments": ["not", "an", "object"]},
    ],
)
async def test_bad_tool_calls_are_invalid_params(params) -> None:
    session = build_session()
    await session.handle_request(INIT)

    response = await session.handle_request(rpc("tools/call", params, request_id=6))

    assert response.status_code == 200
    assert response.body["error"]["code"] == -32602


@pytest.mark.asyncio
async def test_unknown_method_and_malformed_message() -> None:
    session = build_session()
    await session.handle_request(INIT)

    unknown = await session.handle_request(rpc("resources/list", request_id=7))
    malformed = await session.handle_request({"jsonrpc": "1.0", "id": 8})

    assert unknown.body["error"]["code"] == -32601
    assert malformed.status_code == 400
    assert malformed.body["error"]["code"] == -32600
    assert malformed.body["id"] == 8


@pytest.mark.asyncio
async def test_batch_collects_responses_and_skips_notifications() -> None:
    session = build_session()

    response = await session.handle_request(
        [
            INIT,
            {"jsonrpc": "2.0", "method": "notifications/initialized"},
            rpc("ping", request_id=2),
        ]
    )

    assert response.status_code == 200
    assert [body["id"] for body in response.body] == [1, 2]
    assert response.headers == {SESSION_HEADER: "sess-1"}
