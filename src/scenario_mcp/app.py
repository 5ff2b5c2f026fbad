"""FastAPI application factory: the composition root of the gateway.

Every long-lived object (HTTP client, poller, tool registry, session table)
is created here and stored on ``app.state``; nothing lives in module globals.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator, Callable
from functools import partial
from typing import Any

import httpx
from fastapi import FastAPI

from . import __version__
from .config import AppConfig, load_config
from .jobs.jobs_orchestrator import OperationOrchestrator
from .jobs.jobs_poller import JobPoller
from .jobs.jobs_resolver import ResultResolver
from .lifecycle import run_periodic_session_eviction
from .logging import configure_logging
from .operations.operations_registry import build_tool_registry
from .operations.operations_service import ScenarioOperations
from .providers.providers_client import ScenarioClient
from .sessions.sessions_api import router as mcp_router
from .sessions.sessions_protocol import McpSession
from .sessions.sessions_router import SessionRouter, SessionTable

logger = logging.getLogger(__name__)

SERVER_NAME = "scenario"


def create_app(
    config: AppConfig | None = None,
    *,
    http_client: httpx.AsyncClient | None = None,
    clock: Callable[[], float] | None = None,
    sleep: Callable[[float], Any] | None = None,
    session_id_generator: Callable[[], str] | None = None,
) -> FastAPI:
    """Build the gateway with all dependencies wired from ``config``."""

    cfg = config or load_config()
    configure_logging(cfg.log_level)

    client = ScenarioClient(
        api_key=cfg.api_key,
        secret_key=cfg.secret_key,
        base_url=cfg.api_base_url,
        timeout_seconds=cfg.request_timeout_seconds,
        http_client=http_client,
    )
    poller = JobPoller(
        client,
        poll_interval_ms=cfg.poll_interval_ms,
        retry_attempts=cfg.poll_retry_attempts,
        clock=clock,
        sleep=sleep,
    )
    resolver = ResultResolver(client)
    orchestrator = OperationOrchestrator(
        client, poller, resolver, default_deadline_ms=cfg.job_timeout_ms
    )
    operations = ScenarioOperations(
        client=client,
        orchestrator=orchestrator,
        job_timeout_ms=cfg.job_timeout_ms,
        upscale_timeout_ms=cfg.upscale_timeout_ms,
    )
    tools = build_tool_registry(operations)

    session_table: SessionTable[McpSession] = SessionTable(clock=clock)
    session_router = SessionRouter(
        session_table,
        partial(
            McpSession,
            tools=tools,
            server_name=SERVER_NAME,
            server_version=__version__,
            session_id_generator=session_id_generator,
        ),
    )

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        shutdown_event = asyncio.Event()
        eviction_task: asyncio.Task[None] | None = None
        if cfg.session_idle_timeout_seconds is not None:
            eviction_task = asyncio.create_task(
                run_periodic_session_eviction(
                    table=session_table,
                    idle_seconds=cfg.session_idle_timeout_seconds,
                    shutdown_event=shutdown_event,
                    interval_seconds=cfg.session_sweep_interval_seconds,
                ),
                name="scenario-session-eviction",
            )
        else:
            logger.info("Session expiry disabled; sessions live until shutdown")
        app.state.session_eviction_task = eviction_task
        try:
            yield
        finally:
            shutdown_event.set()
            if eviction_task is not None:
                eviction_task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await eviction_task
            session_table.clear()
            await client.aclose()

    app = FastAPI(title="Scenario MCP Server", version=__version__, lifespan=lifespan)
    app.state.config = cfg
    app.state.scenario_client = client
    app.state.job_poller = poller
    app.state.orchestrator = orchestrator
    app.state.operations = operations
    app.state.tool_registry = tools
    app.state.session_table = session_table
    app.state.session_router = session_router
    app.include_router(mcp_router)
    return app


__all__ = ["create_app"]
