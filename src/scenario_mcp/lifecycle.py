"""Lifecycle helpers wiring background tasks for FastAPI startup."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from .sessions.sessions_router import SessionTable

logger = logging.getLogger(__name__)


def session_eviction_once(*, table: SessionTable[Any], idle_seconds: float) -> list[str]:
    """Run a single idle-session sweep and return evicted ids."""

    evicted = table.evict_idle(idle_seconds)
    if evicted:
        logger.info(
            "Evicted %s idle sessions (%s remaining)", len(evicted), len(table)
        )
    return evicted


async def run_periodic_session_eviction(
    *,
    table: SessionTable[Any],
    idle_seconds: float,
    shutdown_event: asyncio.Event,
    interval_seconds: float = 60.0,
) -> None:
    """Evict idle sessions until ``shutdown_event`` is signalled."""

    interval = max(0.01, float(interval_seconds))
    while not shutdown_event.is_set():
        try:
            session_eviction_once(table=table, idle_seconds=idle_seconds)
        except Exception:  # pragma: no cover
            logger.exception("Session eviction iteration failed")
        try:
            await asyncio.wait_for(shutdown_event.wait(), timeout=interval)
        except asyncio.TimeoutError:
            continue


__all__ = ["run_periodic_session_eviction", "session_eviction_once"]
