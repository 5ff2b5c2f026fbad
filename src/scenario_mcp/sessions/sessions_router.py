"""Session routing table and router.

The table is the only long-lived mutable structure shared between requests.
Registration is a single insert-if-absent performed by the handler's own
initialization callback, with the id the handler generated. The router never
assigns ids itself.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

import structlog

logger = structlog.get_logger(__name__)

H = TypeVar("H")


class SessionCollisionError(RuntimeError):
    """Raised when a freshly generated session id is already registered."""


@dataclass
class SessionEntry(Generic[H]):
    handler: H
    last_seen: float


class SessionTable(Generic[H]):
    """Session id → handler map with atomic insert-if-absent.

    All mutations are synchronous dict operations without suspension points,
    so they are atomic under the event loop.
    """

    def __init__(self, *, clock: Callable[[], float] | None = None) -> None:
        self._entries: dict[str, SessionEntry[H]] = {}
        self._clock = clock or time.monotonic

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._entries

    def get(self, session_id: str) -> H | None:
        entry = self._entries.get(session_id)
        if entry is None:
            return None
        entry.last_seen = self._clock()
        return entry.handler

    def insert_if_absent(self, session_id: str, handler: H) -> bool:
        """Register ``handler`` unless ``session_id`` is taken; report success."""
        entry = SessionEntry(handler=handler, last_seen=self._clock())
        return self._entries.setdefault(session_id, entry) is entry

    def evict_idle(self, idle_seconds: float) -> list[str]:
        """Drop sessions not seen for ``idle_seconds``; return their ids."""
        cutoff = self._clock() - idle_seconds
        expired = [sid for sid, entry in self._entries.items() if entry.last_seen < cutoff]
        for sid in expired:
            self._entries.pop(sid, None)
        return expired

    def clear(self) -> None:
        self._entries.clear()


class SessionRouter(Generic[H]):
    """Resolve the handler for an inbound session id, creating one lazily."""

    def __init__(self, table: SessionTable[H], handler_factory: Callable[..., H]) -> None:
        self._table = table
        self._handler_factory = handler_factory

    @property
    def table(self) -> SessionTable[H]:
        return self._table

    def route_for(self, session_id: str | None) -> H:
        """Return the registered handler, or a new unregistered one.

        A new handler registers itself once it has decided its id; an absent
        and an unknown id are treated the same way.
        """
        if session_id:
            handler = self._table.get(session_id)
            if handler is not None:
                return handler
            logger.info("sessions.unknown_id", session_id=session_id)

        handler_ref: list[H] = []

        def _register(new_id: str) -> None:
            if not self._table.insert_if_absent(new_id, handler_ref[0]):
                raise SessionCollisionError(f"Session id {new_id} is already registered")
            logger.info("sessions.initialized", session_id=new_id, active=len(self._table))

        handler = self._handler_factory(on_session_initialized=_register)
        handler_ref.append(handler)
        return handler


__all__ = ["SessionCollisionError", "SessionRouter", "SessionTable"]
