"""Failures raised by the Scenario provider client."""

from __future__ import annotations

from typing import Any

from ..exceptions import ScenarioError


class TransportError(ScenarioError):
    """Raised when the request never produced an HTTP response."""

    def __init__(self, method: str, path: str, reason: str) -> None:
        super().__init__(f"Scenario API unreachable ({method} {path}): {reason}")
        self.method = method
        self.path = path
        self.reason = reason

    def details(self) -> dict[str, Any]:
        return {"method": self.method, "path": self.path, "reason": self.reason}


class ProviderError(ScenarioError):
    """Raised for any non-2xx Scenario response."""

    def __init__(self, status_code: int, raw_body: str) -> None:
        super().__init__(f"Scenario API error {status_code}: {raw_body}")
        self.status_code = status_code
        self.raw_body = raw_body

    def details(self) -> dict[str, Any]:
        return {"statusCode": self.status_code, "rawBody": self.raw_body}


class UnexpectedResponseError(ScenarioError):
    """Raised when a 2xx response does not have the documented shape."""

    def __init__(self, message: str, payload: Any = None) -> None:
        super().__init__(message)
        self.payload = payload

    def details(self) -> dict[str, Any]:
        return {"payload": self.payload}


__all__ = ["ProviderError", "TransportError", "UnexpectedResponseError"]
