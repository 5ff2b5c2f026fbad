"""Authenticated HTTP client for the Scenario REST API."""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

import httpx

from .providers_errors import ProviderError, TransportError, UnexpectedResponseError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.cloud.scenario.com/v1"


def build_basic_auth(api_key: str, secret_key: str) -> str:
    """Return the ``Authorization`` header value for a key pair."""
    token = base64.b64encode(f"{api_key}:{secret_key}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


@dataclass(slots=True)
class ScenarioClient:
    """Issue single authenticated requests; never retries.

    The credential header is computed once at construction time and shared by
    every concurrent caller. Retry policy belongs to the callers.
    """

    api_key: str
    secret_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = 30.0
    http_client: httpx.AsyncClient | None = None
    log: logging.Logger = field(default_factory=lambda: logger)
    _headers: dict[str, str] = field(init=False, repr=False)
    _http: httpx.AsyncClient = field(init=False, repr=False)
    _owns_client: bool = field(init=False, default=False, repr=False)

    def __post_init__(self) -> None:
        self._headers = {
            "Authorization": build_basic_auth(self.api_key, self.secret_key),
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if self.http_client is None:
            self._http = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout_seconds)
            self._owns_client = True
        else:
            self._http = self.http_client

    async def call(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        params: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Perform one request and return the decoded JSON body."""
        query = {key: value for key, value in (params or {}).items() if value is not None}
        try:
            response = await self._http.request(
                method,
                path,
                headers=self._headers,
                json=body,
                params=query or None,
            )
        except httpx.TransportError as exc:
            self.log.warning(
                "scenario.request.transport_error",
                extra={"method": method, "path": path, "error": repr(exc)},
            )
            raise TransportError(method, path, str(exc) or type(exc).__name__) from exc

        if not response.is_success:
            self.log.warning(
                "scenario.request.failed status=%s",
                response.status_code,
                extra={"method": method, "path": path, "status_code": response.status_code},
            )
            raise ProviderError(response.status_code, response.text)

        try:
            data = response.json()
        except ValueError as exc:
            raise UnexpectedResponseError(
                f"Scenario API returned non-JSON body for {method} {path}",
                payload=response.text[:500],
            ) from exc
        if not isinstance(data, dict):
            raise UnexpectedResponseError(
                f"Scenario API returned {type(data).__name__} for {method} {path}",
                payload=data,
            )
        return data

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()


__all__ = ["DEFAULT_BASE_URL", "ScenarioClient", "build_basic_auth"]
