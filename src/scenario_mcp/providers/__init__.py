"""Outbound client for the Scenario REST API."""

from .providers_client import ScenarioClient, build_basic_auth
from .providers_errors import ProviderError, TransportError, UnexpectedResponseError

__all__ = [
    "ProviderError",
    "ScenarioClient",
    "TransportError",
    "UnexpectedResponseError",
    "build_basic_auth",
]
