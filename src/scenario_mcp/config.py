"""Application configuration for the Scenario MCP gateway.

Credentials are mandatory: ``load_config`` raises a ``ValidationError`` when
``SCENARIO_API_KEY`` or ``SCENARIO_SECRET_KEY`` is missing so the process
refuses to start instead of failing on the first tool call.
"""

from __future__ import annotations

from typing import Any, cast

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    """Pydantic settings container for the gateway."""

    model_config = cast(
        Any,
        SettingsConfigDict(env_prefix="SCENARIO_", extra="ignore", populate_by_name=True),
    )

    api_key: str = Field(
        min_length=1,
        description="Scenario API key (left half of the Basic credential).",
    )
    secret_key: str = Field(
        min_length=1,
        description="Scenario secret key (right half of the Basic credential).",
    )
    host: str = Field(default="0.0.0.0", description="Interface uvicorn binds to.")
    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("PORT", "SCENARIO_PORT", "port"),
        description="Network port for the MCP endpoint.",
    )
    api_base_url: str = Field(
        default="https://api.cloud.scenario.com/v1",
        description="Base URL of the Scenario REST API.",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        description="Timeout applied to each outbound Scenario request in seconds.",
    )
    poll_interval_ms: int = Field(
        default=2_000,
        ge=1,
        description="Fixed delay between two job status polls in milliseconds.",
    )
    job_timeout_ms: int = Field(
        default=120_000,
        ge=1,
        description="Deadline for standard generation jobs in milliseconds.",
    )
    upscale_timeout_ms: int = Field(
        default=180_000,
        ge=1,
        description="Deadline for upscale jobs in milliseconds.",
    )
    poll_retry_attempts: int = Field(
        default=0,
        ge=0,
        le=10,
        description=(
            "Extra attempts for a single job poll that failed with a transport error. "
            "Zero keeps a failed poll fatal."
        ),
    )
    session_idle_timeout_seconds: float | None = Field(
        default=None,
        gt=0.0,
        description="Evict sessions idle for longer than this. None disables expiry.",
    )
    session_sweep_interval_seconds: float = Field(
        default=60.0,
        gt=0.0,
        description="How often the idle session sweep runs when expiry is enabled.",
    )
    log_level: str = Field(default="INFO", description="Root log level.")


def load_config(**overrides: Any) -> AppConfig:
    """Build configuration from the environment, applying explicit overrides."""

    return AppConfig(**overrides)


__all__ = ["AppConfig", "load_config"]
