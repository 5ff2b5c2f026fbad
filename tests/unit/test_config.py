from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from scenario_mcp.config import AppConfig, load_config
from scenario_mcp.main import load_config_or_exit

pytestmark = pytest.mark.unit


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in ("SCENARIO_API_KEY", "SCENARIO_SECRET_KEY", "PORT", "SCENARIO_PORT"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_missing_credentials_fail_validation(clean_env: pytest.MonkeyPatch) -> None:
    with pytest.raises(ValidationError) as excinfo:
        load_config()

    missing = {error["loc"][0] for error in excinfo.value.errors()}
    assert missing == {"api_key", "secret_key"}


def test_empty_credentials_are_rejected(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("SCENARIO_API_KEY", "")
    clean_env.setenv("SCENARIO_SECRET_KEY", "secret")

    with pytest.raises(ValidationError):
        load_config()


def test_defaults_from_environment(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("SCENARIO_API_KEY", "key")
    clean_env.setenv("SCENARIO_SECRET_KEY", "secret")

    config = load_config()

    assert config.api_key == "key"
    assert config.port == 3000
    assert config.poll_interval_ms == 2_000
    assert config.job_timeout_ms == 120_000
    assert config.upscale_timeout_ms == 180_000
    assert config.poll_retry_attempts == 0
    assert config.session_idle_timeout_seconds is None


def test_port_reads_plain_port_variable(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("PORT", "8080")

    config = AppConfig(api_key="key", secret_key="secret")

    assert config.port == 8080


def test_overrides_take_precedence(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("SCENARIO_POLL_INTERVAL_MS", "500")

    config = load_config(api_key="key", secret_key="secret", poll_interval_ms=250)

    assert config.poll_interval_ms == 250


def test_load_config_or_exit_terminates_with_status_one(
    clean_env: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.ERROR), pytest.raises(SystemExit) as excinfo:
        load_config_or_exit()

    assert excinfo.value.code == 1
    assert "SCENARIO_API_KEY" in caplog.text
