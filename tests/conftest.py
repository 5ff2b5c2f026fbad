from __future__ import annotations

import pytest

from scenario_mcp.config import AppConfig
from scenario_mcp.jobs.jobs_orchestrator import OperationOrchestrator
from scenario_mcp.jobs.jobs_poller import JobPoller
from scenario_mcp.jobs.jobs_resolver import ResultResolver
from tests.mocks.scenario import FakeClock, StubScenarioClient


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def stub_client() -> StubScenarioClient:
    return StubScenarioClient()


@pytest.fixture
def poller(stub_client: StubScenarioClient, fake_clock: FakeClock) -> JobPoller:
    return JobPoller(stub_client, clock=fake_clock, sleep=fake_clock.sleep)  # type: ignore[arg-type]


@pytest.fixture
def resolver(stub_client: StubScenarioClient) -> ResultResolver:
    return ResultResolver(stub_client)  # type: ignore[arg-type]


@pytest.fixture
def orchestrator(
    stub_client: StubScenarioClient, poller: JobPoller, resolver: ResultResolver
) -> OperationOrchestrator:
    return OperationOrchestrator(stub_client, poller, resolver)  # type: ignore[arg-type]


@pytest.fixture
def app_config(monkeypatch) -> AppConfig:
    monkeypatch.delenv("PORT", raising=False)
    return AppConfig(api_key="test-key", secret_key="test-secret")
