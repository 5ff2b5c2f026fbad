from __future__ import annotations

import pytest

from scenario_mcp.jobs.jobs_models import Job, JobStatus, OutputDescriptor
from scenario_mcp.providers.providers_errors import UnexpectedResponseError

pytestmark = pytest.mark.unit


def test_job_reads_asset_ids_on_success() -> None:
    job = Job.from_payload(
        "j1", {"job": {"jobId": "j1", "status": "success", "metadata": {"assetIds": ["a", "b"]}}}
    )

    assert job.status is JobStatus.SUCCESS
    assert job.output_ids == ("a", "b")


def test_job_with_null_metadata_has_no_outputs() -> None:
    job = Job.from_payload("j1", {"job": {"status": "success", "metadata": None}})

    assert job.output_ids == ()
    assert job.id == "j1"


@pytest.mark.parametrize(
    "job",
    [
        {"status": "success", "metadata": ["x"]},
        {"status": "running", "metadata": "pending"},
        {"status": "success", "metadata": {"assetIds": "a1"}},
    ],
)
def test_malformed_job_payload_is_unexpected_response(job) -> None:
    with pytest.raises(UnexpectedResponseError):
        Job.from_payload("j1", {"job": job})


def test_failed_job_keeps_error_detail() -> None:
    job = Job.from_payload("j2", {"job": {"status": "failed", "metadata": {"error": "nsfw"}}})

    assert job.status is JobStatus.FAILED
    assert job.error_detail == "nsfw"


@pytest.mark.parametrize(
    "asset",
    [
        {"id": "a1", "properties": ["x"]},
        {"id": "a1", "metadata": 3},
    ],
)
def test_malformed_asset_is_unexpected_response(asset) -> None:
    with pytest.raises(UnexpectedResponseError):
        OutputDescriptor.from_asset(asset)


def test_response_without_asset_object_is_unexpected() -> None:
    with pytest.raises(UnexpectedResponseError):
        OutputDescriptor.from_response("a1", {"asset": "a1"})


def test_asset_with_null_sections_maps_to_bare_descriptor() -> None:
    descriptor = OutputDescriptor.from_response(
        "a1", {"asset": {"url": "https://x/a1.png", "properties": None, "metadata": None}}
    )

    assert descriptor.to_payload() == {"id": "a1", "url": "https://x/a1.png"}
