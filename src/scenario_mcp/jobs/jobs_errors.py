"""Failures raised while waiting for and resolving Scenario jobs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..exceptions import FailureStage, ScenarioError

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from .jobs_models import Job


class JobFailedError(ScenarioError):
    """Raised when Scenario marks a job ``failed``."""

    stage = FailureStage.POLLING

    def __init__(self, job: "Job") -> None:
        super().__init__(f"Job {job.id} failed")
        self.job = job

    def details(self) -> dict[str, Any]:
        return {"jobId": self.job.id, "job": dict(self.job.raw), "error": self.job.error_detail}


class JobTimeoutError(ScenarioError):
    """Raised when a job is still not terminal when the deadline elapses."""

    stage = FailureStage.POLLING

    def __init__(self, job_id: str, elapsed_ms: int, deadline_ms: int | None = None) -> None:
        super().__init__(f"Job {job_id} timed out after {elapsed_ms}ms")
        self.job_id = job_id
        self.elapsed_ms = elapsed_ms
        self.deadline_ms = deadline_ms

    def details(self) -> dict[str, Any]:
        return {
            "jobId": self.job_id,
            "elapsedMs": self.elapsed_ms,
            "deadlineMs": self.deadline_ms,
        }


class ResolutionError(ScenarioError):
    """Raised when one output descriptor of a finished job cannot be fetched."""

    stage = FailureStage.RESOLUTION

    def __init__(self, failed_id: str, cause: BaseException) -> None:
        super().__init__(f"Failed to resolve asset {failed_id}: {cause}")
        self.failed_id = failed_id
        self.cause = cause

    def details(self) -> dict[str, Any]:
        cause_details = self.cause.details() if isinstance(self.cause, ScenarioError) else {}
        return {
            "failedId": self.failed_id,
            "cause": type(self.cause).__name__,
            "causeDetails": cause_details,
        }


__all__ = ["JobFailedError", "JobTimeoutError", "ResolutionError"]
