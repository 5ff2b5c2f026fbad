"""Submit → wait → resolve pipeline shared by every generation operation."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from typing import Any

from ..exceptions import FailureStage, ScenarioError
from ..providers.providers_client import ScenarioClient
from ..providers.providers_errors import UnexpectedResponseError
from .jobs_models import OutputDescriptor
from .jobs_poller import DEFAULT_JOB_TIMEOUT_MS, JobPoller
from .jobs_resolver import ResultResolver

logger = logging.getLogger(__name__)

SubmitFn = Callable[[], Awaitable[str]]


class OperationOrchestrator:
    """Run one orchestrated operation end to end.

    The orchestrator is parameter-agnostic: callers clamp and shape the request
    before building ``submit``. Errors are re-raised as the same objects, tagged
    with the stage they happened in.
    """

    def __init__(
        self,
        client: ScenarioClient,
        poller: JobPoller,
        resolver: ResultResolver,
        *,
        default_deadline_ms: int = DEFAULT_JOB_TIMEOUT_MS,
    ) -> None:
        self._client = client
        self._poller = poller
        self._resolver = resolver
        self.default_deadline_ms = default_deadline_ms

    def submission(self, path: str, body: dict[str, Any]) -> SubmitFn:
        """Build a submit function posting ``body`` to ``path``."""

        async def _submit() -> str:
            payload = await self._client.call("POST", path, body)
            job = payload.get("job")
            job_id = job.get("jobId") if isinstance(job, dict) else None
            if not job_id:
                raise UnexpectedResponseError(
                    f"Submission to {path} did not return a job id", payload=payload
                )
            return str(job_id)

        return _submit

    async def run(
        self, submit: SubmitFn, deadline_ms: int | None = None
    ) -> list[OutputDescriptor]:
        deadline = deadline_ms or self.default_deadline_ms

        with _stage(FailureStage.SUBMISSION):
            job_id = await submit()
        logger.info("jobs.submitted", extra={"job_id": job_id, "deadline_ms": deadline})

        with _stage(FailureStage.POLLING):
            job = await self._poller.await_completion(job_id, deadline)

        with _stage(FailureStage.RESOLUTION):
            descriptors = await self._resolver.resolve(job.output_ids)
        logger.info(
            "jobs.resolved outputs=%s", len(descriptors), extra={"job_id": job_id}
        )
        return descriptors


@contextmanager
def _stage(stage: FailureStage) -> Iterator[None]:
    """Tag escaping :class:`ScenarioError` instances with a pipeline stage."""

    try:
        yield
    except ScenarioError as exc:
        if exc.stage is None:
            exc.stage = stage
        raise


__all__ = ["OperationOrchestrator", "SubmitFn"]
