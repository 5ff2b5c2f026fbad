"""Deadline-bounded polling of Scenario job status."""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from collections import OrderedDict
from collections.abc import Awaitable, Callable
from typing import Any

from ..providers.providers_client import ScenarioClient
from ..providers.providers_errors import TransportError
from .jobs_errors import JobFailedError, JobTimeoutError
from .jobs_models import Job, JobStatus

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_MS = 2_000
DEFAULT_JOB_TIMEOUT_MS = 120_000
UPSCALE_JOB_TIMEOUT_MS = 180_000


class JobPoller:
    """Query ``GET /jobs/{id}`` on a fixed cadence until a terminal status.

    Elapsed time is measured from the first invocation with ``clock`` (seconds,
    monotonic). There is no backoff and no jitter. A local timeout only stops
    waiting; the remote job keeps running.
    """

    def __init__(
        self,
        client: ScenarioClient,
        *,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        retry_attempts: int = 0,
        clock: Callable[[], float] | None = None,
        sleep: Callable[[float], Any] | None = None,
        terminal_cache_size: int = 256,
    ) -> None:
        if poll_interval_ms <= 0:
            raise ValueError("poll_interval_ms must be positive")
        self._client = client
        self._interval_seconds = poll_interval_ms / 1000.0
        self._retry_attempts = max(0, retry_attempts)
        self._clock = clock or time.monotonic
        self._sleep = self._wrap_sleep(sleep)
        self._terminal: OrderedDict[str, Job] = OrderedDict()
        self._terminal_cache_size = max(1, terminal_cache_size)

    @staticmethod
    def _wrap_sleep(
        sleep: Callable[[float], Any] | None,
    ) -> Callable[[float], Awaitable[None]]:
        if sleep is None:
            return asyncio.sleep

        async def _async_sleep(seconds: float) -> None:
            result = sleep(seconds)
            if inspect.isawaitable(result):
                await result

        return _async_sleep

    async def await_completion(
        self, job_id: str, deadline_ms: int = DEFAULT_JOB_TIMEOUT_MS
    ) -> Job:
        """Return the job once it succeeds; raise when it fails or times out."""

        if not job_id:
            raise ValueError("job_id must be a non-empty identifier")
        if deadline_ms <= 0:
            raise ValueError("deadline_ms must be positive")

        cached = self._terminal.get(job_id)
        if cached is not None:
            return self._settle(cached)

        started = self._clock()
        polls = 0
        while self._elapsed_ms(started) < deadline_ms:
            job = await self._poll_once(job_id, started=started, deadline_ms=deadline_ms)
            polls += 1
            if job.status.is_terminal:
                logger.info(
                    "jobs.poll.terminal status=%s polls=%s",
                    job.status.value,
                    polls,
                    extra={"job_id": job_id, "elapsed_ms": self._elapsed_ms(started)},
                )
                self._remember(job_id, job)
                return self._settle(job)
            logger.debug(
                "jobs.poll.status status=%s", job.status.value, extra={"job_id": job_id}
            )
            await self._sleep(self._interval_seconds)

        elapsed_ms = self._elapsed_ms(started)
        logger.warning(
            "jobs.poll.timeout elapsed_ms=%s polls=%s",
            elapsed_ms,
            polls,
            extra={"job_id": job_id, "deadline_ms": deadline_ms},
        )
        raise JobTimeoutError(job_id, elapsed_ms, deadline_ms)

    async def _poll_once(self, job_id: str, *, started: float, deadline_ms: int) -> Job:
        attempt = 0
        while True:
            try:
                payload = await self._client.call("GET", f"/jobs/{job_id}")
            except TransportError:
                attempt += 1
                remaining_ms = deadline_ms - self._elapsed_ms(started)
                if attempt > self._retry_attempts or remaining_ms <= self._interval_seconds * 1000:
                    raise
                logger.warning(
                    "jobs.poll.retry attempt=%s", attempt, extra={"job_id": job_id}
                )
                await self._sleep(self._interval_seconds)
                continue
            return Job.from_payload(job_id, payload)

    def _settle(self, job: Job) -> Job:
        if job.status is JobStatus.FAILED:
            raise JobFailedError(job)
        return job

    def _remember(self, job_id: str, job: Job) -> None:
        self._terminal[job_id] = job
        self._terminal.move_to_end(job_id)
        while len(self._terminal) > self._terminal_cache_size:
            self._terminal.popitem(last=False)

    def _elapsed_ms(self, started: float) -> int:
        return int((self._clock() - started) * 1000)


__all__ = [
    "DEFAULT_JOB_TIMEOUT_MS",
    "DEFAULT_POLL_INTERVAL_MS",
    "JobPoller",
    "UPSCALE_JOB_TIMEOUT_MS",
]
