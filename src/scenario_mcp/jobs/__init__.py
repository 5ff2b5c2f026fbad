"""Job orchestration: submit, poll, resolve."""

from .jobs_errors import JobFailedError, JobTimeoutError, ResolutionError
from .jobs_models import Job, JobStatus, OutputDescriptor
from .jobs_orchestrator import OperationOrchestrator
from .jobs_poller import JobPoller
from .jobs_resolver import ResultResolver

__all__ = [
    "Job",
    "JobFailedError",
    "JobPoller",
    "JobStatus",
    "JobTimeoutError",
    "OperationOrchestrator",
    "OutputDescriptor",
    "ResolutionError",
    "ResultResolver",
]
