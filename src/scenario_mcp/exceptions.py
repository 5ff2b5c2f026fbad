"""Root of the gateway error hierarchy."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

__all__ = ["FailureStage", "ScenarioError"]


class FailureStage(StrEnum):
    """Pipeline stage an orchestrated operation failed in."""

    SUBMISSION = "submission"
    POLLING = "polling"
    RESOLUTION = "resolution"


class ScenarioError(Exception):
    """Base class for failures surfaced to MCP callers.

    ``stage`` is filled either by the raising component (when it knows where in
    the pipeline it sits) or by the orchestrator as the error passes through.
    """

    stage: FailureStage | None = None

    def details(self) -> dict[str, Any]:
        """Return diagnostic payload attached to the structured error."""

        return {}

    def to_payload(self) -> dict[str, Any]:
        return {
            "error": {
                "stage": self.stage.value if self.stage else None,
                "type": type(self).__name__,
                "message": str(self),
                "details": self.details(),
            }
        }
