"""Data structures for Scenario jobs and their outputs."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Mapping

from ..providers.providers_errors import UnexpectedResponseError


class JobStatus(StrEnum):
    """Job statuses reported by Scenario."""

    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"

    @classmethod
    def parse(cls, value: Any) -> "JobStatus":
        """Map provider strings onto the enum; unknown values are non-terminal."""
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.RUNNING

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.SUCCESS, JobStatus.FAILED)


@dataclass(slots=True, frozen=True)
class Job:
    """Snapshot of one asynchronous unit of work."""

    id: str
    status: JobStatus
    output_ids: tuple[str, ...] = ()
    error_detail: Any = None
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_payload(cls, job_id: str, payload: Mapping[str, Any]) -> "Job":
        """Build a job from a ``GET /jobs/{id}`` response body."""
        data = payload.get("job")
        if not isinstance(data, Mapping):
            raise UnexpectedResponseError(
                f"Job status response for '{job_id}' has no 'job' object", payload=dict(payload)
            )
        status = JobStatus.parse(data.get("status"))
        metadata = _mapping(data, "metadata", owner=f"job '{job_id}'")
        output_ids: tuple[str, ...] = ()
        error_detail = None
        if status is JobStatus.SUCCESS:
            asset_ids = metadata.get("assetIds") or []
            if not isinstance(asset_ids, list):
                raise UnexpectedResponseError(
                    f"Job '{job_id}' reported non-list assetIds", payload=dict(payload)
                )
            output_ids = tuple(str(asset_id) for asset_id in asset_ids)
        elif status is JobStatus.FAILED:
            error_detail = data.get("error") or metadata.get("error") or dict(data)
        return cls(
            id=str(data.get("jobId") or job_id),
            status=status,
            output_ids=output_ids,
            error_detail=error_detail,
            raw=dict(data),
        )


@dataclass(slots=True, frozen=True)
class OutputDescriptor:
    """Display-ready representation of one generated asset."""

    id: str
    url: str | None
    width: int | None = None
    height: int | None = None
    description: str | None = None
    created_at: str | None = None
    type: str | None = None
    name: str | None = None

    @classmethod
    def from_response(cls, asset_id: str, payload: Mapping[str, Any]) -> "OutputDescriptor":
        """Build a descriptor from a ``GET /assets/{id}`` response body."""
        asset = payload.get("asset")
        if not isinstance(asset, Mapping):
            raise UnexpectedResponseError(
                f"Asset response for '{asset_id}' has no 'asset' object", payload=dict(payload)
            )
        return cls.from_asset(asset, asset_id=asset_id)

    @classmethod
    def from_asset(cls, asset: Mapping[str, Any], *, asset_id: str | None = None) -> "OutputDescriptor":
        """Build a descriptor from a Scenario ``asset`` object."""
        owner = f"asset '{asset_id or asset.get('id')}'"
        properties = _mapping(asset, "properties", owner=owner)
        metadata = _mapping(asset, "metadata", owner=owner)
        return cls(
            id=str(asset_id or asset.get("id")),
            url=asset.get("url"),
            width=properties.get("width"),
            height=properties.get("height"),
            description=asset.get("description"),
            created_at=asset.get("createdAt"),
            type=metadata.get("type"),
            name=metadata.get("name"),
        )

    def to_payload(self, *fields: str) -> dict[str, Any]:
        """Serialise with camelCase keys, omitting unset optional values.

        When ``fields`` are given only those attributes are emitted.
        """
        values = {
            "id": self.id,
            "url": self.url,
            "width": self.width,
            "height": self.height,
            "description": self.description,
            "createdAt": self.created_at,
            "type": self.type,
            "name": self.name,
        }
        if fields:
            values = {key: values[key] for key in fields}
        return {key: value for key, value in values.items() if value is not None}


def _mapping(container: Mapping[str, Any], key: str, *, owner: str) -> Mapping[str, Any]:
    """Return ``container[key]`` as a mapping; absent or null means empty."""
    value = container.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise UnexpectedResponseError(
            f"Scenario {owner} has a non-object '{key}' field", payload=dict(container)
        )
    return value


__all__ = ["Job", "JobStatus", "OutputDescriptor"]
