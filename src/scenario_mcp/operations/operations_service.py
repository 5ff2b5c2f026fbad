"""Scenario tool implementations on top of the job orchestrator."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from ..exceptions import FailureStage
from ..jobs.jobs_models import OutputDescriptor
from ..jobs.jobs_orchestrator import OperationOrchestrator
from ..jobs.jobs_poller import DEFAULT_JOB_TIMEOUT_MS, UPSCALE_JOB_TIMEOUT_MS
from ..providers.providers_client import ScenarioClient
from ..providers.providers_errors import UnexpectedResponseError
from .operations_requests import (
    GetAssetRequest,
    Img2ImgRequest,
    ListAssetsRequest,
    ListModelsRequest,
    RemoveBackgroundRequest,
    Txt2ImgRequest,
    UpscaleRequest,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ScenarioOperations:
    """Catalogue of generation and browsing operations.

    Generation operations only shape the submission body; waiting and
    resolution always go through :class:`OperationOrchestrator`.
    """

    client: ScenarioClient
    orchestrator: OperationOrchestrator
    job_timeout_ms: int = DEFAULT_JOB_TIMEOUT_MS
    upscale_timeout_ms: int = UPSCALE_JOB_TIMEOUT_MS
    log: logging.Logger = field(default_factory=lambda: logger)

    async def list_models(self, request: ListModelsRequest) -> list[dict[str, Any]]:
        result = await self.client.call("GET", "/models", params=request.to_body())
        return [
            {
                "id": model.get("id"),
                "name": model.get("name"),
                "type": model.get("type"),
                "status": model.get("status"),
            }
            for model in _items(result, "models")
        ]

    async def txt2img(self, request: Txt2ImgRequest) -> dict[str, Any]:
        self.log.info(
            "operations.txt2img.start",
            extra={"model_id": request.model_id, "num_samples": request.num_samples},
        )
        descriptors = await self.orchestrator.run(
            self.orchestrator.submission("/generate/txt2img", request.to_body()),
            self.job_timeout_ms,
        )
        return {
            "success": True,
            "assets": [d.to_payload("id", "url", "width", "height") for d in descriptors],
        }

    async def img2img(self, request: Img2ImgRequest) -> dict[str, Any]:
        self.log.info("operations.img2img.start", extra={"model_id": request.model_id})
        descriptors = await self.orchestrator.run(
            self.orchestrator.submission("/generate/img2img", request.to_body()),
            self.job_timeout_ms,
        )
        return {
            "success": True,
            "assets": [d.to_payload("id", "url", "width", "height") for d in descriptors],
        }

    async def list_assets(self, request: ListAssetsRequest) -> list[dict[str, Any]]:
        result = await self.client.call("GET", "/assets", params=request.to_body())
        return [
            OutputDescriptor.from_asset(asset).to_payload(
                "id", "url", "type", "name", "description", "createdAt"
            )
            for asset in _items(result, "assets")
        ]

    async def get_asset(self, request: GetAssetRequest) -> dict[str, Any]:
        result = await self.client.call("GET", f"/assets/{request.asset_id}")
        descriptor = OutputDescriptor.from_response(request.asset_id, result)
        return descriptor.to_payload(
            "id", "url", "type", "description", "width", "height", "createdAt"
        )

    async def remove_background(self, request: RemoveBackgroundRequest) -> dict[str, Any]:
        descriptors = await self.orchestrator.run(
            self.orchestrator.submission("/edit/remove-background", request.to_body()),
            self.job_timeout_ms,
        )
        new_asset = _first_output(descriptors, request.asset_id)
        return {
            "success": True,
            "originalAssetId": request.asset_id,
            "newAssetId": new_asset.id,
            "url": new_asset.url,
        }

    async def upscale(self, request: UpscaleRequest) -> dict[str, Any]:
        descriptors = await self.orchestrator.run(
            self.orchestrator.submission("/edit/upscale", request.to_body()),
            self.upscale_timeout_ms,
        )
        new_asset = _first_output(descriptors, request.asset_id)
        payload = {
            "success": True,
            "originalAssetId": request.asset_id,
            "newAssetId": new_asset.id,
            "url": new_asset.url,
            "width": new_asset.width,
            "height": new_asset.height,
        }
        return {key: value for key, value in payload.items() if value is not None}


def _items(result: dict[str, Any], key: str) -> list[dict[str, Any]]:
    items = result.get(key)
    if not isinstance(items, list):
        raise UnexpectedResponseError(f"Listing response has no '{key}' array", payload=result)
    return [item for item in items if isinstance(item, dict)]


def _first_output(descriptors: list[OutputDescriptor], source_id: str) -> OutputDescriptor:
    if not descriptors:
        error = UnexpectedResponseError(
            f"Job for asset {source_id} completed without outputs", payload=None
        )
        error.stage = FailureStage.RESOLUTION
        raise error
    return descriptors[0]


__all__ = ["ScenarioOperations"]
