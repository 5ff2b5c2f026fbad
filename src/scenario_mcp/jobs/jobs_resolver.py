"""Turn job output ids into ordered asset descriptors."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from ..exceptions import ScenarioError
from ..providers.providers_client import ScenarioClient
from .jobs_errors import ResolutionError
from .jobs_models import OutputDescriptor

logger = logging.getLogger(__name__)


class ResultResolver:
    """Fetch ``GET /assets/{id}`` for every output, all-or-nothing."""

    def __init__(self, client: ScenarioClient) -> None:
        self._client = client

    async def resolve(self, output_ids: Sequence[str]) -> list[OutputDescriptor]:
        """Return descriptors in the same order as ``output_ids``.

        Fetches run concurrently. The first failure cancels the fetches still in
        flight and surfaces as :class:`ResolutionError`.
        """

        if not output_ids:
            return []
        tasks = [
            asyncio.create_task(self.fetch(asset_id), name=f"resolve-{asset_id}")
            for asset_id in output_ids
        ]
        try:
            descriptors = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return list(descriptors)

    async def fetch(self, asset_id: str) -> OutputDescriptor:
        """Fetch a single descriptor, wrapping failures with the offending id."""

        try:
            payload = await self._client.call("GET", f"/assets/{asset_id}")
            return OutputDescriptor.from_response(asset_id, payload)
        except ScenarioError as exc:
            logger.warning(
                "jobs.resolve.failed", extra={"asset_id": asset_id, "error": repr(exc)}
            )
            raise ResolutionError(asset_id, exc) from exc


__all__ = ["ResultResolver"]
