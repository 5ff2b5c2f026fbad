"""Name → operation registry exposed to the MCP handler."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from .operations_errors import InvalidParamsError, UnknownOperationError
from .operations_requests import (
    GetAssetRequest,
    Img2ImgRequest,
    ListAssetsRequest,
    ListModelsRequest,
    OperationRequest,
    RemoveBackgroundRequest,
    Txt2ImgRequest,
    UpscaleRequest,
)
from .operations_service import ScenarioOperations

Handler = Callable[[Any], Awaitable[Any]]


@dataclass(slots=True, frozen=True)
class ToolSpec:
    name: str
    description: str
    request_model: type[OperationRequest]
    handler: Handler

    def descriptor(self) -> dict[str, Any]:
        """Return the ``tools/list`` entry for this tool."""
        schema = self.request_model.model_json_schema(by_alias=True)
        schema.pop("title", None)
        for prop in schema.get("properties", {}).values():
            prop.pop("title", None)
        return {"name": self.name, "description": self.description, "inputSchema": schema}


class ToolRegistry:
    """Validate arguments and dispatch to registered operations."""

    def __init__(self) -> None:
        self._tools: dict[str, ToolSpec] = {}

    def register(
        self,
        name: str,
        description: str,
        request_model: type[OperationRequest],
        handler: Handler,
    ) -> None:
        if name in self._tools:
            raise ValueError(f"Tool '{name}' already registered")
        self._tools[name] = ToolSpec(name, description, request_model, handler)

    def names(self) -> list[str]:
        return list(self._tools)

    def descriptors(self) -> list[dict[str, Any]]:
        return [tool.descriptor() for tool in self._tools.values()]

    async def dispatch(self, name: str, parameters: Mapping[str, Any] | None) -> Any:
        """Run tool ``name`` with raw ``parameters``.

        Errors raised by the operation itself propagate unchanged.
        """
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownOperationError(f"Unknown tool: {name}")
        try:
            request = tool.request_model.model_validate(dict(parameters or {}))
        except ValidationError as exc:
            raise InvalidParamsError(
                f"Invalid arguments for tool {name}: {exc.errors(include_url=False)}"
            ) from exc
        return await tool.handler(request)


def build_tool_registry(operations: ScenarioOperations) -> ToolRegistry:
    """Register the Scenario tool catalogue."""

    registry = ToolRegistry()
    registry.register(
        "list_models",
        "List available AI models for image generation. Includes FLUX, SDXL, and trained custom models.",
        ListModelsRequest,
        operations.list_models,
    )
    registry.register(
        "txt2img",
        "Generate images from a text prompt using AI. Supports FLUX and SDXL models.",
        Txt2ImgRequest,
        operations.txt2img,
    )
    registry.register(
        "img2img",
        "Transform an existing image using AI. Apply style changes while preserving structure.",
        Img2ImgRequest,
        operations.img2img,
    )
    registry.register(
        "list_assets",
        "List generated assets in your Scenario workspace.",
        ListAssetsRequest,
        operations.list_assets,
    )
    registry.register(
        "get_asset",
        "Get details and download URL for a specific asset.",
        GetAssetRequest,
        operations.get_asset,
    )
    registry.register(
        "remove_background",
        "Remove the background from an image.",
        RemoveBackgroundRequest,
        operations.remove_background,
    )
    registry.register(
        "upscale",
        "Upscale an image to higher resolution.",
        UpscaleRequest,
        operations.upscale,
    )
    return registry


__all__ = ["ToolRegistry", "ToolSpec", "build_tool_registry"]
