"""Validated parameter sets for the Scenario tools.

Numeric knobs are clamped rather than rejected, matching what agents expect
from a forgiving tool surface: ``numSamples=7`` becomes 4, ``strength=1.5``
becomes 1.0 and any ``scalingFactor`` other than 4 becomes 2.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_MODEL_ID = "flux.1-pro"


def _clamp(value: float, lower: float, upper: float) -> float:
    return min(upper, max(lower, value))


def _number(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"expected a number, got {value!r}") from exc


class OperationRequest(BaseModel):
    """Base model: camelCase aliases, immutable once built."""

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, extra="ignore", protected_namespaces=()
    )

    def to_body(self) -> dict[str, Any]:
        """Return the Scenario submission body."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ListModelsRequest(OperationRequest):
    privacy: Literal["private", "public"] | None = Field(
        default=None, description="Filter by model privacy (default: all)"
    )
    page_size: int = Field(
        default=20,
        alias="pageSize",
        description="Number of models to return (default: 20, max: 100)",
    )

    @field_validator("page_size", mode="before")
    @classmethod
    def _clamp_page_size(cls, value: Any) -> int:
        return int(_clamp(_number(value), 1, 100))


class Txt2ImgRequest(OperationRequest):
    prompt: str = Field(min_length=1, description="Text description of the image to generate")
    model_id: str = Field(
        default=DEFAULT_MODEL_ID,
        alias="modelId",
        description="Model ID to use (default: flux.1-pro). Use list_models to see available options.",
    )
    num_samples: int = Field(
        default=1, alias="numSamples", description="Number of images to generate (1-4, default: 1)"
    )
    width: int = Field(default=1024, gt=0, description="Image width in pixels (default: 1024)")
    height: int = Field(default=1024, gt=0, description="Image height in pixels (default: 1024)")
    negative_prompt: str | None = Field(
        default=None, alias="negativePrompt", description="Things to avoid in the generated image"
    )

    @field_validator("num_samples", mode="before")
    @classmethod
    def _clamp_samples(cls, value: Any) -> int:
        return int(_clamp(_number(value), 1, 4))

    @field_validator("negative_prompt")
    @classmethod
    def _drop_empty_negative(cls, value: str | None) -> str | None:
        return value or None


class Img2ImgRequest(OperationRequest):
    prompt: str = Field(min_length=1, description="Text description of the desired output")
    image_url: str = Field(
        min_length=1, alias="imageUrl", description="URL of the source image to transform"
    )
    model_id: str = Field(
        default=DEFAULT_MODEL_ID, alias="modelId", description="Model ID to use (default: flux.1-pro)"
    )
    strength: float = Field(
        default=0.75,
        description="How much to transform (0.0-1.0, default: 0.75). Higher = more change.",
    )

    @field_validator("strength", mode="before")
    @classmethod
    def _clamp_strength(cls, value: Any) -> float:
        return _clamp(_number(value), 0.0, 1.0)

    def to_body(self) -> dict[str, Any]:
        return {
            "modelId": self.model_id,
            "prompt": self.prompt,
            "image": self.image_url,
            "strength": self.strength,
        }


class ListAssetsRequest(OperationRequest):
    page_size: int = Field(
        default=10,
        alias="pageSize",
        description="Number of assets to return (default: 10, max: 100)",
    )
    type: str | None = Field(
        default=None, description="Filter by asset type (e.g., inference-txt2img, uploaded)"
    )

    @field_validator("page_size", mode="before")
    @classmethod
    def _clamp_page_size(cls, value: Any) -> int:
        return int(_clamp(_number(value), 1, 100))


class AssetRequest(OperationRequest):
    asset_id: str = Field(min_length=1, alias="assetId", description="The asset ID to process")


class GetAssetRequest(AssetRequest):
    pass


class RemoveBackgroundRequest(AssetRequest):
    pass


class UpscaleRequest(AssetRequest):
    scaling_factor: Literal[2, 4] = Field(
        default=2, alias="scalingFactor", description="Scale factor (2 or 4, default: 2)"
    )

    @field_validator("scaling_factor", mode="before")
    @classmethod
    def _restrict_factor(cls, value: Any) -> int:
        try:
            return 4 if float(value) == 4 else 2
        except (TypeError, ValueError):
            return 2


__all__ = [
    "DEFAULT_MODEL_ID",
    "GetAssetRequest",
    "Img2ImgRequest",
    "ListAssetsRequest",
    "ListModelsRequest",
    "OperationRequest",
    "RemoveBackgroundRequest",
    "Txt2ImgRequest",
    "UpscaleRequest",
]
