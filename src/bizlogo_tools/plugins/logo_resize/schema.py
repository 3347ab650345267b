"""Logo resize parameters and output schema."""

from pydantic import Field, field_validator

from ...common.schema_job import BaseJobParams, TaskOutput
from .algo.fit_crop import ImageFormat, RenderPlan


class LogoResizeParams(BaseJobParams):
    """Parameters for an exact-size logo resize.

    Attributes:
        input_path: Job-relative path of the source logo
        output_path: Job-relative path of the resized logo
        width: Target width in pixels
        height: Target height in pixels
        format: Output encoding (default PNG)
        quality: Encoder quality for JPEG/WebP, ignored otherwise
    """

    width: int = Field(gt=0, description="Target width in pixels")
    height: int = Field(gt=0, description="Target height in pixels")
    format: ImageFormat = Field(default=ImageFormat.PNG, description="Output format")
    quality: int | None = Field(default=None, ge=1, le=100, description="Output quality (1-100)")

    @field_validator("format", mode="before")
    @classmethod
    def normalize_format(cls, v: object) -> object:
        return ImageFormat.parse(v) if isinstance(v, str) else v


class LogoResizeOutput(TaskOutput):
    width: int
    height: int
    format: ImageFormat
    render_plan: RenderPlan
    size: int = Field(ge=0, description="Encoded size in bytes")
