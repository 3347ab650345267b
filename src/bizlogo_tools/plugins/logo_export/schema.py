"""Logo export parameters and output schema."""

from pydantic import BaseModel, Field, field_validator

from ...common.errors import UnknownPresetError
from ...common.schema_job import BaseJobParams, TaskOutput
from ..logo_resize.algo.fit_crop import ImageFormat
from .algo.presets import get_preset


class LogoExportParams(BaseJobParams):
    """Parameters for exporting a logo at several preset sizes.

    Attributes:
        input_path: Job-relative path of the source logo
        output_path: Job-relative directory that receives the exported files
        brand_name: Brand name used in exported filenames
        presets: Preset names to export; empty means the full menu
        quality: Encoder quality for JPEG/WebP presets
    """

    output_path: str = Field(default="output", description="Directory for exported files")
    brand_name: str = Field(default="", max_length=50, description="Brand name for filenames")
    presets: list[str] = Field(default_factory=list, description="Preset names to export")
    quality: int | None = Field(default=None, ge=1, le=100)

    @field_validator("presets")
    @classmethod
    def validate_presets(cls, v: list[str]) -> list[str]:
        try:
            names = [get_preset(name).name for name in v]
        except UnknownPresetError as exc:
            raise ValueError(str(exc)) from exc
        if len(names) != len(set(names)):
            raise ValueError("Preset names must be unique")
        return names


class ExportedFile(BaseModel):
    preset: str
    filename: str
    relative_path: str
    width: int
    height: int
    format: ImageFormat
    size: int = Field(ge=0)


class LogoExportOutput(TaskOutput):
    brand_name: str
    files: list[ExportedFile] = Field(default_factory=list)
