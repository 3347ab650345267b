"""Cover-then-center-crop resize of a logo to exact pixel dimensions."""

import math
import os
from enum import StrEnum
from io import BytesIO
from numbers import Integral, Real
from pathlib import Path
from typing import ClassVar

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ....common.errors import InvalidTargetError
from ....utils.profiling import timed
from .source import ImageSource, decode_image, to_data_uri


class ImageFormat(StrEnum):
    PNG = "png"
    JPEG = "jpeg"
    WEBP = "webp"
    GIF = "gif"
    BMP = "bmp"
    TIFF = "tiff"

    @classmethod
    def parse(cls, value: "str | ImageFormat") -> "ImageFormat":
        """Case-insensitive lookup that also accepts ``jpg`` and ``tif``."""
        key = str(value).strip().lower().lstrip(".")
        key = {"jpg": "jpeg", "tif": "tiff"}.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unsupported image format: {value!r}") from None

    @property
    def pil_format(self) -> str:
        return self.value.upper()

    @property
    def extension(self) -> str:
        return "jpg" if self is ImageFormat.JPEG else self.value

    @property
    def mime_type(self) -> str:
        return f"image/{self.value}"

    @property
    def supports_alpha(self) -> bool:
        return self not in (ImageFormat.JPEG, ImageFormat.BMP)


class TargetSpec(BaseModel):
    width: int = Field(gt=0, description="Target width in pixels")
    height: int = Field(gt=0, description="Target height in pixels")
    format: ImageFormat = Field(default=ImageFormat.PNG, description="Output encoding")

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    @field_validator("format", mode="before")
    @classmethod
    def normalize_format(cls, v: object) -> object:
        return ImageFormat.parse(v) if isinstance(v, str) else v

    @classmethod
    def of(
        cls,
        width: object,
        height: object,
        format: ImageFormat | str = ImageFormat.PNG,
    ) -> "TargetSpec":
        """Build a target, raising InvalidTargetError rather than a ValidationError."""
        checked_width, checked_height = check_target_dimensions(width, height)
        return cls(width=checked_width, height=checked_height, format=ImageFormat.parse(format))


class RenderPlan(BaseModel):
    """Where, and how large, the source is painted onto the target canvas."""

    draw_width: float
    draw_height: float
    offset_x: float
    offset_y: float

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)


class OutputImage(BaseModel):
    width: int
    height: int
    format: ImageFormat
    data: bytes

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    @property
    def mime_type(self) -> str:
        return self.format.mime_type

    @property
    def extension(self) -> str:
        return self.format.extension

    def to_data_uri(self) -> str:
        return to_data_uri(self.data, self.mime_type)


def check_target_dimensions(width: object, height: object) -> tuple[int, int]:
    """
    Validate target dimensions before any pixel work.

    Integral floats (``320.0``) are accepted and returned as ints.

    Raises:
        InvalidTargetError: If either value is not a finite positive integer
    """
    checked: list[int] = []
    for value in (width, height):
        if isinstance(value, bool) or not isinstance(value, Real):
            raise InvalidTargetError(width, height)
        if isinstance(value, Integral):
            as_int = int(value)
        else:
            try:
                as_float = float(value)
            except OverflowError:
                raise InvalidTargetError(width, height) from None
            if not math.isfinite(as_float) or not as_float.is_integer():
                raise InvalidTargetError(width, height)
            as_int = int(as_float)
        if as_int <= 0:
            raise InvalidTargetError(width, height)
        checked.append(as_int)
    return checked[0], checked[1]


def plan_fit_crop(
    source_width: int,
    source_height: int,
    target_width: int,
    target_height: int,
) -> RenderPlan:
    """
    Compute the cover-then-crop placement of a source on a target canvas.

    The source is scaled uniformly until it covers the whole target box;
    the overflowing axis is centered, so its offset is zero or negative and
    equal amounts are clipped from both edges.

    Example:
        1000x500 onto 800x800 -> draw 1600x800 at (-400, 0)
    """
    target_width, target_height = check_target_dimensions(target_width, target_height)
    if source_width <= 0 or source_height <= 0:
        raise ValueError(f"Invalid source size {source_width}x{source_height}")

    source_aspect = source_width / source_height
    target_aspect = target_width / target_height

    if source_aspect > target_aspect:
        draw_height = float(target_height)
        draw_width = source_width * (target_height / source_height)
        offset_x = (target_width - draw_width) / 2
        offset_y = 0.0
    else:
        draw_width = float(target_width)
        draw_height = source_height * (target_width / source_width)
        offset_x = 0.0
        offset_y = (target_height - draw_height) / 2

    return RenderPlan(
        draw_width=draw_width,
        draw_height=draw_height,
        offset_x=offset_x,
        offset_y=offset_y,
    )


def source_box(
    plan: RenderPlan,
    source_width: int,
    source_height: int,
    target_width: int,
    target_height: int,
) -> tuple[float, float, float, float]:
    """Region of the source that lands inside the target canvas."""
    scale_x = plan.draw_width / source_width
    scale_y = plan.draw_height / source_height

    left = max(0.0, -plan.offset_x / scale_x)
    top = max(0.0, -plan.offset_y / scale_y)
    right = min(float(source_width), (target_width - plan.offset_x) / scale_x)
    bottom = min(float(source_height), (target_height - plan.offset_y) / scale_y)
    return left, top, right, bottom


def _working_mode(image: Image.Image) -> str:
    if image.mode in ("RGBA", "LA", "PA", "RGBa", "La"):
        return "RGBA"
    if image.mode == "P" and "transparency" in image.info:
        return "RGBA"
    return "RGB"


@timed
def fit_crop(
    image: Image.Image,
    width: int,
    height: int,
    resample: Image.Resampling = Image.Resampling.LANCZOS,
) -> Image.Image:
    """
    Scale ``image`` to cover ``width x height`` and center-crop the overflow.

    Resampling only the visible source box is equivalent to drawing the whole
    scaled source at the planned offset and clipping, without allocating
    the oversized intermediate.

    Returns:
        New RGB or RGBA image of exactly ``width x height``
    """
    width, height = check_target_dimensions(width, height)
    source_width, source_height = image.size
    plan = plan_fit_crop(source_width, source_height, width, height)
    box = source_box(plan, source_width, source_height, width, height)

    mode = _working_mode(image)
    working = image if image.mode == mode else image.convert(mode)
    return working.resize((width, height), resample, box=box)


def encode_image(
    image: Image.Image,
    format: ImageFormat,
    quality: int | None = None,
) -> bytes:
    """Encode into ``format`` in memory; formats without alpha are flattened on white."""
    if not format.supports_alpha and image.mode == "RGBA":
        background = Image.new("RGB", image.size, (255, 255, 255))
        background.paste(image, mask=image.getchannel("A"))
        image = background

    save_kwargs: dict[str, object] = {}
    if format in (ImageFormat.JPEG, ImageFormat.WEBP) and quality is not None:
        save_kwargs["quality"] = quality
    if format is ImageFormat.PNG:
        save_kwargs["optimize"] = True

    buffer = BytesIO()
    image.save(buffer, format=format.pil_format, **save_kwargs)
    return buffer.getvalue()


def resize_image(
    image: Image.Image,
    target: TargetSpec,
    quality: int | None = None,
) -> OutputImage:
    """Fit-crop ``image`` to ``target`` and encode it."""
    resized = fit_crop(image, target.width, target.height)
    return OutputImage(
        width=target.width,
        height=target.height,
        format=target.format,
        data=encode_image(resized, target.format, quality),
    )


def logo_resize(
    *,
    input_path: ImageSource,
    output_path: str | Path,
    width: int,
    height: int,
    format: ImageFormat | str | None = None,
    quality: int | None = None,
) -> str:
    """
    Resize a single logo file to exact dimensions and write it.

    Framework-agnostic, single-image operation.

    Args:
        input_path: Path, bytes or data URI of the source logo
        output_path: Path to output image; its directory must exist
        width: Target width
        height: Target height
        format: Output format; inferred from the output suffix when None
        quality: Optional quality for JPEG/WebP

    Returns:
        Output file path as string

    Raises:
        InvalidTargetError: If width/height are not positive integers
        SourceDecodeError: If the source cannot be decoded
        FileNotFoundError: If the output directory does not exist
    """
    width, height = check_target_dimensions(width, height)
    output_path = Path(output_path)

    if format is None:
        try:
            fmt = ImageFormat.parse(output_path.suffix or "png")
        except ValueError:
            fmt = ImageFormat.PNG
    else:
        fmt = ImageFormat.parse(format)

    if not output_path.parent.exists():
        raise FileNotFoundError(f"Output directory does not exist: {output_path.parent}")

    image = decode_image(input_path)
    output = resize_image(image, TargetSpec.of(width, height, fmt), quality)

    # Write next to the destination and swap in, so a failure leaves no partial file
    tmp_path = output_path.with_name(f".{output_path.name}.tmp")
    try:
        _ = tmp_path.write_bytes(output.data)
        os.replace(tmp_path, output_path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise

    return str(output_path)
