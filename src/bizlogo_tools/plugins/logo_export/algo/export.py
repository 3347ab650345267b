"""Multi-size export of a logo to the preset menu."""

import re
from typing import ClassVar

from PIL import Image
from pydantic import BaseModel, ConfigDict

from ....utils.profiling import timed
from ...logo_resize.algo.fit_crop import OutputImage, resize_image
from .presets import Preset, resolve_presets

DEFAULT_BRAND_NAME = "logo"


class ExportedImage(BaseModel):
    preset: Preset
    filename: str
    image: OutputImage

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)


def brand_slug(brand_name: str, max_len: int = 50) -> str:
    """Filename-safe brand name; empty input becomes ``logo``."""
    slug = re.sub(r"[^\w\-]+", "_", brand_name.strip(), flags=re.UNICODE).strip("_")
    return slug[:max_len] or DEFAULT_BRAND_NAME


def export_filename(brand_name: str, preset: Preset) -> str:
    """``{brandName}_{presetName}_{width}x{height}.{ext}``

    ``brandName`` is ``brand_slug(brand_name)``, not the name as typed:
    ``"Acme Co."`` gives ``Acme_Co_large_800x800.png`` and an empty name
    gives ``logo_...``.
    """
    return (
        f"{brand_slug(brand_name)}_{preset.name}_{preset.width}x{preset.height}"
        + f".{preset.format.extension}"
    )


@timed
def export_presets(
    image: Image.Image,
    brand_name: str,
    presets: list[Preset] | None = None,
    quality: int | None = None,
) -> list[ExportedImage]:
    """
    Render ``image`` at every preset size.

    Every target is validated before the first resize, and results are only
    returned once all presets are encoded.

    Args:
        image: Decoded source logo
        brand_name: Brand name used in the filenames
        presets: Presets to render; the full default menu when None
        quality: Encoder quality for JPEG/WebP presets

    Returns:
        One ExportedImage per preset, in preset order
    """
    selected = resolve_presets(None) if presets is None else list(presets)
    targets = [preset.target for preset in selected]

    return [
        ExportedImage(
            preset=preset,
            filename=export_filename(brand_name, preset),
            image=resize_image(image, target, quality),
        )
        for preset, target in zip(selected, targets)
    ]
