"""Fixed menu of named export sizes."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from ....common.errors import UnknownPresetError
from ...logo_resize.algo.fit_crop import ImageFormat, TargetSpec


class Preset(BaseModel):
    name: str = Field(pattern=r"^[a-z0-9_]+$", description="Filename-safe preset key")
    label: str
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    format: ImageFormat = ImageFormat.PNG

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    @property
    def target(self) -> TargetSpec:
        return TargetSpec.of(self.width, self.height, self.format)


DEFAULT_PRESETS: tuple[Preset, ...] = (
    Preset(name="large", label="Large Square", width=800, height=800),
    Preset(name="social", label="Social Media Profile", width=320, height=320),
    Preset(name="apple_touch", label="Apple Touch Icon", width=180, height=180),
    Preset(name="header", label="Website Header", width=250, height=100),
    Preset(name="banner", label="Small Banner", width=120, height=60),
    Preset(name="favicon", label="Favicon", width=32, height=32),
)

_PRESETS_BY_NAME: dict[str, Preset] = {preset.name: preset for preset in DEFAULT_PRESETS}


def get_preset(name: str) -> Preset:
    try:
        return _PRESETS_BY_NAME[name.strip().lower()]
    except KeyError:
        raise UnknownPresetError(name) from None


def resolve_presets(names: list[str] | None = None) -> list[Preset]:
    """Presets for ``names`` in the given order; all presets when empty or None."""
    if not names:
        return list(DEFAULT_PRESETS)
    return [get_preset(name) for name in names]
