"""Preset menu and multi-size export."""

from .export import ExportedImage, brand_slug, export_filename, export_presets
from .presets import DEFAULT_PRESETS, Preset, get_preset, resolve_presets

__all__ = [
    "DEFAULT_PRESETS",
    "ExportedImage",
    "Preset",
    "brand_slug",
    "export_filename",
    "export_presets",
    "get_preset",
    "resolve_presets",
]
