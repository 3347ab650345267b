"""Public algorithm API for bizlogo_tools.

Core resize and export functions for direct use without the FastAPI job
infrastructure.

Example:
    Resize one logo to an exact size::

        from bizlogo_tools.algorithms import logo_resize

        logo_resize(
            input_path="logo.png",
            output_path="header.png",
            width=250,
            height=100,
        )

    Export the full preset menu from a data URI::

        from bizlogo_tools.algorithms import decode_image, export_presets

        image = decode_image(logo_data_uri)
        for item in export_presets(image, "Acme"):
            Path(item.filename).write_bytes(item.image.data)
"""

from .plugins.logo_export.algo.export import (
    ExportedImage,
    brand_slug,
    export_filename,
    export_presets,
)
from .plugins.logo_export.algo.presets import (
    DEFAULT_PRESETS,
    Preset,
    get_preset,
    resolve_presets,
)
from .plugins.logo_resize.algo.fit_crop import (
    ImageFormat,
    OutputImage,
    RenderPlan,
    TargetSpec,
    check_target_dimensions,
    encode_image,
    fit_crop,
    logo_resize,
    plan_fit_crop,
    resize_image,
)
from .plugins.logo_resize.algo.source import (
    decode_image,
    extension_from_data_uri,
    load_source,
    parse_data_uri,
    to_data_uri,
)
from .utils.media_types import (
    MediaType,
    determine_mime,
    get_extension_from_mime,
)
from .utils.preferences import (
    InMemoryPreferenceStore,
    JsonFilePreferenceStore,
    PreferenceStore,
    Theme,
    get_theme,
    set_theme,
)

__all__ = [
    # Resize
    "ImageFormat",
    "TargetSpec",
    "RenderPlan",
    "OutputImage",
    "check_target_dimensions",
    "plan_fit_crop",
    "fit_crop",
    "encode_image",
    "resize_image",
    "logo_resize",
    # Source decoding
    "decode_image",
    "load_source",
    "parse_data_uri",
    "to_data_uri",
    "extension_from_data_uri",
    # Export
    "Preset",
    "DEFAULT_PRESETS",
    "get_preset",
    "resolve_presets",
    "ExportedImage",
    "brand_slug",
    "export_filename",
    "export_presets",
    # Utilities
    "MediaType",
    "determine_mime",
    "get_extension_from_mime",
    "PreferenceStore",
    "InMemoryPreferenceStore",
    "JsonFilePreferenceStore",
    "Theme",
    "get_theme",
    "set_theme",
]
