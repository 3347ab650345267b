"""Cover-then-crop resize algorithms."""

from .fit_crop import (
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
from .source import decode_image, load_source, parse_data_uri, to_data_uri

__all__ = [
    "ImageFormat",
    "OutputImage",
    "RenderPlan",
    "TargetSpec",
    "check_target_dimensions",
    "decode_image",
    "encode_image",
    "fit_crop",
    "load_source",
    "logo_resize",
    "parse_data_uri",
    "plan_fit_crop",
    "resize_image",
    "to_data_uri",
]
