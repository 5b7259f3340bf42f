"""
Utility Functions
"""

from .image_utils import (
    decode_image,
    load_image,
    format_duration,
)
from .geometry import (
    CropRect,
    crop_to_cover,
    crop_16_9,
    crop_square,
    cover_scale,
)

__all__ = [
    "decode_image",
    "load_image",
    "format_duration",
    "CropRect",
    "crop_to_cover",
    "crop_16_9",
    "crop_square",
    "cover_scale",
]
