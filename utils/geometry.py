"""
Crop geometry - convert arbitrary source images to a target aspect ratio
"""

from dataclasses import dataclass
from typing import Tuple

WIDESCREEN = 16 / 9
SQUARE = 1.0


@dataclass(frozen=True)
class CropRect:
    """Crop rectangle in source-image pixel space"""
    x: float
    y: float
    w: float
    h: float

    @property
    def aspect(self) -> float:
        return self.w / self.h

    def as_box(self) -> Tuple[float, float, float, float]:
        """(left, upper, right, lower) as Pillow expects it"""
        return (self.x, self.y, self.x + self.w, self.y + self.h)


def crop_to_cover(src_w: int, src_h: int, target_aspect: float) -> CropRect:
    """
    Compute a centered "zoom-to-cover" crop

    The longer axis (relative to the target aspect) is trimmed symmetrically,
    the other axis is kept whole, so the crop always fills the destination
    without letterboxing and never reaches outside the source.

    Args:
        src_w: Source width in pixels
        src_h: Source height in pixels
        target_aspect: Desired width / height

    Returns:
        CropRect with w / h == target_aspect
    """
    if src_w <= 0 or src_h <= 0:
        raise ValueError(f"Source dimensions must be positive, got {src_w}x{src_h}")
    if target_aspect <= 0:
        raise ValueError(f"Target aspect must be positive, got {target_aspect}")

    current_aspect = src_w / src_h

    if current_aspect > target_aspect:
        # Image is wider - crop width
        new_w = min(float(src_w), src_h * target_aspect)
        return CropRect(x=(src_w - new_w) / 2, y=0.0, w=new_w, h=float(src_h))

    # Image is taller (or exact) - crop height
    new_h = min(float(src_h), src_w / target_aspect)
    return CropRect(x=0.0, y=(src_h - new_h) / 2, w=float(src_w), h=new_h)


def crop_16_9(src_w: int, src_h: int) -> CropRect:
    return crop_to_cover(src_w, src_h, WIDESCREEN)


def crop_square(src_w: int, src_h: int) -> CropRect:
    return crop_to_cover(src_w, src_h, SQUARE)


def cover_scale(src_w: int, src_h: int, dst_w: float, dst_h: float) -> float:
    """Uniform scale at which the whole source covers a dst_w x dst_h box"""
    return max(dst_w / src_w, dst_h / src_h)
