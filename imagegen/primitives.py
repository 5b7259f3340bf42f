"""
Primitives Module - Stars, arrows and rasterized SVG icons
"""

import math
from functools import lru_cache
from io import BytesIO
from typing import List, Optional, Tuple

from loguru import logger
from PIL import Image

from imagegen.surface import Surface

Color = Tuple[int, ...]

SVG_ICONS = {
    "key": (
        '<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24" '
        'fill="none" stroke="white" stroke-width="2" stroke-linecap="round" stroke-linejoin="round">'
        '<path d="m15.5 7.5 2.3 2.3a1 1 0 0 0 1.4 0l2.1-2.1a1 1 0 0 0 0-1.4L19 4"/>'
        '<path d="m21 2-9.6 9.6"/><circle cx="7.5" cy="15.5" r="5.5"/></svg>'
    ),
    "clock": (
        '<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24" '
        'fill="none" stroke="white" stroke-width="2" stroke-linecap="round" stroke-linejoin="round">'
        '<circle cx="12" cy="12" r="10"/><polyline points="12,6 12,12 16,14"/></svg>'
    ),
    "metronome": (
        '<svg xmlns="http://www.w3.org/2000/svg" width="1280" height="1280" viewBox="0 0 1280 1280"><g>'
        '<path fill="#FFFFFF" d="M703.47,886.75l-428.38-463.1c-9.94-10.75-26.71-11.4-37.46-1.46l-41.85,38.72'
        'c-10.75,9.94-11.4,26.71-1.46,37.46l428.38,463.1c9.94,10.75,26.71,11.4,37.46,1.46l41.85-38.72'
        'C712.76,914.27,713.41,897.5,703.47,886.75z"/>'
        '<polygon fill="#FFFFFF" points="817.7,135.5 484.43,135.5 392.26,471.63 470.09,555.77 558.65,232.81 '
        '743.36,232.81 965.35,1047.19 335.33,1047.19 400.45,809.71 322.62,725.58 207.75,1144.5 1092.73,1144.5"/>'
        '</g></svg>'
    ),
}


def star_points(cx: float, cy: float, radius: float) -> List[Tuple[float, float]]:
    """Vertices of a 5-point star pointing up (inner radius 0.4r)"""
    inner = radius * 0.4
    points = []
    for i in range(10):
        angle = math.radians(i * 36.0 - 90.0)
        r = radius if i % 2 == 0 else inner
        points.append((cx + r * math.cos(angle), cy + r * math.sin(angle)))
    return points


def draw_star(surface: Surface, cx: float, cy: float, radius: float, color: Color) -> None:
    surface.fill_polygon(star_points(cx, cy, radius), color)


def arrow_points(cx: float, cy: float, size: float) -> List[Tuple[float, float]]:
    """Right-pointing triangle centered on (cx, cy)"""
    half_h = size * 0.5
    half_w = size * 0.4
    return [
        (cx - half_w, cy - half_h),  # top left
        (cx + half_w, cy),           # tip
        (cx - half_w, cy + half_h),  # bottom left
    ]


def draw_arrow(surface: Surface, cx: float, cy: float, size: float, color: Color) -> None:
    surface.fill_polygon(arrow_points(cx, cy, size), color)


@lru_cache(maxsize=64)
def rasterize_icon(icon: str, size: int) -> Optional[Image.Image]:
    """
    Render an embedded SVG icon to a size x size RGBA bitmap

    Icons are static, so results are cached per (icon, size).
    Returns None when the cairo runtime needed by cairosvg is missing.

    Args:
        icon: One of SVG_ICONS ('key', 'clock', 'metronome')
        size: Output edge length in pixels

    Returns:
        RGBA image or None
    """
    svg = SVG_ICONS[icon]

    try:
        # cairosvg loads libcairo at import time
        import cairosvg
    except OSError as e:
        logger.warning(f"Cannot rasterize icon '{icon}': {e}")
        return None

    png = cairosvg.svg2png(
        bytestring=svg.encode("utf-8"),
        output_width=size,
        output_height=size,
    )
    with Image.open(BytesIO(png)) as img:
        return img.convert("RGBA")


def draw_icon(surface: Surface, icon: str, x: float, y: float, size: float) -> None:
    """Blit an icon with its top-left corner at (x, y)"""
    bitmap = rasterize_icon(icon, int(size))
    if bitmap is None:
        return
    surface.composite(bitmap, (round(x), round(y)))


def draw_key_icon(surface: Surface, x: float, y: float, size: float) -> None:
    draw_icon(surface, "key", x, y, size)


def draw_clock_icon(surface: Surface, x: float, y: float, size: float) -> None:
    draw_icon(surface, "clock", x, y, size)


def draw_metronome_icon(surface: Surface, x: float, y: float, size: float) -> None:
    draw_icon(surface, "metronome", x, y, size)
