"""
Renderer Module - Layers shared by the thumbnail and card generators
"""

from functools import lru_cache
from typing import Optional, Sequence, Tuple

from loguru import logger
from PIL import Image, ImageFont

from config import settings
from imagegen.models import BackgroundTransform, MapMetadata
from imagegen.palette import WHITE
from imagegen.primitives import draw_star
from imagegen.surface import Surface
from imagegen.text import TextStyle, draw_text, draw_text_with_fallback, measure_text
from imagegen.typeface import FontWeight
from utils.exceptions import DecodeError
from utils.geometry import CropRect
from utils.image_utils import load_image

Color = Tuple[int, ...]

LOGO_SIZE = (1538.0, 262.0)


def draw_background(
    surface: Surface,
    background: Image.Image,
    crop: CropRect,
    transform: Optional[BackgroundTransform] = None,
) -> None:
    """
    Draw the cropped background over the whole surface

    The optional transform translates, then scales, the destination
    rectangle; it affects only this layer.

    Args:
        surface: Target surface
        background: Decoded background image
        crop: Source crop rectangle
        transform: Optional caller-supplied scale / x / y
    """
    scale, tx, ty = (transform or BackgroundTransform()).resolved()
    dst = (tx, ty, surface.width * scale, surface.height * scale)

    logger.debug(f"Background crop={crop}, transform=(scale={scale}, x={tx}, y={ty})")
    surface.draw_image(background, dst, src=crop)


@lru_cache(maxsize=1)
def load_logo() -> Optional[Image.Image]:
    """The channel logo, or None when the asset is not installed"""
    try:
        return load_image(settings.LOGO_PATH)
    except (FileNotFoundError, DecodeError) as e:
        logger.warning(f"Logo unavailable: {e}")
        return None


def draw_logo(surface: Surface, y: float, scale: float) -> None:
    """Draw the logo horizontally centered at ``y``"""
    logo = load_logo()
    if logo is None:
        return

    logo_w, logo_h = LOGO_SIZE[0] * scale, LOGO_SIZE[1] * scale
    surface.draw_image(logo, ((surface.width - logo_w) / 2, y, logo_w, logo_h))


def draw_centered_text(
    surface: Surface,
    text: str,
    font: ImageFont.FreeTypeFont,
    center_x: float,
    baseline: float,
    color: Color = WHITE,
    shadow_offset: float = 0.0,
) -> None:
    x = center_x - measure_text(font, text) / 2
    draw_text(surface, text, x, baseline, font, color, shadow_offset)


def draw_star_label(
    surface: Surface,
    text: str,
    font: ImageFont.FreeTypeFont,
    center_x: float,
    baseline: float,
    star_cy: float,
    star_size: float,
    gap: float,
    star_radius: Optional[float] = None,
    color: Color = WHITE,
) -> None:
    """
    Draw ``text`` followed by a star, the pair centered on ``center_x``

    Args:
        surface: Target surface
        text: Rating text
        font: Text font
        center_x: Horizontal center of text + gap + star
        baseline: Text baseline
        star_cy: Vertical center of the star
        star_size: Width reserved for the star
        gap: Space between text and star
        star_radius: Outer star radius (default: half the reserved width)
        color: Text and star color
    """
    text_w = measure_text(font, text)
    start_x = center_x - (text_w + gap + star_size) / 2
    radius = star_size / 2 if star_radius is None else star_radius

    draw_text(surface, text, start_x, baseline, font, color)
    draw_star(surface, start_x + text_w + gap + star_size / 2, star_cy, radius, color)


def draw_map_text(
    surface: Surface,
    metadata: MapMetadata,
    x: float,
    baselines: Sequence[float],
    families: Sequence[str],
    sizes: Sequence[float],
    weights: Sequence[int],
    max_width: float,
    sub_color: Color = WHITE,
) -> None:
    """
    Draw the author / song / sub name / mapper block

    The sub name line is skipped when empty; the other lines keep their
    positions.

    Args:
        surface: Target surface
        metadata: Map metadata
        x: Left edge of the block
        baselines: Baselines of the four lines
        families: Font family fallback chain
        sizes: Font size per line
        weights: Font weight per line
        max_width: Ellipsis bound shared by all lines
        sub_color: Color of the sub name line
    """
    lines = [
        (metadata.song_author_name, WHITE),
        (metadata.song_name, WHITE),
        (metadata.song_sub_name or "", sub_color),
        (f"Mapped by {metadata.level_author_name}", WHITE),
    ]

    for (text, color), y, size, weight in zip(lines, baselines, sizes, weights):
        if not text:
            continue
        style = TextStyle(
            families=families,
            size=size,
            weight=FontWeight.from_value(weight),
            color=color,
            max_width=max_width,
        )
        draw_text_with_fallback(surface, text, x, y, style)
