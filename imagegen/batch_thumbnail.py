"""
Batch Thumbnail Module - 1920x1080 monthly batch thumbnail
"""

import asyncio
from typing import Optional, Union

from loguru import logger

from imagegen.fetcher import fetch_image_bytes
from imagegen.models import BackgroundTransform, parse_model
from imagegen.palette import WHITE
from imagegen.renderer import draw_background, draw_centered_text, draw_logo
from imagegen.surface import Surface
from imagegen.typeface import FontWeight, resolve_typeface
from utils.geometry import crop_16_9
from utils.image_utils import decode_image

WIDTH, HEIGHT = 1920, 1080

LOGO_Y = 100
LOGO_SCALE = 1.0

TITLE_FAMILY = "Aller"
TITLE_SIZE = 130
TITLE_BASELINE = 760
TITLE_SHADOW = 3


def render_batch_thumbnail(
    background_bytes: bytes,
    month: str,
    transform: Optional[BackgroundTransform] = None,
) -> str:
    """
    Compose the batch thumbnail from already-fetched background bytes

    Args:
        background_bytes: Encoded background image
        month: Title text (e.g. "March 2024")
        transform: Optional background scale/translation

    Returns:
        PNG data URL
    """
    surface = Surface(WIDTH, HEIGHT)
    background = decode_image(background_bytes)

    draw_background(surface, background, crop_16_9(*background.size), transform)
    draw_logo(surface, LOGO_Y, LOGO_SCALE)

    title = resolve_typeface(TITLE_FAMILY, TITLE_SIZE, FontWeight.BOLD)
    draw_centered_text(surface, month, title.font, WIDTH / 2, TITLE_BASELINE, WHITE, TITLE_SHADOW)

    return surface.to_data_url()


async def generate_batch_thumbnail(
    background: str,
    month: str,
    transform: Union[BackgroundTransform, dict, None] = None,
) -> str:
    """
    Generate the monthly batch thumbnail

    Args:
        background: Background image URL, data URL or local path
        month: Title text
        transform: Optional background transform (model or dict)

    Returns:
        PNG data URL
    """
    if transform is not None:
        transform = parse_model(BackgroundTransform, transform, "background transform")

    logger.info(f"Generating batch thumbnail for '{month}'")
    background_bytes = await fetch_image_bytes(background)

    return await asyncio.to_thread(render_batch_thumbnail, background_bytes, month, transform)
