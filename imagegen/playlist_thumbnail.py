"""
Playlist Thumbnail Module - 512x512 playlist cover
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
from utils.geometry import crop_square
from utils.image_utils import decode_image

SIZE = 512

LOGO_Y = 50
LOGO_SCALE = 0.30

TITLE_FAMILY = "Aller"
TITLE_SIZE = 54
TITLE_BASELINE = 460
TITLE_SHADOW = 2


def render_playlist_thumbnail(
    background_bytes: bytes,
    month: str,
    transform: Optional[BackgroundTransform] = None,
) -> str:
    """
    Compose the playlist cover from already-fetched background bytes

    Same composition as the batch thumbnail at square scale.
    """
    surface = Surface(SIZE, SIZE)
    background = decode_image(background_bytes)

    draw_background(surface, background, crop_square(*background.size), transform)
    draw_logo(surface, LOGO_Y, LOGO_SCALE)

    title = resolve_typeface(TITLE_FAMILY, TITLE_SIZE, FontWeight.REGULAR, italic=True)
    draw_centered_text(surface, month, title.font, SIZE / 2, TITLE_BASELINE, WHITE, TITLE_SHADOW)

    return surface.to_data_url()


async def generate_playlist_thumbnail(
    background: str,
    month: str,
    transform: Union[BackgroundTransform, dict, None] = None,
) -> str:
    """
    Generate the playlist cover

    Args:
        background: Background image URL, data URL or local path
        month: Title text
        transform: Optional background transform (model or dict)

    Returns:
        PNG data URL
    """
    if transform is not None:
        transform = parse_model(BackgroundTransform, transform, "background transform")

    logger.info(f"Generating playlist thumbnail for '{month}'")
    background_bytes = await fetch_image_bytes(background)

    return await asyncio.to_thread(render_playlist_thumbnail, background_bytes, month, transform)
