"""
Video Thumbnail Module - 1920x1080 map showcase thumbnail
"""

import asyncio
from typing import Dict, Optional, Union

from loguru import logger

from config import settings
from imagegen.fetcher import fetch_image_bytes
from imagegen.models import DifficultyKey, MapInfo, StarRatings, parse_model
from imagegen.palette import (
    GRADIENT_END,
    GRADIENT_START,
    PANEL_DARK,
    WHITE,
    difficulty_color,
    difficulty_name,
    is_sentinel,
)
from imagegen.renderer import draw_centered_text, draw_map_text, draw_star_label
from imagegen.surface import Surface
from imagegen.typeface import FontWeight, resolve_typeface
from utils.exceptions import FetchError
from utils.geometry import crop_16_9, crop_square
from utils.image_utils import decode_image

WIDTH, HEIGHT = 1920, 1080

FRAME_BOX = (20, 20, 1880, 1040)
FRAME_RADIUS = 50

PANEL_BOX = (20, 20, 620, 1040)

COVER_BOX = (75, 495, 510, 510)
COVER_RADIUS = 50
OUTLINE_WIDTH = 10

TEXT_X = 50
TEXT_MAX_WIDTH = 560
TEXT_BASELINES = (95, 160, 220, 295)
TEXT_SIZES = (48, 56, 48, 40)
TEXT_WEIGHTS = (FontWeight.REGULAR, FontWeight.BOLD, FontWeight.REGULAR, FontWeight.REGULAR)

RATING_BOX = (75, 360, 510, 100)
RATING_RADIUS = 25
RATING_FAMILY = "Heebo"
RATING_SIZE = 48
RATING_CENTER_X = 330
RATING_BASELINE = 425
STAR_SIZE = 40
STAR_GAP = 8
STAR_CY = 410

DOT_COUNT = 17
DOT_X = 640
DOT_Y = 50
DOT_STEP = 61
DOT_RADIUS = 15


def _draw_rating_box(surface: Surface, chosen: DifficultyKey, rating: str) -> None:
    surface.fill_rounded_rect(RATING_BOX, RATING_RADIUS, difficulty_color(chosen))

    font = resolve_typeface(RATING_FAMILY, RATING_SIZE, FontWeight.BOLD).font
    text = f"{difficulty_name(chosen)} {rating}"

    if is_sentinel(rating):
        draw_centered_text(surface, text, font, RATING_CENTER_X, RATING_BASELINE)
    else:
        draw_star_label(
            surface, text, font, RATING_CENTER_X, RATING_BASELINE,
            star_cy=STAR_CY, star_size=STAR_SIZE, gap=STAR_GAP,
        )


def _draw_divider(surface: Surface, color) -> None:
    """Vertical column of dots right of the panel"""
    for i in range(DOT_COUNT):
        surface.fill_circle((DOT_X, DOT_Y + i * DOT_STEP), DOT_RADIUS, color)


def render_video_thumbnail(
    cover_bytes: bytes,
    background_bytes: bytes,
    map_info: MapInfo,
    chosen: Optional[DifficultyKey],
    ratings: StarRatings,
) -> str:
    """
    Compose the video thumbnail from already-fetched images

    Args:
        cover_bytes: Encoded cover image
        background_bytes: Encoded background image
        map_info: Map description
        chosen: Difficulty shown in the rating box and divider
            (None when unknown: gray divider, no rating box)
        ratings: Star ratings per difficulty

    Returns:
        PNG data URL
    """
    surface = Surface(WIDTH, HEIGHT)
    cover = decode_image(cover_bytes)
    background = decode_image(background_bytes)

    surface.linear_gradient(GRADIENT_START, GRADIENT_END)

    with surface.clipped(FRAME_BOX, FRAME_RADIUS):
        surface.draw_image(
            background, (0, 0, WIDTH, HEIGHT),
            src=crop_16_9(*background.size), blur=settings.BLUR_SIGMA,
        )

    surface.fill_rounded_rect(PANEL_BOX, FRAME_RADIUS, PANEL_DARK)

    with surface.clipped(COVER_BOX, COVER_RADIUS):
        surface.draw_image(cover, COVER_BOX, src=crop_square(*cover.size))

    surface.stroke_rounded_rect(COVER_BOX, COVER_RADIUS, WHITE, OUTLINE_WIDTH)
    surface.stroke_rounded_rect(FRAME_BOX, FRAME_RADIUS, WHITE, OUTLINE_WIDTH)

    draw_map_text(
        surface, map_info.metadata, TEXT_X, TEXT_BASELINES,
        settings.VIDEO_FONT_FAMILIES, TEXT_SIZES, TEXT_WEIGHTS, TEXT_MAX_WIDTH,
    )

    rating = ratings.get(chosen)
    if rating is not None:
        _draw_rating_box(surface, chosen, rating)

    _draw_divider(surface, difficulty_color(chosen))

    return surface.to_data_url()


async def generate_video_thumbnail(
    map_info: Union[MapInfo, dict],
    chosen_diff: Union[DifficultyKey, str],
    star_ratings: Union[StarRatings, Dict[str, Optional[str]], None],
    background: str,
) -> str:
    """
    Generate the video thumbnail

    A background that cannot be fetched is replaced by the map cover.

    Args:
        map_info: Map description (model or camelCase dict)
        chosen_diff: Difficulty key to feature
        star_ratings: Star ratings per difficulty key
        background: Background image URL, data URL or local path

    Returns:
        PNG data URL
    """
    map_info = parse_model(MapInfo, map_info, "map info")
    ratings = parse_model(StarRatings, star_ratings, "star ratings")

    chosen = DifficultyKey.parse(chosen_diff)
    if chosen is None:
        logger.warning(f"Unknown difficulty '{chosen_diff}', drawing it in gray without a rating")

    logger.info(f"Generating video thumbnail for map {map_info.id or '<no id>'} ({chosen_diff})")
    cover_bytes = await fetch_image_bytes(map_info.cover_url)

    try:
        background_bytes = await fetch_image_bytes(background)
    except FetchError as e:
        logger.warning(f"{e}; using cover as background")
        background_bytes = cover_bytes

    return await asyncio.to_thread(
        render_video_thumbnail, cover_bytes, background_bytes, map_info, chosen, ratings
    )
