"""
Reweight Card Module - 600x270 old-vs-new star rating card
"""

import asyncio
from typing import Dict, Optional, Union

from loguru import logger
from PIL import ImageFont

from config import settings
from imagegen.fetcher import fetch_image_bytes
from imagegen.models import DifficultyKey, MapInfo, StarRatings, parse_model
from imagegen.palette import LIGHT_GRAY, difficulty_color, reweight_accent
from imagegen.primitives import draw_arrow
from imagegen.renderer import draw_map_text, draw_star_label
from imagegen.surface import Surface
from imagegen.typeface import FontWeight, resolve_typeface
from utils.geometry import crop_square
from utils.image_utils import decode_image

WIDTH, HEIGHT = 600, 270

BACKGROUND_RADIUS = 40
BACKGROUND_COLOR = (0, 0, 0, 77)

GLOW_BOX = (40, 40, 520, 190)
GLOW_RADIUS = 20

COVER_BOX = (20, 20, 230, 230)
COVER_RADIUS = 20

TEXT_X = 270
TEXT_MAX_WIDTH = 300
TEXT_BASELINES = (55, 90, 120, 170)
TEXT_SIZES = (24, 30, 20, 20)
TEXT_WEIGHTS = (FontWeight.LIGHT, FontWeight.BOLD, FontWeight.REGULAR, FontWeight.MEDIUM)

RATING_FAMILY = "Torus Pro"
RATING_SIZE = 24
CENTER_X = 405
CENTER_Y = 218
CHIP_OFFSET = 85
CHIP_W, CHIP_H = 100, 34
CHIP_RADIUS = 10
RATING_BASELINE = 226
STAR_SIZE = 10
STAR_GAP = 4
ARROW_SIZE = 20


def _draw_rating_chip(
    surface: Surface,
    rating: str,
    center_x: float,
    color,
    font: ImageFont.FreeTypeFont,
) -> None:
    surface.fill_rounded_rect(
        (center_x - CHIP_W / 2, CENTER_Y - CHIP_H / 2, CHIP_W, CHIP_H), CHIP_RADIUS, color
    )
    # Star is drawn at full radius over a half-width slot
    draw_star_label(
        surface, rating, font, center_x, RATING_BASELINE,
        star_cy=CENTER_Y, star_size=STAR_SIZE, gap=STAR_GAP, star_radius=STAR_SIZE,
    )


def render_reweight_card(
    cover_bytes: bytes,
    map_info: MapInfo,
    old_ratings: StarRatings,
    new_ratings: StarRatings,
    chosen: Optional[DifficultyKey],
) -> str:
    """
    Compose the reweight card from already-fetched cover bytes

    The rating comparison row is drawn only when both the old and the new
    rating of the chosen difficulty are present.

    Args:
        cover_bytes: Encoded cover image
        map_info: Map description
        old_ratings: Ratings before the reweight
        new_ratings: Ratings after the reweight
        chosen: Difficulty being compared (None when unknown: no chips)

    Returns:
        PNG data URL
    """
    surface = Surface(WIDTH, HEIGHT)
    cover = decode_image(cover_bytes)

    old_rating = old_ratings.get(chosen)
    new_rating = new_ratings.get(chosen)
    accent = reweight_accent(old_rating, new_rating)
    logger.debug(f"Reweight {chosen.value if chosen else '?'}: {old_rating} -> {new_rating} ({accent.trend})")

    surface.fill_rounded_rect((0, 0, WIDTH, HEIGHT), BACKGROUND_RADIUS, BACKGROUND_COLOR)
    if accent.glow is not None:
        surface.fill_rounded_rect(GLOW_BOX, GLOW_RADIUS, accent.glow, blur=settings.GLOW_SIGMA)

    with surface.clipped(COVER_BOX, COVER_RADIUS):
        surface.draw_image(cover, COVER_BOX, src=crop_square(*cover.size))

    draw_map_text(
        surface, map_info.metadata, TEXT_X, TEXT_BASELINES,
        settings.CARD_FONT_FAMILIES, TEXT_SIZES, TEXT_WEIGHTS, TEXT_MAX_WIDTH,
        sub_color=LIGHT_GRAY,
    )

    if old_rating is not None and new_rating is not None:
        font = resolve_typeface(RATING_FAMILY, RATING_SIZE, FontWeight.BOLD).font
        color = difficulty_color(chosen)

        _draw_rating_chip(surface, old_rating, CENTER_X - CHIP_OFFSET, color, font)
        draw_arrow(surface, CENTER_X, CENTER_Y, ARROW_SIZE, accent.arrow)
        _draw_rating_chip(surface, new_rating, CENTER_X + CHIP_OFFSET, color, font)

    return surface.to_data_url()


async def generate_reweight_card(
    map_info: Union[MapInfo, dict],
    old_star_ratings: Union[StarRatings, Dict[str, Optional[str]], None],
    new_star_ratings: Union[StarRatings, Dict[str, Optional[str]], None],
    chosen_diff: Union[DifficultyKey, str],
) -> str:
    """
    Generate the reweight comparison card

    Args:
        map_info: Map description (model or camelCase dict)
        old_star_ratings: Ratings before the reweight
        new_star_ratings: Ratings after the reweight
        chosen_diff: Difficulty key to compare

    Returns:
        PNG data URL
    """
    map_info = parse_model(MapInfo, map_info, "map info")
    old_ratings = parse_model(StarRatings, old_star_ratings, "old star ratings")
    new_ratings = parse_model(StarRatings, new_star_ratings, "new star ratings")

    chosen = DifficultyKey.parse(chosen_diff)
    if chosen is None:
        logger.warning(f"Unknown difficulty '{chosen_diff}', drawing it in gray without a rating")

    logger.info(f"Generating reweight card for map {map_info.id or '<no id>'} ({chosen_diff})")
    cover_bytes = await fetch_image_bytes(map_info.cover_url)

    return await asyncio.to_thread(
        render_reweight_card, cover_bytes, map_info, old_ratings, new_ratings, chosen
    )
