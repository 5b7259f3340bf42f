"""
Card Module - 900x300 map info card
"""

import asyncio
from typing import Dict, Optional, Union

from loguru import logger
from PIL import Image

from config import settings
from imagegen.fetcher import fetch_image_bytes
from imagegen.models import MapInfo, MapMetadata, StarRatings, parse_model
from imagegen.palette import WHITE, difficulty_color, is_sentinel
from imagegen.primitives import draw_clock_icon, draw_key_icon, draw_metronome_icon
from imagegen.renderer import draw_centered_text, draw_map_text, draw_star_label
from imagegen.surface import Surface
from imagegen.text import draw_text, measure_text
from imagegen.typeface import FontWeight, resolve_typeface
from utils.geometry import cover_scale, crop_square
from utils.image_utils import decode_image, format_duration

WIDTH, HEIGHT = 900, 300
CORNER_RADIUS = 20

BACKGROUND_OVERLAY = (0, 0, 0, 102)

COVER_BOX = (20, 20, 260, 260)
COVER_RADIUS = 10

PANEL_BOX = (300, 20, 580, 180)
PANEL_RADIUS = 10
PANEL_COLOR = (0, 0, 0, 51)

TEXT_X = 320
TEXT_MAX_WIDTH = 380
TEXT_BASELINES = (55, 90, 125, 180)
TEXT_SIZES = (24, 30, 20, 20)
TEXT_WEIGHTS = (FontWeight.REGULAR, FontWeight.HEAVY, FontWeight.MEDIUM, FontWeight.SEMIBOLD)

INFO_FAMILY = "Torus Pro"
INFO_SIZE = 24
INFO_RIGHT = 830
ICON_X = 840
ICON_SIZE = 24

DIFF_X = 300
DIFF_Y = 220
DIFF_W, DIFF_H = 107, 50
DIFF_STEP = 118
DIFF_RADIUS = 10
DIFF_BASELINE = 252
SENTINEL_SIZE = 20
RATING_SIZE = 28
STAR_SIZE = 18
STAR_GAP = 4
STAR_CY = 244


def _draw_blurred_backdrop(surface: Surface, cover: Image.Image) -> None:
    """Cover scaled to fill the card, blurred and darkened"""
    scale = cover_scale(cover.width, cover.height, WIDTH, HEIGHT)
    w, h = cover.width * scale, cover.height * scale
    surface.draw_image(cover, ((WIDTH - w) / 2, (HEIGHT - h) / 2, w, h), blur=settings.BLUR_SIGMA)
    surface.fill_rounded_rect((0, 0, WIDTH, HEIGHT), CORNER_RADIUS, BACKGROUND_OVERLAY)


def _draw_info_rows(surface: Surface, map_id: str, metadata: MapMetadata) -> None:
    """Right-aligned id / bpm / duration, each followed by its icon"""
    font = resolve_typeface(INFO_FAMILY, INFO_SIZE, FontWeight.REGULAR).font

    rows = [
        (map_id or None, 55, draw_key_icon),
        (f"{metadata.bpm:.0f}" if metadata.bpm is not None else None, 85, draw_metronome_icon),
        (format_duration(metadata.duration) if metadata.duration is not None else None, 115, draw_clock_icon),
    ]

    for text, baseline, draw_icon in rows:
        if text is None:
            continue
        draw_text(surface, text, INFO_RIGHT - measure_text(font, text), baseline, font, WHITE)
        draw_icon(surface, ICON_X, baseline - 21, ICON_SIZE)


def _draw_difficulties(surface: Surface, ratings: StarRatings) -> None:
    """One colored box per present rating, left to right"""
    sentinel_font = resolve_typeface(INFO_FAMILY, SENTINEL_SIZE, FontWeight.BOLD).font
    rating_font = resolve_typeface(INFO_FAMILY, RATING_SIZE, FontWeight.BOLD).font

    x = DIFF_X
    for key, rating in ratings.present():
        surface.fill_rounded_rect((x, DIFF_Y, DIFF_W, DIFF_H), DIFF_RADIUS, difficulty_color(key))
        center_x = x + DIFF_W / 2

        if is_sentinel(rating):
            draw_centered_text(surface, rating, sentinel_font, center_x, DIFF_BASELINE)
        else:
            draw_star_label(
                surface, rating, rating_font, center_x, DIFF_BASELINE,
                star_cy=STAR_CY, star_size=STAR_SIZE, gap=STAR_GAP,
            )

        x += DIFF_STEP


def render_card(
    cover_bytes: bytes,
    map_info: MapInfo,
    ratings: StarRatings,
    use_background: bool = True,
) -> str:
    """
    Compose the map card from already-fetched cover bytes

    Args:
        cover_bytes: Encoded cover image
        map_info: Map description
        ratings: Star ratings per difficulty
        use_background: Draw the blurred cover backdrop (else transparent)

    Returns:
        PNG data URL
    """
    surface = Surface(WIDTH, HEIGHT)
    cover = decode_image(cover_bytes)

    with surface.clipped((0, 0, WIDTH, HEIGHT), CORNER_RADIUS):
        if use_background:
            _draw_blurred_backdrop(surface, cover)

        with surface.clipped(COVER_BOX, COVER_RADIUS):
            surface.draw_image(cover, COVER_BOX, src=crop_square(*cover.size))

        surface.fill_rounded_rect(PANEL_BOX, PANEL_RADIUS, PANEL_COLOR)

        draw_map_text(
            surface, map_info.metadata, TEXT_X, TEXT_BASELINES,
            settings.CARD_FONT_FAMILIES, TEXT_SIZES, TEXT_WEIGHTS, TEXT_MAX_WIDTH,
        )
        _draw_info_rows(surface, map_info.id, map_info.metadata)
        _draw_difficulties(surface, ratings)

    return surface.to_data_url()


async def generate_card(
    map_info: Union[MapInfo, dict],
    ratings: Union[StarRatings, Dict[str, Optional[str]], None],
    use_background: bool = True,
) -> str:
    """
    Generate the map info card

    Args:
        map_info: Map description (model or camelCase dict)
        ratings: Star ratings per difficulty key
        use_background: Draw the blurred cover backdrop

    Returns:
        PNG data URL
    """
    map_info = parse_model(MapInfo, map_info, "map info")
    ratings = parse_model(StarRatings, ratings, "star ratings")

    logger.info(f"Generating card for map {map_info.id or '<no id>'} (background={use_background})")
    cover_bytes = await fetch_image_bytes(map_info.cover_url)

    return await asyncio.to_thread(render_card, cover_bytes, map_info, ratings, use_background)
