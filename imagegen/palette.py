"""
Palette Module - Difficulty colors, sentinel ratings and reweight accents
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from imagegen.models import DifficultyKey

Color = Tuple[int, int, int, int]

WHITE: Color = (255, 255, 255, 255)
BLACK: Color = (0, 0, 0, 255)
GRAY: Color = (136, 136, 136, 255)
LIGHT_GRAY: Color = (200, 200, 200, 255)
PANEL_DARK: Color = (20, 20, 20, 255)

BUFF_GREEN: Color = (22, 163, 74, 255)
NERF_RED: Color = (220, 38, 38, 255)

DIFFICULTY_COLORS = {
    DifficultyKey.ES: (22, 163, 74, 255),
    DifficultyKey.NOR: (59, 130, 246, 255),
    DifficultyKey.HARD: (249, 115, 22, 255),
    DifficultyKey.EX: (220, 38, 38, 255),
    DifficultyKey.EXP: (126, 34, 206, 255),
}

DIFFICULTY_NAMES = {
    DifficultyKey.ES: "Easy",
    DifficultyKey.NOR: "Normal",
    DifficultyKey.HARD: "Hard",
    DifficultyKey.EX: "Expert",
    DifficultyKey.EXP: "Expert+",
}

SENTINEL_RATINGS = ("Unranked", "Qualified")

# Video thumbnail backdrop (top-left -> bottom-right)
GRADIENT_START: Color = (15, 8, 208, 255)
GRADIENT_END: Color = (155, 11, 57, 255)


def with_alpha(color: Color, alpha: int) -> Color:
    return (color[0], color[1], color[2], alpha)


def difficulty_color(key: Union[DifficultyKey, str, None]) -> Color:
    """Box/divider color for a difficulty, gray for unknown keys"""
    key = DifficultyKey.parse(key)
    return DIFFICULTY_COLORS.get(key, GRAY)


def difficulty_name(key: Union[DifficultyKey, str, None]) -> str:
    key = DifficultyKey.parse(key)
    return DIFFICULTY_NAMES.get(key, "")


def is_sentinel(rating: str) -> bool:
    """True for non-numeric display values rendered without a star"""
    return rating in SENTINEL_RATINGS


def parse_rating(rating: Optional[str]) -> float:
    """Numeric star value; missing or non-numeric ratings count as 0.0"""
    if rating is None:
        return 0.0
    try:
        return float(rating)
    except ValueError:
        return 0.0


@dataclass(frozen=True)
class ReweightAccent:
    """Colors picked from the sign of a rating change"""
    trend: str  # 'buff', 'nerf' or 'neutral'
    glow: Optional[Color]
    arrow: Color


def reweight_accent(old_rating: Optional[str], new_rating: Optional[str]) -> ReweightAccent:
    """
    Select glow and arrow colors for a reweight

    Args:
        old_rating: Previous display rating
        new_rating: New display rating

    Returns:
        Green accent for a buff, red for a nerf, gray arrow and no glow otherwise
    """
    delta = parse_rating(new_rating) - parse_rating(old_rating)

    if delta > 0:
        return ReweightAccent("buff", with_alpha(BUFF_GREEN, 26), BUFF_GREEN)
    if delta < 0:
        return ReweightAccent("nerf", with_alpha(NERF_RED, 26), NERF_RED)
    return ReweightAccent("neutral", None, GRAY)
