import pytest

from imagegen.models import DifficultyKey
from imagegen.palette import (
    BUFF_GREEN,
    DIFFICULTY_COLORS,
    GRAY,
    NERF_RED,
    difficulty_color,
    difficulty_name,
    is_sentinel,
    parse_rating,
    reweight_accent,
)


def test_buff_is_green():
    accent = reweight_accent("5.2", "6.8")
    assert accent.trend == "buff"
    assert accent.arrow == BUFF_GREEN
    assert accent.glow == BUFF_GREEN[:3] + (26,)


def test_nerf_is_red():
    accent = reweight_accent("6.8", "5.2")
    assert accent.trend == "nerf"
    assert accent.arrow == NERF_RED
    assert accent.glow == NERF_RED[:3] + (26,)


def test_equal_ratings_are_neutral():
    accent = reweight_accent("6.8", "6.8")
    assert accent.trend == "neutral"
    assert accent.glow is None
    assert accent.arrow == GRAY


def test_sentinel_counts_as_zero():
    assert reweight_accent("Unranked", "4.0").trend == "buff"
    assert reweight_accent("3.1", "Qualified").trend == "nerf"
    assert reweight_accent("Unranked", "Qualified").trend == "neutral"


@pytest.mark.parametrize("value, expected", [("6.81", 6.81), ("Unranked", 0.0), (None, 0.0), ("", 0.0)])
def test_parse_rating(value, expected):
    assert parse_rating(value) == pytest.approx(expected)


def test_sentinels():
    assert is_sentinel("Unranked")
    assert is_sentinel("Qualified")
    assert not is_sentinel("7.25")


def test_every_difficulty_has_color_and_name():
    for key in DifficultyKey:
        assert difficulty_color(key) == DIFFICULTY_COLORS[key]
        assert difficulty_name(key)
    assert difficulty_name(DifficultyKey.EXP) == "Expert+"


def test_unknown_difficulty_is_gray():
    assert difficulty_color("BOGUS") == GRAY
