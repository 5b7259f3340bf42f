import pytest

from imagegen.models import (
    BackgroundTransform,
    DifficultyKey,
    MapInfo,
    StarRatings,
    parse_model,
)
from utils.exceptions import MalformedInputError, MissingCoverError


def test_map_info_reads_camel_case(map_payload):
    info = parse_model(MapInfo, map_payload, "map info")

    assert info.id == "3f2a1"
    assert info.metadata.song_author_name == "Camellia"
    assert info.metadata.level_author_name == "Someone"
    assert info.metadata.duration == 185
    assert info.cover_url.startswith("data:image/jpeg;base64,")


def test_missing_versions_has_no_cover(map_payload):
    map_payload["versions"] = []
    info = parse_model(MapInfo, map_payload, "map info")

    with pytest.raises(MissingCoverError, match="3f2a1"):
        _ = info.cover_url


def test_malformed_map_info():
    with pytest.raises(MalformedInputError, match="Failed to parse map info"):
        parse_model(MapInfo, {"metadata": {"songName": "x"}}, "map info")


def test_model_instances_pass_through(map_payload):
    info = MapInfo.model_validate(map_payload)
    assert parse_model(MapInfo, info, "map info") is info


def test_present_ratings_follow_key_order():
    ratings = StarRatings({"EXP": "9.1", "ES": "Unranked", "HARD": "", "NOR": None, "XYZ": "1.0"})

    assert list(ratings.present()) == [
        (DifficultyKey.ES, "Unranked"),
        (DifficultyKey.EXP, "9.1"),
    ]


def test_empty_rating_reads_as_absent():
    ratings = StarRatings({"HARD": ""})
    assert ratings.get("HARD") is None
    assert ratings.get(DifficultyKey.EX) is None
    assert ratings.get("BOGUS") is None


def test_missing_ratings_parse_as_empty():
    ratings = parse_model(StarRatings, None, "star ratings")
    assert list(ratings.present()) == []


def test_difficulty_key_parse():
    assert DifficultyKey.parse("EXP") is DifficultyKey.EXP
    assert DifficultyKey.parse("Expert") is None
    assert DifficultyKey.parse(None) is None


def test_background_transform_defaults():
    assert BackgroundTransform().resolved() == (1.0, 0.0, 0.0)
    assert BackgroundTransform(scale=1.5, y=-40).resolved() == (1.5, 0.0, -40)
