import pytest

from config import settings
from imagegen import typeface
from imagegen.typeface import (
    EMBEDDED_FAMILIES,
    FontWeight,
    embedded_asset_for,
    match_embedded_family,
    resolve_typeface,
)


@pytest.mark.parametrize(
    "hint, key",
    [
        ("Torus Pro", "torus"),
        ("torus", "torus"),
        ("Heebo", "heebo"),
        ("Aller Bold", "aller"),
        ("Segoe UI", None),
    ],
)
def test_family_hint_matching(hint, key):
    assert match_embedded_family(hint) == key


@pytest.mark.parametrize(
    "weight, italic, asset",
    [
        (FontWeight.THIN, False, "Torus.Pro/TorusPro-Thin.ttf"),
        (FontWeight.LIGHT, True, "Torus.Pro/TorusPro-LightItalic.ttf"),
        (FontWeight.REGULAR, False, "Torus.Pro/TorusPro-Regular.ttf"),
        # No Medium cut: falls back to the nearest lighter weight
        (FontWeight.MEDIUM, False, "Torus.Pro/TorusPro-Regular.ttf"),
        (FontWeight.SEMIBOLD, True, "Torus.Pro/TorusPro-SemiBoldItalic.ttf"),
        (FontWeight.BOLD, False, "Torus.Pro/TorusPro-Bold.ttf"),
        (FontWeight.HEAVY, True, "Torus.Pro/TorusPro-HeavyItalic.ttf"),
    ],
)
def test_torus_weight_table(weight, italic, asset):
    assert embedded_asset_for("torus", weight, italic) == asset


def test_heebo_heavy_is_black():
    assert embedded_asset_for("heebo", FontWeight.HEAVY, False) == "Heebo/Heebo-Black.ttf"
    assert embedded_asset_for("heebo", FontWeight.MEDIUM, False) == "Heebo/Heebo-Medium.ttf"


def test_heebo_has_no_italic_so_upright_is_used():
    assert embedded_asset_for("heebo", FontWeight.BOLD, True) == "Heebo/Heebo-Bold.ttf"


@pytest.mark.parametrize("weight", list(FontWeight))
def test_aller_always_uses_its_only_face(weight):
    assert embedded_asset_for("aller", weight, False) == "Aller_It.ttf"
    assert embedded_asset_for("aller", weight, True) == "Aller_It.ttf"


def test_every_embedded_asset_is_reachable():
    for key, variants in EMBEDDED_FAMILIES.items():
        reachable = {
            embedded_asset_for(key, weight, italic)
            for weight in FontWeight
            for italic in (False, True)
        }
        assert reachable == set(variants.values())


@pytest.mark.parametrize("value, expected", [(100, 100), (350, 400), (500, 500), (900, 800), (50, 100)])
def test_weight_bucketing(value, expected):
    assert FontWeight.from_value(value) == expected


@pytest.mark.parametrize("hint", ["Torus Pro", "Heebo", "Aller", "Segoe UI", "No Such Family"])
@pytest.mark.parametrize("italic", [False, True])
def test_resolution_never_fails(hint, italic):
    typeface = resolve_typeface(hint, 24, FontWeight.BOLD, italic)

    assert typeface.origin in ("embedded", "system", "default")
    assert typeface.font.getlength("Hello") > 0


@pytest.mark.parametrize(
    "hint, first_file",
    [
        ("Arial", "arial.ttf"),
        ("helvetica", "LiberationSans-Regular.ttf"),
        ("No Such Family", "segoeui.ttf"),
    ],
)
def test_system_lookup_tries_hinted_family_first(monkeypatch, hint, first_file):
    tried = []

    def not_installed(filename):
        tried.append(filename)
        return None

    monkeypatch.setattr(typeface, "_system_font_path", not_installed)

    face = resolve_typeface(hint, 24)

    assert face.origin == "default"
    assert tried[0] == first_file
    # Every fallback family is still tried, none of them twice
    assert len(tried) == len(set(tried)) == len(settings.SYSTEM_FONT_FALLBACKS)
