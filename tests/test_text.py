import pytest

from config import settings
from imagegen import text
from imagegen.surface import Surface
from imagegen.text import TextStyle, draw_text, draw_text_with_fallback, layout_line, measure_text
from imagegen.typeface import FontWeight, Typeface, resolve_typeface


@pytest.fixture
def card_style():
    return TextStyle(families=settings.CARD_FONT_FAMILIES, size=30, weight=FontWeight.HEAVY, max_width=380)


def test_long_text_is_truncated_with_ellipsis(card_style):
    line = layout_line("An Extraordinarily Long Song Name That Never Ends " * 3, card_style)

    assert line.truncated
    assert line.text.endswith(settings.ELLIPSIS)
    assert line.width <= 380


def test_short_text_is_untouched(card_style):
    line = layout_line("Ghost", card_style)

    assert not line.truncated
    assert line.text == "Ghost"
    assert line.width <= 380


def test_unbounded_style_never_truncates():
    style = TextStyle(families=["Torus Pro"], size=24)
    text = "word " * 100

    line = layout_line(text, style)

    assert line.text == text
    assert not line.truncated


def test_line_metrics_are_positive(card_style):
    line = layout_line("Mapped by Someone", card_style)
    assert line.ascent > 0
    assert line.line_height >= line.ascent


def test_fallback_paragraph_draws_inside_the_surface():
    surface = Surface(400, 100)
    style = TextStyle(families=settings.CARD_FONT_FAMILIES, size=24, max_width=380)

    draw_text_with_fallback(surface, "Camellia", 10, 55, style)

    bbox = surface.image.getchannel("A").getbbox()
    assert bbox is not None
    left, top, right, bottom = bbox
    assert left >= 8
    assert bottom <= 70


def test_draw_text_with_shadow_paints_black_behind():
    surface = Surface(200, 80)
    font = resolve_typeface("Aller", 40).font

    draw_text(surface, "Hi", 20, 60, font, (255, 255, 255, 255), shadow_offset=3)

    pixels = list(surface.image.getdata())
    assert any(p[3] > 0 and p[0] == 0 for p in pixels)
    assert any(p[3] > 0 and p[0] > 200 for p in pixels)


def test_empty_text_draws_nothing():
    surface = Surface(50, 50)
    font = resolve_typeface("Torus Pro", 20).font

    draw_text(surface, "", 10, 30, font, (255, 255, 255, 255))

    assert surface.image.getchannel("A").getbbox() is None
    assert measure_text(font, "") == 0


def test_ellipsis_wider_than_limit_yields_empty_line():
    style = TextStyle(families=settings.CARD_FONT_FAMILIES, size=30, max_width=5)

    line = layout_line("Ghost story", style)

    assert line.truncated
    assert line.text == ""
    assert line.width <= 5
    assert line.line_height > 0


def _face_covering(chars, size):
    face = resolve_typeface("No Such Family", size)
    return Typeface(
        font=face.font,
        origin="system",
        source=f"fake-{size}.ttf",
        size=size,
        _coverage=frozenset(ord(c) for c in chars),
    )


def test_uncovered_glyphs_fall_back_to_next_face(monkeypatch):
    latin = _face_covering("Ghost ", 24)
    symbols = _face_covering("★", 28)
    monkeypatch.setattr(text, "_resolve_chain", lambda style: [latin, symbols])

    line = layout_line("Ghost ★", TextStyle(families=["Primary", "Symbols"], size=24))

    assert [run.text for run in line.runs] == ["Ghost ", "★"]
    assert line.runs[0].typeface is latin
    assert line.runs[1].typeface is symbols
    assert line.width == pytest.approx(
        latin.font.getlength("Ghost ") + symbols.font.getlength("★")
    )


def test_glyph_no_face_covers_uses_last_face():
    primary = _face_covering("ab", 24)
    middle = _face_covering("xy", 26)
    last = _face_covering("", 28)

    runs = text._shape_runs("ab€x", [primary, middle, last])

    assert [(run.text, run.typeface) for run in runs] == [("ab", primary), ("€", last), ("x", middle)]
