"""
Text Module - Baseline text with drop shadow and single-line fallback paragraphs
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from loguru import logger
from PIL import Image, ImageDraw, ImageFont

from config import settings
from imagegen.surface import Surface
from imagegen.typeface import FontWeight, Typeface, resolve_typeface

Color = Tuple[int, ...]

# Fraction of the font size added back when converting a paragraph's
# baseline y to its top edge. Hand-tuned for the layouts; keep as is.
BASELINE_CORRECTION = 0.2


def measure_text(font: ImageFont.FreeTypeFont, text: str) -> float:
    """Advance width of ``text`` in pixels"""
    return font.getlength(text)


def _glyph_mask(font: ImageFont.FreeTypeFont, text: str, x: float, y: float) -> Tuple[Image.Image, Tuple[int, int]]:
    """Coverage mask for text placed with its baseline-left at (x, y)"""
    left, top, right, bottom = font.getbbox(text, anchor="ls")
    origin_x = math.floor(x + left) - 1
    origin_y = math.floor(y + top) - 1
    size = (max(1, math.ceil(right - left) + 3), max(1, math.ceil(bottom - top) + 3))

    mask = Image.new("L", size, 0)
    ImageDraw.Draw(mask).text((x - origin_x, y - origin_y), text, font=font, fill=255, anchor="ls")
    return mask, (origin_x, origin_y)


def draw_text(
    surface: Surface,
    text: str,
    x: float,
    y: float,
    font: ImageFont.FreeTypeFont,
    color: Color,
    shadow_offset: float = 0.0,
) -> None:
    """
    Draw a single run with its baseline at (x, y)

    Args:
        surface: Target surface
        text: Text to draw (no wrapping, no truncation)
        x: Left edge of the run
        y: Baseline
        font: Font to draw with
        color: Text color
        shadow_offset: Offset of a semi-transparent black copy drawn first (0 = none)
    """
    if not text:
        return

    if shadow_offset > 0:
        shadow_alpha = round(255 * settings.TEXT_SHADOW_OPACITY)
        mask, dest = _glyph_mask(font, text, x + shadow_offset, y + shadow_offset)
        surface.fill_mask(mask, (0, 0, 0, shadow_alpha), dest)

    mask, dest = _glyph_mask(font, text, x, y)
    surface.fill_mask(mask, color, dest)


@dataclass
class TextStyle:
    """Per-draw text style"""
    families: Sequence[str]
    size: float
    weight: int = FontWeight.REGULAR
    color: Color = (255, 255, 255, 255)
    italic: bool = False
    max_width: Optional[float] = None


@dataclass
class TextRun:
    """Consecutive characters drawn with the same face"""
    text: str
    typeface: Typeface

    @property
    def width(self) -> float:
        return self.typeface.font.getlength(self.text)


@dataclass
class TextLine:
    """Result of laying out one line of text"""
    runs: List[TextRun] = field(default_factory=list)
    ascent: float = 0.0
    line_height: float = 0.0
    truncated: bool = False

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)

    @property
    def width(self) -> float:
        return sum(run.width for run in self.runs)


def _resolve_chain(style: TextStyle) -> List[Typeface]:
    """One face per family, duplicates (same source file) dropped"""
    faces: List[Typeface] = []
    seen = set()
    for family in style.families:
        face = resolve_typeface(family, style.size, style.weight, style.italic)
        key = (face.origin, face.source)
        if key in seen:
            continue
        seen.add(key)
        faces.append(face)
    return faces


def _shape_runs(text: str, faces: List[Typeface]) -> List[TextRun]:
    """
    Split text into runs, each char going to the first face that has it

    A char no face covers goes to the last face of the chain, the broadest
    fallback.
    """
    runs: List[TextRun] = []
    last_resort = faces[-1]

    for char in text:
        if char.isspace() and runs:
            face = runs[-1].typeface
        else:
            face = next((f for f in faces if f.covers(char)), None)
            if face is None:
                logger.debug(f"No face covers U+{ord(char):04X}, using {last_resort.source or last_resort.origin}")
                face = last_resort

        if runs and runs[-1].typeface is face:
            runs[-1].text += char
        else:
            runs.append(TextRun(char, face))

    return runs


def _line_metrics(runs: List[TextRun], fallback: Typeface) -> Tuple[float, float]:
    """(ascent, line height) over the faces actually used"""
    faces = {id(run.typeface): run.typeface for run in runs} or {id(fallback): fallback}
    ascent = 0.0
    height = 0.0
    for face in faces.values():
        face_ascent, face_descent = face.font.getmetrics()
        ascent = max(ascent, face_ascent)
        height = max(height, face_ascent + face_descent)
    return ascent, height


def _runs_width(runs: List[TextRun]) -> float:
    return sum(run.width for run in runs)


def layout_line(text: str, style: TextStyle) -> TextLine:
    """
    Lay out a single line with per-glyph family fallback

    When ``style.max_width`` is set and the text is wider, characters are
    dropped from the end and an ellipsis appended until the line fits.

    Args:
        text: Text to lay out
        style: Families, size, weight and optional width bound

    Returns:
        TextLine with runs, width and vertical metrics
    """
    faces = _resolve_chain(style)
    runs = _shape_runs(text, faces)
    truncated = False

    if style.max_width is not None and _runs_width(runs) > style.max_width:
        truncated = True
        kept = text
        while True:
            kept = kept[:-1]
            runs = _shape_runs(kept.rstrip() + settings.ELLIPSIS, faces)
            if _runs_width(runs) <= style.max_width:
                break
            if not kept:
                # Not even the ellipsis fits
                runs = []
                break
        logger.debug(f"Truncated '{text}' to '{kept.rstrip()}{settings.ELLIPSIS}' ({style.max_width}px)")

    ascent, line_height = _line_metrics(runs, faces[0])
    return TextLine(runs=runs, ascent=ascent, line_height=line_height, truncated=truncated)


def draw_text_with_fallback(surface: Surface, text: str, x: float, y: float, style: TextStyle) -> TextLine:
    """
    Draw a single-line paragraph

    ``y`` is treated like a baseline by the layouts; the paragraph is
    positioned from its top at ``y - line_height + size * 0.2``.

    Args:
        surface: Target surface
        text: Text to draw
        x: Left edge
        y: Approximate baseline
        style: Text style (families are an ordered fallback chain)

    Returns:
        The laid-out line
    """
    line = layout_line(text, style)
    top = y - line.line_height + style.size * BASELINE_CORRECTION
    baseline = top + line.ascent

    cursor = x
    for run in line.runs:
        mask, dest = _glyph_mask(run.typeface.font, run.text, cursor, baseline)
        surface.fill_mask(mask, style.color, dest)
        cursor += run.width

    return line
