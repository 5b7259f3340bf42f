"""
Typeface Module - Resolve family/weight/italic requests to concrete fonts

Resolution order:
    1. embedded family (Torus Pro, Heebo, Aller) from settings.FONTS_DIR
    2. host fonts from settings.SYSTEM_FONT_FALLBACKS
    3. Pillow's built-in default face
"""

from dataclasses import dataclass, field
from enum import IntEnum
from functools import lru_cache
from io import BytesIO
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Tuple

from fontTools.ttLib import TTFont, TTLibError
from loguru import logger
from PIL import ImageFont

from config import settings


class FontWeight(IntEnum):
    """Weight presets (CSS numeric scale)"""
    THIN = 100
    LIGHT = 300
    REGULAR = 400
    MEDIUM = 500
    SEMIBOLD = 600
    BOLD = 700
    HEAVY = 800

    @classmethod
    def from_value(cls, value: int) -> "FontWeight":
        """Bucket a raw 100-900 weight into a preset"""
        for weight in (cls.THIN, cls.LIGHT, cls.REGULAR, cls.MEDIUM, cls.SEMIBOLD, cls.BOLD):
            if value <= weight:
                return weight
        return cls.HEAVY


# family key -> {(weight, italic): asset path relative to FONTS_DIR}
EMBEDDED_FAMILIES: Dict[str, Dict[Tuple[int, bool], str]] = {
    "torus": {
        (100, False): "Torus.Pro/TorusPro-Thin.ttf",
        (300, False): "Torus.Pro/TorusPro-Light.ttf",
        (400, False): "Torus.Pro/TorusPro-Regular.ttf",
        (600, False): "Torus.Pro/TorusPro-SemiBold.ttf",
        (700, False): "Torus.Pro/TorusPro-Bold.ttf",
        (800, False): "Torus.Pro/TorusPro-Heavy.ttf",
        (100, True): "Torus.Pro/TorusPro-ThinItalic.ttf",
        (300, True): "Torus.Pro/TorusPro-LightItalic.ttf",
        (400, True): "Torus.Pro/TorusPro-Italic.ttf",
        (600, True): "Torus.Pro/TorusPro-SemiBoldItalic.ttf",
        (700, True): "Torus.Pro/TorusPro-BoldItalic.ttf",
        (800, True): "Torus.Pro/TorusPro-HeavyItalic.ttf",
    },
    "heebo": {
        (100, False): "Heebo/Heebo-Thin.ttf",
        (300, False): "Heebo/Heebo-Light.ttf",
        (400, False): "Heebo/Heebo-Regular.ttf",
        (500, False): "Heebo/Heebo-Medium.ttf",
        (600, False): "Heebo/Heebo-SemiBold.ttf",
        (700, False): "Heebo/Heebo-Bold.ttf",
        (800, False): "Heebo/Heebo-Black.ttf",
    },
    "aller": {
        (400, True): "Aller_It.ttf",
    },
}


def match_embedded_family(family_hint: str) -> Optional[str]:
    """Case-insensitive substring match against the embedded family keys"""
    name = family_hint.lower()
    for key in EMBEDDED_FAMILIES:
        if key in name:
            return key
    return None


def embedded_asset_for(family_key: str, weight: int, italic: bool) -> str:
    """
    Pick the asset for a weight/style from an embedded family

    Missing combinations fall back to the nearest lighter variant of the same
    style; if the family has no variant of the requested style at all, the
    other style is used.

    Args:
        family_key: Key of EMBEDDED_FAMILIES
        weight: Requested weight
        italic: Requested slant

    Returns:
        Asset path relative to FONTS_DIR
    """
    variants = EMBEDDED_FAMILIES[family_key]

    styled = {w: path for (w, it), path in variants.items() if it == italic}
    if not styled:
        styled = {w: path for (w, it), path in variants.items() if it != italic}

    lighter = [w for w in styled if w <= weight]
    chosen = max(lighter) if lighter else min(styled)
    return styled[chosen]


@lru_cache(maxsize=None)
def _asset_bytes(relative_path: str) -> Optional[bytes]:
    """Read an embedded font once per process; None if not installed"""
    path = settings.FONTS_DIR / relative_path
    if not path.exists():
        logger.warning(f"Embedded font not found: {path}")
        return None
    return path.read_bytes()


@lru_cache(maxsize=None)
def _cmap_for(source: str) -> FrozenSet[int]:
    """Code points covered by a font file (embedded key or filesystem path)"""
    if Path(source).is_absolute():
        data = Path(source).read_bytes()
    else:
        data = _asset_bytes(source)
    if data is None:
        return frozenset()
    try:
        font = TTFont(BytesIO(data), lazy=True, fontNumber=0)
        cmap = font.getBestCmap() or {}
    except (TTLibError, KeyError, OSError) as e:
        logger.warning(f"Could not read cmap from {source}: {e}")
        return frozenset()
    return frozenset(cmap)


@dataclass
class Typeface:
    """A usable font plus where it came from"""
    font: ImageFont.FreeTypeFont
    origin: str  # 'embedded', 'system' or 'default'
    source: str = ""
    size: float = 0.0
    _coverage: Optional[FrozenSet[int]] = field(default=None, repr=False)

    def covers(self, char: str) -> bool:
        """Whether the face has a glyph for ``char``"""
        if self.origin == "default":
            return True
        if self._coverage is None:
            self._coverage = _cmap_for(self.source)
        return ord(char) in self._coverage


def _load_embedded(family_hint: str, size: float, weight: int, italic: bool) -> Optional[Typeface]:
    family_key = match_embedded_family(family_hint)
    if family_key is None:
        return None

    asset = embedded_asset_for(family_key, weight, italic)
    data = _asset_bytes(asset)
    if data is None:
        return None

    font = ImageFont.truetype(BytesIO(data), size)
    return Typeface(font=font, origin="embedded", source=asset, size=size)


def _system_style(weight: int, italic: bool) -> str:
    bold = weight >= FontWeight.SEMIBOLD
    if bold and italic:
        return "bold_italic"
    if bold:
        return "bold"
    return "italic" if italic else "regular"


@lru_cache(maxsize=None)
def _system_font_path(filename: str) -> Optional[str]:
    """Absolute path of a host font file, None if not installed"""
    # Pillow resolves bare file names against the platform font dirs
    try:
        font = ImageFont.truetype(filename, 12)
    except OSError:
        return None
    if not isinstance(font.path, str):
        return None
    return str(Path(font.path).resolve())


def _system_families(family_hint: str) -> List[str]:
    """Host fallback order, led by the hinted family when the font table knows it"""
    wanted = family_hint.strip().lower()
    hinted = [name for name in settings.SYSTEM_FONT_FILES if name.lower() == wanted]
    return hinted + [name for name in settings.SYSTEM_FONT_FALLBACKS if name not in hinted]


def _load_system(family_hint: str, size: float, weight: int, italic: bool) -> Optional[Typeface]:
    style = _system_style(weight, italic)

    for family in _system_families(family_hint):
        files = settings.SYSTEM_FONT_FILES.get(family, {})
        filename = files.get(style) or files.get("regular")
        if not filename:
            continue

        path = _system_font_path(filename)
        if path is None:
            continue

        logger.debug(f"Using system font {family} ({style}) from {path}")
        font = ImageFont.truetype(path, size)
        return Typeface(font=font, origin="system", source=path, size=size)

    return None


def resolve_typeface(
    family_hint: str,
    size: float,
    weight: int = FontWeight.REGULAR,
    italic: bool = False,
) -> Typeface:
    """
    Resolve a logical font request to a concrete face

    Never fails: the cascade ends in Pillow's built-in default face.

    Args:
        family_hint: Logical family name (e.g. "Torus Pro")
        size: Font size in pixels
        weight: Numeric weight (100-900)
        italic: Italic/oblique slant

    Returns:
        Typeface ready for drawing and measuring
    """
    weight = FontWeight.from_value(int(weight))

    typeface = _load_embedded(family_hint, size, weight, italic)
    if typeface is not None:
        return typeface

    typeface = _load_system(family_hint, size, weight, italic)
    if typeface is not None:
        return typeface

    logger.warning(f"No font found for '{family_hint}', using default")
    return Typeface(font=ImageFont.load_default(size), origin="default", size=size)
