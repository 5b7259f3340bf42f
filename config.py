"""
Configuration settings for Map Thumbnail Generator
"""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Project paths
    PROJECT_ROOT: Path = Path(__file__).parent
    ASSETS_DIR: Path = PROJECT_ROOT / "assets"
    FONTS_DIR: Path = ASSETS_DIR / "fonts"
    LOGO_PATH: Path = ASSETS_DIR / "thumbnails" / "SSRB_Logo.png"
    OUTPUT_DIR: Path = PROJECT_ROOT / "output"  # Root for /images/read and /images/save paths

    # Source fetching
    FETCH_TIMEOUT: float = 30.0  # Seconds, network sources only

    # Rendering settings
    SUPERSAMPLE: int = 4  # Mask oversampling factor for anti-aliased shapes
    TEXT_SHADOW_OPACITY: float = 0.5
    ELLIPSIS: str = "…"
    BLUR_SIGMA: float = 10.0  # Backdrop blur (card + video thumbnail)
    GLOW_SIGMA: float = 20.0  # Reweight card buff/nerf glow

    # Host font fallback chain (tried in order when no embedded family matches)
    SYSTEM_FONT_FALLBACKS: list[str] = ["Segoe UI", "Arial", "Helvetica", "sans-serif"]

    # Font file names per fallback family: regular / bold / italic / bold_italic
    SYSTEM_FONT_FILES: dict = {
        "Segoe UI": {
            "regular": "segoeui.ttf",
            "bold": "segoeuib.ttf",
            "italic": "segoeuii.ttf",
            "bold_italic": "segoeuiz.ttf",
        },
        "Arial": {
            "regular": "arial.ttf",
            "bold": "arialbd.ttf",
            "italic": "ariali.ttf",
            "bold_italic": "arialbi.ttf",
        },
        "Helvetica": {
            "regular": "LiberationSans-Regular.ttf",
            "bold": "LiberationSans-Bold.ttf",
            "italic": "LiberationSans-Italic.ttf",
            "bold_italic": "LiberationSans-BoldItalic.ttf",
        },
        "sans-serif": {
            "regular": "DejaVuSans.ttf",
            "bold": "DejaVuSans-Bold.ttf",
            "italic": "DejaVuSans-Oblique.ttf",
            "bold_italic": "DejaVuSans-BoldOblique.ttf",
        },
    }

    # Paragraph family chains (first is primary, rest are per-glyph fallbacks)
    CARD_FONT_FAMILIES: list[str] = ["Torus Pro", "Segoe UI", "Arial"]
    VIDEO_FONT_FAMILIES: list[str] = ["Heebo", "Segoe UI", "Arial"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[Path] = PROJECT_ROOT / "logs" / "app.log"

    # FastAPI settings
    API_TITLE: str = "Map Thumbnail Generator API"
    API_VERSION: str = "1.0.0"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
