"""
Image utility functions for decoding and formatting
"""

import cv2
import numpy as np
from io import BytesIO
from pathlib import Path
from typing import Union
from loguru import logger
from PIL import Image, UnidentifiedImageError

from utils.exceptions import DecodeError


def decode_image(data: bytes) -> Image.Image:
    """
    Decode raw image bytes into an RGBA bitmap

    Pillow is tried first; OpenCV is the fallback decoder for anything
    Pillow refuses.

    Args:
        data: Encoded image bytes (PNG, JPEG, WebP, ...)

    Returns:
        Decoded image in RGBA mode
    """
    if not data:
        raise DecodeError("empty image data")

    try:
        with Image.open(BytesIO(data)) as img:
            img.load()
            return img.convert("RGBA")
    except (UnidentifiedImageError, OSError, ValueError) as e:
        logger.debug(f"Pillow could not decode image ({e}), trying OpenCV")
        primary_error = e

    buffer = np.frombuffer(data, dtype=np.uint8)
    decoded = cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED)
    if decoded is None:
        raise DecodeError(str(primary_error))

    if decoded.ndim == 2:
        rgba = cv2.cvtColor(decoded, cv2.COLOR_GRAY2RGBA)
    elif decoded.shape[2] == 4:
        rgba = cv2.cvtColor(decoded, cv2.COLOR_BGRA2RGBA)
    else:
        rgba = cv2.cvtColor(decoded, cv2.COLOR_BGR2RGBA)

    if rgba.dtype != np.uint8:
        # 16-bit PNG/TIFF
        rgba = (rgba / 257).astype(np.uint8)

    return Image.fromarray(np.ascontiguousarray(rgba))


def load_image(image_path: Union[str, Path]) -> Image.Image:
    """
    Load and decode an image from file path

    Args:
        image_path: Path to image file

    Returns:
        Decoded image in RGBA mode
    """
    image_path = Path(image_path)
    if not image_path.exists():
        raise FileNotFoundError(f"Image not found: {image_path}")

    return decode_image(image_path.read_bytes())


def format_duration(seconds: int) -> str:
    """Format a duration in seconds as M:SS"""
    seconds = int(seconds)
    return f"{seconds // 60}:{seconds % 60:02d}"
