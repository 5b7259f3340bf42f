"""
Fetcher Module - Obtain raw image bytes from URLs, data URLs and local files
"""

import base64
import binascii
from pathlib import Path
from typing import Union

import httpx
from loguru import logger

from config import settings
from utils.exceptions import FetchError

MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
}


def decode_data_url(data_url: str) -> bytes:
    """
    Decode the payload of a ``data:<mime>;base64,<payload>`` URL

    Args:
        data_url: Data URL string

    Returns:
        Decoded bytes
    """
    header, sep, payload = data_url.partition(",")
    if not sep:
        raise FetchError(data_url, "Invalid data URL format")
    try:
        return base64.b64decode(payload, validate=False)
    except (binascii.Error, ValueError) as e:
        raise FetchError(data_url, f"Failed to decode base64: {e}") from e


async def fetch_image_bytes(source: Union[str, Path]) -> bytes:
    """
    Resolve an image source to raw bytes

    Accepts an http(s) URL, a data URL, or a local file path.

    Args:
        source: Image location

    Returns:
        Raw (still encoded) image bytes
    """
    source = str(source)

    if source.startswith("data:"):
        return decode_data_url(source)

    if source.startswith(("http://", "https://")):
        logger.debug(f"Fetching image: {source}")
        try:
            async with httpx.AsyncClient(
                timeout=settings.FETCH_TIMEOUT,
                follow_redirects=True,
            ) as client:
                response = await client.get(source)
                response.raise_for_status()
                return response.content
        except httpx.TimeoutException as e:
            raise FetchError(source, "request timed out") from e
        except httpx.HTTPError as e:
            raise FetchError(source, str(e)) from e

    path = Path(source)
    if not path.is_file():
        raise FetchError(source, "local file not found")
    try:
        return path.read_bytes()
    except OSError as e:
        raise FetchError(source, f"Failed to read local file: {e}") from e


def read_image_as_data_url(image_path: Union[str, Path]) -> str:
    """
    Read an image file from disk as a data URL

    The MIME type comes from the extension (PNG when unknown).

    Args:
        image_path: Path to image file

    Returns:
        ``data:<mime>;base64,<payload>``
    """
    path = Path(image_path)
    if not path.exists():
        raise FetchError(str(image_path), "Image file not found")

    try:
        data = path.read_bytes()
    except OSError as e:
        raise FetchError(str(image_path), f"Failed to read image file: {e}") from e

    mime_type = MIME_TYPES.get(path.suffix.lower(), "image/png")
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"
