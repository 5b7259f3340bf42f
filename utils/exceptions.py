"""
Custom exceptions for Map Thumbnail Generator
"""


class ThumbnailError(Exception):
    """
    Base class for every failure raised while generating an image.

    The message is the whole user-facing failure channel: callers only
    ever see ``str(error)``.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class FetchError(ThumbnailError):
    """Raised when the source bytes of an image cannot be obtained."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to fetch image from {_shorten(source)}: {reason}")


class DecodeError(ThumbnailError):
    """Raised when neither the primary nor the fallback decoder can read the bytes."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Failed to decode image: {reason}")


class MissingCoverError(ThumbnailError):
    """Raised when a map has no version entry to take the cover from."""

    def __init__(self, map_id: str = ""):
        self.map_id = map_id
        label = f" for map {map_id}" if map_id else ""
        super().__init__(f"No cover URL available{label}")


class SurfaceAllocationError(ThumbnailError):
    """Raised when the raster surface cannot be allocated."""

    def __init__(self, width: int, height: int, reason: str = None):
        self.width = width
        self.height = height
        message = f"Failed to create surface ({width}x{height})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class EncodingError(ThumbnailError):
    """Raised when the finished surface cannot be encoded to PNG."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Failed to encode image to PNG: {reason}")


class MalformedInputError(ThumbnailError):
    """Raised when structured input (map info, ratings, payloads, paths) fails validation."""


def _shorten(source: str, limit: int = 80) -> str:
    # data URLs can be megabytes long
    if len(source) <= limit:
        return source
    return source[:limit] + "..."
