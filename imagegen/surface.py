"""
Surface Module - Raster target for one generator call, encoded to a PNG data URL
"""

import base64
import math
from contextlib import contextmanager
from io import BytesIO
from typing import Callable, Iterator, Optional, Sequence, Tuple

import numpy as np
from loguru import logger
from PIL import Image, ImageChops, ImageDraw, ImageFilter

from config import settings
from utils.exceptions import EncodingError, SurfaceAllocationError
from utils.geometry import CropRect

Color = Tuple[int, ...]
Box = Tuple[float, float, float, float]  # x, y, w, h

DATA_URL_PREFIX = "data:image/png;base64,"


def shape_mask(
    size: Tuple[int, int],
    draw_fn: Callable[[ImageDraw.ImageDraw, int], None],
    scale: int = None,
) -> Image.Image:
    """
    Render an anti-aliased coverage mask

    The shape is drawn at ``scale`` times the target size and downsampled,
    which smooths the hard edges ImageDraw produces.

    Args:
        size: Mask size (width, height)
        draw_fn: Callback receiving the oversized ImageDraw and the scale factor
        scale: Oversampling factor (default: settings.SUPERSAMPLE)

    Returns:
        'L' mode mask of the requested size
    """
    scale = max(1, scale or settings.SUPERSAMPLE)
    w, h = max(1, size[0]), max(1, size[1])
    big = Image.new("L", (w * scale, h * scale), 0)
    draw_fn(ImageDraw.Draw(big), scale)
    if scale == 1:
        return big
    return big.resize((w, h), Image.LANCZOS)


def rounded_rect_mask(size: Tuple[int, int], radius: float) -> Image.Image:
    """Anti-aliased rounded rectangle filling the whole mask"""
    def _draw(draw: ImageDraw.ImageDraw, scale: int) -> None:
        draw.rounded_rectangle(
            (0, 0, size[0] * scale - 1, size[1] * scale - 1),
            radius=radius * scale,
            fill=255,
        )

    return shape_mask(size, _draw)


def _outer_box(box: Box, pad: float = 0.0) -> Tuple[int, int, int, int]:
    """Integer pixel box (left, top, width, height) enclosing a float box"""
    x, y, w, h = box
    left = math.floor(x - pad)
    top = math.floor(y - pad)
    right = math.ceil(x + w + pad)
    bottom = math.ceil(y + h + pad)
    return left, top, max(1, right - left), max(1, bottom - top)


class Surface:
    """
    Mutable RGBA raster of fixed size

    All draw calls blend onto the surface in call order (source-over).
    The surface is owned by a single generator call and discarded after
    ``to_data_url``.
    """

    def __init__(self, width: int, height: int):
        """
        Allocate a transparent surface

        Args:
            width: Width in pixels
            height: Height in pixels
        """
        if width <= 0 or height <= 0:
            raise SurfaceAllocationError(width, height, "dimensions must be positive")

        try:
            self.image = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        except (MemoryError, ValueError) as e:
            raise SurfaceAllocationError(width, height, str(e)) from e

        self.width = width
        self.height = height

        logger.debug(f"Surface allocated ({width}x{height})")

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    # ------------------------------------------------------------------
    # Compositing
    # ------------------------------------------------------------------

    def composite(self, layer: Image.Image, dest: Tuple[int, int] = (0, 0)) -> None:
        """
        Blend an RGBA layer onto the surface at an integer offset

        Layers may extend past any edge; the overhang is dropped.
        """
        x, y = int(dest[0]), int(dest[1])
        if layer.mode != "RGBA":
            layer = layer.convert("RGBA")

        left, top = max(0, -x), max(0, -y)
        right = min(layer.width, self.width - x)
        bottom = min(layer.height, self.height - y)
        if right <= left or bottom <= top:
            return

        if (left, top, right, bottom) != (0, 0, layer.width, layer.height):
            layer = layer.crop((left, top, right, bottom))

        self.image.alpha_composite(layer, dest=(x + left, y + top))

    def fill_mask(self, mask: Image.Image, color: Color, dest: Tuple[int, int] = (0, 0)) -> None:
        """Paint a solid color through a coverage mask"""
        r, g, b = color[:3]
        a = color[3] if len(color) > 3 else 255

        if a < 255:
            mask = mask.point(lambda v: v * a // 255)

        layer = Image.new("RGBA", mask.size, (r, g, b, 0))
        layer.putalpha(mask)
        self.composite(layer, dest)

    @contextmanager
    def clipped(self, box: Box, radius: float) -> Iterator["Surface"]:
        """
        Clip every draw inside the block to a rounded rectangle

        Usage:
            with surface.clipped((20, 20, 260, 260), 10):
                surface.draw_image(cover, (20, 20, 260, 260))
        """
        saved = self.image
        self.image = Image.new("RGBA", saved.size, (0, 0, 0, 0))
        try:
            yield self
            layer = self.image
        finally:
            self.image = saved

        left, top, w, h = _outer_box(box)
        mask = Image.new("L", self.size, 0)
        local = rounded_rect_mask((w, h), radius)
        mask.paste(local, (left, top))

        layer.putalpha(ImageChops.darker(layer.getchannel("A"), mask))
        self.image.alpha_composite(layer)

    # ------------------------------------------------------------------
    # Shapes
    # ------------------------------------------------------------------

    def fill_rect(self, box: Box, color: Color) -> None:
        self.fill_rounded_rect(box, 0, color)

    def fill_rounded_rect(self, box: Box, radius: float, color: Color, blur: float = 0.0) -> None:
        """
        Fill a rounded rectangle

        Args:
            box: (x, y, w, h)
            radius: Corner radius (0 for square corners)
            color: RGBA fill
            blur: Optional Gaussian blur sigma applied to the shape
        """
        pad = math.ceil(blur * 3)
        left, top, w, h = _outer_box(box, pad)
        x, y, bw, bh = box

        def _draw(draw: ImageDraw.ImageDraw, scale: int) -> None:
            shape = (
                (x - left) * scale,
                (y - top) * scale,
                (x - left + bw) * scale - 1,
                (y - top + bh) * scale - 1,
            )
            if radius > 0:
                draw.rounded_rectangle(shape, radius=radius * scale, fill=255)
            else:
                draw.rectangle(shape, fill=255)

        mask = shape_mask((w, h), _draw)
        if blur > 0:
            mask = mask.filter(ImageFilter.GaussianBlur(blur))

        self.fill_mask(mask, color, (left, top))

    def stroke_rounded_rect(self, box: Box, radius: float, color: Color, width: float) -> None:
        """Outline a rounded rectangle; the stroke is centered on the edge"""
        half = width / 2
        x, y, bw, bh = box
        outer = (x - half, y - half, bw + width, bh + width)
        left, top, w, h = _outer_box(outer)

        def _draw(draw: ImageDraw.ImageDraw, scale: int) -> None:
            draw.rounded_rectangle(
                (
                    (outer[0] - left) * scale,
                    (outer[1] - top) * scale,
                    (outer[0] - left + outer[2]) * scale - 1,
                    (outer[1] - top + outer[3]) * scale - 1,
                ),
                radius=(radius + half) * scale,
                outline=255,
                width=max(1, round(width * scale)),
            )

        self.fill_mask(shape_mask((w, h), _draw), color, (left, top))

    def fill_circle(self, center: Tuple[float, float], radius: float, color: Color) -> None:
        cx, cy = center
        left, top, w, h = _outer_box((cx - radius, cy - radius, radius * 2, radius * 2), 1)

        def _draw(draw: ImageDraw.ImageDraw, scale: int) -> None:
            draw.ellipse(
                (
                    (cx - radius - left) * scale,
                    (cy - radius - top) * scale,
                    (cx + radius - left) * scale,
                    (cy + radius - top) * scale,
                ),
                fill=255,
            )

        self.fill_mask(shape_mask((w, h), _draw), color, (left, top))

    def fill_polygon(self, points: Sequence[Tuple[float, float]], color: Color) -> None:
        """Fill a closed polygon (anti-aliased)"""
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        left, top, w, h = _outer_box(
            (min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys)), 1
        )

        def _draw(draw: ImageDraw.ImageDraw, scale: int) -> None:
            draw.polygon(
                [((px - left) * scale, (py - top) * scale) for px, py in points],
                fill=255,
            )

        self.fill_mask(shape_mask((w, h), _draw), color, (left, top))

    def linear_gradient(self, start: Color, end: Color) -> None:
        """
        Fill the whole surface with a two-stop gradient running
        from the top-left corner to the bottom-right corner
        """
        w, h = self.size
        ys, xs = np.mgrid[0:h, 0:w].astype(np.float32)
        # Projection of each pixel onto the (0,0)->(w,h) diagonal
        t = (xs * w + ys * h) / float(w * w + h * h)
        t = np.clip(t, 0.0, 1.0)[..., None]

        c0 = np.array(start, dtype=np.float32)
        c1 = np.array(end, dtype=np.float32)
        if c0.shape[0] == 3:
            c0 = np.append(c0, 255.0)
        if c1.shape[0] == 3:
            c1 = np.append(c1, 255.0)

        pixels = (c0 + (c1 - c0) * t + 0.5).astype(np.uint8)
        self.composite(Image.fromarray(pixels))

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def draw_image(
        self,
        image: Image.Image,
        dst: Box,
        src: Optional[CropRect] = None,
        blur: float = 0.0,
    ) -> None:
        """
        Draw (a region of) an image scaled into a destination box

        Args:
            image: Source bitmap
            dst: Destination (x, y, w, h) on the surface
            src: Source crop rectangle (default: whole image)
            blur: Optional Gaussian blur sigma applied after scaling
        """
        x, y, w, h = dst
        out_w, out_h = max(1, round(w)), max(1, round(h))
        source_box = src.as_box() if src is not None else None

        scaled = image.convert("RGBA").resize((out_w, out_h), Image.LANCZOS, box=source_box)
        if blur > 0:
            scaled = scaled.filter(ImageFilter.GaussianBlur(blur))

        self.composite(scaled, (round(x), round(y)))

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    def encode_png(self) -> bytes:
        """Snapshot the pixel buffer and encode it losslessly"""
        buffer = BytesIO()
        try:
            self.image.copy().save(buffer, format="PNG")
        except (OSError, ValueError) as e:
            raise EncodingError(str(e)) from e
        return buffer.getvalue()

    def to_data_url(self) -> str:
        """Encode as ``data:image/png;base64,<payload>``"""
        png = self.encode_png()
        logger.debug(f"Encoded {self.width}x{self.height} surface ({len(png)} bytes)")
        return DATA_URL_PREFIX + base64.b64encode(png).decode("ascii")
