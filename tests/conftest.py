import base64
from io import BytesIO

import pytest
from PIL import Image


def make_image_bytes(size=(64, 64), color=(200, 40, 90), fmt="PNG") -> bytes:
    buffer = BytesIO()
    mode = "RGBA" if fmt == "PNG" else "RGB"
    fill = tuple(color) + ((255,) if mode == "RGBA" else ())
    Image.new(mode, size, fill).save(buffer, format=fmt)
    return buffer.getvalue()


def to_data_url(data: bytes, mime: str = "image/png") -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def decode_data_url(data_url: str) -> Image.Image:
    header, _, payload = data_url.partition(",")
    assert header == "data:image/png;base64"
    return Image.open(BytesIO(base64.b64decode(payload)))


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes((320, 180), fmt="PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image_bytes((1024, 768), color=(30, 120, 220), fmt="JPEG")


@pytest.fixture
def cover_bytes() -> bytes:
    return make_image_bytes((256, 256), color=(240, 200, 20), fmt="JPEG")


@pytest.fixture
def cover_data_url(cover_bytes) -> str:
    return to_data_url(cover_bytes, "image/jpeg")


@pytest.fixture
def background_data_url(jpeg_bytes) -> str:
    return to_data_url(jpeg_bytes, "image/jpeg")


@pytest.fixture
def map_payload(cover_data_url) -> dict:
    return {
        "id": "3f2a1",
        "metadata": {
            "songAuthorName": "Camellia",
            "songName": "Ghost",
            "songSubName": "",
            "levelAuthorName": "Someone",
            "duration": 185,
            "bpm": 200.0,
        },
        "versions": [{"coverURL": cover_data_url, "hash": "abc123"}],
    }
