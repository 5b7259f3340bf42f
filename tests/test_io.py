import asyncio
import base64

import httpx
import pytest

from config import settings
from imagegen.exporter import Exporter
from imagegen.fetcher import decode_data_url, fetch_image_bytes, read_image_as_data_url
from utils.exceptions import DecodeError, FetchError, MalformedInputError
from utils.image_utils import decode_image, format_duration, load_image

from conftest import make_image_bytes, to_data_url


def test_fetch_data_url(png_bytes):
    assert asyncio.run(fetch_image_bytes(to_data_url(png_bytes))) == png_bytes


def test_fetch_local_file(tmp_path, png_bytes):
    path = tmp_path / "bg.png"
    path.write_bytes(png_bytes)

    assert asyncio.run(fetch_image_bytes(path)) == png_bytes


def test_fetch_missing_file(tmp_path):
    with pytest.raises(FetchError, match="not found"):
        asyncio.run(fetch_image_bytes(str(tmp_path / "nope.png")))


def test_fetch_http(monkeypatch, png_bytes):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/cover.png":
            return httpx.Response(200, content=png_bytes)
        return httpx.Response(404)

    transport = httpx.MockTransport(handler)
    real_client = httpx.AsyncClient

    def client_factory(**kwargs):
        return real_client(transport=transport, **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", client_factory)

    assert asyncio.run(fetch_image_bytes("https://cdn.example.com/cover.png")) == png_bytes
    with pytest.raises(FetchError, match="404"):
        asyncio.run(fetch_image_bytes("https://cdn.example.com/missing.png"))


def test_malformed_data_url():
    with pytest.raises(FetchError):
        decode_data_url("data:image/png;base64")


def test_read_image_as_data_url(tmp_path, jpeg_bytes):
    path = tmp_path / "cover.JPG"
    path.write_bytes(jpeg_bytes)

    data_url = read_image_as_data_url(path)

    assert data_url.startswith("data:image/jpeg;base64,")
    assert base64.b64decode(data_url.split(",", 1)[1]) == jpeg_bytes


def test_read_unknown_extension_defaults_to_png(tmp_path, png_bytes):
    path = tmp_path / "cover.dat"
    path.write_bytes(png_bytes)
    assert read_image_as_data_url(path).startswith("data:image/png;base64,")


def test_read_missing_image(tmp_path):
    with pytest.raises(FetchError):
        read_image_as_data_url(tmp_path / "gone.png")


@pytest.mark.parametrize("as_data_url", [True, False])
def test_exporter_saves_payload(tmp_path, png_bytes, as_data_url):
    payload = to_data_url(png_bytes) if as_data_url else base64.b64encode(png_bytes).decode("ascii")
    exporter = Exporter(output_dir=tmp_path)

    path = exporter.save(payload, "out/card.png")

    assert path == (tmp_path / "out" / "card.png").resolve()
    assert path.read_bytes() == png_bytes


def test_exporter_rejects_garbage(tmp_path):
    with pytest.raises(MalformedInputError):
        Exporter(tmp_path).save("not base64 at all!", "x.png")


def test_decode_image_variants(png_bytes, jpeg_bytes):
    assert decode_image(png_bytes).mode == "RGBA"
    assert decode_image(jpeg_bytes).size == (1024, 768)
    gray = make_image_bytes((8, 8), color=(10, 10, 10), fmt="BMP")
    assert decode_image(gray).mode == "RGBA"


@pytest.mark.parametrize("data", [b"", b"garbage bytes"])
def test_decode_image_failure(data):
    with pytest.raises(DecodeError):
        decode_image(data)


def test_load_image_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_image(tmp_path / "missing.png")


@pytest.mark.parametrize("seconds, expected", [(0, "0:00"), (59, "0:59"), (185, "3:05"), (3600, "60:00")])
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


@pytest.mark.parametrize("path", ["../../x.png", "out/../../x.png", "/etc/passwd", "", "."])
def test_exporter_confines_paths_to_output_dir(tmp_path, png_bytes, path):
    output_dir = tmp_path / "output"
    exporter = Exporter(output_dir)

    with pytest.raises(MalformedInputError):
        exporter.save(to_data_url(png_bytes), path)

    assert not (tmp_path / "x.png").exists()


def test_exporter_defaults_to_configured_output_dir(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "OUTPUT_DIR", tmp_path)

    assert Exporter().resolve_path("cards/a.png") == (tmp_path / "cards" / "a.png").resolve()
