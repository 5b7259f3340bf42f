import base64
from io import BytesIO

import pytest
from PIL import Image

from imagegen.surface import DATA_URL_PREFIX, Surface
from utils.exceptions import SurfaceAllocationError


@pytest.mark.parametrize("size", [(0, 10), (10, 0), (-5, 5)])
def test_non_positive_size_is_rejected(size):
    with pytest.raises(SurfaceAllocationError):
        Surface(*size)


def test_new_surface_is_transparent():
    surface = Surface(20, 10)
    assert surface.size == (20, 10)
    assert surface.image.getpixel((5, 5)) == (0, 0, 0, 0)


def test_encoding_twice_is_identical():
    surface = Surface(40, 30)
    surface.fill_rounded_rect((5, 5, 30, 20), 6, (255, 0, 0, 255))

    assert surface.encode_png() == surface.encode_png()
    assert surface.to_data_url() == surface.to_data_url()


def test_data_url_round_trips_to_png():
    surface = Surface(12, 8)
    data_url = surface.to_data_url()

    assert data_url.startswith(DATA_URL_PREFIX)
    payload = base64.b64decode(data_url[len(DATA_URL_PREFIX):])
    with Image.open(BytesIO(payload)) as img:
        assert img.format == "PNG"
        assert img.size == (12, 8)


def test_fill_rect_blends_source_over():
    surface = Surface(10, 10)
    surface.fill_rect((0, 0, 10, 10), (0, 0, 255, 255))
    surface.fill_rect((0, 0, 10, 10), (255, 0, 0, 128))

    r, g, b, a = surface.image.getpixel((5, 5))
    assert a == 255
    assert r > 100 and b > 100


def test_composite_drops_overhang():
    surface = Surface(10, 10)
    layer = Image.new("RGBA", (8, 8), (0, 255, 0, 255))

    surface.composite(layer, (-4, 6))

    assert surface.image.getpixel((0, 9)) == (0, 255, 0, 255)
    assert surface.image.getpixel((5, 9))[3] == 0
    assert surface.image.getpixel((0, 5))[3] == 0


def test_clipped_drawing_stays_inside_rounded_rect():
    surface = Surface(100, 100)
    with surface.clipped((20, 20, 60, 60), 10):
        surface.fill_rect((0, 0, 100, 100), (255, 255, 255, 255))

    assert surface.image.getpixel((50, 50))[3] == 255
    assert surface.image.getpixel((10, 50))[3] == 0
    # Rounded corner
    assert surface.image.getpixel((20, 20))[3] < 128


def test_gradient_runs_corner_to_corner():
    surface = Surface(50, 50)
    surface.linear_gradient((0, 0, 0, 255), (255, 255, 255, 255))

    assert surface.image.getpixel((0, 0))[0] < 10
    assert surface.image.getpixel((49, 49))[0] > 245
    assert surface.image.getpixel((0, 49))[0] == pytest.approx(127, abs=8)


def test_blurred_rect_spreads_past_its_box():
    surface = Surface(100, 100)
    surface.fill_rounded_rect((40, 40, 20, 20), 4, (255, 0, 0, 255), blur=5)

    assert surface.image.getpixel((36, 50))[3] > 0
    assert surface.image.getpixel((50, 50))[3] > 0
