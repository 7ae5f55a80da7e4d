import numpy as np
import pytest
from PIL import Image

from backend.image_lib import Raster, convert_to_rgba
from backend.texture_classes import CHANNEL_COUNT, ChannelIndex


def test_new_raster_is_zeroed():
    raster = Raster.new(3, 2)

    assert raster.size == (3, 2)
    for channel in range(CHANNEL_COUNT):
        assert not raster.get_channel(channel).any()


def test_invalid_raster_size():
    with pytest.raises(ValueError):
        Raster.new(0, 4)


def test_rejects_wrong_shape():
    with pytest.raises(ValueError):
        Raster(np.zeros((2, 2, 3), dtype=np.uint8))


def test_set_and_get_pixel():
    raster = Raster.new(4, 3)
    raster.set_pixel(3, 2, ChannelIndex.B, 200)

    assert raster.get_pixel(3, 2, ChannelIndex.B) == 200
    assert raster.get_pixel(3, 2, ChannelIndex.R) == 0


@pytest.mark.parametrize("x, y", [(4, 0), (0, 3), (-1, 0)])
def test_pixel_bounds_checked(x, y):
    with pytest.raises(IndexError):
        Raster.new(4, 3).get_pixel(x, y, ChannelIndex.R)


def test_channel_bounds_checked():
    raster = Raster.new(2, 2)
    with pytest.raises(IndexError):
        raster.fill_channel(CHANNEL_COUNT, 1)


def test_fill_channel_rejects_non_8bit():
    with pytest.raises(ValueError):
        Raster.new(2, 2).fill_channel(ChannelIndex.A, 256)


def test_copy_channel_between_slots():
    source = Raster.new(2, 2)
    source.set_pixel(1, 0, ChannelIndex.R, 42)
    target = Raster.new(2, 2)
    target.copy_channel(source, ChannelIndex.R, ChannelIndex.A)

    assert target.get_pixel(1, 0, ChannelIndex.A) == 42
    assert target.get_pixel(1, 0, ChannelIndex.R) == 0


def test_copy_channel_size_mismatch():
    with pytest.raises(ValueError):
        Raster.new(2, 2).copy_channel(Raster.new(4, 4), ChannelIndex.R, ChannelIndex.R)


def test_get_channel_returns_copy():
    raster = Raster.new(2, 2)
    channel = raster.get_channel(ChannelIndex.G)
    channel[:] = 9

    assert raster.get_pixel(0, 0, ChannelIndex.G) == 0


def test_grayscale_source_is_normalized():
    raster = Raster.from_image(Image.new("L", (3, 2), 77))

    assert raster.size == (3, 2)
    assert raster.get_pixel(2, 1, ChannelIndex.R) == 77
    assert raster.get_pixel(2, 1, ChannelIndex.G) == 77
    assert raster.get_pixel(2, 1, ChannelIndex.B) == 77
    assert raster.get_pixel(2, 1, ChannelIndex.A) == 255


def test_rgb_source_gets_opaque_alpha():
    image = convert_to_rgba(Image.new("RGB", (1, 1), (1, 2, 3)))
    assert image.mode == "RGBA"
    assert image.getpixel((0, 0)) == (1, 2, 3, 255)


def test_to_image_round_trip():
    raster = Raster.new(2, 1)
    raster.set_pixel(0, 0, ChannelIndex.A, 10)
    image = raster.to_image()

    assert image.mode == "RGBA"
    assert image.size == (2, 1)
    assert image.getpixel((0, 0)) == (0, 0, 0, 10)


@pytest.mark.parametrize("mode, value, expected", [
    ("I;16", 0x8000, 128),
    ("I;16", 0xFFFF, 255),
    ("I", 0x00FF, 0),
    ("I", 0x4000, 64),
])
def test_16bit_grayscale_is_scaled(mode, value, expected):
    raster = Raster.from_image(Image.new(mode, (3, 2), value))

    assert raster.size == (3, 2)
    for channel in (ChannelIndex.R, ChannelIndex.G, ChannelIndex.B):
        assert raster.get_pixel(2, 1, channel) == expected
    assert raster.get_pixel(2, 1, ChannelIndex.A) == 255
