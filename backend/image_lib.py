""" Image processing backend. Currently implemented using Pillow (PIL) and NumPy. PIL exports 8bit images only."""



#                                           === Backend ===

from typing import Any, Tuple, TypeAlias

import numpy as np
from numpy.typing import NDArray

from PIL import Image as _PIL
from PIL.Image import Image as PILImage
from PIL import Image as PILImageModule

from backend.texture_classes import CHANNEL_COUNT

ImageObject: TypeAlias = PILImage


def close_image(image: object) -> None:
    close = getattr(image, "close", None)
    if callable(close):
        close()


def from_array_u8(data: Any) -> ImageObject:
# Creates an image from a uint8 numpy array; HxW gives "L", HxWx4 gives "RGBA".
    return PILImageModule.fromarray(np.ascontiguousarray(data, dtype=np.uint8))


def open_image(path: str) -> ImageObject:
    return _PIL.open(path)


def save_image(image: Any, path: str) -> None:
    image.save(path)




#                                           === Raster ===


class Raster:
    """8bit RGBA pixel buffer addressed as (x, y, channel).

    Backed by a (height, width, CHANNEL_COUNT) uint8 array, so the flat offset of a value is
    (y * width + x) * CHANNEL_COUNT + channel. All accessors are bounds-checked.
    """

    def __init__(self, pixels: NDArray[np.uint8]) -> None:
        if pixels.ndim != 3 or pixels.shape[2] != CHANNEL_COUNT:
            raise ValueError(f"Expected a HxWx{CHANNEL_COUNT} array, got shape {pixels.shape}")
        if pixels.dtype != np.uint8:
            raise ValueError(f"Expected uint8 pixels, got {pixels.dtype}")
        self._pixels = pixels

    @classmethod
    def new(cls, width: int, height: int) -> "Raster":
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid raster size {width}x{height}")
        return cls(np.zeros((height, width, CHANNEL_COUNT), dtype=np.uint8))

    @classmethod
    def from_image(cls, image: ImageObject) -> "Raster":
    # Normalizes any Pillow image to 8bit RGBA; grayscale sources end up in R, G and B with an opaque alpha.
        return cls(np.array(convert_to_rgba(image), dtype=np.uint8))

    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def _check_channel(self, channel: int) -> int:
        channel = int(channel)
        if not 0 <= channel < CHANNEL_COUNT:
            raise IndexError(f"Channel {channel} out of range 0..{CHANNEL_COUNT - 1}")
        return channel

    def get_channel(self, channel: int) -> NDArray[np.uint8]:
    # Returns a HxW copy of one channel.
        return self._pixels[:, :, self._check_channel(channel)].copy()

    def set_channel(self, channel: int, values: NDArray[np.uint8]) -> None:
        channel = self._check_channel(channel)
        if values.shape != (self.height, self.width):
            raise ValueError(f"Channel data {values.shape} does not match raster {self.height}x{self.width} (HxW)")
        self._pixels[:, :, channel] = values

    def fill_channel(self, channel: int, value: int) -> None:
        if not 0 <= value <= 255:
            raise ValueError(f"Value {value} is not an 8bit value")
        self._pixels[:, :, self._check_channel(channel)] = value

    def copy_channel(self, source: "Raster", source_channel: int, channel: int) -> None:
        if source.size != self.size:
            raise ValueError(f"Source raster {source.width}x{source.height} does not match {self.width}x{self.height}")
        self.set_channel(channel, source.get_channel(source_channel))

    def get_pixel(self, x: int, y: int, channel: int) -> int:
        self._check_position(x, y)
        return int(self._pixels[y, x, self._check_channel(channel)])

    def set_pixel(self, x: int, y: int, channel: int, value: int) -> None:
        self._check_position(x, y)
        if not 0 <= value <= 255:
            raise ValueError(f"Value {value} is not an 8bit value")
        self._pixels[y, x, self._check_channel(channel)] = value

    def _check_position(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} raster")

    def to_image(self) -> ImageObject:
        return from_array_u8(self._pixels)




#                                           === Utils ===



def convert_to_rgba(image: ImageObject) -> ImageObject:
# Converts an image to 8-bit RGBA, scaling 16bit grayscale down instead of clipping it.
    mode = image.mode
    if mode == "RGBA":
        return image
    if mode in ("I", "I;16", "I;16L", "I;16B"):
        return _16_to_8bit(image).convert("RGBA")
    return image.convert("RGBA")


def _16_to_8bit(image: ImageObject) -> ImageObject:
# Scales down 16bit range to a 8bit, so values are properly maintained instead of being clipped.

    if image.mode not in ("I", "I;16", "I;16L", "I;16B"):
        return image.convert("L")
    # If the image is just 8bit grayscale, passes it though.

    data16: NDArray[np.int64] = np.clip(np.asarray(image).astype(np.int64), 0, 0xFFFF)
    # "I" is 32bit signed, "I;16*" are 16bit unsigned in either byte order.

# Scaling:
    return from_array_u8((data16 >> 8).astype(np.uint8))
