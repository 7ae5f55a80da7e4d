import os
from typing import Callable, Tuple

import pytest
from PIL import Image

from maps_creator import build_registry


@pytest.fixture
def registry():
    return build_registry()


@pytest.fixture
def texture_name(tmp_path) -> str:
    return os.path.join(str(tmp_path), "tex")


@pytest.fixture
def write_source(texture_name) -> Callable[..., str]:
    # Writes "<texture_name>_<channel>.png" filled with a single colour and returns its path.

    def _write(channel: str, size: Tuple[int, int] = (2, 2), color=128, mode: str = "L") -> str:
        path = f"{texture_name}_{channel}.png"
        Image.new(mode, size, color).save(path)
        return path

    return _write


@pytest.fixture
def read_map() -> Callable[[str], Image.Image]:
    # Loads a written map as an in-memory RGBA image.

    def _read(path: str) -> Image.Image:
        with Image.open(path) as image:
            return image.convert("RGBA")

    return _read
