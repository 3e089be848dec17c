"""Loading, saving and converting greyscale images for the network."""

from __future__ import annotations

import os
from typing import NamedTuple

import numpy as np
from PIL import Image

from .png import write_png

_WHITE = 255
_GREY = 255 // 2


class _Raster(NamedTuple):
    """Greyscale pixel bytes, row-major, with the image size."""

    pixels: bytes
    width: int
    height: int


def load_pixels(path: str | os.PathLike) -> _Raster:
    """Read an image file as 8-bit greyscale pixels."""
    with Image.open(path) as image:
        grey = image.convert("L")
        return _Raster(grey.tobytes(), grey.width, grey.height)


def save_pixels(path: str | os.PathLike, pixels, width: int, height: int) -> None:
    """Write 8-bit greyscale pixels to ``path`` as a PNG file."""
    write_png(path, pixels, width, height, 1, width)


def _as_array(pixels) -> np.ndarray:
    return np.frombuffer(bytes(pixels), dtype=np.uint8)


def to_bipolar(pixels) -> np.ndarray:
    """Map white pixels to +1 and every other pixel to -1."""
    return np.where(_as_array(pixels) == _WHITE, 1, -1).astype(np.int64)


def to_binary(pixels) -> np.ndarray:
    """Map white pixels to 1 and every other pixel to 0."""
    return np.where(_as_array(pixels) == _WHITE, 1, 0).astype(np.int64)


def to_pixels(state) -> bytes:
    """Map a neuron state to pixels: +1 white, 0 mid-grey, anything else black."""
    values = np.asarray(state).ravel()
    shades = np.where(values == 1, _WHITE, np.where(values == 0, _GREY, 0))
    return shades.astype(np.uint8).tobytes()