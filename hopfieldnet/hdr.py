"""Radiance RGBE (.hdr) image writer with per-component run-length encoding."""

from __future__ import annotations

import math
import os

import numpy as np

_HEADER = b"#?RADIANCE\n# Written by hopfieldnet\nFORMAT=32-bit_rle_rgbe\n"


def linear_to_rgbe(red: float, green: float, blue: float) -> tuple[int, int, int, int]:
    """Convert a linear colour to shared-exponent RGBE bytes."""
    r, g, b = np.float32(red), np.float32(green), np.float32(blue)
    maxcomp = max(r, max(g, b))
    if maxcomp < np.float32(1e-32):
        return (0, 0, 0, 0)
    mantissa, exponent = math.frexp(float(maxcomp))
    with np.errstate(over="ignore"):
        normalize = np.float32(mantissa) * np.float32(256.0) / maxcomp
        channels = tuple(int(c * normalize) & 0xFF for c in (r, g, b))
    return channels + ((exponent + 128) & 0xFF,)


def _encode_rle(values: bytes) -> bytearray:
    out = bytearray()
    width = len(values)
    x = 0
    while x < width:
        r = x
        while r + 2 < width:
            if values[r] == values[r + 1] == values[r + 2]:
                break
            r += 1
        if r + 2 >= width:
            r = width
        while x < r:
            length = min(r - x, 128)
            out.append(length)
            out += values[x:x + length]
            x += length
        if r + 2 < width:
            while r < width and values[r] == values[x]:
                r += 1
            while x < r:
                length = min(r - x, 127)
                out += bytes((length + 128, values[x]))
                x += length
    return out


def _scanline(row: list[float], width: int, components: int) -> bytes:
    pixels = []
    for x in range(width):
        base = x * components
        if components >= 3:
            colour = row[base:base + 3]
        else:
            colour = [row[base]] * 3
        pixels.append(linear_to_rgbe(*colour))

    if width < 8 or width >= 32768:
        return b"".join(bytes(p) for p in pixels)

    out = bytearray((2, 2, (width >> 8) & 0xFF, width & 0xFF))
    for channel in range(4):
        out += _encode_rle(bytes(p[channel] for p in pixels))
    return bytes(out)


def encode_hdr(data, width: int, height: int, components: int, *, flip: bool = False) -> bytes:
    """Encode linear float pixels as a Radiance HDR file image.

    Alpha is discarded and grey input is replicated across all channels.
    """
    if data is None or width <= 0 or height <= 0:
        raise ValueError("image must have positive dimensions and data")
    if components not in (1, 2, 3, 4):
        raise ValueError(f"unsupported component count: {components}")
    values = [float(v) for v in data]
    row_len = width * components
    if len(values) < row_len * height:
        raise ValueError("pixel data is shorter than the image")

    out = bytearray(_HEADER)
    out += f"EXPOSURE=          1.0000000000000\n\n-Y {height} +X {width}\n".encode("ascii")
    for i in range(height):
        y = height - 1 - i if flip else i
        out += _scanline(values[y * row_len:(y + 1) * row_len], width, components)
    return bytes(out)


def write_hdr(path: str | os.PathLike, data, width: int, height: int, components: int,
              *, flip: bool = False) -> None:
    """Encode float pixels as HDR and write them to ``path``."""
    encoded = encode_hdr(data, width, height, components, flip=flip)
    with open(path, "wb") as handle:
        handle.write(encoded)