"""PNG encoding with per-row filter selection."""

from __future__ import annotations

import os
import struct

from .deflate import crc32, zlib_compress

_SIGNATURE = bytes((137, 80, 78, 71, 13, 10, 26, 10))
_COLOUR_TYPES = {1: 0, 2: 4, 3: 2, 4: 6}
# On the first row, filters that look upward are replaced by their
# zero-row equivalents.
_FIRST_ROW_MODES = (0, 1, 0, 5, 6)


def paeth(a: int, b: int, c: int) -> int:
    """Return the Paeth predictor of left ``a``, above ``b`` and upper-left ``c``."""
    p = a + b - c
    pa, pb, pc = abs(p - a), abs(p - b), abs(p - c)
    if pa <= pb and pa <= pc:
        return a & 0xFF
    if pb <= pc:
        return b & 0xFF
    return c & 0xFF


def _filter_row(row: bytes, prev: bytes, n: int, mode: int) -> bytes:
    if mode == 0:
        return bytes(row)
    size = len(row)
    left = bytes(n) + row[:size - n]
    up_left = bytes(n) + prev[:size - n]
    if mode == 1:
        predicted = left
    elif mode == 2:
        predicted = prev
    elif mode == 3:
        predicted = [(lv + uv) >> 1 for lv, uv in zip(left, prev)]
    elif mode == 4:
        predicted = [paeth(lv, uv, cv) for lv, uv, cv in zip(left, prev, up_left)]
    elif mode == 5:
        predicted = [lv >> 1 for lv in left]
    else:
        predicted = [paeth(lv, 0, 0) for lv in left]
    return bytes((value - guess) & 0xFF for value, guess in zip(row, predicted))


def _cost(filtered: bytes) -> int:
    return sum(v if v < 128 else 256 - v for v in filtered)


def _chunk(tag: bytes, payload: bytes) -> bytes:
    body = tag + payload
    return struct.pack(">I", len(payload)) + body + struct.pack(">I", crc32(body))


def encode_png(
    pixels,
    width: int,
    height: int,
    components: int,
    stride: int = 0,
    *,
    flip: bool = False,
    force_filter: int = -1,
    compression_level: int = 8,
) -> bytes:
    """Encode 8-bit interleaved pixels as a PNG file image.

    ``components`` is 1 (grey), 2 (grey+alpha), 3 (RGB) or 4 (RGBA).
    ``stride`` of 0 means rows are packed. A ``force_filter`` of 0..4 fixes
    the filter; otherwise the cheapest filter is chosen per row.
    """
    if components not in _COLOUR_TYPES:
        raise ValueError(f"unsupported component count: {components}")
    if width < 0 or height < 0:
        raise ValueError("image dimensions must not be negative")
    pixels = bytes(pixels)
    row_len = width * components
    if stride == 0:
        stride = row_len
    if height and len(pixels) < stride * (height - 1) + row_len:
        raise ValueError("pixel data is shorter than the image")
    if force_filter >= 5:
        force_filter = -1

    def row_at(y: int) -> bytes:
        start = stride * (height - 1 - y if flip else y)
        return pixels[start:start + row_len]

    filtered = bytearray()
    prev = bytes(row_len)
    for y in range(height):
        row = row_at(y)
        modes = _FIRST_ROW_MODES if y == 0 else range(5)
        if force_filter > -1:
            chosen = force_filter
            line = _filter_row(row, prev, components, modes[chosen])
        else:
            candidates = [_filter_row(row, prev, components, modes[f]) for f in range(5)]
            chosen = min(range(5), key=lambda f: _cost(candidates[f]))
            line = candidates[chosen]
        filtered.append(chosen)
        filtered += line
        prev = row

    compressed = zlib_compress(bytes(filtered), compression_level)
    header = struct.pack(">IIBBBBB", width, height, 8, _COLOUR_TYPES[components], 0, 0, 0)
    return (
        _SIGNATURE
        + _chunk(b"IHDR", header)
        + _chunk(b"IDAT", compressed)
        + _chunk(b"IEND", b"")
    )


def write_png(
    path: str | os.PathLike,
    pixels,
    width: int,
    height: int,
    components: int,
    stride: int = 0,
    *,
    flip: bool = False,
    force_filter: int = -1,
    compression_level: int = 8,
) -> None:
    """Encode pixels as PNG and write them to ``path``."""
    data = encode_png(
        pixels,
        width,
        height,
        components,
        stride,
        flip=flip,
        force_filter=force_filter,
        compression_level=compression_level,
    )
    with open(path, "wb") as handle:
        handle.write(data)