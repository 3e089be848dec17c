"""Uncompressed BMP and (optionally run-length encoded) TGA image writers."""

from __future__ import annotations

import os
import struct
from collections.abc import Iterator


def _validate(pixels, width: int, height: int, components: int) -> bytes:
    if components not in (1, 2, 3, 4):
        raise ValueError(f"unsupported component count: {components}")
    if width < 0 or height < 0:
        raise ValueError("image dimensions must not be negative")
    data = bytes(pixels)
    if len(data) < width * height * components:
        raise ValueError("pixel data is shorter than the image")
    return data


def _rows(data: bytes, width: int, height: int, components: int, flip: bool) -> Iterator[bytes]:
    """Yield rows bottom-up, or top-down when ``flip`` is set."""
    row_len = width * components
    order = range(height) if flip else range(height - 1, -1, -1)
    for y in order:
        yield data[y * row_len:(y + 1) * row_len]


def _pixel(d: bytes, components: int, with_alpha: bool, expand_mono: bool) -> bytes:
    """Serialise one pixel in BGR order, alpha last when requested."""
    if components in (1, 2):
        colour = bytes((d[0],) * 3) if expand_mono else bytes((d[0],))
    else:
        colour = bytes((d[2], d[1], d[0]))
    if with_alpha:
        colour += bytes((d[components - 1],))
    return colour


def _pixels_of(row: bytes, components: int) -> list[bytes]:
    return [row[i:i + components] for i in range(0, len(row), components)]


def encode_bmp(pixels, width: int, height: int, components: int, *, flip: bool = False) -> bytes:
    """Encode 8-bit pixels as a BMP file image.

    Grey input is expanded to RGB; four-component input is written as a
    32-bit bitmap with a V4 header and an alpha mask.
    """
    data = _validate(pixels, width, height, components)
    out = bytearray()
    if components != 4:
        pad = (-width * 3) & 3
        out += struct.pack("<2sIHHI", b"BM", 14 + 40 + (width * 3 + pad) * height, 0, 0, 14 + 40)
        out += struct.pack("<IIIHHIIIIII", 40, width, height, 1, 24, 0, 0, 0, 0, 0, 0)
        with_alpha = False
    else:
        pad = 0
        out += struct.pack("<2sIHHI", b"BM", 14 + 108 + width * height * 4, 0, 0, 14 + 108)
        out += struct.pack("<IIIHHIIIIII", 108, width, height, 1, 32, 3, 0, 0, 0, 0, 0)
        out += struct.pack("<IIII", 0xFF0000, 0xFF00, 0xFF, 0xFF000000)
        out += struct.pack("<I", 0)
        out += bytes(48)
        with_alpha = True

    for row in _rows(data, width, height, components, flip):
        for d in _pixels_of(row, components):
            out += _pixel(d, components, with_alpha, expand_mono=True)
        out += bytes(pad)
    return bytes(out)


def write_bmp(path: str | os.PathLike, pixels, width: int, height: int, components: int,
              *, flip: bool = False) -> None:
    """Encode pixels as BMP and write them to ``path``."""
    encoded = encode_bmp(pixels, width, height, components, flip=flip)
    with open(path, "wb") as handle:
        handle.write(encoded)


def _tga_packets(row: list[bytes]) -> Iterator[tuple[bool, list[bytes]]]:
    """Split a row into (is_raw, pixels) packets of at most 128 pixels."""
    count = len(row)
    i = 0
    while i < count:
        length = 1
        raw = True
        if i < count - 1:
            length = 2
            raw = row[i] != row[i + 1]
            if raw:
                prev = i
                for k in range(i + 2, count):
                    if length >= 128:
                        break
                    if row[prev] != row[k]:
                        prev += 1
                        length += 1
                    else:
                        length -= 1
                        break
            else:
                for k in range(i + 2, count):
                    if length >= 128 or row[i] != row[k]:
                        break
                    length += 1
        if raw:
            yield True, row[i:i + length]
        else:
            yield False, [row[i]] * length
        i += length


def encode_tga(pixels, width: int, height: int, components: int, *, rle: bool = True,
               flip: bool = False) -> bytes:
    """Encode 8-bit pixels as a TGA file image, run-length encoded by default."""
    data = _validate(pixels, width, height, components)
    has_alpha = components in (2, 4)
    colour_bytes = components - 1 if has_alpha else components
    image_type = 3 if colour_bytes < 2 else 2
    if rle:
        image_type += 8

    out = bytearray(struct.pack(
        "<BBBHHBHHHHBB",
        0, 0, image_type, 0, 0, 0, 0, 0, width, height,
        (colour_bytes + int(has_alpha)) * 8, int(has_alpha) * 8,
    ))
    for row in _rows(data, width, height, components, flip):
        pixels_in_row = _pixels_of(row, components)
        if not rle:
            for d in pixels_in_row:
                out += _pixel(d, components, has_alpha, expand_mono=False)
            continue
        for raw, packet in _tga_packets(pixels_in_row):
            if raw:
                out.append((len(packet) - 1) & 0xFF)
                for d in packet:
                    out += _pixel(d, components, has_alpha, expand_mono=False)
            else:
                out.append((len(packet) - 129) & 0xFF)
                out += _pixel(packet[0], components, has_alpha, expand_mono=False)
    return bytes(out)


def write_tga(path: str | os.PathLike, pixels, width: int, height: int, components: int,
              *, rle: bool = True, flip: bool = False) -> None:
    """Encode pixels as TGA and write them to ``path``."""
    encoded = encode_tga(pixels, width, height, components, rle=rle, flip=flip)
    with open(path, "wb") as handle:
        handle.write(encoded)