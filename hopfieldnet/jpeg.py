"""Baseline JPEG encoder with optional 2x2 chroma subsampling."""

from __future__ import annotations

import os

import numpy as np

from .jpeg_tables import (
    AC_CHROMINANCE_COUNTS,
    AC_CHROMINANCE_VALUES,
    AC_LUMINANCE_COUNTS,
    AC_LUMINANCE_VALUES,
    DC_CHROMINANCE_COUNTS,
    DC_CHROMINANCE_VALUES,
    DC_LUMINANCE_COUNTS,
    DC_LUMINANCE_VALUES,
    UVAC_HT,
    UVDC_HT,
    YAC_HT,
    YDC_HT,
    ZIGZAG,
    build_quant_tables,
)

_F = np.float32
_ZIGZAG_INDEX = np.array(ZIGZAG)

_HEAD0 = bytes((
    0xFF, 0xD8, 0xFF, 0xE0, 0, 0x10, ord("J"), ord("F"), ord("I"), ord("F"), 0,
    1, 1, 0, 0, 1, 0, 1, 0, 0, 0xFF, 0xDB, 0, 0x84, 0,
))
_HEAD2 = bytes((0xFF, 0xDA, 0, 0x0C, 3, 1, 0, 2, 0x11, 3, 0x11, 0, 0x3F, 0))
_FILL_BITS = (0x7F, 7)


def fdct8(values) -> np.ndarray:
    """Apply the scaled AAN forward DCT along the first axis of ``values``.

    The first axis must have length 8; arithmetic is done in float32.
    """
    data = np.asarray(values, dtype=np.float32)
    if data.shape[:1] != (8,):
        raise ValueError("the first axis must hold exactly 8 values")
    d0, d1, d2, d3, d4, d5, d6, d7 = (data[k] for k in range(8))

    tmp0 = d0 + d7
    tmp7 = d0 - d7
    tmp1 = d1 + d6
    tmp6 = d1 - d6
    tmp2 = d2 + d5
    tmp5 = d2 - d5
    tmp3 = d3 + d4
    tmp4 = d3 - d4

    # even part
    tmp10 = tmp0 + tmp3
    tmp13 = tmp0 - tmp3
    tmp11 = tmp1 + tmp2
    tmp12 = tmp1 - tmp2

    out0 = tmp10 + tmp11
    out4 = tmp10 - tmp11

    z1 = (tmp12 + tmp13) * _F(0.707106781)
    out2 = tmp13 + z1
    out6 = tmp13 - z1

    # odd part
    tmp10 = tmp4 + tmp5
    tmp11 = tmp5 + tmp6
    tmp12 = tmp6 + tmp7

    z5 = (tmp10 - tmp12) * _F(0.382683433)
    z2 = tmp10 * _F(0.541196100) + z5
    z4 = tmp12 * _F(1.306562965) + z5
    z3 = tmp11 * _F(0.707106781)

    z11 = tmp7 + z3
    z13 = tmp7 - z3

    out5 = z13 + z2
    out3 = z13 - z2
    out1 = z11 + z4
    out7 = z11 - z4

    return np.stack([out0, out1, out2, out3, out4, out5, out6, out7]).astype(np.float32)


class _BitWriter:
    """Packs bits most-significant first, stuffing a zero after each 0xFF."""

    def __init__(self, out: bytearray) -> None:
        self.out = out
        self.buffer = 0
        self.count = 0

    def write(self, code: int, length: int) -> None:
        self.count += length
        self.buffer |= code << (24 - self.count)
        while self.count >= 8:
            byte = (self.buffer >> 16) & 0xFF
            self.out.append(byte)
            if byte == 0xFF:
                self.out.append(0)
            self.buffer = (self.buffer << 8) & 0xFFFFFF
            self.count -= 8


def _magnitude_bits(value: int) -> tuple[int, int]:
    """Return the (bits, length) pair that encodes a coefficient's magnitude."""
    length = max(abs(value).bit_length(), 1)
    if value < 0:
        value -= 1
    return value & ((1 << length) - 1), length


def _encode_block(writer: _BitWriter, block: np.ndarray, scale: np.ndarray, dc: int,
                  dc_table, ac_table) -> int:
    """Transform, quantise and entropy-code one 8x8 block; return its DC value."""
    rows = fdct8(block.T).T
    coefficients = fdct8(rows)
    v = coefficients * scale
    rounded = np.where(v < 0, v - _F(0.5), v + _F(0.5))
    du = np.empty(64, dtype=np.int64)
    du[_ZIGZAG_INDEX] = rounded.reshape(64).astype(np.int64)
    du = du.tolist()

    diff = du[0] - dc
    if diff == 0:
        writer.write(*dc_table[0])
    else:
        bits, length = _magnitude_bits(diff)
        writer.write(*dc_table[length])
        writer.write(bits, length)

    end = 63
    while end > 0 and du[end] == 0:
        end -= 1
    if end == 0:
        writer.write(*ac_table[0x00])
        return du[0]

    i = 1
    while i <= end:
        start = i
        while du[i] == 0 and i <= end:
            i += 1
        zeroes = i - start
        if zeroes >= 16:
            for _ in range(zeroes >> 4):
                writer.write(*ac_table[0xF0])
            zeroes &= 15
        bits, length = _magnitude_bits(du[i])
        writer.write(*ac_table[(zeroes << 4) + length])
        writer.write(bits, length)
        i += 1
    if end != 63:
        writer.write(*ac_table[0x00])
    return du[0]


def _headers(width: int, height: int, subsample: bool, y_table: bytes, uv_table: bytes) -> bytes:
    head1 = bytes((
        0xFF, 0xC0, 0, 0x11, 8, (height >> 8) & 0xFF, height & 0xFF,
        (width >> 8) & 0xFF, width & 0xFF, 3, 1, 0x22 if subsample else 0x11,
        0, 2, 0x11, 1, 3, 0x11, 1, 0xFF, 0xC4, 0x01, 0xA2, 0,
    ))
    return b"".join((
        _HEAD0, y_table, b"\x01", uv_table, head1,
        bytes(DC_LUMINANCE_COUNTS), bytes(DC_LUMINANCE_VALUES),
        b"\x10", bytes(AC_LUMINANCE_COUNTS), bytes(AC_LUMINANCE_VALUES),
        b"\x01", bytes(DC_CHROMINANCE_COUNTS), bytes(DC_CHROMINANCE_VALUES),
        b"\x11", bytes(AC_CHROMINANCE_COUNTS), bytes(AC_CHROMINANCE_VALUES),
        _HEAD2,
    ))


def encode_jpeg(pixels, width: int, height: int, components: int, quality: int = 90,
                *, flip: bool = False) -> bytes:
    """Encode 8-bit interleaved pixels as a baseline JPEG file image.

    Alpha (components 2 and 4) is ignored. ``quality`` runs from 1 to 100,
    0 meaning 90; at 90 and below chroma is subsampled 2x2.
    """
    if pixels is None or width <= 0 or height <= 0:
        raise ValueError("image must have positive dimensions and data")
    if not 1 <= components <= 4:
        raise ValueError(f"unsupported component count: {components}")
    data = bytes(pixels)
    count = width * height * components
    if len(data) < count:
        raise ValueError("pixel data is shorter than the image")

    tables = build_quant_tables(quality)
    y_scale = np.array(tables.y_scale, dtype=np.float32).reshape(8, 8)
    uv_scale = np.array(tables.uv_scale, dtype=np.float32).reshape(8, 8)

    out = bytearray(_headers(width, height, tables.subsample, tables.y_table, tables.uv_table))

    image = np.frombuffer(data, dtype=np.uint8, count=count)
    image = image.reshape(height, width, components).astype(np.float32)
    if flip:
        image = image[::-1]
    size = 16 if tables.subsample else 8
    image = np.pad(image, ((0, (-height) % size), (0, (-width) % size), (0, 0)), mode="edge")

    offset_g = 1 if components > 2 else 0
    offset_b = 2 if components > 2 else 0
    r, g, b = image[..., 0], image[..., offset_g], image[..., offset_b]
    lum = _F(0.29900) * r + _F(0.58700) * g + _F(0.11400) * b - _F(128)
    cb = _F(-0.16874) * r - _F(0.33126) * g + _F(0.50000) * b
    cr = _F(0.50000) * r - _F(0.41869) * g - _F(0.08131) * b

    writer = _BitWriter(out)
    dc_y = dc_u = dc_v = 0
    for y in range(0, height, size):
        for x in range(0, width, size):
            ys = lum[y:y + size, x:x + size]
            us = cb[y:y + size, x:x + size]
            vs = cr[y:y + size, x:x + size]
            if tables.subsample:
                for by, bx in ((0, 0), (0, 8), (8, 0), (8, 8)):
                    dc_y = _encode_block(writer, ys[by:by + 8, bx:bx + 8], y_scale, dc_y,
                                         YDC_HT, YAC_HT)
                sub_u = (us[0::2, 0::2] + us[0::2, 1::2] + us[1::2, 0::2] + us[1::2, 1::2]) * _F(0.25)
                sub_v = (vs[0::2, 0::2] + vs[0::2, 1::2] + vs[1::2, 0::2] + vs[1::2, 1::2]) * _F(0.25)
                dc_u = _encode_block(writer, sub_u, uv_scale, dc_u, UVDC_HT, UVAC_HT)
                dc_v = _encode_block(writer, sub_v, uv_scale, dc_v, UVDC_HT, UVAC_HT)
            else:
                dc_y = _encode_block(writer, ys, y_scale, dc_y, YDC_HT, YAC_HT)
                dc_u = _encode_block(writer, us, uv_scale, dc_u, UVDC_HT, UVAC_HT)
                dc_v = _encode_block(writer, vs, uv_scale, dc_v, UVDC_HT, UVAC_HT)

    writer.write(*_FILL_BITS)
    out += b"\xFF\xD9"
    return bytes(out)


def write_jpeg(path: str | os.PathLike, pixels, width: int, height: int, components: int,
               quality: int = 90, *, flip: bool = False) -> None:
    """Encode pixels as JPEG and write them to ``path``."""
    encoded = encode_jpeg(pixels, width, height, components, quality, flip=flip)
    with open(path, "wb") as handle:
        handle.write(encoded)