"""Constant tables for baseline JPEG encoding and quantisation setup."""

from __future__ import annotations

from typing import NamedTuple

import numpy as np

# Position in zig-zag order of each coefficient in natural (row-major) order.
ZIGZAG = (
    0, 1, 5, 6, 14, 15, 27, 28, 2, 4, 7, 13, 16, 26, 29, 42,
    3, 8, 12, 17, 25, 30, 41, 43, 9, 11, 18, 24, 31, 40, 44, 53,
    10, 19, 23, 32, 39, 45, 52, 54, 20, 22, 33, 38, 46, 51, 55, 60,
    21, 34, 37, 47, 50, 56, 59, 61, 35, 36, 48, 49, 57, 58, 62, 63,
)

LUMINANCE_QUANT = (
    16, 11, 10, 16, 24, 40, 51, 61, 12, 12, 14, 19, 26, 58, 60, 55,
    14, 13, 16, 24, 40, 57, 69, 56, 14, 17, 22, 29, 51, 87, 80, 62,
    18, 22, 37, 56, 68, 109, 103, 77, 24, 35, 55, 64, 81, 104, 113, 92,
    49, 64, 78, 87, 103, 121, 120, 101, 72, 92, 95, 98, 112, 100, 103, 99,
)

CHROMINANCE_QUANT = (
    17, 18, 24, 47, 99, 99, 99, 99, 18, 21, 26, 66, 99, 99, 99, 99,
    24, 26, 56, 99, 99, 99, 99, 99, 47, 66, 99, 99, 99, 99, 99, 99,
) + (99,) * 32

# Scale factors of the AAN forward DCT, each multiplied by 2*sqrt(2).
AASF = tuple(
    np.float32(factor) * np.float32(2.828427125)
    for factor in (
        1.0, 1.387039845, 1.306562965, 1.175875602,
        1.0, 0.785694958, 0.541196100, 0.275899379,
    )
)

# Standard Huffman specifications: number of codes of each length 1..16,
# followed by the symbols in code order.
DC_LUMINANCE_COUNTS = (0, 1, 5, 1, 1, 1, 1, 1, 1, 0, 0, 0, 0, 0, 0, 0)
DC_LUMINANCE_VALUES = tuple(range(12))
AC_LUMINANCE_COUNTS = (0, 2, 1, 3, 3, 2, 4, 3, 5, 5, 4, 4, 0, 0, 1, 0x7D)
AC_LUMINANCE_VALUES = (
    0x01, 0x02, 0x03, 0x00, 0x04, 0x11, 0x05, 0x12, 0x21, 0x31, 0x41, 0x06, 0x13, 0x51, 0x61, 0x07,
    0x22, 0x71, 0x14, 0x32, 0x81, 0x91, 0xA1, 0x08, 0x23, 0x42, 0xB1, 0xC1, 0x15, 0x52, 0xD1, 0xF0,
    0x24, 0x33, 0x62, 0x72, 0x82, 0x09, 0x0A, 0x16, 0x17, 0x18, 0x19, 0x1A, 0x25, 0x26, 0x27, 0x28,
    0x29, 0x2A, 0x34, 0x35, 0x36, 0x37, 0x38, 0x39, 0x3A, 0x43, 0x44, 0x45, 0x46, 0x47, 0x48, 0x49,
    0x4A, 0x53, 0x54, 0x55, 0x56, 0x57, 0x58, 0x59, 0x5A, 0x63, 0x64, 0x65, 0x66, 0x67, 0x68, 0x69,
    0x6A, 0x73, 0x74, 0x75, 0x76, 0x77, 0x78, 0x79, 0x7A, 0x83, 0x84, 0x85, 0x86, 0x87, 0x88, 0x89,
    0x8A, 0x92, 0x93, 0x94, 0x95, 0x96, 0x97, 0x98, 0x99, 0x9A, 0xA2, 0xA3, 0xA4, 0xA5, 0xA6, 0xA7,
    0xA8, 0xA9, 0xAA, 0xB2, 0xB3, 0xB4, 0xB5, 0xB6, 0xB7, 0xB8, 0xB9, 0xBA, 0xC2, 0xC3, 0xC4, 0xC5,
    0xC6, 0xC7, 0xC8, 0xC9, 0xCA, 0xD2, 0xD3, 0xD4, 0xD5, 0xD6, 0xD7, 0xD8, 0xD9, 0xDA, 0xE1, 0xE2,
    0xE3, 0xE4, 0xE5, 0xE6, 0xE7, 0xE8, 0xE9, 0xEA, 0xF1, 0xF2, 0xF3, 0xF4, 0xF5, 0xF6, 0xF7, 0xF8,
    0xF9, 0xFA,
)
DC_CHROMINANCE_COUNTS = (0, 3, 1, 1, 1, 1, 1, 1, 1, 1, 1, 0, 0, 0, 0, 0)
DC_CHROMINANCE_VALUES = tuple(range(12))
AC_CHROMINANCE_COUNTS = (0, 2, 1, 2, 4, 4, 3, 4, 7, 5, 4, 4, 0, 1, 2, 0x77)
AC_CHROMINANCE_VALUES = (
    0x00, 0x01, 0x02, 0x03, 0x11, 0x04, 0x05, 0x21, 0x31, 0x06, 0x12, 0x41, 0x51, 0x07, 0x61, 0x71,
    0x13, 0x22, 0x32, 0x81, 0x08, 0x14, 0x42, 0x91, 0xA1, 0xB1, 0xC1, 0x09, 0x23, 0x33, 0x52, 0xF0,
    0x15, 0x62, 0x72, 0xD1, 0x0A, 0x16, 0x24, 0x34, 0xE1, 0x25, 0xF1, 0x17, 0x18, 0x19, 0x1A, 0x26,
    0x27, 0x28, 0x29, 0x2A, 0x35, 0x36, 0x37, 0x38, 0x39, 0x3A, 0x43, 0x44, 0x45, 0x46, 0x47, 0x48,
    0x49, 0x4A, 0x53, 0x54, 0x55, 0x56, 0x57, 0x58, 0x59, 0x5A, 0x63, 0x64, 0x65, 0x66, 0x67, 0x68,
    0x69, 0x6A, 0x73, 0x74, 0x75, 0x76, 0x77, 0x78, 0x79, 0x7A, 0x82, 0x83, 0x84, 0x85, 0x86, 0x87,
    0x88, 0x89, 0x8A, 0x92, 0x93, 0x94, 0x95, 0x96, 0x97, 0x98, 0x99, 0x9A, 0xA2, 0xA3, 0xA4, 0xA5,
    0xA6, 0xA7, 0xA8, 0xA9, 0xAA, 0xB2, 0xB3, 0xB4, 0xB5, 0xB6, 0xB7, 0xB8, 0xB9, 0xBA, 0xC2, 0xC3,
    0xC4, 0xC5, 0xC6, 0xC7, 0xC8, 0xC9, 0xCA, 0xD2, 0xD3, 0xD4, 0xD5, 0xD6, 0xD7, 0xD8, 0xD9, 0xDA,
    0xE2, 0xE3, 0xE4, 0xE5, 0xE6, 0xE7, 0xE8, 0xE9, 0xEA, 0xF2, 0xF3, 0xF4, 0xF5, 0xF6, 0xF7, 0xF8,
    0xF9, 0xFA,
)


def _huffman_table(counts: tuple[int, ...], values: tuple[int, ...]) -> tuple[tuple[int, int], ...]:
    """Expand a canonical Huffman specification into (code, length) per symbol.

    Symbols that have no code map to (0, 0).
    """
    table = [(0, 0)] * 256
    symbols = iter(values)
    code = 0
    for length, count in enumerate(counts, start=1):
        for _ in range(count):
            table[next(symbols)] = (code, length)
            code += 1
        code <<= 1
    return tuple(table)


YDC_HT = _huffman_table(DC_LUMINANCE_COUNTS, DC_LUMINANCE_VALUES)
UVDC_HT = _huffman_table(DC_CHROMINANCE_COUNTS, DC_CHROMINANCE_VALUES)
YAC_HT = _huffman_table(AC_LUMINANCE_COUNTS, AC_LUMINANCE_VALUES)
UVAC_HT = _huffman_table(AC_CHROMINANCE_COUNTS, AC_CHROMINANCE_VALUES)


class _QuantTables(NamedTuple):
    """Quantisation setup for one quality level.

    ``y_table``/``uv_table`` are in zig-zag order as written to the file;
    ``y_scale``/``uv_scale`` are per-coefficient float32 multipliers in
    natural order, folding quantisation and DCT descaling together.
    """

    subsample: bool
    y_table: bytes
    uv_table: bytes
    y_scale: tuple[np.float32, ...]
    uv_scale: tuple[np.float32, ...]


def _scaled(base: tuple[int, ...], factor: int) -> bytes:
    table = bytearray(64)
    for i, value in enumerate(base):
        table[ZIGZAG[i]] = min(max((value * factor + 50) // 100, 1), 255)
    return bytes(table)


def _descale(table: bytes) -> tuple[np.float32, ...]:
    one = np.float32(1)
    return tuple(
        one / (np.float32(table[ZIGZAG[row * 8 + col]]) * AASF[row] * AASF[col])
        for row in range(8)
        for col in range(8)
    )


def build_quant_tables(quality: int) -> _QuantTables:
    """Build quantisation tables for a JPEG ``quality`` of 1..100.

    A quality of 0 means 90. Chroma is subsampled at quality 90 and below;
    other values are clamped to 1..100.
    """
    quality = quality or 90
    subsample = quality <= 90
    quality = min(max(quality, 1), 100)
    factor = 5000 // quality if quality < 50 else 200 - quality * 2

    y_table = _scaled(LUMINANCE_QUANT, factor)
    uv_table = _scaled(CHROMINANCE_QUANT, factor)
    return _QuantTables(subsample, y_table, uv_table, _descale(y_table), _descale(uv_table))