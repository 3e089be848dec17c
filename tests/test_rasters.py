import io
import struct

import pytest
from PIL import Image

from hopfieldnet.rasters import encode_bmp, encode_tga, write_bmp, write_tga


def _gradient(width, height, components):
    return bytes((x * 37 + y * 11 + c * 53) % 256
                 for y in range(height) for x in range(width) for c in range(components))


def _flip_rows(data, width, height, components):
    row = width * components
    return b"".join(data[y * row:(y + 1) * row] for y in range(height - 1, -1, -1))


def test_bmp_rgb_header_and_size():
    data = encode_bmp(_gradient(3, 2, 3), 3, 2, 3)
    assert data[:2] == b"BM"
    size, = struct.unpack_from("<I", data, 2)
    assert size == len(data)
    offset, = struct.unpack_from("<I", data, 10)
    assert offset == 54


def test_bmp_rgb_round_trip_with_pillow():
    pixels = _gradient(5, 4, 3)
    image = Image.open(io.BytesIO(encode_bmp(pixels, 5, 4, 3)))
    assert image.size == (5, 4)
    assert image.convert("RGB").tobytes() == pixels


def test_bmp_grey_expands_to_rgb():
    pixels = bytes([0, 100, 200, 255])
    image = Image.open(io.BytesIO(encode_bmp(pixels, 2, 2, 1))).convert("RGB")
    expected = b"".join(bytes((v, v, v)) for v in pixels)
    assert image.tobytes() == expected


def test_bmp_rgba_uses_v4_header_and_bgra_order():
    pixels = bytes([10, 20, 30, 40])
    data = encode_bmp(pixels, 1, 1, 4)
    header_size, = struct.unpack_from("<I", data, 14)
    assert header_size == 108
    masks = struct.unpack_from("<IIII", data, 54)
    assert masks == (0xFF0000, 0xFF00, 0xFF, 0xFF000000)
    assert len(data) == 122 + 4
    assert data[-4:] == bytes([30, 20, 10, 40])


def test_bmp_flip_matches_reversed_rows():
    pixels = _gradient(4, 3, 3)
    flipped = encode_bmp(pixels, 4, 3, 3, flip=True)
    assert flipped == encode_bmp(_flip_rows(pixels, 4, 3, 3), 4, 3, 3)


@pytest.mark.parametrize("width,height", [(-1, 2), (2, -1)])
def test_bmp_rejects_negative_dimensions(width, height):
    with pytest.raises(ValueError):
        encode_bmp(b"\x00" * 16, width, height, 3)


def test_bmp_rejects_short_data():
    with pytest.raises(ValueError):
        encode_bmp(b"\x00" * 5, 2, 2, 3)


def test_write_bmp_matches_encode(tmp_path):
    pixels = _gradient(3, 3, 3)
    path = tmp_path / "out.bmp"
    write_bmp(path, pixels, 3, 3, 3)
    assert path.read_bytes() == encode_bmp(pixels, 3, 3, 3)


@pytest.mark.parametrize("components,mode", [(1, "L"), (2, "LA"), (3, "RGB"), (4, "RGBA")])
@pytest.mark.parametrize("rle", [True, False])
def test_tga_round_trip_with_pillow(components, mode, rle):
    pixels = _gradient(6, 5, components)
    image = Image.open(io.BytesIO(encode_tga(pixels, 6, 5, components, rle=rle)))
    assert image.size == (6, 5)
    assert image.convert(mode).tobytes() == pixels


def test_tga_rle_round_trip_with_runs():
    row = bytes([1, 2, 3]) * 140 + bytes([9, 9, 9, 4, 5, 6, 7, 8, 9]) + bytes([1, 2, 3]) * 3
    width = len(row) // 3
    pixels = row * 2
    image = Image.open(io.BytesIO(encode_tga(pixels, width, 2, 3)))
    assert image.convert("RGB").tobytes() == pixels


def test_tga_header_fields():
    data = encode_tga(_gradient(7, 3, 4), 7, 3, 4, rle=False)
    assert data[2] == 2
    assert struct.unpack_from("<HH", data, 12) == (7, 3)
    assert data[16] == 32
    assert data[17] == 8
    assert len(data) == 18 + 7 * 3 * 4


def test_tga_rle_sets_image_type_and_compresses_runs():
    pixels = bytes([50]) * 100
    compressed = encode_tga(pixels, 100, 1, 1, rle=True)
    raw = encode_tga(pixels, 100, 1, 1, rle=False)
    assert compressed[2] == 3 + 8
    assert raw[2] == 3
    assert compressed[18:] == bytes([(100 - 129) & 0xFF, 50])


def test_tga_flip_matches_reversed_rows():
    pixels = _gradient(3, 4, 3)
    flipped = encode_tga(pixels, 3, 4, 3, flip=True)
    assert flipped == encode_tga(_flip_rows(pixels, 3, 4, 3), 3, 4, 3)


def test_tga_rejects_bad_component_count():
    with pytest.raises(ValueError):
        encode_tga(b"\x00" * 10, 1, 1, 5)


def test_write_tga_matches_encode(tmp_path):
    pixels = _gradient(4, 2, 2)
    path = tmp_path / "out.tga"
    write_tga(path, pixels, 4, 2, 2, rle=False)
    assert path.read_bytes() == encode_tga(pixels, 4, 2, 2, rle=False)