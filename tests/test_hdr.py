import pytest

from hopfieldnet.hdr import encode_hdr, linear_to_rgbe, write_hdr


def _body(data, width, height):
    marker = f"-Y {height} +X {width}\n".encode()
    index = data.index(marker)
    return data[index + len(marker):]


def _decode_rle_scanline(body, pos, width):
    assert body[pos:pos + 2] == bytes((2, 2))
    assert (body[pos + 2] << 8) | body[pos + 3] == width
    pos += 4
    channels = []
    for _ in range(4):
        values = bytearray()
        while len(values) < width:
            count = body[pos]
            pos += 1
            if count > 128:
                values += bytes((body[pos],)) * (count - 128)
                pos += 1
            else:
                assert count > 0
                values += body[pos:pos + count]
                pos += count
        assert len(values) == width
        channels.append(values)
    pixels = [tuple(channels[c][x] for c in range(4)) for x in range(width)]
    return pixels, pos


def _decode(rgbe):
    r, g, b, e = rgbe
    if e == 0:
        return (0.0, 0.0, 0.0)
    scale = 2.0 ** (e - 136)
    return tuple((c + 0.5) * scale for c in (r, g, b))


def test_black_is_all_zero():
    assert linear_to_rgbe(0.0, 0.0, 0.0) == (0, 0, 0, 0)


def test_unit_white():
    assert linear_to_rgbe(1.0, 1.0, 1.0) == (128, 128, 128, 129)


@pytest.mark.parametrize("colour", [(0.25, 0.5, 0.75), (3.0, 100.0, 0.01), (1e-3, 2e-3, 5e-4)])
def test_rgbe_decodes_close_to_input(colour):
    decoded = _decode(linear_to_rgbe(*colour))
    peak = max(colour)
    for original, value in zip(colour, decoded):
        assert abs(original - value) <= peak / 128


def test_header_lines():
    data = encode_hdr([0.5] * 6, 3, 2, 1)
    assert data.startswith(b"#?RADIANCE\n")
    assert b"FORMAT=32-bit_rle_rgbe\n" in data
    assert b"EXPOSURE=          1.0000000000000\n\n-Y 2 +X 3\n" in data


def test_narrow_image_is_flat_rgbe():
    values = [0.1, 0.2, 0.3, 1.0, 2.0, 3.0]
    body = _body(encode_hdr(values, 2, 1, 3), 2, 1)
    assert len(body) == 8
    assert tuple(body[:4]) == linear_to_rgbe(0.1, 0.2, 0.3)
    assert tuple(body[4:]) == linear_to_rgbe(1.0, 2.0, 3.0)


def test_grey_is_replicated():
    body = _body(encode_hdr([0.7, 0.9], 2, 1, 2), 2, 1)
    r, g, b, _ = body[:4]
    assert r == g == b


def test_rle_scanline_round_trip():
    width = 12
    colours = [(0.5, 0.5, 0.5)] * 5 + [(0.1 * i, 0.2, 0.05 * i + 0.01) for i in range(1, 8)]
    flat = [v for colour in colours for v in colour]
    body = _body(encode_hdr(flat, width, 1, 3), width, 1)
    pixels, end = _decode_rle_scanline(body, 0, width)
    assert end == len(body)
    assert pixels == [linear_to_rgbe(*c) for c in colours]


def test_long_run_is_split_into_valid_runs():
    width = 300
    body = _body(encode_hdr([2.0] * width, width, 1, 1), width, 1)
    pixels, end = _decode_rle_scanline(body, 0, width)
    assert end == len(body)
    assert set(pixels) == {linear_to_rgbe(2.0, 2.0, 2.0)}


def test_flip_reverses_rows():
    values = [0.1, 0.2, 0.3, 0.4]
    flipped = _body(encode_hdr(values, 2, 2, 1, flip=True), 2, 2)
    plain = _body(encode_hdr(values, 2, 2, 1), 2, 2)
    assert flipped == plain[8:] + plain[:8]


@pytest.mark.parametrize("width,height", [(0, 1), (1, 0), (-2, 3)])
def test_rejects_empty_dimensions(width, height):
    with pytest.raises(ValueError):
        encode_hdr([1.0] * 4, width, height, 1)


def test_rejects_missing_data():
    with pytest.raises(ValueError):
        encode_hdr(None, 1, 1, 3)


def test_rejects_short_data():
    with pytest.raises(ValueError):
        encode_hdr([1.0, 2.0], 2, 2, 3)


def test_write_hdr_matches_encode(tmp_path):
    values = [0.3] * 27
    path = tmp_path / "out.hdr"
    write_hdr(path, values, 3, 3, 3)
    assert path.read_bytes() == encode_hdr(values, 3, 3, 3)