"""A small zlib stream compressor using fixed Huffman codes, plus checksums."""

from __future__ import annotations

_HASH_SIZE = 16384
_WINDOW = 32768
_MAX_MATCH = 258
_MASK32 = 0xFFFFFFFF

_LENGTH_BASE = (
    3, 4, 5, 6, 7, 8, 9, 10, 11, 13, 15, 17, 19, 23, 27, 31, 35, 43, 51, 59,
    67, 83, 99, 115, 131, 163, 195, 227, 258, 259,
)
_LENGTH_EXTRA = (
    0, 0, 0, 0, 0, 0, 0, 0, 1, 1, 1, 1, 2, 2, 2, 2, 3, 3, 3, 3,
    4, 4, 4, 4, 5, 5, 5, 5, 0,
)
_DIST_BASE = (
    1, 2, 3, 4, 5, 7, 9, 13, 17, 25, 33, 49, 65, 97, 129, 193, 257, 385, 513,
    769, 1025, 1537, 2049, 3073, 4097, 6145, 8193, 12289, 16385, 24577, 32768,
)
_DIST_EXTRA = (
    0, 0, 0, 0, 1, 1, 2, 2, 3, 3, 4, 4, 5, 5, 6, 6, 7, 7, 8, 8,
    9, 9, 10, 10, 11, 11, 12, 12, 13, 13,
)


def _make_crc_table() -> tuple[int, ...]:
    table = []
    for n in range(256):
        c = n
        for _ in range(8):
            c = (c >> 1) ^ 0xEDB88320 if c & 1 else c >> 1
        table.append(c)
    return tuple(table)


_CRC_TABLE = _make_crc_table()


def crc32(data: bytes) -> int:
    """Return the CRC-32 checksum used by PNG chunks."""
    crc = _MASK32
    for byte in data:
        crc = (crc >> 8) ^ _CRC_TABLE[(byte ^ crc) & 0xFF]
    return crc ^ _MASK32


def adler32(data: bytes) -> int:
    """Return the Adler-32 checksum that trails a zlib stream."""
    s1, s2 = 1, 0
    for start in range(0, len(data), 5552):
        for byte in data[start:start + 5552]:
            s1 += byte
            s2 += s1
        s1 %= 65521
        s2 %= 65521
    return (s2 << 16) | s1


def _bit_reverse(code: int, bits: int) -> int:
    result = 0
    for _ in range(bits):
        result = (result << 1) | (code & 1)
        code >>= 1
    return result


def _zhash(data: bytes, i: int) -> int:
    h = data[i] + (data[i + 1] << 8) + (data[i + 2] << 16)
    h ^= (h << 3) & _MASK32
    h = (h + (h >> 5)) & _MASK32
    h ^= (h << 4) & _MASK32
    h = (h + (h >> 17)) & _MASK32
    h ^= (h << 25) & _MASK32
    h = (h + (h >> 6)) & _MASK32
    return h


def _match_length(data: bytes, a: int, b: int, limit: int) -> int:
    limit = min(limit, _MAX_MATCH)
    k = 0
    while k < limit and data[a + k] == data[b + k]:
        k += 1
    return k


class _BitWriter:
    """Packs bits least-significant first into a growing byte array."""

    def __init__(self, out: bytearray) -> None:
        self.out = out
        self.buffer = 0
        self.count = 0

    def add(self, code: int, bits: int) -> None:
        self.buffer |= code << self.count
        self.count += bits
        while self.count >= 8:
            self.out.append(self.buffer & 0xFF)
            self.buffer >>= 8
            self.count -= 8

    def huffman(self, symbol: int) -> None:
        """Write a literal/length symbol with the fixed Huffman code."""
        if symbol <= 143:
            self.add(_bit_reverse(0x30 + symbol, 8), 8)
        elif symbol <= 255:
            self.add(_bit_reverse(0x190 + symbol - 144, 9), 9)
        elif symbol <= 279:
            self.add(_bit_reverse(symbol - 256, 7), 7)
        else:
            self.add(_bit_reverse(0xC0 + symbol - 280, 8), 8)

    def pad(self) -> None:
        while self.count:
            self.add(0, 1)


def _stored_blocks(data: bytes) -> bytearray:
    out = bytearray()
    pos = 0
    while pos < len(data):
        block_len = min(len(data) - pos, 32767)
        out.append(1 if len(data) - pos == block_len else 0)
        out += bytes((block_len & 0xFF, (block_len >> 8) & 0xFF))
        inverted = ~block_len
        out += bytes((inverted & 0xFF, (inverted >> 8) & 0xFF))
        out += data[pos:pos + block_len]
        pos += block_len
    return out


def zlib_compress(data: bytes, quality: int = 8) -> bytes:
    """Compress ``data`` into a zlib stream.

    ``quality`` bounds the hash chain length (minimum 5). When compression
    would expand the data, stored blocks are emitted instead.
    """
    data = bytes(data)
    size = len(data)
    quality = max(quality, 5)

    out = bytearray((0x78, 0x5E))
    writer = _BitWriter(out)
    writer.add(1, 1)  # BFINAL
    writer.add(1, 2)  # fixed Huffman block

    table: dict[int, list[int]] = {}
    i = 0
    while i < size - 3:
        h = _zhash(data, i) & (_HASH_SIZE - 1)
        best = 3
        best_pos: int | None = None
        chain = table.setdefault(h, [])
        for pos in chain:
            if pos > i - _WINDOW:
                d = _match_length(data, pos, i, size - i)
                if d >= best:
                    best, best_pos = d, pos
        if len(chain) == 2 * quality:
            del chain[:quality]
        chain.append(i)

        if best_pos is not None:
            # lazy matching: prefer a literal if the next byte matches longer
            h = _zhash(data, i + 1) & (_HASH_SIZE - 1)
            for pos in table.get(h, ()):
                if pos > i - (_WINDOW - 1):
                    if _match_length(data, pos, i + 1, size - i - 1) > best:
                        best_pos = None
                        break

        if best_pos is not None:
            distance = i - best_pos
            j = next(k for k in range(len(_LENGTH_EXTRA)) if best <= _LENGTH_BASE[k + 1] - 1)
            writer.huffman(j + 257)
            if _LENGTH_EXTRA[j]:
                writer.add(best - _LENGTH_BASE[j], _LENGTH_EXTRA[j])
            j = next(k for k in range(len(_DIST_EXTRA)) if distance <= _DIST_BASE[k + 1] - 1)
            writer.add(_bit_reverse(j, 5), 5)
            if _DIST_EXTRA[j]:
                writer.add(distance - _DIST_BASE[j], _DIST_EXTRA[j])
            i += best
        else:
            writer.huffman(data[i])
            i += 1

    for byte in data[i:]:
        writer.huffman(byte)
    writer.huffman(256)
    writer.pad()

    if len(out) > size + 2 + ((size + 32766) // 32767) * 5:
        out = out[:2] + _stored_blocks(data)

    checksum = adler32(data)
    out += checksum.to_bytes(4, "big")
    return bytes(out)