"""Compression dispatch by tag and by grit compression mode."""

from __future__ import annotations

from . import huffman, lz77, rle
from .header import MAX_SIZE, CompressionError, CprsTag, create_header, parse_header
from .options import Compression

__all__ = ["fake_compress", "fake_decompress", "compress", "decompress", "grit_compress"]

_MODE_TAGS = {
    Compression.OFF: CprsTag.FAKE,
    Compression.LZ77: CprsTag.LZ77,
    Compression.HUFF: CprsTag.HUFF8,
    Compression.RLE: CprsTag.RLE,
    Compression.HEADER: CprsTag.FAKE,
}


def fake_compress(data: bytes) -> bytes:
    """Store *data* unchanged behind a compression-style header, padded to 4 bytes."""
    src = bytes(data)
    if len(src) > MAX_SIZE:
        raise CompressionError(f"data too large for a 24-bit size field: {len(src)}")
    return create_header(len(src), CprsTag.FAKE) + src + bytes(-len(src) % 4)


def fake_decompress(data: bytes) -> bytes:
    """Strip the header written by :func:`fake_compress`."""
    src = bytes(data)
    tag, size = parse_header(src)
    if tag != CprsTag.FAKE:
        raise CompressionError(f"not uncompressed data (tag 0x{tag:02X})")
    body = src[4:4 + size]
    if len(body) < size:
        raise CompressionError("uncompressed data ends unexpectedly")
    return body


def compress(data: bytes, tag: int) -> bytes:
    """Compress *data* with the method named by the compression *tag*."""
    if tag == CprsTag.FAKE:
        return fake_compress(data)
    if tag == CprsTag.LZ77:
        return lz77.compress(data)
    if tag == CprsTag.HUFF8:
        return huffman.compress(data)
    if tag == CprsTag.RLE:
        return rle.compress(data)
    raise CompressionError(f"unsupported compression tag 0x{int(tag):02X}")


def decompress(data: bytes) -> bytes:
    """Decompress *data*, choosing the method from its header tag."""
    tag, _ = parse_header(bytes(data))
    if tag == CprsTag.FAKE:
        return fake_decompress(data)
    if tag == CprsTag.LZ77:
        return lz77.decompress(data)
    if tag == CprsTag.RLE:
        return rle.decompress(data)
    if tag in (CprsTag.HUFF, CprsTag.HUFF8):
        raise CompressionError("Huffman decompression is not supported here")
    raise CompressionError(f"unknown compression tag 0x{tag:02X}")


def grit_compress(data: bytes, mode: int) -> bytes:
    """Apply a grit compression *mode*; ``Compression.OFF`` returns the data as is."""
    try:
        mode = Compression(mode)
    except ValueError as exc:
        raise CompressionError(f"unknown compression mode {mode!r}") from exc
    if mode == Compression.OFF:
        return bytes(data)
    return compress(data, _MODE_TAGS[mode])