"""Compression tags and the 32-bit little-endian compression header word."""

from __future__ import annotations

from enum import IntEnum

__all__ = ["CprsTag", "CompressionError", "create_header", "parse_header"]

HEADER_SIZE = 4
MAX_SIZE = 0xFFFFFF


class CprsTag(IntEnum):
    """Compression type tags as stored in the low byte of the header word."""

    FAKE = 0x00
    LZ77 = 0x10
    HUFF = 0x20
    HUFF8 = 0x28
    RLE = 0x30


class CompressionError(ValueError):
    """Raised when data cannot be compressed or decompressed."""


def create_header(size: int, tag: int) -> bytes:
    """Build the header word: the tag byte followed by the 24-bit size."""
    if not 0 <= tag <= 0xFF:
        raise ValueError(f"tag out of range: {tag}")
    if size < 0:
        raise ValueError(f"size must not be negative: {size}")
    return bytes((tag, size & 0xFF, (size >> 8) & 0xFF, (size >> 16) & 0xFF))


def parse_header(data: bytes) -> tuple[int, int]:
    """Return ``(tag, size)`` read from the first four bytes of *data*."""
    if len(data) < HEADER_SIZE:
        raise CompressionError("data too short for a compression header")
    word = int.from_bytes(bytes(data[:HEADER_SIZE]), "little")
    return word & 0xFF, word >> 8