"""GBA BIOS compatible 8-bit run-length encoding."""

from __future__ import annotations

from .header import CompressionError, CprsTag, create_header, parse_header

__all__ = ["compress", "decompress"]

_MAX_RUN = 0x82
_MAX_LITERAL = 0x80


def compress(data: bytes) -> bytes:
    """Compress *data* into GBA RLE format, header included, padded to 4 bytes."""
    src = bytes(data)
    size = len(src)
    out = bytearray()

    if size:
        prev = curr = src[0]
        rle = non = 1
        # `non` is always one more than the pending literal stretch.
        for ii in range(1, size + 1):
            at_end = ii == size
            if not at_end:
                curr = src[ii]

            if rle == _MAX_RUN or at_end:
                prev = ~curr & 0xFF

            if rle < 3 and (non + rle > _MAX_LITERAL or at_end):
                non += rle
                out.append(non - 2)
                out += src[ii - non + 1:ii]
                non = rle = 1
            elif curr == prev:
                rle += 1
                if rle == 3 and non > 1:
                    out.append(non - 2)
                    out += src[ii - non - 1:ii - 2]
                    non = 1
            else:
                if rle >= 3:
                    out += bytes((0x80 | (rle - 3), src[ii - 1]))
                    non = 0
                    rle = 1
                non += rle
                rle = 1
            prev = curr

    out += bytes(-len(out) % 4)
    return create_header(size, CprsTag.RLE) + bytes(out)


def decompress(data: bytes) -> bytes:
    """Expand GBA RLE data (header included) back to the original bytes."""
    src = bytes(data)
    tag, size = parse_header(src)
    if tag != CprsTag.RLE:
        raise CompressionError(f"not RLE data (tag 0x{tag:02X})")

    out = bytearray()
    pos = 4
    while len(out) < size:
        if pos >= len(src):
            raise CompressionError("RLE data ends unexpectedly")
        flag = src[pos]
        pos += 1
        remaining = size - len(out)
        if flag & 0x80:
            count = min((flag & 0x7F) + 3, remaining)
            if pos >= len(src):
                raise CompressionError("RLE data ends unexpectedly")
            out += bytes((src[pos],)) * count
            pos += 1
        else:
            count = min(flag + 1, remaining)
            chunk = src[pos:pos + count]
            if len(chunk) < count:
                raise CompressionError("RLE data ends unexpectedly")
            out += chunk
            pos += count
    return bytes(out)