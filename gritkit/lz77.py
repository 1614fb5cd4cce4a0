"""GBA BIOS compatible LZ77 (LZSS) compression that is safe for VRAM decoding."""

from __future__ import annotations

from .header import MAX_SIZE, CompressionError, CprsTag, create_header, parse_header

__all__ = ["compress", "decompress"]

RING_MAX = 4096
FRAME_MAX = 18
THRESHOLD = 2
NIL = RING_MAX
NMASK = RING_MAX - 1


class _Compressor:
    """Binary search tree LZSS encoder over a 4 KiB ring buffer."""

    def __init__(self, data: bytes) -> None:
        self.src = data
        self.text = bytearray(RING_MAX + FRAME_MAX - 1)
        self.lson = [NIL] * (RING_MAX + 1)
        self.rson = [NIL] * (RING_MAX + 256 + 1)
        self.dad = [NIL] * (RING_MAX + 256 + 1)
        self.match_position = RING_MAX - FRAME_MAX
        self.match_length = 0

    def insert_node(self, r: int) -> None:
        """Insert the string at *r* and record the longest VRAM-safe match."""
        text, lson, rson, dad = self.text, self.lson, self.rson, self.dad
        cmp = 1
        p = RING_MAX + 1 + text[r]
        rson[r] = lson[r] = NIL
        match_length = 0
        match_position = self.match_position
        previous = (r - 1) & NMASK

        while True:
            if cmp >= 0:
                if rson[p] != NIL:
                    p = rson[p]
                else:
                    rson[p] = r
                    dad[r] = p
                    self.match_length = match_length
                    self.match_position = match_position
                    return
            else:
                if lson[p] != NIL:
                    p = lson[p]
                else:
                    lson[p] = r
                    dad[r] = p
                    self.match_length = match_length
                    self.match_position = match_position
                    return

            i = 1
            while i < FRAME_MAX:
                cmp = text[r + i] - text[p + i]
                if cmp:
                    break
                i += 1

            if i > match_length:
                # A match with the byte directly before is unsafe for VRAM.
                if p != previous:
                    match_length = i
                    match_position = p
                if match_length >= FRAME_MAX:
                    break

        # Full-length match: the new node replaces the old one.
        dad[r] = dad[p]
        lson[r] = lson[p]
        rson[r] = rson[p]
        dad[lson[p]] = r
        dad[rson[p]] = r
        if rson[dad[p]] == p:
            rson[dad[p]] = r
        else:
            lson[dad[p]] = r
        dad[p] = NIL
        self.match_length = match_length
        self.match_position = match_position

    def delete_node(self, p: int) -> None:
        lson, rson, dad = self.lson, self.rson, self.dad
        if dad[p] == NIL:
            return
        if rson[p] == NIL:
            q = lson[p]
        elif lson[p] == NIL:
            q = rson[p]
        else:
            q = lson[p]
            if rson[q] != NIL:
                while rson[q] != NIL:
                    q = rson[q]
                rson[dad[q]] = lson[q]
                dad[lson[q]] = dad[q]
                lson[q] = lson[p]
                dad[lson[p]] = q
            rson[q] = rson[p]
            dad[rson[p]] = q

        dad[q] = dad[p]
        if rson[dad[p]] == p:
            rson[dad[p]] = q
        else:
            lson[dad[p]] = q
        dad[p] = NIL

    def run(self) -> bytes:
        text = self.text
        out = bytearray(create_header(len(self.src), CprsTag.LZ77))
        source = iter(self.src)

        s = 0
        r = RING_MAX - FRAME_MAX
        curmatch = RING_MAX - FRAME_MAX

        length = 0
        for byte in source:
            text[r + length] = byte
            length += 1
            if length == FRAME_MAX:
                break
        if length == 0:
            return bytes(out)

        self.insert_node(r)

        code_buf = bytearray(1)
        mask = 0x80
        while True:
            if self.match_length > length:
                self.match_length = length

            if self.match_length <= THRESHOLD:
                self.match_length = 1
                code_buf.append(text[r])
            else:
                code_buf[0] |= mask
                distance = ((curmatch - self.match_position) & NMASK) - 1
                code_buf.append(((distance >> 8) & 0xF) | ((self.match_length - (THRESHOLD + 1)) << 4))
                code_buf.append(distance & 0xFF)
            curmatch = (curmatch + self.match_length) & NMASK

            mask >>= 1
            if mask == 0:
                out += code_buf
                code_buf = bytearray(1)
                mask = 0x80

            last_match_length = self.match_length
            done = 0
            while done < last_match_length:
                byte = next(source, None)
                if byte is None:
                    break
                self.delete_node(s)
                text[s] = byte
                if s < FRAME_MAX - 1:
                    text[s + RING_MAX] = byte
                s = (s + 1) & NMASK
                r = (r + 1) & NMASK
                self.insert_node(r)
                done += 1

            while done < last_match_length:
                done += 1
                self.delete_node(s)
                s = (s + 1) & NMASK
                r = (r + 1) & NMASK
                length -= 1
                if length:
                    self.insert_node(r)

            if length <= 0:
                break

        if len(code_buf) > 1:
            out += code_buf
        return bytes(out)


def compress(data: bytes) -> bytes:
    """Compress *data* into GBA LZ77 format, header included, padded to 4 bytes."""
    src = bytes(data)
    if len(src) > MAX_SIZE:
        raise CompressionError(f"data too large for a 24-bit size field: {len(src)}")
    out = _Compressor(src).run()
    return out + bytes(-len(out) % 4)


def decompress(data: bytes) -> bytes:
    """Expand GBA LZ77 data (header included) back to the original bytes."""
    src = bytes(data)
    tag, size = parse_header(src)
    if tag != CprsTag.LZ77:
        raise CompressionError(f"not LZ77 data (tag 0x{tag:02X})")

    out = bytearray()
    pos = 4
    try:
        while len(out) < size:
            flags = src[pos]
            pos += 1
            for bit in range(7, -1, -1):
                if len(out) >= size:
                    break
                if (flags >> bit) & 1:
                    first, second = src[pos], src[pos + 1]
                    pos += 2
                    count = (first >> 4) + THRESHOLD + 1
                    offset = ((first & 0xF) << 8 | second) + 1
                    if offset > len(out):
                        raise CompressionError("LZ77 reference before start of data")
                    for _ in range(count):
                        out.append(out[-offset])
                else:
                    out.append(src[pos])
                    pos += 1
    except IndexError as exc:
        raise CompressionError("LZ77 data ends unexpectedly") from exc
    return bytes(out[:size])