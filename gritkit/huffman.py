"""GBA BIOS compatible Huffman compression (4-bit and 8-bit symbols)."""

from __future__ import annotations

from collections import deque
from typing import Optional

from .header import CompressionError, parse_header

__all__ = ["encode", "decode", "compress"]

_TAG_HUFF4 = 0x24
_TAG_HUFF8 = 0x28
_EXTENDED = 0x80
_TREE_BYTES = 512
_OFFSET_MASK = 0x3F
_LEFT_IS_DATA = 0x80
_RIGHT_IS_DATA = 0x40


class _Node:
    """A Huffman tree node; ``val`` is the symbol for leaves, the offset for parents."""

    __slots__ = ("count", "val", "left", "right", "leaves", "code", "code_len")

    def __init__(
        self,
        val: int = 0,
        count: int = 0,
        left: Optional["_Node"] = None,
        right: Optional["_Node"] = None,
    ) -> None:
        self.left = left
        self.right = right
        self.val = val
        self.code = 0
        self.code_len = 0
        if left is not None and right is not None:
            self.count = left.count + right.count
            self.leaves = left.leaves + right.leaves
        else:
            self.count = count
            self.leaves = 1

    @property
    def is_parent(self) -> bool:
        return self.left is not None

    def children(self) -> tuple["_Node", "_Node"]:
        assert self.left is not None and self.right is not None
        return self.left, self.right

    def num_nodes(self) -> int:
        if self.is_parent:
            left, right = self.children()
            return left.num_nodes() + right.num_nodes() + 1
        return 1


def _build_codes(node: _Node, code: int, code_len: int) -> None:
    if code_len >= 32:
        raise CompressionError("Huffman code exceeds 32 bits")
    if node.is_parent:
        left, right = node.children()
        _build_codes(left, code << 1, code_len + 1)
        _build_codes(right, (code << 1) | 1, code_len + 1)
    else:
        node.code = code
        node.code_len = code_len


def _build_lookup(lookup: dict[int, _Node], node: _Node) -> None:
    if not node.is_parent:
        lookup[node.val] = node
        return
    left, right = node.children()
    _build_lookup(lookup, left)
    _build_lookup(lookup, right)


def _symbols(data: bytes, four_bit: bool):
    if four_bit:
        for byte in data:
            yield byte & 0xF
            yield byte >> 4
    else:
        yield from data


def _build_tree(data: bytes, four_bit: bool) -> _Node:
    histogram = [0] * (16 if four_bit else 256)
    for symbol in _symbols(data, four_bit):
        histogram[symbol] += 1

    nodes = [_Node(val, count) for val, count in enumerate(histogram) if count > 0]
    if not nodes:
        raise CompressionError("cannot Huffman-encode empty data")

    while len(nodes) > 1:
        nodes.sort(key=lambda n: (n.count, n.val))
        nodes[0] = _Node(left=nodes[0], right=nodes[1])
        nodes[1] = nodes[-1]
        nodes.pop()

    root = nodes[0]
    if not root.is_parent:
        root = _Node(left=root, right=_Node(0x00, 0))

    _build_codes(root, 0, 0)
    return root


def _serialize_tree(tree: list[Optional[_Node]], node: _Node, next_slot: int) -> None:
    left, right = node.children()

    if node.leaves > 0x40:
        # Inserting this subtree naively would overflow the offset field.
        tree[next_slot] = left
        tree[next_slot + 1] = right
        first, second = (right, left) if right.leaves < left.leaves else (left, right)

        if first.is_parent:
            first.val = 0
            _serialize_tree(tree, first, next_slot + 2)
        if second.is_parent:
            second.val = first.leaves - 1
            _serialize_tree(tree, second, next_slot + 2 * first.leaves)
        return

    queue: deque[_Node] = deque((left, right))
    while queue:
        current = queue.popleft()
        tree[next_slot] = current
        next_slot += 1
        if not current.is_parent:
            continue
        current.val = len(queue) // 2
        queue.extend(current.children())


def _target(tree: list[_Node], index: int) -> int:
    return index // 2 + 1 + tree[index].val


def _fixup_tree(tree: list[_Node]) -> None:
    i = 1
    while i < len(tree):
        if not tree[i].is_parent or tree[i].val <= _OFFSET_MASK:
            i += 1
            continue

        shift = tree[i].val - _OFFSET_MASK
        if (i & 1) and tree[i - 1].is_parent and tree[i - 1].val == _OFFSET_MASK:
            # Right child whose left sibling would overflow: shift the left one by 1.
            i -= 1
            shift = 1

        node_end = _target(tree, i)
        node_begin = node_end - shift
        shift_begin = 2 * node_begin
        shift_end = 2 * node_end

        # Move the last child pair to the front of the range.
        moved = (tree[shift_end], tree[shift_end + 1])
        tree[shift_begin + 2:shift_end + 2] = tree[shift_begin:shift_end]
        tree[shift_begin], tree[shift_begin + 1] = moved

        tree[i].val -= shift
        for index in range(i + 1, shift_begin):
            if tree[index].is_parent and node_begin <= _target(tree, index) < node_end:
                tree[index].val += 1

        for index in (shift_begin, shift_begin + 1):
            if tree[index].is_parent:
                tree[index].val += shift

        for index in range(shift_begin + 2, shift_end + 2):
            if tree[index].is_parent and _target(tree, index) > node_end:
                tree[index].val -= 1

        i += 1


def _encode_tree(root: _Node, size: int) -> bytearray:
    slots: list[Optional[_Node]] = [None] * size
    slots[1] = root
    _serialize_tree(slots, root, 2)
    if any(node is None for node in slots[1:]):
        raise CompressionError("Huffman tree serialization failed")
    nodes: list[_Node] = [root] + [n for n in slots[1:] if n is not None]
    _fixup_tree(nodes)

    tree = bytearray(size)
    for index, node in enumerate(nodes[1:], start=1):
        value = node.val & 0xFF
        if node.is_parent:
            left, right = node.children()
            if node.val > _OFFSET_MASK:
                raise CompressionError("Huffman tree offset overflow")
            if not left.is_parent:
                value |= _LEFT_IS_DATA
            if not right.is_parent:
                value |= _RIGHT_IS_DATA
        tree[index] = value
    return tree


def encode(data: bytes, four_bit: bool) -> bytes:
    """Huffman-encode *data* with 4-bit or 8-bit symbols, header included."""
    src = bytes(data)
    size = len(src)
    root = _build_tree(src, four_bit)

    lookup: dict[int, _Node] = {}
    _build_lookup(lookup, root)

    count = root.num_nodes()
    tree = _encode_tree(root, (count + 2) & ~1)

    out = bytearray(
        (
            _TAG_HUFF4 if four_bit else _TAG_HUFF8,
            size & 0xFF,
            (size >> 8) & 0xFF,
            (size >> 16) & 0xFF,
        )
    )
    if size >= 0x1000000:
        # Size extension; not understood by the BIOS routines.
        out[0] |= _EXTENDED
        out += bytes(((size >> 24) & 0xFF, 0, 0, 0))

    tree[0] = 0xFF
    out += tree
    out += bytes(max(0, _TREE_BYTES - len(tree)))

    word = 0
    pos = 32
    for symbol in _symbols(src, four_bit):
        leaf = lookup[symbol]
        for shift in range(leaf.code_len - 1, -1, -1):
            pos -= 1
            if (leaf.code >> shift) & 1:
                word |= 1 << pos
            if pos == 0:
                out += word.to_bytes(4, "little")
                word = 0
                pos = 32
    if pos < 32:
        out += word.to_bytes(4, "little")

    out += bytes(-len(out) % 4)
    return bytes(out)


def decode(data: bytes) -> bytes:
    """Decode Huffman data produced by :func:`encode` (header included)."""
    src = bytes(data)
    tag, size = parse_header(src)
    start = 4
    if tag & _EXTENDED:
        if len(src) < 8:
            raise CompressionError("Huffman data too short for extended header")
        size |= src[4] << 24
        start = 8
        tag &= ~_EXTENDED
    if tag not in (_TAG_HUFF4, _TAG_HUFF8):
        raise CompressionError(f"not Huffman data (tag 0x{tag:02X})")
    four_bit = tag == _TAG_HUFF4

    tree = src[start:]
    if not tree:
        raise CompressionError("Huffman data ends unexpectedly")
    stream = start + (tree[0] + 1) * 2

    out = bytearray()
    pending: Optional[int] = None
    node = 1
    word = 0
    mask = 0
    try:
        while len(out) < size:
            if mask == 0:
                if stream + 4 > len(src):
                    raise CompressionError("Huffman data ends unexpectedly")
                word = int.from_bytes(src[stream:stream + 4], "little")
                stream += 4
                mask = 0x80000000

            entry = tree[node]
            child = (node & ~1) + (entry & _OFFSET_MASK) * 2 + 2
            if word & mask:
                child += 1
                is_data = bool(entry & _RIGHT_IS_DATA)
            else:
                is_data = bool(entry & _LEFT_IS_DATA)

            if is_data:
                value = tree[child]
                if not four_bit:
                    out.append(value)
                elif pending is None:
                    pending = value & 0xF
                else:
                    out.append(pending | ((value & 0xF) << 4))
                    pending = None
                node = 1
            else:
                node = child
            mask >>= 1
    except IndexError as exc:
        raise CompressionError("corrupt Huffman tree") from exc
    return bytes(out)


def compress(data: bytes) -> bytes:
    """Encode with both symbol sizes and return the smaller result (8-bit on ties)."""
    huff4 = encode(data, True)
    huff8 = encode(data, False)
    return huff4 if len(huff4) < len(huff8) else huff8