import pytest
from hypothesis import given, settings, strategies as st

from gritkit.header import CompressionError, parse_header
from gritkit.huffman import compress, decode, encode


@pytest.mark.parametrize("four_bit, tag", [(True, 0x24), (False, 0x28)])
def test_header_tag_and_size(four_bit, tag):
    data = b"hello huffman world"
    out = encode(data, four_bit)
    assert parse_header(out) == (tag, len(data))


@pytest.mark.parametrize("four_bit", [True, False])
def test_tree_block_and_alignment(four_bit):
    out = encode(b"abracadabra" * 5, four_bit)
    assert out[4] == 0xFF
    assert len(out) % 4 == 0
    assert len(out) > 4 + 512


def test_single_symbol_worked_example():
    out = encode(b"\x00", False)
    assert out[:5] == bytes((0x28, 1, 0, 0, 0xFF))
    assert out[5] == 0xC0
    assert out[-4:] == b"\x00\x00\x00\x80"
    assert decode(out) == b"\x00"


@pytest.mark.parametrize("four_bit", [True, False])
@pytest.mark.parametrize(
    "data",
    [
        b"a",
        b"aaaaaaaaaa",
        b"ab",
        bytes(range(256)),
        bytes(range(256)) * 3 + b"\x07" * 500,
        b"".join(bytes((i,)) * (i + 1) for i in range(256)),
    ],
)
def test_round_trip_examples(data, four_bit):
    assert decode(encode(data, four_bit)) == data


def test_skewed_distribution_round_trip():
    fib = [1, 1]
    while len(fib) < 18:
        fib.append(fib[-1] + fib[-2])
    data = b"".join(bytes((sym,)) * count for sym, count in enumerate(fib))
    for four_bit in (True, False):
        assert decode(encode(data, four_bit)) == data


@settings(max_examples=60, deadline=None)
@given(st.binary(min_size=1, max_size=1500))
def test_round_trip_property(data):
    assert decode(encode(data, True)) == data
    assert decode(encode(data, False)) == data


@settings(max_examples=40, deadline=None)
@given(st.binary(min_size=1, max_size=800))
def test_compress_picks_smaller(data):
    out = compress(data)
    assert len(out) == min(len(encode(data, True)), len(encode(data, False)))
    assert decode(out) == data


def test_compress_prefers_eight_bit_on_tie():
    data = b"\x11"
    assert len(encode(data, True)) == len(encode(data, False))
    assert compress(data)[0] == 0x28


def test_empty_input_raises():
    with pytest.raises(CompressionError):
        encode(b"", False)
    with pytest.raises(CompressionError):
        compress(b"")


def test_decode_rejects_wrong_tag():
    with pytest.raises(CompressionError):
        decode(bytes((0x10, 4, 0, 0)) + b"\x00" * 8)


def test_decode_rejects_short_data():
    with pytest.raises(CompressionError):
        decode(b"\x28\x01")


def test_decode_rejects_truncated_stream():
    out = encode(b"some data to encode" * 4, False)
    with pytest.raises(CompressionError):
        decode(out[:4 + 512])