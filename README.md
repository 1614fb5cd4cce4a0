# gritkit

Compression routines in the formats understood by the Game Boy Advance and
Nintendo DS BIOS decompressors, together with the option record that
describes an image conversion (tiles, maps, palettes) and its validation.

## Installation

```
pip install gritkit
```

The package has no runtime dependencies.

## Compression

Every compressed stream starts with a 4-byte little-endian header: the low
byte is the type tag (`gritkit.header.CprsTag`), the upper three bytes hold
the decompressed size. Compressed output is padded to a multiple of 4 bytes.

| Module               | Format                                   | Tag          |
|----------------------|------------------------------------------|--------------|
| `gritkit.lz77`       | LZ77/LZSS, safe for VRAM decoding        | `0x10`       |
| `gritkit.huffman`    | Huffman, 4-bit or 8-bit symbols          | `0x24`/`0x28`|
| `gritkit.rle`        | 8-bit run-length encoding                | `0x30`       |
| `gritkit.compression`| uncompressed data behind a header        | `0x00`       |

```python
from gritkit import lz77, rle, huffman
from gritkit.header import CprsTag, create_header, parse_header
from gritkit.compression import compress, decompress, grit_compress
from gritkit.options import Compression

data = bytes(range(16)) * 8

packed = lz77.compress(data)
assert lz77.decompress(packed) == data

packed = rle.compress(data)
assert rle.decompress(packed) == data

packed = huffman.compress(data)        # smaller of 4-bit and 8-bit (8-bit on ties)
assert huffman.decode(packed) == data
packed4 = huffman.encode(data, True)   # force 4-bit symbols

packed = compress(data, CprsTag.LZ77)  # dispatch by tag
assert decompress(packed) == data      # dispatch on the header's tag

tag, size = parse_header(packed)       # (0x10, 128)
create_header(128, CprsTag.RLE)        # b"\x30\x80\x00\x00"

grit_compress(data, Compression.RLE)     # dispatch by conversion mode
grit_compress(data, Compression.OFF)     # data returned unchanged, no header
grit_compress(data, Compression.HEADER)  # data behind a 0x00 header
```

`compression.compress` accepts the tags `FAKE`, `LZ77`, `HUFF8` and `RLE`;
`HUFF8` chooses the smaller Huffman variant. `compression.decompress` handles
`FAKE`, `LZ77` and `RLE` streams; for Huffman streams use `huffman.decode`,
which also reads the extended 8-byte header written for inputs of 16 MiB or
more.

Failures (unknown tags, truncated or corrupt streams, empty input to the
Huffman encoder, inputs too large for the 24-bit size field) raise
`gritkit.header.CompressionError`, a subclass of `ValueError`.

## Conversion settings

`gritkit.options` holds the enumerations used to describe a conversion
(`ProcMode`, `DataType`, `Compression`, `GfxMode`, `TexFormat`, `MapRedux`,
`MapLayout`, `FileType`, `SharedMode`, `Affix`, `GritItem`), the
`MapselFormat` map-entry layout with the `MAPSEL_GBA_TEXT` and
`MAPSEL_GBA_AFFINE` presets, and the helpers `type_size()` and `gba_rgb16()`.

`gritkit.record.GritRec` is a dataclass holding the options of one
conversion, with defaults of assembly output with a header, 8bpp tiles in
`u32` arrays, a `u16` palette of entries 0–256, and the map excluded.
The source image is described by `ImageInfo(width, height, bpp, colors)`.

```python
from gritkit.record import GritRec, ImageInfo

rec = GritRec(src_path="gfx/hero.png", src_image=ImageInfo(30, 20, 8, 16))
rec.init_from_image()   # palette range, bit depth and area from the image
rec.validate()          # dst_path "hero.s", sym_name "hero", area rounded to 8px tiles
print(rec.dump_short())
print(rec.dump())
```

`validate()` fills in a missing destination path and symbol name, checks the
bit depth and texture format, clamps the palette range and rounds the export
area up to whole tiles, meta-tiles or screenblocks. Settings it cannot use
raise `gritkit.record.ValidationError`; corrections it makes are reported
through the `logging` module. `copy_options()` and `copy_strings()` copy
settings between records.

## What is not included

The package does not read or write image files, convert pixel data, build
tilesets or tilemaps, or write C, assembly or binary output files, and it
has no command-line program. It provides the compression formats and the
conversion settings record only.

## Tests

```
pip install -e .[test]
pytest
```