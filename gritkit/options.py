"""Option enumerations and format constants for graphics conversion."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, IntFlag

__all__ = [
    "GritItem",
    "ProcMode",
    "DataType",
    "Compression",
    "GfxMode",
    "TexFormat",
    "MapRedux",
    "MapLayout",
    "FileType",
    "SharedMode",
    "Affix",
    "MapselFormat",
    "MAPSEL_GBA_TEXT",
    "MAPSEL_GBA_AFFINE",
    "type_size",
    "gba_rgb16",
]


class GritItem(IntEnum):
    GFX = 0
    MAP = 1
    METAMAP = 2
    PAL = 3


class ProcMode(IntEnum):
    """Process mode for a data chunk."""

    EXCLUDE = 0
    PROCESS = 1
    OUTPUT = 2
    EXPORT = 3


class DataType(IntEnum):
    """Element type of output arrays."""

    U8 = 0
    U16 = 1
    U32 = 2

    @property
    def ident(self) -> str:
        return ("u8", "u16", "u32")[self]


class Compression(IntEnum):
    OFF = 0
    LZ77 = 1
    HUFF = 2
    RLE = 3
    HEADER = 4

    @property
    def label(self) -> str:
        return ("not", "lz77", "huf", "rle", "fake")[self]


class GfxMode(IntEnum):
    TILE = 0
    BMP = 1
    BMP_A = 2


class TexFormat(IntEnum):
    NONE = 0
    A5I3 = 1
    A3I5 = 2
    FOUR_BY_FOUR = 3


class MapRedux(IntFlag):
    """Tilemap reduction flags; they may be combined."""

    OFF = 0
    TILE = 0x01
    FLIP = 0x04
    PBANK = 0x08
    AFF = 0x01
    REG4 = 0x0D
    REG8 = 0x05
    META_PAL = 0x10


class MapLayout(IntEnum):
    FLAT = 0
    REG = 1
    AFFINE = 2


class FileType(IntEnum):
    C = 0
    S = 1
    BIN = 2
    GBFS = 3
    GRF = 4

    @property
    def extension(self) -> str:
        return ("c", "s", "bin", "gbfs", "grf")[self]


class SharedMode(IntEnum):
    SINGLE = 0
    MULTI = 1
    SHARED = 2
    SINGLE_SHARED = 2
    MULTI_SHARED = 3


class Affix(IntEnum):
    """Indices of the symbol-name affixes."""

    TILE = 0
    BMP = 1
    MAP = 2
    PAL = 3
    MTILE = 4
    MMAP = 5
    GRF = 6

    @property
    def text(self) -> str:
        return ("Tiles", "Bitmap", "Map", "Pal", "MetaTiles", "MetaMap", "Grf")[self]


@dataclass(frozen=True)
class MapselFormat:
    """Bit layout of a packed map entry."""

    base: int
    bit_depth: int
    id_shift: int
    id_len: int
    hflip_shift: int
    hflip_len: int
    vflip_shift: int
    vflip_len: int
    pbank_shift: int
    pbank_len: int


MAPSEL_GBA_TEXT = MapselFormat(0, 16, 0, 10, 10, 1, 11, 1, 12, 4)
MAPSEL_GBA_AFFINE = MapselFormat(0, 8, 0, 8, 10, 0, 11, 0, 12, 0)

OFS_BASE0 = 1 << 31

SE_HFLIP = 0x0400
SE_VFLIP = 0x0800
SE_ID_MASK = 0x03FF
SE_ID_SHIFT = 0
SE_FLIP_MASK = 0x0C00
SE_FLIP_SHIFT = 10
SE_PAL_MASK = 0xF000
SE_PAL_SHIFT = 12

GBA_RED_MASK = 0x001F
GBA_RED_SHIFT = 0
GBA_GREEN_MASK = 0x03E0
GBA_GREEN_SHIFT = 5
GBA_BLUE_MASK = 0x7C00
GBA_BLUE_SHIFT = 10

NDS_ALPHA = 0x8000


def type_size(data_type: int) -> int:
    """Size in bytes of one element of *data_type*."""
    return 1 << int(data_type)


def gba_rgb16(r: int, g: int, b: int) -> int:
    """Pack 5-bit components into a GBA BGR555 colour."""
    return r | (g << 5) | (b << 10)