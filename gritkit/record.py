"""Conversion settings record: defaults, validation and summaries."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from .options import (
    MAPSEL_GBA_TEXT,
    Affix,
    Compression,
    DataType,
    FileType,
    GfxMode,
    MapLayout,
    MapRedux,
    MapselFormat,
    ProcMode,
    TexFormat,
)

__all__ = ["ImageInfo", "ValidationError", "GritRec"]

log = logging.getLogger(__name__)

_LAYOUT_NAMES = ("reg flat", "reg sbb", "affine")

_OPTION_FIELDS = (
    "file_type", "header", "append", "export", "riff",
    "area_left", "area_top", "area_right", "area_bottom",
    "gfx_proc_mode", "gfx_data_type", "gfx_compression", "gfx_mode",
    "gfx_has_alpha", "gfx_alpha_color", "gfx_bpp", "gfx_offset",
    "gfx_offset_on_zero", "gfx_is_shared",
    "map_proc_mode", "map_data_type", "map_compression", "map_redux",
    "map_layout", "ms_format",
    "tile_width", "tile_height", "meta_width", "meta_height", "col_major",
    "pal_proc_mode", "pal_data_type", "pal_compression", "pal_has_alpha",
    "pal_alpha_id", "pal_start", "pal_end",
)


class ValidationError(ValueError):
    """Raised when conversion settings cannot be made valid."""


@dataclass(frozen=True)
class ImageInfo:
    """Dimensions and colour depth of a source image."""

    width: int
    height: int
    bpp: int
    colors: int = 0


def _fix_sep(path: str) -> str:
    return path.replace("\\", "/")


def _split(path: str) -> tuple[str, str]:
    path = _fix_sep(path)
    head, sep, tail = path.rpartition("/")
    return head + sep, tail


def _path_name(path: str) -> str:
    return _split(path)[1]


def _path_title(path: str) -> str:
    name = _path_name(path)
    stem, dot, _ = name.rpartition(".")
    return stem if dot else name


def _path_repl_ext(path: str, ext: str) -> str:
    head, _ = _split(path)
    return f"{head}{_path_title(path)}.{ext}"


def _fix_ident(name: str) -> str:
    ident = re.sub(r"[^A-Za-z0-9_]", "_", name)
    if ident[:1].isdigit():
        ident = "_" + ident
    return ident


def _align(value: int, block: int) -> int:
    return (value + block - 1) // block * block


@dataclass
class GritRec:
    """Settings for one graphics conversion, with grit's default values."""

    src_path: Optional[str] = None
    src_image: Optional[ImageInfo] = None
    dst_path: Optional[str] = None
    sym_name: Optional[str] = None
    file_type: FileType = FileType.S
    header: bool = True
    append: bool = False
    export: bool = True
    riff: bool = False

    area_left: int = 0
    area_top: int = 0
    area_right: int = 0
    area_bottom: int = 0

    gfx_proc_mode: ProcMode = ProcMode.EXPORT
    gfx_data_type: DataType = DataType.U32
    gfx_compression: Compression = Compression.OFF
    gfx_mode: GfxMode = GfxMode.TILE
    tex_mode_enabled: bool = False
    gfx_bpp: int = 8
    gfx_tex_mode: TexFormat = TexFormat.NONE
    gfx_has_alpha: bool = False
    gfx_alpha_color: tuple[int, int, int] = (255, 0, 255)
    gfx_offset: int = 0
    gfx_offset_on_zero: bool = False
    gfx_is_shared: bool = False

    map_proc_mode: ProcMode = ProcMode.EXCLUDE
    map_data_type: DataType = DataType.U16
    map_compression: Compression = Compression.OFF
    map_redux: MapRedux = MapRedux.REG8
    map_layout: MapLayout = MapLayout.FLAT
    ms_format: MapselFormat = field(default=MAPSEL_GBA_TEXT)

    tile_width: int = 0
    tile_height: int = 0
    meta_width: int = 1
    meta_height: int = 1
    col_major: bool = False

    pal_proc_mode: ProcMode = ProcMode.EXPORT
    pal_data_type: DataType = DataType.U16
    pal_compression: Compression = Compression.OFF
    pal_has_alpha: bool = False
    pal_alpha_id: int = 0
    pal_start: int = 0
    pal_end: int = 256
    pal_end_set: bool = False
    pal_is_shared: bool = False

    # --- attributes ---

    def is_tiled(self) -> bool:
        return self.gfx_mode == GfxMode.TILE

    def is_bitmap(self) -> bool:
        return self.gfx_mode != GfxMode.TILE

    def is_mapped(self) -> bool:
        return self.is_tiled() and self.map_proc_mode != ProcMode.EXCLUDE

    def is_meta_tiled(self) -> bool:
        return self.meta_width * self.meta_height > 1

    def mtile_width(self) -> int:
        return self.meta_width * self.tile_width

    def mtile_height(self) -> int:
        return self.meta_height * self.tile_height

    # --- copying ---

    def copy_options(self, other: "GritRec") -> None:
        """Copy the main options (not the strings) from *other*."""
        for name in _OPTION_FIELDS:
            setattr(self, name, getattr(other, name))

    def copy_strings(self, other: "GritRec") -> None:
        """Copy the path and symbol strings from *other*."""
        self.src_path = other.src_path
        self.dst_path = other.dst_path
        self.sym_name = other.sym_name

    # --- setup and validation ---

    def init_from_image(self) -> None:
        """Set palette range, bit depth and area from the source image."""
        image = self.src_image
        if image is None:
            raise ValidationError("No bitmap to initialize GritRec from.")
        self.pal_end = image.colors or 256
        self.gfx_bpp = 16 if image.bpp > 8 else image.bpp
        self.area_right = image.width
        self.area_bottom = image.height

    def validate_paths(self) -> None:
        """Fill in missing destination path and symbol name."""
        if not self.export:
            return
        if not self.src_path and not self.dst_path:
            raise ValidationError("No input or output paths. Validation failed.")

        if self.src_path is None:
            self.src_path = ""
            log.warning("No explicit src path.")
        else:
            self.src_path = _fix_sep(self.src_path)

        if not self.dst_path:
            self.dst_path = _path_name(self.src_path)
            log.warning("No explicit dst path. Borrowing from src path.")

        self.dst_path = _fix_sep(
            _path_repl_ext(self.dst_path, FileType(self.file_type).extension)
        )

        if not self.sym_name:
            if self.append:
                self.sym_name = _path_title(self.src_path)
                log.warning("No explicit symbol name. In append mode, so using src title.")
            else:
                self.sym_name = _path_title(self.dst_path)
                log.warning("No explicit symbol name. In overwrite mode, so using dst title.")
        self.sym_name = _fix_ident(self.sym_name)

    def validate_area(self) -> None:
        """Normalise the export area and round it up to whole blocks."""
        if self.gfx_proc_mode == ProcMode.EXCLUDE and self.map_proc_mode == ProcMode.EXCLUDE:
            return

        al, at, ar, ab = self.area_left, self.area_top, self.area_right, self.area_bottom
        if al > ar:
            log.warning("Area: left (%d) > right (%d). Swapping.", al, ar)
            al, ar = ar, al
        if at > ab:
            log.warning("Area: top (%d) > bottom (%d). Swapping.", at, ab)
            at, ab = ab, at

        if ar == 0 or ab == 0:
            if self.src_image is None:
                raise ValidationError("No input bitmap to take the area size from.")
            if ar == 0:
                ar = self.src_image.width
            if ab == 0:
                ab = self.src_image.height

        aw = ar - al
        ah = ab - at

        self.meta_width = max(self.meta_width, 1)
        self.meta_height = max(self.meta_height, 1)

        if self.gfx_mode == GfxMode.TILE:
            if self.tile_width < 4:
                self.tile_width = 8
            if self.tile_height < 4:
                self.tile_height = 8
        else:
            self.tile_width = max(self.tile_width, 1)
            self.tile_height = max(self.tile_height, 1)

        if self.map_proc_mode == ProcMode.EXPORT and self.map_layout == MapLayout.REG:
            block_w = block_h = 256
        else:
            block_w = self.mtile_width()
            block_h = self.mtile_height()

        if aw % block_w:
            log.warning("Non-integer tiling in width (%d vs %d)", aw, block_w)
            aw = _align(aw, block_w)
        if ah % block_h:
            log.warning("Non-integer tiling in height (%d vs %d)", ah, block_h)
            ah = _align(ah, block_h)

        self.area_left, self.area_top = al, at
        self.area_right, self.area_bottom = al + aw, at + ah

    def validate(self) -> None:
        """Check and correct all settings; raise ValidationError when fatal."""
        log.info("Validating gr.")
        image = self.src_image
        if image is None:
            raise ValidationError("No input bitmap. Validation failed.")

        self.validate_paths()

        demand_tex_mode = True
        if self.gfx_tex_mode == TexFormat.A5I3:
            if image.bpp != 32:
                log.warning("tex format A5I3 specified but source graphics contains no alpha")
            self.gfx_bpp = 3
        elif self.gfx_tex_mode == TexFormat.A3I5:
            if image.bpp != 32:
                log.warning("tex format A3I5 specified but source graphics contains no alpha")
            self.gfx_bpp = 5
        elif self.gfx_tex_mode == TexFormat.FOUR_BY_FOUR:
            raise ValidationError("4x4 is not supported yet.")
        else:
            demand_tex_mode = False

        if demand_tex_mode and not self.tex_mode_enabled:
            raise ValidationError("Specified a texture-only format but did not supply -gx")

        bpp = self.gfx_bpp
        if bpp == 0:
            self.gfx_bpp = 8
        elif bpp in (1, 2, 4, 8):
            pass
        elif bpp in (16, 24, 32):
            self.gfx_bpp = 16
            self.map_proc_mode = ProcMode.EXCLUDE
            self.pal_proc_mode = ProcMode.EXCLUDE
        elif bpp in (3, 5):
            self.map_proc_mode = ProcMode.EXCLUDE
            if not self.pal_end_set:
                self.pal_end_set = True
                log.info("Guessing palette size for A3I5/A5I3 texture")
                self.pal_end = self.pal_start + (8 if bpp == 3 else 32)
        else:
            raise ValidationError(f"Bad bpp ({bpp}).")

        if self.file_type == FileType.BIN and self.append:
            self.append = False
            log.warning("Can't append to binary files. Switching to override mode.")

        if self.pal_proc_mode != ProcMode.EXCLUDE:
            if self.pal_start > self.pal_end:
                log.warning("Palette: start (%d) > end (%d): swapping.",
                            self.pal_start, self.pal_end)
                self.pal_start, self.pal_end = self.pal_end, self.pal_start
            if self.pal_start < 0:
                log.warning("Palette: start (%d) < 0. Clamping to 0.", self.pal_start)
                self.pal_start = 0
            nclrs = image.colors
            if nclrs and self.pal_end > self.pal_start + nclrs:
                log.warning("Palette: end (%d) > #colors (%d). Clamping to %d.",
                            self.pal_end, nclrs, self.pal_start + nclrs)
                self.pal_end = self.pal_start + nclrs

        self.validate_area()
        log.info("Validation succeeded.")

    # --- summaries ---

    def dump(self) -> str:
        """Return a detailed multi-line description of the settings."""
        lines = [
            f"{'src path':>12} {self.src_path or '--'}",
            f"{'dst path':>12} {self.dst_path or '--'}",
            f"{'sym name':>12} {self.sym_name or '--'}",
            f"{'file opt':>12}: type:{int(self.file_type)}, hdr:{int(self.header)}, "
            f"append:{int(self.append)}",
            "--- pal ---",
            f"{'pal opts':>12}: pm:{int(self.pal_proc_mode)}, dt:{int(self.pal_data_type)}, "
            f"cprs:{int(self.pal_compression)}",
            f"{'pal range':>12} [{self.pal_start}, {self.pal_end})",
            "--- image ---",
            f"{'gfx opts':>12}: pm:{int(self.gfx_proc_mode)}, dt:{int(self.gfx_data_type)}, "
            f"cprs:{int(self.gfx_compression)}",
            f"{'gfx bpp':>12} {self.gfx_bpp}",
            f"{'gfx ofs':>12} {self.gfx_offset}",
            f"{'gfx range':>12} ({self.area_left},{self.area_top})-"
            f"({self.area_right},{self.area_bottom})",
            "--- map ---",
            f"{'map opts':>12}: pm:{int(self.map_proc_mode)}, dt:{int(self.map_data_type)}, "
            f"cprs:{int(self.map_compression)}",
            f"{'map ofs':>12} {self.ms_format.base}",
            f"{'meta size':>12} [{self.meta_width}, {self.meta_height}]",
        ]
        return "\n".join(lines) + "\n"

    def dump_short(self, prefix: Optional[str] = None) -> str:
        """Return a compact summary, each line starting with *prefix*."""
        pre = prefix or ""
        sym = self.sym_name or ""
        lines = [
            f"{pre}{self.src_path or ''} >{'>' if self.append else ''} "
            f"{self.dst_path or ''}.{'+.h' if self.header else ''}"
        ]

        if self.pal_proc_mode != ProcMode.EXCLUDE:
            lines.append(
                f"{pre}{sym}{Affix.PAL.text} : "
                f"{Compression(self.pal_compression).label} cprs, "
                f"{DataType(self.pal_data_type).ident}, [{self.pal_start},{self.pal_end}>"
            )

        if self.gfx_proc_mode != ProcMode.EXCLUDE:
            affix = Affix.TILE if self.is_tiled() else Affix.BMP
            lines.append(
                f"{pre}{sym}{affix.text} : "
                f"{Compression(self.gfx_compression).label} cprs, "
                f"{DataType(self.gfx_data_type).ident}, {self.gfx_bpp}bpp, +{self.gfx_offset}"
            )

        if self.map_proc_mode != ProcMode.EXCLUDE:
            affix = Affix.MTILE if self.is_meta_tiled() else Affix.MAP
            text = (
                f"{pre}{sym}{affix.text} : "
                f"{Compression(self.map_compression).label} cprs, "
                f"{DataType(self.map_data_type).ident}, "
            )
            redux = int(self.map_redux)
            if redux:
                text += "-t"
                if redux & MapRedux.FLIP:
                    text += "f"
                if redux & MapRedux.PBANK:
                    text += "p"
                text += ", "
            text += f"{_LAYOUT_NAMES[int(self.map_layout)]}, +{self.ms_format.base}"
            lines.append(text)

        lines.append(
            f"{pre}Area : ({self.area_left},{self.area_top})-"
            f"({self.area_right},{self.area_bottom})    "
            f"Meta: {self.meta_width},{self.meta_height}"
        )
        return "\n".join(lines) + "\n"