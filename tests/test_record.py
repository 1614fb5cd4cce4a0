import pytest
from hypothesis import given, strategies as st

from gritkit.options import (
    MAPSEL_GBA_TEXT,
    Compression,
    DataType,
    FileType,
    GfxMode,
    MapLayout,
    MapRedux,
    ProcMode,
    TexFormat,
)
from gritkit.record import GritRec, ImageInfo, ValidationError


def make_rec(**kwargs):
    image = kwargs.pop("image", ImageInfo(64, 32, 8, 16))
    rec = GritRec(src_path="gfx/brin.png", src_image=image, **kwargs)
    return rec


def test_defaults_match_documented_init():
    rec = GritRec()
    assert rec.file_type == FileType.S
    assert rec.header and rec.export and not rec.append
    assert rec.gfx_data_type == DataType.U32
    assert rec.gfx_bpp == 8
    assert rec.gfx_alpha_color == (255, 0, 255)
    assert rec.map_proc_mode == ProcMode.EXCLUDE
    assert rec.map_redux == MapRedux.REG8
    assert rec.ms_format == MAPSEL_GBA_TEXT
    assert (rec.pal_start, rec.pal_end) == (0, 256)


def test_attribute_predicates():
    rec = GritRec(meta_width=2, meta_height=3, tile_width=8, tile_height=8)
    assert rec.is_tiled() and not rec.is_bitmap()
    assert not rec.is_mapped()
    rec.map_proc_mode = ProcMode.EXPORT
    assert rec.is_mapped()
    assert rec.is_meta_tiled()
    assert rec.mtile_width() == 2 * 8
    assert rec.mtile_height() == 3 * 8
    rec.gfx_mode = GfxMode.BMP
    assert rec.is_bitmap() and not rec.is_mapped()


def test_init_from_image():
    rec = GritRec(src_image=ImageInfo(40, 24, 24, 0))
    rec.init_from_image()
    assert rec.gfx_bpp == 16
    assert rec.pal_end == 256
    assert (rec.area_right, rec.area_bottom) == (40, 24)

    rec = GritRec(src_image=ImageInfo(40, 24, 4, 16))
    rec.init_from_image()
    assert rec.gfx_bpp == 4
    assert rec.pal_end == 16


def test_init_from_image_without_image():
    with pytest.raises(ValidationError):
        GritRec().init_from_image()


def test_validate_requires_image():
    with pytest.raises(ValidationError):
        GritRec(src_path="a.png").validate()


def test_validate_requires_a_path():
    rec = GritRec(src_image=ImageInfo(8, 8, 8, 0))
    with pytest.raises(ValidationError):
        rec.validate()


def test_paths_borrowed_from_source():
    rec = make_rec()
    rec.validate()
    assert rec.dst_path == "brin.s"
    assert rec.sym_name == "brin"


def test_paths_respect_file_type_and_separators():
    rec = make_rec(dst_path="out\\tiles.png", file_type=FileType.C)
    rec.validate_paths()
    assert rec.dst_path == "out/tiles.c"
    assert rec.sym_name == "tiles"


def test_append_uses_source_title():
    rec = make_rec(dst_path="all.s", append=True)
    rec.validate_paths()
    assert rec.sym_name == "brin"


def test_symbol_name_made_identifier():
    rec = make_rec(sym_name="my-gfx")
    rec.validate_paths()
    assert rec.sym_name == "my_gfx"


def test_no_export_skips_paths():
    rec = GritRec(src_image=ImageInfo(8, 8, 8, 0), export=False)
    rec.validate()
    assert rec.dst_path is None and rec.sym_name is None


def test_bad_bpp():
    rec = make_rec(gfx_bpp=7)
    with pytest.raises(ValidationError):
        rec.validate()


def test_truecolor_excludes_map_and_palette():
    rec = make_rec(gfx_bpp=24, map_proc_mode=ProcMode.EXPORT)
    rec.validate()
    assert rec.gfx_bpp == 16
    assert rec.map_proc_mode == ProcMode.EXCLUDE
    assert rec.pal_proc_mode == ProcMode.EXCLUDE


def test_zero_bpp_becomes_eight():
    rec = make_rec(gfx_bpp=0)
    rec.validate()
    assert rec.gfx_bpp == 8


def test_texture_format_needs_enable():
    rec = make_rec(gfx_tex_mode=TexFormat.A3I5)
    with pytest.raises(ValidationError):
        rec.validate()


def test_texture_four_by_four_rejected():
    rec = make_rec(gfx_tex_mode=TexFormat.FOUR_BY_FOUR, tex_mode_enabled=True)
    with pytest.raises(ValidationError):
        rec.validate()


def test_texture_a3i5_guesses_palette():
    rec = make_rec(gfx_tex_mode=TexFormat.A3I5, tex_mode_enabled=True,
                   image=ImageInfo(64, 32, 32, 0))
    rec.validate()
    assert rec.gfx_bpp == 5
    assert rec.pal_end_set
    assert rec.pal_end == rec.pal_start + 32


def test_texture_a5i3_guesses_palette():
    rec = make_rec(gfx_tex_mode=TexFormat.A5I3, tex_mode_enabled=True,
                   image=ImageInfo(64, 32, 32, 0))
    rec.validate()
    assert rec.gfx_bpp == 3
    assert rec.pal_end == rec.pal_start + 8


def test_binary_cannot_append():
    rec = make_rec(file_type=FileType.BIN, append=True)
    rec.validate()
    assert rec.append is False
    assert rec.dst_path.endswith(".bin")


def test_palette_swap_and_clamp():
    rec = make_rec(pal_start=10, pal_end=5, image=ImageInfo(64, 32, 8, 0))
    rec.validate()
    assert (rec.pal_start, rec.pal_end) == (5, 10)

    rec = make_rec(pal_start=-3, pal_end=200, image=ImageInfo(64, 32, 8, 16))
    rec.validate()
    assert rec.pal_start == 0
    assert rec.pal_end == 16


def test_area_swapped_and_filled():
    rec = make_rec(area_left=16, area_right=0)
    rec.validate_area()
    assert rec.area_left == 0
    assert rec.area_right == 16
    assert rec.area_bottom == 32


def test_area_fills_from_image():
    rec = make_rec()
    rec.validate_area()
    assert (rec.area_right, rec.area_bottom) == (64, 32)
    assert (rec.tile_width, rec.tile_height) == (8, 8)


def test_area_needs_image_when_unset():
    rec = GritRec()
    with pytest.raises(ValidationError):
        rec.validate_area()


def test_bitmap_tiles_at_least_one():
    rec = make_rec(gfx_mode=GfxMode.BMP, area_right=13, area_bottom=7)
    rec.validate_area()
    assert (rec.tile_width, rec.tile_height) == (1, 1)
    assert (rec.area_right, rec.area_bottom) == (13, 7)


def test_sbb_layout_aligns_to_screenblock():
    rec = make_rec(map_proc_mode=ProcMode.EXPORT, map_layout=MapLayout.REG)
    rec.validate_area()
    assert rec.area_right % 256 == 0
    assert rec.area_bottom % 256 == 0
    assert rec.area_right >= 64


@given(
    left=st.integers(0, 100),
    width=st.integers(1, 300),
    top=st.integers(0, 100),
    height=st.integers(1, 300),
    meta=st.integers(0, 4),
)
def test_area_is_whole_metatiles(left, width, top, height, meta):
    rec = make_rec(area_left=left, area_right=left + width, area_top=top,
                   area_bottom=top + height, meta_width=meta, meta_height=meta)
    rec.validate_area()
    assert rec.meta_width >= 1
    assert (rec.area_right - rec.area_left) % rec.mtile_width() == 0
    assert (rec.area_bottom - rec.area_top) % rec.mtile_height() == 0
    assert rec.area_right - rec.area_left >= width
    assert rec.area_right - rec.area_left < width + rec.mtile_width()


def test_copy_options_and_strings():
    src = make_rec(gfx_bpp=4, pal_end=16, map_redux=MapRedux.REG4,
                   dst_path="x.s", sym_name="sym", tex_mode_enabled=True)
    dst = GritRec()
    dst.copy_options(src)
    assert dst.gfx_bpp == 4
    assert dst.pal_end == 16
    assert dst.map_redux == MapRedux.REG4
    assert dst.src_path is None
    assert dst.tex_mode_enabled is False
    dst.copy_strings(src)
    assert (dst.src_path, dst.dst_path, dst.sym_name) == (src.src_path, "x.s", "sym")


def test_dump_contains_fields():
    rec = make_rec()
    text = rec.dump()
    assert "    src path gfx/brin.png" in text
    assert "    dst path --" in text
    assert "--- pal ---" in text
    assert "   pal range [0, 256)" in text


def test_dump_short():
    rec = make_rec(map_proc_mode=ProcMode.EXPORT, map_compression=Compression.LZ77)
    rec.validate()
    text = rec.dump_short("# ")
    lines = text.splitlines()
    assert all(line.startswith("# ") for line in lines)
    assert lines[0] == "# gfx/brin.png > brin.s.+.h"
    assert "# brinPal : not cprs, u16, [0,16>" in lines
    assert "# brinTiles : not cprs, u32, 8bpp, +0" in lines
    assert "# brinMap : lz77 cprs, u16, -tf, reg flat, +0" in lines
    assert lines[-1].startswith("# Area : (0,0)-(64,32)")


def test_dump_short_excluded_sections():
    rec = make_rec(pal_proc_mode=ProcMode.EXCLUDE, gfx_mode=GfxMode.BMP)
    text = rec.dump_short(None)
    assert "Pal :" not in text
    assert "Bitmap :" in text
    assert "Map :" not in text