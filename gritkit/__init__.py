"""GBA/NDS BIOS compatible compression (LZ77, RLE, Huffman) and conversion settings."""

__version__ = "0.9.2"
__all__ = ["header", "rle", "options", "huffman", "lz77", "compression", "record"]