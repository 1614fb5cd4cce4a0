[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gritkit"
version = "0.9.2"
description = "GBA/NDS BIOS compatible compression (LZ77, RLE, Huffman) and image conversion settings"
requires-python = ">=3.10"
dependencies = []
keywords = ["gba", "nds", "lz77", "rle", "huffman", "compression", "homebrew"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: System :: Archiving :: Compression",
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["gritkit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
