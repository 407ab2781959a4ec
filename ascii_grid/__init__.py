"""
Image to ASCII Grid Converter
=============================
Convert PIL images to character grids for terminals, ANSI files and HTML.

Example:
    from PIL import Image
    import ascii_grid

    config = ascii_grid.ConfigBuilder().target_size(100).build()
    print(ascii_grid.convert(Image.open("image.png"), config))
"""

from ascii_grid.color import supports_truecolor
from ascii_grid.config import (
    AnsiFile,
    Config,
    ConfigBuilder,
    HtmlFile,
    PlainFile,
    ResizingDimension,
    Shell,
    TargetType,
)
from ascii_grid.converter import AsciiArtGenerator, convert
from ascii_grid.exceptions import ConfigurationError, ConversionError, WorkerFailure

__version__ = "0.1.0"

__all__ = [
    "AnsiFile",
    "AsciiArtGenerator",
    "Config",
    "ConfigBuilder",
    "ConfigurationError",
    "ConversionError",
    "HtmlFile",
    "PlainFile",
    "ResizingDimension",
    "Shell",
    "TargetType",
    "WorkerFailure",
    "convert",
    "supports_truecolor",
]
