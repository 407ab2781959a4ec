#!/usr/bin/env python3
"""
Image to ASCII Grid Converter
=============================
Converts PIL images into character grids for terminals, ANSI files and HTML.

The image is optionally outlined, flipped and resized so that it splits into
equally sized tiles, one per output character. Rows of tiles are mapped to
characters on a pool of worker threads, each writing its own buffer; the
buffers are joined in row order.
"""

import logging
import time
from typing import List, Optional, Tuple

import numpy as np
from PIL import Image, ImageOps

from ascii_grid.config import Config, HtmlFile, Shell
from ascii_grid.constants import BORDER, HTML_BOTTOM, HTML_TOP
from ascii_grid.edge_detection import edge_detection_filter
from ascii_grid.geometry import calculate_dimensions
from ascii_grid.parallel import run_row_chunks
from ascii_grid.pixel import correlating_char

logger = logging.getLogger(__name__)


class AsciiArtGenerator:
    """Main class for converting images to character grids."""

    def __init__(self, config: Optional[Config] = None,
                 truecolor: bool = False,
                 terminal_size: Optional[Tuple[int, int]] = None):
        """
        Initialize the generator.

        Args:
            config: Conversion config, defaults to `Config()`
            truecolor: Whether 24-bit ANSI colors may be used
            terminal_size: (columns, lines) of the terminal, needed for
                           centering; None disables centering
        """
        self.config = config or Config()
        self.truecolor = truecolor
        self.terminal_size = terminal_size

    def _preprocess_image(self, image: Image.Image) -> Image.Image:
        """Outline and flip the image."""
        img = image

        if self.config.outline:
            # create an outline using an algorithm loosely based on canny edge detection
            img = edge_detection_filter(img, self.config.threads, self.config.hysteresis)

        # flips are applied to the whole image, so every worker sees mirrored rows
        if self.config.transform_x:
            logger.info("Flipping image horizontally")
            img = ImageOps.mirror(img)

        if self.config.transform_y:
            logger.info("Flipping image vertically")
            img = ImageOps.flip(img)

        return img

    def _resize_image(self, image: Image.Image,
                      target_width: int, target_height: int) -> Image.Image:
        """Resize image to target dimensions."""
        return image.convert('RGBA').resize((target_width, target_height), Image.Resampling.LANCZOS)

    def _horizontal_spacing(self, columns: int) -> str:
        if not self.config.center_x or self.terminal_size is None:
            return ''
        width = columns + 2 if self.config.border else columns
        return ' ' * (max(0, self.terminal_size[0] - width) // 2)

    def _vertical_spacing(self, rows: int) -> str:
        if (not self.config.center_y or self.terminal_size is None
                or not isinstance(self.config.target, Shell)):
            return ''
        height = rows + 2 if self.config.border else rows
        return '\n' * (max(0, self.terminal_size[1] - height) // 2)

    def _convert_rows(self, pixels: np.ndarray, columns: int,
                      tile_width: int, tile_height: int,
                      spacing: str, start: int, end: int) -> str:
        """Convert the tile rows [start, end) into text, one line per row."""
        border = BORDER['vertical'] if self.config.border else ''
        lines: List[str] = []

        for row in range(start, end):
            tile_row = row * tile_height
            line = [spacing, border]

            for col in range(columns):
                tile_col = col * tile_width
                block = pixels[tile_row:tile_row + tile_height, tile_col:tile_col + tile_width]
                line.append(correlating_char(block, self.config, self.truecolor))

            line.append(border)
            line.append('\n')
            lines.append(''.join(line))

        return ''.join(lines)

    def generate(self, image: Image.Image) -> str:
        """
        Convert a PIL image.

        Args:
            image: PIL Image to convert

        Returns:
            The converted image, trailing whitespace removed

        Raises:
            ConfigurationError: if the geometry cannot be computed
            WorkerFailure: if a worker thread failed
        """
        config = self.config
        input_width, input_height = image.size
        logger.debug("Input Image Width: %d, Height: %d", input_width, input_height)
        logger.debug("Using inverted color: %s", config.invert)

        if input_width == 0 or input_height == 0:
            logger.warning("Image has no pixels, nothing to convert")
            return ''

        columns, rows, tile_width, tile_height = calculate_dimensions(
            config.target_size, input_width, input_height,
            config.scale, config.border, config.dimension,
        )

        processed = self._preprocess_image(image)

        logger.info("Resizing image to fit new dimensions")
        resized = self._resize_image(processed, columns * tile_width, rows * tile_height)
        logger.debug("Resized Image Width: %d, Height: %d", *resized.size)
        pixels = np.asarray(resized)

        spacing = self._horizontal_spacing(columns)
        is_html = isinstance(config.target, HtmlFile)

        output: List[str] = []
        if is_html:
            output.append(HTML_TOP)

        output.append(self._vertical_spacing(rows))

        if config.border:
            output.append(spacing + BORDER['top_left'] + BORDER['horizontal'] * columns
                          + BORDER['top_right'] + '\n')

        logger.info("Starting conversion to ascii")
        started = time.perf_counter()

        def worker(start: int, end: int) -> str:
            return self._convert_rows(pixels, columns, tile_width, tile_height, spacing, start, end)

        output.extend(run_row_chunks(worker, rows, config.threads, "conversion"))
        logger.info("Converted %d tiles in %d ms", columns * rows,
                    (time.perf_counter() - started) * 1000)

        if config.border:
            output.append(spacing + BORDER['bottom_left'] + BORDER['horizontal'] * columns
                          + BORDER['bottom_right'])

        if is_html:
            output.append(HTML_BOTTOM)

        return ''.join(output).rstrip()


def convert(image: Image.Image,
            config: Optional[Config] = None,
            truecolor: bool = False,
            terminal_size: Optional[Tuple[int, int]] = None) -> str:
    """
    Convenience function to convert an image.

    Args:
        image: PIL Image
        config: Conversion config, defaults to `Config()`
        truecolor: Whether 24-bit ANSI colors may be used
        terminal_size: (columns, lines) used for centering

    Returns:
        The converted image as a single string
    """
    return AsciiArtGenerator(config, truecolor, terminal_size).generate(image)
