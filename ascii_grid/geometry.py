#!/usr/bin/env python3
"""
Image to ASCII Grid Converter - Geometry
========================================
Derives the character grid and the tile size from the image dimensions.
"""

import logging
import math
from typing import Tuple

from ascii_grid.config import ResizingDimension
from ascii_grid.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def calculate_dimensions(target_size: int,
                         width: int,
                         height: int,
                         scale: float,
                         border: bool,
                         dimension: ResizingDimension) -> Tuple[int, int, int, int]:
    """
    Calculate the output grid and the pixel size of each tile.

    Terminal characters are higher than wide, so only one dimension follows
    `target_size` and the other one is derived through `scale`.

    Args:
        target_size: Number of characters along `dimension`
        width: Input image width in pixels
        height: Input image height in pixels
        scale: Character width/height ratio
        border: Reserve space for a border
        dimension: Dimension `target_size` applies to

    Returns:
        Tuple of (columns, rows, tile_width, tile_height), all at least 1

    Raises:
        ConfigurationError: if any size is zero or the scale is not positive

    Example:
        >>> calculate_dimensions(100, 512, 512, 0.42, False, ResizingDimension.WIDTH)
        (100, 46, 5, 11)
    """
    if target_size < 1:
        raise ConfigurationError(f"Target size must be at least 1, got {target_size}")
    if width < 1 or height < 1:
        raise ConfigurationError(f"Image size {width}x{height} has no pixels")
    if scale <= 0:
        raise ConfigurationError(f"Scale must be positive, got {scale}")

    if dimension == ResizingDimension.WIDTH:
        columns = min(width, target_size)
        if border:
            columns = max(1, columns - 2)

        tile_width = width // columns
        tile_height = max(1, math.floor(tile_width / scale))
        rows = height // tile_height
    else:
        # keep one line free for the prompt
        rows = max(1, target_size - 1) if height > target_size else height

        tile_height = height // rows
        tile_width = max(1, math.ceil(tile_height * scale))
        columns = width // tile_width

        if border:
            columns -= 2
            rows -= 2

    columns, rows = max(1, columns), max(1, rows)
    logger.debug("Columns: %d, Rows: %d", columns, rows)
    logger.debug("Tile Width: %d, Tile Height: %d", tile_width, tile_height)
    return columns, rows, tile_width, tile_height
