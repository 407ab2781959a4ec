#!/usr/bin/env python3
"""
Image to ASCII Grid Converter - Pixel Density
=============================================
Maps blocks of pixels to density characters.
"""

from typing import Tuple, Union

import numpy as np

from ascii_grid.color import colored_char
from ascii_grid.config import Config
from ascii_grid.constants import LUMINOSITY_WEIGHTS


def map_range(from_range: Tuple[float, float],
              to_range: Tuple[float, float],
              value: float) -> float:
    """Remap a value from one range to another. Values outside are not clamped."""
    return to_range[0] + (value - from_range[0]) * (to_range[1] - to_range[0]) / (from_range[1] - from_range[0])


def luminosity(red: Union[float, np.ndarray],
               green: Union[float, np.ndarray],
               blue: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """Weighted grayscale value of an RGB color. Works on scalars and arrays."""
    wr, wg, wb = LUMINOSITY_WEIGHTS
    return wr * red + wg * green + wb * blue


def average_color(block) -> Tuple[int, int, int]:
    """
    Average RGB color of a block of pixels.

    Each channel is the quadratic mean of the pixel values, which is closer to
    how bright colors blend than the arithmetic mean.

    Args:
        block: Array (or sequence) of pixels with at least 3 channels;
               any extra channel such as alpha is ignored

    Returns:
        (r, g, b) tuple, (0, 0, 0) for an empty block
    """
    arr = np.asarray(block, dtype=np.float64)
    if arr.size == 0:
        return 0, 0, 0

    rgb = arr.reshape(-1, arr.shape[-1])[:, :3]
    mean = np.sqrt(np.mean(rgb * rgb, axis=0))
    red, green, blue = (int(round(channel)) for channel in mean)
    return red, green, blue


def density_char(lum: float, characters: str, invert: bool) -> str:
    """
    Pick the ramp character for a luminosity value.

    Bright values select the start of the ramp unless `invert` is set.
    A value mapped past the end of the ramp becomes a space.
    """
    length = len(characters)
    to_range = (0.0, float(length)) if invert else (float(length), 0.0)

    index = int(np.clip(np.floor(map_range((0.0, 255.0), to_range, lum)), 0, length))
    return characters[index] if index < length else ' '


def density_glyph(block, characters: str, invert: bool) -> Tuple[float, str]:
    """Return the luminosity of a pixel block and its density character."""
    lum = luminosity(*average_color(block))
    return lum, density_char(lum, characters, invert)


def correlating_char(block, config: Config, truecolor: bool = False) -> str:
    """
    Convert a pixel block to its output fragment.

    Args:
        block: Pixels of one tile
        config: Conversion config, provides ramp, inversion and target
        truecolor: Whether 24-bit ANSI colors may be used

    Returns:
        The density character, colored for the config target
    """
    red, green, blue = average_color(block)
    char = density_char(luminosity(red, green, blue), config.characters, config.invert)
    return colored_char(red, green, blue, char, config.target, truecolor)
