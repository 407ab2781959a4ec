#!/usr/bin/env python3
"""
Image to ASCII Grid Converter - Constants
=========================================
Character ramps, palettes and fixed markup shared by the conversion pipeline.
"""

from typing import Dict, Tuple


# =============================================================================
# CHARACTER SETS
# =============================================================================

class CharacterSet:
    """Predefined density ramps (densest to sparsest)."""

    SHORT: str = "Ñ@#W$9876543210?!abc;:+=-,._ "
    FLAT: str = "MWNXK0Okxdolc:;,'...   "
    LONG: str = "$@B%8&WM#*oahkbdpqwmZO0QLCJUYXzcvunxrjft/\\|()1{}[]?-_+~<>i!lI;:,\"^`'. "

    @classmethod
    def get_preset(cls, name: str) -> str:
        """
        Resolve a preset name to its ramp.

        Unknown names are returned unchanged, so a user supplied ramp can be
        passed straight through.
        """
        presets = {
            'short': cls.SHORT, 's': cls.SHORT, '0': cls.SHORT,
            'flat': cls.FLAT, 'f': cls.FLAT, '1': cls.FLAT,
            'long': cls.LONG, 'l': cls.LONG, '2': cls.LONG,
        }
        return presets.get(name.lower(), name)


# density map from jp2a
DEFAULT_CHARACTERS = CharacterSet.FLAT

DEFAULT_SCALE = 0.42
DEFAULT_TARGET_SIZE = 80
DEFAULT_THREADS = 4


# =============================================================================
# COLORS
# =============================================================================

# VGA colors as reference ANSI colors, in escape code order
VGA_COLORS: Tuple[Tuple[int, int, int], ...] = (
    (0, 0, 0),        # black
    (170, 0, 0),      # red
    (0, 170, 0),      # green
    (170, 85, 0),     # yellow
    (0, 0, 170),      # blue
    (170, 0, 170),    # magenta
    (0, 170, 170),    # cyan
    (170, 170, 170),  # white
    (128, 128, 128),  # bright black/gray
    (255, 0, 0),      # bright red
    (0, 255, 0),      # bright green
    (255, 255, 0),    # bright yellow
    (0, 0, 255),      # bright blue
    (255, 0, 255),    # bright magenta
    (0, 255, 255),    # bright cyan
    (255, 255, 255),  # bright white
)

ANSI_WHITE = 7

# Luminosity weights, see http://www.johndcook.com/blog/2009/08/24/algorithms-convert-color-grayscale/
LUMINOSITY_WEIGHTS = (0.21, 0.72, 0.07)


# =============================================================================
# EDGE DETECTION
# =============================================================================

BLUR_SIGMA = 6.4
SOBEL_AMPLIFICATION = 3
UPPER_THRESHOLD = 255 * 0.5
LOWER_THRESHOLD = 255 * 0.3


# =============================================================================
# MARKUP
# =============================================================================

BORDER: Dict[str, str] = {
    'top_left': '╔',
    'top_right': '╗',
    'bottom_left': '╚',
    'bottom_right': '╝',
    'horizontal': '═',
    'vertical': '║',
}

HTML_TOP = """<!DOCTYPE html>
<html lang="en">

<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Ascii Image</title>
    <style>* {font-family: Courier;}</style>
</head>

<body>
    <pre>"""

HTML_BOTTOM = "\n</pre></body></html>"
