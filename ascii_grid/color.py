#!/usr/bin/env python3
"""
Image to ASCII Grid Converter - Color Output
============================================
Wraps density characters in ANSI escape codes or HTML spans.
"""

import os
from typing import Mapping, Optional

from ascii_grid.config import AnsiFile, HtmlFile, Shell, TargetType
from ascii_grid.constants import ANSI_WHITE, VGA_COLORS


def supports_truecolor(environ: Optional[Mapping[str, str]] = None) -> bool:
    """
    Check whether the terminal supports 24-bit colors.

    Only `COLORTERM` is inspected; it has to contain `truecolor` or `24bit`.
    Call this once at startup and pass the result on.
    """
    environ = os.environ if environ is None else environ
    value = environ.get('COLORTERM', '')
    return 'truecolor' in value or '24bit' in value


# =============================================================================
# ANSI COLOR OUTPUT
# =============================================================================

class AnsiColorFormatter:
    """Format characters with ANSI color codes for terminal output."""

    RESET = "\033[0m"

    @staticmethod
    def rgb_to_ansi_24bit(r: int, g: int, b: int, foreground: bool = True) -> str:
        """Convert RGB to 24-bit ANSI color code (true color)."""
        code = 38 if foreground else 48
        return f"\033[{code};2;{r};{g};{b}m"

    @staticmethod
    def rgb_to_ansi(r: int, g: int, b: int) -> int:
        """
        Find the nearest of the 16 ANSI colors.

        Terminals render ANSI colors differently, the VGA colors are used as
        reference. The first color with the smallest squared distance wins.

        Returns:
            Palette index 0-15
        """
        smallest_distance = None
        smallest_index = ANSI_WHITE
        for index, (vr, vg, vb) in enumerate(VGA_COLORS):
            distance = (r - vr) ** 2 + (g - vg) ** 2 + (b - vb) ** 2
            if smallest_distance is None or distance < smallest_distance:
                smallest_distance = distance
                smallest_index = index
        return smallest_index

    @classmethod
    def rgb_to_ansi_16(cls, r: int, g: int, b: int) -> str:
        """Convert RGB to the nearest 16-color ANSI foreground code."""
        index = cls.rgb_to_ansi(r, g, b)
        code = 30 + index if index < 8 else 90 + index - 8
        return f"\033[{code}m"

    @classmethod
    def colored_char(cls, r: int, g: int, b: int, char: str,
                     background: bool, truecolor: bool) -> str:
        """
        Color a single character.

        Background colors need truecolor; the 16-color fallback always colors
        the foreground.
        """
        if truecolor:
            return cls.rgb_to_ansi_24bit(r, g, b, not background) + char + cls.RESET
        return cls.rgb_to_ansi_16(r, g, b) + char + cls.RESET


# =============================================================================
# HTML OUTPUT
# =============================================================================

class HtmlFormatter:
    """Format characters as HTML."""

    @staticmethod
    def escape(char: str) -> str:
        return char.replace('&', '&amp;').replace('<', '&lt;').replace('>', '&gt;')

    @classmethod
    def colored_char(cls, r: int, g: int, b: int, char: str, background: bool) -> str:
        """
        Wrap a character in a span with the given (background) color.

        Whitespace has no visible foreground color, so it is returned without
        a span unless the background is colored.
        """
        hex_color = f"#{r:02X}{g:02X}{b:02X}"
        if background:
            return f'<span style="background-color:{hex_color}">{cls.escape(char)}</span>'
        if char.isspace():
            return char
        return f'<span style="color:{hex_color}">{cls.escape(char)}</span>'


def colored_char(red: int, green: int, blue: int, char: str,
                 target: TargetType, truecolor: bool = False) -> str:
    """
    Return `char` formatted for the output target.

    Args:
        red, green, blue: Average color of the tile
        char: Density character
        target: Output target
        truecolor: Whether 24-bit ANSI colors may be used

    Returns:
        The character, possibly wrapped in ANSI codes or an HTML span
    """
    if isinstance(target, HtmlFile):
        if not target.color:
            return HtmlFormatter.escape(char)
        return HtmlFormatter.colored_char(red, green, blue, char, target.background)

    if isinstance(target, (Shell, AnsiFile)) and target.color:
        return AnsiColorFormatter.colored_char(red, green, blue, char,
                                               target.background, truecolor)

    # plain files and shells without colors
    return char
