#!/usr/bin/env python3
"""
Image to ASCII Grid Converter - Configuration
=============================================
Immutable conversion config, output target variants and the config builder.
"""

from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Optional, Union

from ascii_grid.constants import (
    DEFAULT_CHARACTERS,
    DEFAULT_SCALE,
    DEFAULT_TARGET_SIZE,
    DEFAULT_THREADS,
)
from ascii_grid.exceptions import ConfigurationError


# =============================================================================
# ENUMS AND TARGETS
# =============================================================================

class ResizingDimension(Enum):
    """Dimension the target size applies to; the other one is derived."""
    WIDTH = auto()
    HEIGHT = auto()


@dataclass(frozen=True)
class Shell:
    """Standard output. Supports foreground and background colors."""
    color: bool = True
    background: bool = False


@dataclass(frozen=True)
class AnsiFile:
    """ANSI/.ans file, always colored."""
    background: bool = False

    @property
    def color(self) -> bool:
        return True


@dataclass(frozen=True)
class HtmlFile:
    """HTML document with colored spans."""
    color: bool = True
    background: bool = False


@dataclass(frozen=True)
class PlainFile:
    """Any other file. No color support."""

    @property
    def color(self) -> bool:
        return False

    @property
    def background(self) -> bool:
        return False


TargetType = Union[Shell, AnsiFile, HtmlFile, PlainFile]


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass(frozen=True)
class Config:
    """Configuration for one conversion. Build it through `ConfigBuilder`."""

    # Density ramp, densest character first
    characters: str = DEFAULT_CHARACTERS
    threads: int = DEFAULT_THREADS               # Worker threads per stage
    scale: float = DEFAULT_SCALE                 # Character width/height ratio
    target_size: int = DEFAULT_TARGET_SIZE       # Cells along `dimension`
    invert: bool = False                         # Invert density mapping
    border: bool = False                         # Surround output with a box
    dimension: ResizingDimension = ResizingDimension.WIDTH

    # Transformations
    transform_x: bool = False                    # Flip horizontally
    transform_y: bool = False                    # Flip vertically
    center_x: bool = False                       # Center in terminal width
    center_y: bool = False                       # Center in terminal height

    # Edge detection
    outline: bool = False
    hysteresis: bool = False                     # Only used with outline

    target: TargetType = field(default_factory=Shell)

    @classmethod
    def builder(cls) -> 'ConfigBuilder':
        return ConfigBuilder()


class ConfigBuilder:
    """
    Chainable builder for `Config`.

    Example:
        config = ConfigBuilder().target_size(100).border(True).build()
    """

    def __init__(self, config: Optional[Config] = None):
        self._values = config or Config()

    def _set(self, **changes) -> 'ConfigBuilder':
        self._values = replace(self._values, **changes)
        return self

    def characters(self, characters: str) -> 'ConfigBuilder':
        # an empty ramp cannot represent anything, keep the current one
        if characters:
            self._set(characters=characters)
        return self

    def threads(self, threads: int) -> 'ConfigBuilder':
        return self._set(threads=threads)

    def scale(self, scale: float) -> 'ConfigBuilder':
        return self._set(scale=scale)

    def target_size(self, target_size: int) -> 'ConfigBuilder':
        return self._set(target_size=target_size)

    def invert(self, invert: bool) -> 'ConfigBuilder':
        return self._set(invert=invert)

    def border(self, border: bool) -> 'ConfigBuilder':
        return self._set(border=border)

    def dimension(self, dimension: ResizingDimension) -> 'ConfigBuilder':
        return self._set(dimension=dimension)

    def transform_x(self, transform_x: bool) -> 'ConfigBuilder':
        return self._set(transform_x=transform_x)

    def transform_y(self, transform_y: bool) -> 'ConfigBuilder':
        return self._set(transform_y=transform_y)

    def center_x(self, center_x: bool) -> 'ConfigBuilder':
        return self._set(center_x=center_x)

    def center_y(self, center_y: bool) -> 'ConfigBuilder':
        return self._set(center_y=center_y)

    def outline(self, outline: bool) -> 'ConfigBuilder':
        return self._set(outline=outline)

    def hysteresis(self, hysteresis: bool) -> 'ConfigBuilder':
        return self._set(hysteresis=hysteresis)

    def target(self, target: TargetType) -> 'ConfigBuilder':
        return self._set(target=target)

    def build(self) -> Config:
        """
        Validate and return the config.

        Raises:
            ConfigurationError: if a numeric value is out of range
        """
        config = self._values
        if config.target_size < 1:
            raise ConfigurationError(f"Target size must be at least 1, got {config.target_size}")
        if config.threads < 1:
            raise ConfigurationError(f"Thread count must be at least 1, got {config.threads}")
        if config.scale <= 0:
            raise ConfigurationError(f"Scale must be positive, got {config.scale}")
        if not isinstance(config.target, (Shell, AnsiFile, HtmlFile, PlainFile)):
            raise ConfigurationError(f"Unknown target: {config.target!r}")
        return config
