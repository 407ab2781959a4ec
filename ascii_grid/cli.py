#!/usr/bin/env python3
"""
Image to ASCII Grid Converter - Command Line Interface
=====================================================
Loads images, builds the config from the arguments and prints or saves the
converted result.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from ascii_grid.color import supports_truecolor
from ascii_grid.config import (
    AnsiFile,
    ConfigBuilder,
    HtmlFile,
    PlainFile,
    ResizingDimension,
    Shell,
)
from ascii_grid.constants import DEFAULT_CHARACTERS, DEFAULT_THREADS, CharacterSet
from ascii_grid.converter import convert
from ascii_grid.exceptions import ConversionError

LOG = logging.getLogger("ascii_grid")

EXIT_NO_INPUT = 66
EXIT_NO_TERMINAL = 72
EXIT_CANT_CREATE = 73

MIN_SIZE, MAX_SIZE = 20, 230
MIN_SCALE, MAX_SCALE = 0.1, 1.0

VERBOSITY = {
    'error': logging.ERROR,
    'warn': logging.WARNING,
    'info': logging.INFO,
    'debug': logging.DEBUG,
}


def setup_logging(verbosity: str) -> None:
    level = VERBOSITY[verbosity]
    LOG.setLevel(level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    LOG.handlers[:] = [handler]
    LOG.propagate = False


def create_argument_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        prog='ascii-grid',
        description='Convert images to ASCII art',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s image.png                          # Basic conversion
  %(prog)s image.png -s 120 --border          # 120 columns with a border
  %(prog)s image.png -c long                  # Use the long character ramp
  %(prog)s image.png --outline --hysteresis   # Outline the image
  %(prog)s image.png -o output.html           # Colored HTML output
        """
    )

    # Input/Output
    parser.add_argument('input', nargs='+', help='Input image files. They are not altered')
    parser.add_argument('-o', '--output', type=Path,
                        help='Output file; .html/.htm and .ans/.ansi keep colors')

    # Characters
    parser.add_argument('-c', '--characters',
                        help='Characters used for the image, densest first, '
                             'or one of the presets: short (s, 0), flat (f, 1), long (l, 2)')
    parser.add_argument('--invert-density', action='store_true',
                        help='Invert the density mapping')

    # Size options
    size = parser.add_mutually_exclusive_group()
    size.add_argument('-s', '--size', type=int, default=80,
                      help=f'Output width in characters, clamped to [{MIN_SIZE}, {MAX_SIZE}]')
    size.add_argument('-w', '--width', action='store_true', help='Use the terminal width')
    size.add_argument('--height', action='store_true', help='Use the terminal height')
    parser.add_argument('--ratio', type=float, default=0.42,
                        help='Character width/height ratio, clamped to [0.1, 1.0]')
    parser.add_argument('-j', '--threads', type=int, default=DEFAULT_THREADS,
                        help='Number of worker threads')

    # Transformations
    parser.add_argument('--flipX', action='store_true', help='Flip the image horizontally')
    parser.add_argument('--flipY', action='store_true', help='Flip the image vertically')
    parser.add_argument('--centerX', action='store_true', help='Center the image horizontally')
    parser.add_argument('--centerY', action='store_true', help='Center the image vertically')
    parser.add_argument('--border', action='store_true', help='Draw a border around the image')

    # Edge detection
    parser.add_argument('--outline', action='store_true', help='Only show the outline of the image')
    parser.add_argument('--hysteresis', action='store_true',
                        help='Thin the outline, requires --outline')

    # Colors
    parser.add_argument('--no-color', action='store_true', help='Do not use colors')
    parser.add_argument('--background', action='store_true',
                        help='Color the background instead of the characters')

    parser.add_argument('--verbosity', choices=list(VERBOSITY), default='warn',
                        help='Log level')

    return parser


def terminal_size() -> Optional[Tuple[int, int]]:
    """Return (columns, lines) of the terminal, None when stdout is not a tty."""
    try:
        size = os.get_terminal_size(sys.stdout.fileno())
    except (OSError, ValueError):
        return None
    return size.columns, size.lines


def select_target(output: Optional[Path], color: bool, background: bool, truecolor: bool):
    """Pick the output target from the output file extension."""
    if output is None:
        LOG.debug("Target: Shell")
        return Shell(color=color, background=background)

    extension = output.suffix.lower()
    if extension in ('.html', '.htm'):
        LOG.debug("Target: Html-File")
        return HtmlFile(color=color, background=background)

    if extension in ('.ans', '.ansi'):
        # ansi files are colored by definition
        if not color:
            LOG.warning("--no-color conflicts with the target file type, "
                        "falling back to a plain text file")
            return PlainFile()
        if not truecolor:
            LOG.warning("Truecolor is disabled, output file will not use truecolor")
        LOG.debug("Target: Ansi-File")
        return AnsiFile(background=background)

    if color:
        LOG.warning("Filetype does not support colors. "
                    "For colored output files use either .html or .ansi files")
    LOG.debug("Target: File")
    return PlainFile()


def load_image(path: str) -> Image.Image:
    LOG.info("Opening image %s", path)
    image = Image.open(path)
    image.load()
    return image


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for command line usage."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbosity)

    LOG.info("Checking inputs")
    for value in args.input:
        path = Path(value)
        if not path.exists():
            LOG.error("File %s does not exist", value)
            return EXIT_NO_INPUT
        if not path.is_file():
            LOG.error("%s is not a file", value)
            return EXIT_NO_INPUT

    builder = ConfigBuilder()

    characters = CharacterSet.get_preset(args.characters) if args.characters else DEFAULT_CHARACTERS
    LOG.debug("Characters used: '%s'", characters)
    builder.characters(characters)

    if args.width or args.height:
        size = terminal_size()
        if size is None:
            LOG.error("Failed to read terminal size, STDOUT is not a tty")
            return EXIT_NO_TERMINAL
        if args.height:
            builder.dimension(ResizingDimension.HEIGHT)
            target_size = size[1]
        else:
            target_size = size[0]
    else:
        target_size = args.size
    # below 20 the image is barely visible, above 230 it might not be displayed properly
    target_size = max(MIN_SIZE, min(MAX_SIZE, target_size))
    LOG.debug("Target Size: %d", target_size)
    builder.target_size(target_size)

    scale = max(MIN_SCALE, min(MAX_SCALE, args.ratio))
    LOG.debug("Scale: %s", scale)
    builder.scale(scale)
    builder.threads(max(1, args.threads))
    builder.invert(args.invert_density)

    truecolor = supports_truecolor()
    color = not args.no_color
    if color:
        if args.outline:
            LOG.warning("Using outline, result will only be in grayscale")
        if not truecolor:
            if args.background:
                LOG.warning("Background flag will be ignored, since truecolor is not supported")
            LOG.warning("Truecolor is not supported. Using ansi color")
    else:
        LOG.info("Using non-colored ascii")

    builder.border(args.border)
    builder.transform_x(args.flipX)
    builder.transform_y(args.flipY)
    builder.center_x(args.centerX)
    builder.center_y(args.centerY)
    builder.outline(args.outline)
    if args.hysteresis:
        if args.outline:
            LOG.warning("Using hysteresis might result in a worse looking image than only using --outline")
            builder.hysteresis(True)
        else:
            LOG.warning("--hysteresis has no effect without --outline")

    builder.target(select_target(args.output, color, args.background, truecolor))

    try:
        config = builder.build()
        size = terminal_size() if (args.centerX or args.centerY) else None

        results = []
        for path in args.input:
            try:
                image = load_image(path)
            except (OSError, UnidentifiedImageError) as e:
                LOG.error("Error loading image %s: %s", path, e)
                return EXIT_NO_INPUT
            results.append(convert(image, config, truecolor, size))
    except ConversionError as e:
        LOG.error("Error encountered when converting image: %s", e)
        return 1

    output = '\n'.join(results)

    if args.output:
        LOG.info("Writing output to output file")
        try:
            with open(args.output, 'w', encoding='utf-8') as f:
                f.write(output)
        except OSError as e:
            LOG.error("Could not create output file: %s", e)
            return EXIT_CANT_CREATE
        print(f"Written {len(output.encode('utf-8'))} bytes to {args.output}")
    else:
        print(output)

    return 0


if __name__ == '__main__':
    sys.exit(main())
