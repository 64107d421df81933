"""
bmfont2h Command Line
=====================
Converts a BMFont text descriptor and its page images to a C header.

Usage:
    # Header named after the font, written to the current directory
    bmfont2h fonts/open_sans.fnt

    # Explicit output file
    bmfont2h fonts/open_sans.fnt include/open_sans.h

    # Output directory (file named <font name>.h)
    bmfont2h fonts/open_sans.fnt include/
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .diagnostics import Diagnostics
from .emit import emit_c_font
from .errors import BMFontError
from .parse import parse_descriptor

logger = logging.getLogger("bmfont2h")

HEADER_SUFFIX = ".h"


def resolve_output(output: Optional[Path], font_name: str, input_path: Path) -> Path:
    """
    Decide the header path.

    Args:
        output: Path given on the command line, or None
        font_name: Normalized font name
        input_path: Absolute descriptor path (name fallback)

    Returns:
        Absolute output file path. A directory (or no output at all)
        gets <font name in lower case>.h inside it.
    """
    if output is not None:
        output = output.resolve()
        if not output.is_dir():
            return output
        directory = output
    else:
        directory = Path.cwd()
    stem = font_name.lower() or input_path.stem
    return directory / (stem + HEADER_SUFFIX)


def convert(input_path: Path, output: Optional[Path] = None,
            diagnostics: Optional[Diagnostics] = None) -> Path:
    """
    Parse a descriptor and write its header.

    Returns:
        Path of the written header

    Raises:
        BMFontError: On a fatal parse or page read error
        OSError: If the output file cannot be written
    """
    input_path = input_path.resolve()
    font = parse_descriptor(input_path, diagnostics)
    with font:
        out_path = resolve_output(output, font.name, input_path)
        logger.info(f"Loaded {font.name or input_path.stem}: "
                    f"{len(font.buckets)} buckets, {font.char_count} chars, "
                    f"{font.kerning_count} kerning pairs, {len(font.pages)} pages")

        out_path.parent.mkdir(parents=True, exist_ok=True)
        with open(out_path, "w", encoding="utf-8", newline="\n") as f:
            try:
                emit_c_font(font, f)
            except BaseException:
                f.close()
                out_path.unlink(missing_ok=True)
                raise

    size_kb = out_path.stat().st_size / 1024
    logger.info(f"Created: {out_path} ({size_kb:.1f} KB)")
    return out_path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bmfont2h",
        description="Convert a BMFont text descriptor to a C header",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Header named after the font in the current directory
  bmfont2h open_sans.fnt

  # Explicit output file
  bmfont2h open_sans.fnt include/open_sans.h

  # Output directory
  bmfont2h open_sans.fnt include/
        """
    )

    parser.add_argument('input', type=Path, help='BMFont text descriptor (.fnt)')
    parser.add_argument('output', type=Path, nargs='?',
                        help='Output header file or directory (default: current directory)')

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument('--verbose', '-v', action='store_true',
                           help='Log parsing progress')
    verbosity.add_argument('--quiet', '-q', action='store_true',
                           help='Only log warnings and errors')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    diagnostics = Diagnostics()
    try:
        convert(args.input, args.output, diagnostics)
    except (BMFontError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if diagnostics:
        logger.warning(f"{len(diagnostics)} field(s) skipped or truncated")
    return 0


if __name__ == '__main__':
    sys.exit(main())
