"""
bmfont2h - BMFont to C Header Converter
=======================================
Turns a BMFont text descriptor (.fnt) and its page images into a C header
of constant tables that a runtime without a file system can use directly.

Architecture
------------
    cli              Argument handling, output path, exit codes
       │
       ├── parse     Descriptor text -> BMFont
       │      │
       │      └── Diagnostics    Recoverable field problems
       │
       └── emit      BMFont -> C tables + page byte arrays

Quick Start
-----------
    from bmfont2h import parse_descriptor, emit_c_font

    font = parse_descriptor("open_sans.fnt")
    with open("open_sans.h", "w") as f:
        emit_c_font(font, f)

Module Structure
----------------
    bmfont2h/
    ├── font.py          Model: BMFont, Bucket, Char, Page
    ├── parse.py         Descriptor parser
    ├── emit.py          C header emitter
    ├── names.py         Font name -> C symbol prefix
    ├── diagnostics.py   Recoverable parse warnings
    ├── errors.py        Fatal error types
    └── cli.py           Command line entry point
"""

from .font import BMFont, Bucket, Char, Page, ChannelType, CHANNEL_TYPES
from .diagnostics import Diagnostic, Diagnostics
from .errors import BMFontError, DescriptorError, PageOpenError, PageReadError
from .parse import parse_descriptor, parse_lines
from .emit import emit_c_font, render_c_font

__all__ = [
    # Model
    "BMFont",
    "Bucket",
    "Char",
    "Page",
    "ChannelType",
    "CHANNEL_TYPES",
    # Pipeline
    "parse_descriptor",
    "parse_lines",
    "emit_c_font",
    "render_c_font",
    # Diagnostics
    "Diagnostic",
    "Diagnostics",
    # Errors
    "BMFontError",
    "DescriptorError",
    "PageOpenError",
    "PageReadError",
]

__version__ = "1.0.0"
