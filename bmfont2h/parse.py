"""
BMFont Descriptor Parser
========================
Reads a BMFont text descriptor (.fnt) into a BMFont model.

Descriptor Layout:
    One tag per line, followed by key=value fields:

    info face="Open Sans" size=32 bold=0 ...
    common lineHeight=38 base=30 scaleW=256 scaleH=256 pages=1 packed=0 ...
    page id=0 file="open_sans_0.png"
    chars count=95
    char id=32 x=0 y=0 width=0 height=0 xoffset=0 yoffset=30 xadvance=8 ...
    kernings count=1
    kerning first=65 second=86 amount=-2

Handled tags: info, common, page, char, kerning. Everything else
(chars, kernings, unknown tags) is ignored.

Error Policy:
    - A malformed numeric field is recorded in Diagnostics and skipped
    - info.size that is not a number aborts the parse
    - A channel index outside CHANNEL_TYPES aborts the parse
    - A missing page file aborts the parse
    - Zero-amount kerning pairs and pairs whose first char is unknown
      are dropped silently

Usage:
    from bmfont2h.parse import parse_descriptor

    font = parse_descriptor("fonts/open_sans.fnt")
"""

import logging
import re
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .diagnostics import Diagnostics
from .errors import DescriptorError, PageOpenError
from .font import BMFont, Char, Page, CHANNEL_TYPES, to_fixed_width
from .names import screaming_snake

logger = logging.getLogger(__name__)

_INT_RE = re.compile(r"^[+-]?[0-9]+$")

# common field -> (BMFont attribute, C type)
_COMMON_FIELDS = {
    "lineHeight": ("line_height", "uint8_t"),
    "base": ("base", "uint8_t"),
    "scaleW": ("scale_w", "uint16_t"),
    "scaleH": ("scale_h", "uint16_t"),
    "packed": ("packed", "uint8_t"),
}

# common field -> BMFont channel attribute
_CHANNEL_FIELDS = {
    "alphaChnl": "a_type",
    "redChnl": "r_type",
    "greenChnl": "g_type",
    "blueChnl": "b_type",
}

# char field spellings -> Char attribute
_CHAR_ALIASES = {
    "chnl": "channels",
}

# kerning field -> C type
_KERNING_FIELDS = {
    "first": "uint32_t",
    "second": "uint32_t",
    "amount": "int16_t",
}


# =============================================================================
# Field Splitting
# =============================================================================

def split_fields(line: str, text_keys: Iterable[str] = ()) -> List[Tuple[str, str]]:
    """
    Split a descriptor line into (key, value) pairs, skipping the tag.

    Tokens without '=' continue the value of a preceding text field
    (face="Open Sans" arrives as two tokens) and are joined with a single
    space. Elsewhere they are ignored. Double quotes around values are
    stripped.

    Args:
        line: Raw descriptor line
        text_keys: Keys whose values may span several tokens

    Returns:
        List of (key, value) in line order
    """
    fields = []
    continuing = False
    for token in line.split()[1:]:
        key, sep, value = token.partition("=")
        if sep:
            fields.append([key, value])
            continuing = key in text_keys
        elif continuing:
            fields[-1][1] += " " + token
    return [(key, value.strip('"')) for key, value in fields]


def parse_int(value: str) -> int:
    """
    Parse a base-10 integer with optional sign.

    Raises:
        ValueError: If value is not a plain integer
    """
    if not _INT_RE.match(value):
        raise ValueError(f"invalid integer {value!r}")
    return int(value, 10)


# =============================================================================
# Parser
# =============================================================================

class DescriptorParser:
    """
    Incremental line parser building one BMFont.

    Args:
        base_dir: Directory page file names are resolved against
        diagnostics: Collector for recoverable problems (created if None)
    """

    def __init__(self, base_dir, diagnostics: Optional[Diagnostics] = None):
        self.base_dir = Path(base_dir)
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.font = BMFont()
        self._lineno = 0
        self._handlers = {
            "info": self._parse_info,
            "common": self._parse_common,
            "page": self._parse_page,
            "char": self._parse_char,
            "kerning": self._parse_kerning,
        }

    def feed(self, line: str):
        """Parse one descriptor line."""
        self._lineno += 1
        tokens = line.split(None, 1)
        if not tokens:
            return
        handler = self._handlers.get(tokens[0])
        if handler is not None:
            handler(line)

    def abort(self, message: str, cause=None):
        """Release opened pages and raise DescriptorError with the partial font."""
        self.font.close()
        raise DescriptorError(f"line {self._lineno}: {message}",
                              font=self.font) from cause

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _warn(self, tag: str, field, message: str):
        self.diagnostics.warn(self._lineno, tag, field, message)

    def _number(self, tag: str, key: str, value: str, ctype: str) -> Optional[int]:
        """
        Parse a numeric field and fit it to ctype.

        Returns None (after recording a warning) if the value is malformed.
        Out-of-range values are truncated with a warning.
        """
        try:
            number = parse_int(value)
        except ValueError as e:
            self._warn(tag, key, f"failed to parse value: {e}")
            return None
        fitted = to_fixed_width(number, ctype)
        if fitted != number:
            self._warn(tag, key, f"value {number} does not fit {ctype}, "
                                 f"truncated to {fitted}")
        return fitted

    # -------------------------------------------------------------------------
    # Tags
    # -------------------------------------------------------------------------

    def _parse_info(self, line: str):
        logger.debug("parsing info tag")
        for key, value in split_fields(line, text_keys=("face",)):
            if key == "face":
                self.font.name = value
            elif key == "size":
                try:
                    size = parse_int(value)
                except ValueError as e:
                    self.abort(f"info.size: {e}", cause=e)
                self.font.size = to_fixed_width(size, "uint16_t")
                if self.font.size != size:
                    self._warn("info", key, f"value {size} does not fit "
                                            f"uint16_t, truncated to {self.font.size}")
        self.font.name = screaming_snake(self.font.name)

    def _parse_common(self, line: str):
        logger.debug("parsing common tag")
        for key, value in split_fields(line):
            if key in _COMMON_FIELDS:
                attr, ctype = _COMMON_FIELDS[key]
                number = self._number("common", key, value, ctype)
                if number is not None:
                    setattr(self.font, attr, number)
            elif key in _CHANNEL_FIELDS:
                try:
                    index = parse_int(value)
                except ValueError as e:
                    self._warn("common", key, f"failed to parse value: {e}")
                    continue
                if not 0 <= index < len(CHANNEL_TYPES):
                    self.abort(f"common.{key}: channel index {index} out of "
                               f"range 0..{len(CHANNEL_TYPES) - 1}")
                setattr(self.font, _CHANNEL_FIELDS[key], CHANNEL_TYPES[index])

    def _parse_page(self, line: str):
        logger.debug("parsing page tag")
        for key, value in split_fields(line, text_keys=("file",)):
            if key == "id":
                logger.debug("found page %s", value)
            elif key == "file":
                path = self.base_dir / value
                logger.debug("opening '%s'", path)
                try:
                    page = Page.open(str(path))
                except OSError as e:
                    self.font.close()
                    raise PageOpenError(
                        f"line {self._lineno}: failed to open page file "
                        f"'{path}': {e.strerror or e}",
                        path=str(path), font=self.font,
                    ) from e
                self.font.pages.append(page)

    def _parse_char(self, line: str):
        char = Char()
        for key, value in split_fields(line):
            key = _CHAR_ALIASES.get(key, key)
            ctype = Char.FIELD_TYPES.get(key)
            if ctype is None:
                continue
            number = self._number("char", key, value, ctype)
            if number is not None:
                setattr(char, key, number)

        if self.font.find_char(char.id) is not None:
            self._warn("char", "id", f"duplicate char {char.id}, ignored")
            return
        self.font.insert_char(char)

    def _parse_kerning(self, line: str):
        values = {"first": 0, "second": 0, "amount": 0}
        for key, value in split_fields(line):
            ctype = _KERNING_FIELDS.get(key)
            if ctype is None:
                continue
            number = self._number("kerning", key, value, ctype)
            if number is not None:
                values[key] = number

        if values["amount"] == 0:
            return
        char = self.font.find_char(values["first"])
        if char is not None:
            char.add_kerning(values["second"], values["amount"])


# =============================================================================
# Entry Points
# =============================================================================

def parse_lines(lines: Iterable[str], base_dir,
                diagnostics: Optional[Diagnostics] = None) -> BMFont:
    """
    Parse descriptor lines into a BMFont.

    Args:
        lines: Descriptor text, one line per item
        base_dir: Directory page file names are resolved against
        diagnostics: Collector for recoverable problems

    Returns:
        Populated BMFont owning open page handles

    Raises:
        DescriptorError: On a fatal parse condition
    """
    parser = DescriptorParser(base_dir, diagnostics)
    for line in lines:
        parser.feed(line)
    return parser.font


def parse_descriptor(path, diagnostics: Optional[Diagnostics] = None) -> BMFont:
    """
    Parse a BMFont text descriptor file.

    Page files are resolved relative to the descriptor's directory and
    stay open in the returned font until emitted or closed.

    Args:
        path: Descriptor file path
        diagnostics: Collector for recoverable problems

    Returns:
        Populated BMFont

    Raises:
        DescriptorError: If the descriptor cannot be read or is fatally
                         malformed (PageOpenError for missing pages)
    """
    path = Path(path)
    parser = DescriptorParser(path.parent, diagnostics)
    try:
        with open(path, "r", encoding="utf-8-sig", errors="replace") as f:
            for line in f:
                parser.feed(line)
    except OSError as e:
        parser.font.close()
        raise DescriptorError(
            f"failed to read font descriptor '{path}': {e.strerror or e}",
            path=str(path), font=parser.font,
        ) from e
    except DescriptorError as e:
        if e.path is None:
            e.path = str(path)
        raise
    return parser.font
