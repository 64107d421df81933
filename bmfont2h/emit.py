"""
C Header Emitter
================
Writes a parsed BMFont as a self-contained C header.

Output Layout:
    #ifndef _<NAME>_H_             Header guard
    BMFont types                   Shared, guarded by _BMFONT_TYPES_
    extern declarations            Every generated array
    BMFONT_<NAME>                  Top-level descriptor literal
    BMFONT_<NAME>_BUCKETS[]        {startChar, endChar, chars}
    BMFONT_<NAME>_PAGES[]          {size, data}
    BMFONT_<NAME>_KERNINGS_CHAR_<id>[]   One per glyph with kerning pairs
    BMFONT_<NAME>_BUCKET_<i>[]     Glyph metrics, one array per bucket
    BMFONT_<NAME>_PAGE_<i>[]       Raw page file bytes, 16 per line
    #endif

The descriptor and metadata arrays point at arrays defined further down,
so all array symbols are declared before the first definition.

Each page file is streamed into the output and its handle released
exactly once, on success or failure.
"""

import io
import logging
from typing import List, TextIO

from .errors import PageReadError
from .font import BMFont, Char

logger = logging.getLogger(__name__)

BYTES_PER_LINE = 16
KERNINGS_MAX = 0xFF  # BMFontChar.kerningsCount is uint8_t


# =============================================================================
# Templates
# =============================================================================

HEADER = """\
#ifndef _{name}_H_
#define _{name}_H_
"""

TYPES = """

#ifndef _BMFONT_TYPES_
#define _BMFONT_TYPES_

#include <stdint.h>
#include <stddef.h>

typedef struct BMFontKerning {
  uint32_t secondChar;
  int16_t amount;
} BMFontKerning;

typedef struct BMFontChar {
  uint16_t x;
  uint16_t y;
  uint16_t width;
  uint16_t height;
  int16_t xoffset;
  int16_t yoffset;
  int16_t xadvance;
  uint8_t page;
  uint8_t kerningsCount;
  uint8_t channels; // 1 = blue, 2 = green, 4 = red, 8 = alpha, 15 = all
  const BMFontKerning *kernings;
} BMFontChar;

typedef struct BMFontBucket {
  uint32_t startChar; // char ch is chars[ch - startChar]
  uint32_t endChar;
  const BMFontChar *chars;
} BMFontBucket;

typedef struct BMFontPage {
  unsigned int size;
  unsigned char *data; // page file contents
} BMFontPage;

typedef enum {
  CHANNEL_GLYPH,
  CHANNEL_OUTLINE,
  CHANNEL_GLYPH_OUTLINE,
  CHANNEL_ZERO,
  CHANNEL_ONE,
} ChannelType;

typedef struct BMFont {
  uint16_t scaleW;
  uint16_t scaleH;
  uint16_t size;
  uint8_t lineHeight;
  uint8_t base;
  uint8_t isPacked;
  ChannelType aChannelType;
  ChannelType rChannelType;
  ChannelType gChannelType;
  ChannelType bChannelType;

  uint16_t bucketCount;
  const BMFontBucket *buckets;
  uint16_t pageCount;
  const BMFontPage *pages;
} BMFont;

#endif

"""

DESCRIPTOR = """
const struct BMFont {symbol} = {{
    .size = {font.size},
    .lineHeight = {font.line_height},
    .base = {font.base},
    .scaleW = {font.scale_w},
    .scaleH = {font.scale_h},
    .isPacked = {font.packed},
    .aChannelType = {font.a_type},
    .rChannelType = {font.r_type},
    .gChannelType = {font.g_type},
    .bChannelType = {font.b_type},

    .bucketCount = {bucket_count},
    .buckets = {buckets},
    .pageCount = {page_count},
    .pages = {pages},
}};
"""

FOOTER = "#endif\n"


# =============================================================================
# Symbols
# =============================================================================

class Symbols:
    """
    Names of every array generated for a font.

    Computed up front so declarations can be emitted before any
    definition refers to them.
    """

    def __init__(self, font: BMFont):
        prefix = f"BMFONT_{font.name}"
        self.descriptor = prefix
        self.buckets = f"{prefix}_BUCKETS"
        self.pages = f"{prefix}_PAGES"
        self._prefix = prefix
        self._font = font

    def bucket(self, index: int) -> str:
        return f"{self._prefix}_BUCKET_{index}"

    def kernings(self, char: Char) -> str:
        return f"{self._prefix}_KERNINGS_CHAR_{char.id}"

    def page(self, index: int) -> str:
        return f"{self._prefix}_PAGE_{index}"

    def declarations(self) -> List[str]:
        """
        Forward declarations for all arrays, in definition order.
        """
        decls = [
            f"extern const BMFontBucket {self.buckets}[];",
            f"extern const BMFontPage {self.pages}[];",
        ]
        for char in self._font.chars():
            if char.kernings:
                decls.append(f"extern const BMFontKerning {self.kernings(char)}[];")
        for i in range(len(self._font.buckets)):
            decls.append(f"extern const BMFontChar {self.bucket(i)}[];")
        for i in range(len(self._font.pages)):
            decls.append(f"extern unsigned char {self.page(i)}[];")
        return decls


def char_label(cp: int) -> str:
    """Quoted character for comments, or U+XXXX if not printable."""
    try:
        ch = chr(cp)
    except (ValueError, OverflowError):
        return f"U+{cp:04X}"
    if ch.isprintable():
        return f"'{ch}'"
    return f"U+{cp:04X}"


def byte_line(data: bytes) -> str:
    """One line of byte literals, each followed by a comma."""
    return "    " + " ".join(f"0x{b:02x}," for b in data) + "\n"


# =============================================================================
# Sections
# =============================================================================

def _emit_descriptor(out: TextIO, font: BMFont, sym: Symbols):
    out.write(DESCRIPTOR.format(
        symbol=sym.descriptor,
        font=font,
        bucket_count=len(font.buckets),
        buckets=sym.buckets,
        page_count=len(font.pages),
        pages=sym.pages,
    ))


def _emit_buckets(out: TextIO, font: BMFont, sym: Symbols):
    out.write(f"\nconst BMFontBucket {sym.buckets}[] = {{\n")
    for i, bucket in enumerate(font.buckets):
        out.write(f"    {{{bucket.start_char}, {bucket.end_char}, {sym.bucket(i)}}},\n")
    out.write("};\n")


def _emit_pages(out: TextIO, font: BMFont, sym: Symbols):
    out.write(f"const BMFontPage {sym.pages}[] = {{\n")
    for i, page in enumerate(font.pages):
        out.write(f"    {{{page.size}, {sym.page(i)}}},\n")
    out.write("};\n\n")


def _emit_kernings(out: TextIO, font: BMFont, sym: Symbols):
    for char in font.chars():
        if not char.kernings:
            continue
        out.write(f"const BMFontKerning {sym.kernings(char)}[] = {{ "
                  f"// {char_label(char.id)}\n")
        for second, amount in char.kernings.items():
            out.write(f"    {{{second}, {amount}}}, // {char_label(second)}\n")
        out.write("};\n\n")


def _emit_chars(out: TextIO, font: BMFont, sym: Symbols):
    for i, bucket in enumerate(font.buckets):
        out.write(f"const BMFontChar {sym.bucket(i)}[] = {{\n")
        for char in bucket.chars:
            count = len(char.kernings)
            if count > KERNINGS_MAX:
                logger.warning("char %d has %d kerning pairs, more than "
                               "kerningsCount can hold", char.id, count)
            kernings = sym.kernings(char) if count else "NULL"
            out.write(
                f"    {{{char.x}, {char.y}, {char.width}, {char.height}, "
                f"{char.xoffset}, {char.yoffset}, {char.xadvance}, "
                f"{char.page}, {count}, {char.channels}, {kernings}}}, "
                f"// {char.id} ({char_label(char.id)})\n"
            )
        out.write("};\n\n")


def _emit_page_data(out: TextIO, index: int, page, sym: Symbols):
    """
    Stream one page file as byte literals and release its handle.

    Raises:
        PageReadError: If the page cannot be read to EOF
    """
    out.write(f"unsigned char {sym.page(index)}[] __attribute__((aligned(16))) = {{\n")
    written = 0
    pending = b""
    chunks = page.drain()
    try:
        while True:
            # Only page reads map to PageReadError; output errors propagate
            try:
                chunk = next(chunks)
            except StopIteration:
                break
            except (OSError, ValueError) as e:
                raise PageReadError(f"failed to read page file '{page.path}': {e}",
                                    path=page.path) from e
            data = pending + chunk
            whole = len(data) - len(data) % BYTES_PER_LINE
            for start in range(0, whole, BYTES_PER_LINE):
                out.write(byte_line(data[start:start + BYTES_PER_LINE]))
            pending = data[whole:]
            written += len(chunk)
    finally:
        chunks.close()
    if pending:
        out.write(byte_line(pending))
    out.write("};\n\n")

    if written != page.size:
        logger.warning("page '%s' changed while converting: expected %d bytes, "
                       "embedded %d", page.path, page.size, written)


# =============================================================================
# Entry Points
# =============================================================================

def emit_c_font(font: BMFont, out: TextIO):
    """
    Write the C header for a font.

    Consumes the font's page handles; every handle is closed when this
    returns or raises.

    Args:
        font: Parsed font
        out: Text stream receiving the header

    Raises:
        PageReadError: If a page file cannot be fully read
    """
    sym = Symbols(font)
    try:
        out.write(HEADER.format(name=font.name))
        out.write(TYPES)

        for decl in sym.declarations():
            out.write(decl + "\n")

        _emit_descriptor(out, font, sym)
        _emit_buckets(out, font, sym)
        _emit_pages(out, font, sym)
        _emit_kernings(out, font, sym)
        _emit_chars(out, font, sym)
        for i, page in enumerate(font.pages):
            _emit_page_data(out, i, page, sym)

        out.write(FOOTER)
    finally:
        font.close()


def render_c_font(font: BMFont) -> str:
    """Return the C header for a font as a string."""
    buf = io.StringIO()
    emit_c_font(font, buf)
    return buf.getvalue()
