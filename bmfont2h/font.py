"""
BMFont Data Model
=================
In-memory representation of a parsed BMFont text descriptor.

The model is built once by the parser and handed read-only to the emitter:

    BMFont
       ├── Bucket[]     Contiguous code point runs
       │      └── Char[]     Glyph metrics + kerning pairs
       └── Page[]       Atlas image files (open handles)

All numeric fields are stored in the fixed-width integer domain of the
C structure they are emitted into (see FIELD_TYPES).
"""

import os
from typing import Dict, List, Optional, BinaryIO


# =============================================================================
# Channel Semantics
# =============================================================================

class ChannelType:
    """
    Meaning of one RGBA channel in the font atlas.

    Values are the C enumerator names emitted in the generated header.
    """
    GLYPH = "CHANNEL_GLYPH"                  # Glyph coverage
    OUTLINE = "CHANNEL_OUTLINE"              # Outline only
    GLYPH_OUTLINE = "CHANNEL_GLYPH_OUTLINE"  # Glyph and outline
    ZERO = "CHANNEL_ZERO"                    # Constant 0
    ONE = "CHANNEL_ONE"                      # Constant 1


# BMFont channel index -> semantics, in descriptor order
CHANNEL_TYPES = [
    ChannelType.GLYPH,
    ChannelType.OUTLINE,
    ChannelType.GLYPH_OUTLINE,
    ChannelType.ZERO,
    ChannelType.ONE,
]


# =============================================================================
# Fixed-Width Integers
# =============================================================================

# C type name -> (bits, signed)
INT_TYPES = {
    "uint8_t": (8, False),
    "uint16_t": (16, False),
    "uint32_t": (32, False),
    "int16_t": (16, True),
}


def to_fixed_width(value: int, ctype: str) -> int:
    """
    Truncate an integer to a C fixed-width type, like a cast would.

    Args:
        value: Arbitrary Python integer
        ctype: Key of INT_TYPES

    Returns:
        The value wrapped into the type's range
    """
    bits, signed = INT_TYPES[ctype]
    mask = (1 << bits) - 1
    value &= mask
    if signed and value >> (bits - 1):
        value -= 1 << bits
    return value


# =============================================================================
# Model
# =============================================================================

class Char:
    """
    Metrics of a single glyph.

    Attributes:
        id: Unicode code point
        x, y, width, height: Atlas rectangle in pixels
        xoffset, yoffset: Offset applied when copying to screen
        xadvance: Cursor advance after drawing
        page: Index of the atlas page holding the glyph
        channels: Channel bit-mask (1=blue, 2=green, 4=red, 8=alpha)
        kernings: second code point -> amount, empty without pairs
    """

    # Attribute -> C type
    FIELD_TYPES = {
        "id": "uint32_t",
        "x": "uint16_t",
        "y": "uint16_t",
        "width": "uint16_t",
        "height": "uint16_t",
        "xoffset": "int16_t",
        "yoffset": "int16_t",
        "xadvance": "int16_t",
        "page": "uint8_t",
        "channels": "uint8_t",
    }

    def __init__(
        self,
        id: int = 0,
        x: int = 0,
        y: int = 0,
        width: int = 0,
        height: int = 0,
        xoffset: int = 0,
        yoffset: int = 0,
        xadvance: int = 0,
        page: int = 0,
        channels: int = 0,
    ):
        self.id = id
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.xoffset = xoffset
        self.yoffset = yoffset
        self.xadvance = xadvance
        self.page = page
        self.channels = channels
        self.kernings: Dict[int, int] = {}

    def add_kerning(self, second: int, amount: int):
        """Attach a kerning pair; a repeated second char overwrites."""
        self.kernings[second] = amount

    def __repr__(self):
        return f"Char(id={self.id}, kernings={len(self.kernings)})"


class Bucket:
    """
    Contiguous run of code points [start_char, end_char].

    chars[i] holds the glyph for code point start_char + i.
    """

    def __init__(self, char: Char):
        self.start_char = char.id
        self.end_char = char.id
        self.chars: List[Char] = [char]

    def __len__(self):
        return len(self.chars)

    def __contains__(self, cp: int) -> bool:
        return self.start_char <= cp <= self.end_char

    def follows(self, cp: int) -> bool:
        """True if cp is the immediate successor of this bucket's end."""
        return cp == self.end_char + 1

    def append(self, char: Char):
        """Extend the run by one glyph. Caller checks follows() first."""
        self.chars.append(char)
        self.end_char = char.id

    def get(self, cp: int) -> Optional[Char]:
        """Glyph for cp, or None if outside the run."""
        if cp not in self:
            return None
        return self.chars[cp - self.start_char]

    def __repr__(self):
        return f"Bucket({self.start_char}..{self.end_char})"


class Page:
    """
    One atlas page file.

    The page owns its open file handle until drain() streams the contents
    and closes it. The size is cached when the page is opened.

    Attributes:
        path: Resolved file path
        size: Byte size at open time
    """

    CHUNK_SIZE = 8192

    def __init__(self, path: str, size: int, file: BinaryIO):
        self.path = path
        self.size = size
        self._file = file

    @classmethod
    def open(cls, path: str) -> "Page":
        """
        Stat and open a page file.

        Raises:
            OSError: If the file is missing or unreadable
        """
        size = os.stat(path).st_size
        return cls(path, size, open(path, "rb"))

    @property
    def closed(self) -> bool:
        return self._file is None

    def drain(self):
        """
        Yield the file contents in order, then release the handle.

        The handle is closed even if reading fails.

        Raises:
            ValueError: If the page was already drained or closed
            OSError: If the file cannot be read
        """
        if self._file is None:
            raise ValueError(f"Page already released: {self.path}")
        f, self._file = self._file, None
        with f:
            for chunk in iter(lambda: f.read(self.CHUNK_SIZE), b""):
                yield chunk

    def close(self):
        """Release the file handle if still held."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def __repr__(self):
        return f"Page({self.path!r}, size={self.size})"


class BMFont:
    """
    Parsed BMFont descriptor.

    Owns its buckets and pages. Use close() or the context manager to
    release page files that were never emitted.

    Attributes:
        name: Normalized SCREAMING_SNAKE font name
        size: Nominal point size
        line_height: Distance between lines in pixels
        base: Baseline offset from the top of a line
        scale_w, scale_h: Atlas dimensions
        packed: 1 if glyphs are packed into separate channels
        a_type, r_type, g_type, b_type: Channel semantics (ChannelType)
        buckets: Glyph buckets in creation order
        pages: Atlas pages in descriptor order
    """

    # Attribute -> C type
    FIELD_TYPES = {
        "size": "uint16_t",
        "line_height": "uint8_t",
        "base": "uint8_t",
        "scale_w": "uint16_t",
        "scale_h": "uint16_t",
        "packed": "uint8_t",
    }

    def __init__(self):
        self.name = ""
        self.size = 0
        self.line_height = 0
        self.base = 0
        self.scale_w = 0
        self.scale_h = 0
        self.packed = 0
        self.a_type = ChannelType.GLYPH
        self.r_type = ChannelType.GLYPH
        self.g_type = ChannelType.GLYPH
        self.b_type = ChannelType.GLYPH
        self.buckets: List[Bucket] = []
        self.pages: List[Page] = []

    def insert_char(self, char: Char):
        """
        Add a glyph to the bucket set.

        The glyph joins the first bucket it immediately follows; otherwise a
        new single-glyph bucket is started. Ranges are not merged afterwards,
        so bucket layout depends on descriptor order.
        """
        for bucket in self.buckets:
            if bucket.follows(char.id):
                bucket.append(char)
                return
        self.buckets.append(Bucket(char))

    def find_char(self, cp: int) -> Optional[Char]:
        """Glyph for a code point, or None if no bucket covers it."""
        for bucket in self.buckets:
            if cp in bucket:
                return bucket.get(cp)
        return None

    def chars(self):
        """Iterate over all glyphs in bucket order."""
        for bucket in self.buckets:
            yield from bucket.chars

    @property
    def char_count(self) -> int:
        return sum(len(b) for b in self.buckets)

    @property
    def kerning_count(self) -> int:
        return sum(len(c.kernings) for c in self.chars())

    def close(self):
        """Release every page file not yet drained."""
        for page in self.pages:
            page.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
        return False

    def __repr__(self):
        return (f"BMFont({self.name!r}, buckets={len(self.buckets)}, "
                f"pages={len(self.pages)})")
