"""
Symbol Names
============
Turns a font family name into an identifier usable as a C symbol prefix.

    "Open Sans"        -> "OPEN_SANS"
    "DejaVuSansMono"   -> "DEJA_VU_SANS_MONO"
    "Noto-Sans CJK.jp" -> "NOTO_SANS_CJK_JP"
    "Font16"           -> "FONT_16"
"""

import re

# Word boundaries inside a run of letters/digits:
#   lower followed by upper        ("aB"  -> "a|B")
#   acronym followed by a word     ("HTTPServer" -> "HTTP|Server")
#   letter/digit transitions       ("Font16" -> "Font|16", "2D" -> "2|D")
_CAMEL_RE = re.compile(
    r"(?<=[a-z])(?=[A-Z])"
    r"|(?<=[A-Z])(?=[A-Z][a-z])"
    r"|(?<=[A-Za-z])(?=[0-9])"
    r"|(?<=[0-9])(?=[A-Za-z])"
)
_SEPARATOR_RE = re.compile(r"[^A-Za-z0-9]+")


def screaming_snake(name: str) -> str:
    """
    Convert a free-form name to SCREAMING_SNAKE_CASE.

    Any run of characters other than ASCII letters and digits acts as a
    separator; camel-case humps also split words.
    """
    words = []
    for part in _SEPARATOR_RE.split(name):
        if part:
            words.extend(w for w in _CAMEL_RE.split(part) if w)
    return "_".join(words).upper()
