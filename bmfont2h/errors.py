"""
Conversion Errors
=================
Fatal conditions raised by the parser and emitter.

    BMFontError
       ├── DescriptorError      Descriptor unreadable or fatally malformed
       │      └── PageOpenError     Referenced page file missing/unreadable
       └── PageReadError        Page contents could not be embedded

Recoverable problems are not exceptions; they are recorded in
diagnostics.Diagnostics and parsing continues.
"""


class BMFontError(Exception):
    """Base class for all conversion failures."""


class DescriptorError(BMFontError):
    """
    Parsing aborted.

    Attributes:
        path: Offending file, if known
        font: Partially populated BMFont for inspection, or None.
              Its page handles are already released.
    """

    def __init__(self, message: str, path=None, font=None):
        super().__init__(message)
        self.path = path
        self.font = font


class PageOpenError(DescriptorError):
    """A page file named by the descriptor could not be stat'ed or opened."""


class PageReadError(BMFontError):
    """A page file could not be fully read during emission."""

    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.path = path
