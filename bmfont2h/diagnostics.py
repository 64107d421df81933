"""
Parse Diagnostics
=================
Collector for recoverable problems found while parsing a descriptor.

The collector is passed explicitly through the parser so callers (and
tests) can inspect warnings instead of scraping log output. Every
recorded warning is also forwarded to the logger.
"""

import logging

logger = logging.getLogger(__name__)


class Diagnostic:
    """
    One recoverable problem.

    Attributes:
        line: 1-based descriptor line number (0 if unknown)
        tag: Line tag being parsed ("common", "char", ...)
        field: Field name, or None for line-level problems
        message: Human-readable description
    """

    def __init__(self, line: int, tag: str, field, message: str):
        self.line = line
        self.tag = tag
        self.field = field
        self.message = message

    def __str__(self):
        where = f"line {self.line}" if self.line else "descriptor"
        if self.field:
            return f"{where}: {self.tag}.{self.field}: {self.message}"
        return f"{where}: {self.tag}: {self.message}"

    def __repr__(self):
        return f"Diagnostic({str(self)!r})"


class Diagnostics:
    """
    Ordered list of Diagnostic entries.

    Args:
        log: Logger receiving a WARNING per entry (default: module logger,
             None disables forwarding)
    """

    def __init__(self, log=logger):
        self._log = log
        self.warnings = []

    def warn(self, line: int, tag: str, field, message: str):
        """Record a recoverable problem."""
        entry = Diagnostic(line, tag, field, message)
        self.warnings.append(entry)
        if self._log is not None:
            self._log.warning("%s", entry)

    def for_field(self, field: str):
        """All warnings about a given field name."""
        return [w for w in self.warnings if w.field == field]

    def __len__(self):
        return len(self.warnings)

    def __iter__(self):
        return iter(self.warnings)

    def __bool__(self):
        return bool(self.warnings)
