"""
doc_parser/header_patterns.py — regex patterns for section headers.

Each HeaderPattern holds:
  - regex  : compiled pattern, matched against a whole line
  - dialect: document dialect the pattern applies to
  - level  : derived from the length of the marker group (1..6)

Header-looking lines inside delimited blocks (code fences, listing and
literal blocks, comment blocks) are body text; FenceTracker follows them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from data_model.documents import Dialect

MAX_HEADER_LEVEL = 6


@dataclass(frozen=True, slots=True)
class HeaderPattern:
    regex: re.Pattern[str]
    dialect: Dialect


@dataclass(frozen=True, slots=True)
class HeaderMatch:
    level: int
    title: str


PATTERNS: list[HeaderPattern] = [
    # = Title / == Section ... (AsciiDoc)
    HeaderPattern(regex=re.compile(r"^(=+)[ \t]+(\S.*?)[ \t]*$"), dialect=Dialect.ASCIIDOC),
    # # Title / ## Section ... (Markdown ATX; optional closing hashes)
    HeaderPattern(regex=re.compile(r"^(#+)[ \t]+(\S.*?)(?:[ \t]+#+)?[ \t]*$"), dialect=Dialect.MARKDOWN),
]

_BY_DIALECT: dict[Dialect, HeaderPattern] = {p.dialect: p for p in PATTERNS}


def match_header(line: str, dialect: Dialect) -> HeaderMatch | None:
    """Returns level and title for a header line, None for anything else."""
    m = _BY_DIALECT[dialect].regex.match(line)
    if not m:
        return None
    level = len(m.group(1))
    if level > MAX_HEADER_LEVEL:
        return None
    return HeaderMatch(level=level, title=m.group(2))


# ---------------------------------------------------------------------------
# Delimited blocks
# ---------------------------------------------------------------------------

_MARKDOWN_FENCE_RE = re.compile(r"^[ ]{0,3}(`{3,}|~{3,})")
_ASCIIDOC_FENCE_RE = re.compile(r"^(-{4,}|\.{4,}|\+{4,}|/{4,}|`{3,})[ \t]*$")


class FenceTracker:
    """Tracks whether the current line is inside a delimited block."""

    def __init__(self, dialect: Dialect) -> None:
        self._regex = _MARKDOWN_FENCE_RE if dialect is Dialect.MARKDOWN else _ASCIIDOC_FENCE_RE
        self._open: str | None = None

    @property
    def inside(self) -> bool:
        return self._open is not None

    def feed(self, line: str) -> bool:
        """
        Consumes one line; returns True when the line is part of a block
        (its opening or closing delimiter included).
        """
        m = self._regex.match(line)
        if self._open is None:
            if m:
                self._open = m.group(1)
                return True
            return False
        if m and m.group(1)[0] == self._open[0] and len(m.group(1)) >= len(self._open):
            self._open = None
        return True
