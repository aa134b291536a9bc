"""
data_model/documents.py — parsed document and its section tree.

Document and Section are immutable once the parser returns them. Sections
are stored in document order; the tree is expressed by `parent`, the index
of the nearest preceding section with a strictly lower level.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from .errors import StructuralError


class Dialect(StrEnum):
    ASCIIDOC = "asciidoc"
    MARKDOWN = "markdown"

    @property
    def marker(self) -> str:
        """Character repeated to form a header of a given level."""
        return "=" if self is Dialect.ASCIIDOC else "#"

    def header(self, level: int, title: str) -> str:
        return f"{self.marker * level} {title}"


_EXTENSIONS: dict[str, Dialect] = {
    ".adoc":      Dialect.ASCIIDOC,
    ".asciidoc":  Dialect.ASCIIDOC,
    ".asc":       Dialect.ASCIIDOC,
    ".md":        Dialect.MARKDOWN,
    ".markdown":  Dialect.MARKDOWN,
}


def detect_dialect(path: str | Path) -> Dialect:
    suffix = Path(path).suffix.lower()
    try:
        return _EXTENSIONS[suffix]
    except KeyError:
        raise StructuralError(
            f"Unsupported document type '{suffix or path}'. "
            f"Expected one of: {', '.join(_EXTENSIONS)}"
        ) from None


@dataclass(frozen=True, slots=True)
class Section:
    title: str
    level: int                    # 2..6 (1 is the document title)
    body: str                     # text up to the next header, stripped
    parent: int | None            # index into Document.sections
    slug: str                     # basic slug of the title
    ancestors: tuple[str, ...]    # basic slugs of the ancestors, outermost first
    line_no: int                  # 1-based line of the header


@dataclass(frozen=True, slots=True)
class Document:
    text: str
    dialect: Dialect
    title: str
    base_slug: str
    metadata_lines: tuple[str, ...]
    preamble: str
    sections: tuple[Section, ...]

    def children_of(self, index: int | None) -> list[int]:
        """Indices of the direct children of a section (None = document root)."""
        return [i for i, s in enumerate(self.sections) if s.parent == index]

    def top_level(self) -> list[int]:
        return self.children_of(None)

    def descendants_of(self, index: int) -> list[int]:
        """All descendants of a section, in document order."""
        found: list[int] = []
        owners = {index}
        for i in range(index + 1, len(self.sections)):
            if self.sections[i].parent in owners:
                owners.add(i)
                found.append(i)
        return found
