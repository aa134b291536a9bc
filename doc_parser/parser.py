"""
doc_parser/parser.py — splits an AsciiDoc / Markdown document into sections.

Algorithm:
  1. Classify every line: header (level, title) or text. Lines inside
     delimited blocks are always text.
  2. Require exactly one level-1 header, with nothing but blank lines
     before it.
  3. The first non-blank lines after the title, up to the next blank line,
     form the metadata block. When blank lines separate it from the title
     the block must consist of key lines only.
  4. Text before the first section header is the preamble; every header
     opens a section whose body runs until the next header.
  5. Parent = nearest preceding section with a strictly lower level
     (level/index stack).

Public API:
  parse_document(text, dialect) -> Document
  parse_file(path)              -> Document
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from data_model.documents import Dialect, Document, Section, detect_dialect
from data_model.errors import StructuralError

from .header_patterns import FenceTracker, HeaderMatch, match_header
from .metadata import is_metadata_line
from .slugs import basic_slug, document_slug


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class _RawSection:
    title: str
    level: int
    line_no: int
    lines: list[str] = field(default_factory=list)


def _clean_block(lines: list[str]) -> str:
    """Drops leading/trailing blank lines and trailing whitespace."""
    text = "\n".join(line.rstrip() for line in lines)
    return text.strip("\n")


def _classify(lines: list[str], dialect: Dialect) -> tuple[list[HeaderMatch | None], list[bool]]:
    fences = FenceTracker(dialect)
    headers: list[HeaderMatch | None] = []
    in_block: list[bool] = []
    for line in lines:
        blocked = fences.feed(line)
        in_block.append(blocked)
        headers.append(None if blocked else match_header(line, dialect))
    return headers, in_block


def _metadata_start(
    lines: list[str],
    headers: list[HeaderMatch | None],
    in_block: list[bool],
    start: int,
    dialect: Dialect,
) -> int:
    """
    Index where the metadata block begins.

    A block right under the title is taken as-is. After blank lines the
    run only counts as metadata when every line is a key line; a plain
    paragraph there stays preamble.
    """
    if start >= len(lines) or lines[start].strip():
        return start

    first = start
    while first < len(lines) and not lines[first].strip():
        first += 1

    end = first
    while end < len(lines) and lines[end].strip() and headers[end] is None and not in_block[end]:
        if not is_metadata_line(lines[end], dialect):
            return start
        end += 1
    return first if end > first else start


def _build_sections(raw: list[_RawSection]) -> tuple[Section, ...]:
    sections: list[Section] = []
    stack: list[tuple[int, int]] = []  # (level, index)

    for idx, r in enumerate(raw):
        while stack and stack[-1][0] >= r.level:
            stack.pop()
        parent = stack[-1][1] if stack else None
        ancestors = (
            sections[parent].ancestors + (sections[parent].slug,)
            if parent is not None
            else ()
        )
        sections.append(Section(
            title     = r.title,
            level     = r.level,
            body      = _clean_block(r.lines),
            parent    = parent,
            slug      = basic_slug(r.title),
            ancestors = ancestors,
            line_no   = r.line_no,
        ))
        stack.append((r.level, idx))

    return tuple(sections)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_document(text: str, dialect: Dialect) -> Document:
    """
    Parses document text into a Document.

    Raises:
        StructuralError: no title, more than one title, or non-blank
                         content before the title.
    """
    lines = text.splitlines()
    headers, in_block = _classify(lines, dialect)

    titles = [i for i, h in enumerate(headers) if h is not None and h.level == 1]
    if len(titles) != 1:
        line_no = titles[1] + 1 if len(titles) > 1 else None
        raise StructuralError(
            f"Expected exactly one level-1 title, found {len(titles)}", line_no
        )
    title_idx = titles[0]

    for i in range(title_idx):
        if lines[i].strip():
            raise StructuralError(
                f"Content before the document title: {lines[i].strip()[:60]!r}", i + 1
            )

    title_match = headers[title_idx]
    assert title_match is not None

    # Metadata block: first run of non-blank text lines after the title.
    i = _metadata_start(lines, headers, in_block, title_idx + 1, dialect)
    metadata: list[str] = []
    while i < len(lines) and lines[i].strip() and headers[i] is None and not in_block[i]:
        metadata.append(lines[i].strip())
        i += 1

    preamble: list[str] = []
    raw: list[_RawSection] = []
    for j in range(i, len(lines)):
        header = headers[j]
        if header is not None:
            raw.append(_RawSection(title=header.title, level=header.level, line_no=j + 1))
        elif raw:
            raw[-1].lines.append(lines[j])
        else:
            preamble.append(lines[j])

    return Document(
        text           = text,
        dialect        = dialect,
        title          = title_match.title,
        base_slug      = document_slug(title_match.title),
        metadata_lines = tuple(metadata),
        preamble       = _clean_block(preamble),
        sections       = _build_sections(raw),
    )


def parse_file(path: str | Path) -> Document:
    """Reads a document from disk; the dialect follows the file extension."""
    dialect = detect_dialect(path)
    text = Path(path).read_text(encoding="utf-8-sig")
    return parse_document(text, dialect)
