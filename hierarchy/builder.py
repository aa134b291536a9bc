"""
hierarchy/builder.py — section tree → content and index units.

The content level L selects the header depth that becomes publishable
content; shallower sections become indexes pointing at their children.

  L <= 1   the whole document (preamble + every section, re-headered) is a
           single content unit keyed by the base slug; no indexes.
  L >= 2   the shallowest section at depth >= L on every path becomes a
           content unit carrying its body and all descendants. A shallower
           section with at least one child unit becomes an index of those
           units; without any it is published as content itself. A root
           index keyed by the base slug aggregates the preamble unit and
           the top-level units.

Sections that would produce an empty body are dropped.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from data_model.documents import Document
from data_model.errors import StructuralError
from data_model.kinds import EventKind
from data_model.units import Unit, UnitKind
from doc_parser.slugs import CONTENT_SUFFIX, PREAMBLE_SUFFIX, hierarchical_key, unique_key

MAX_CONTENT_LEVEL = 6
PREAMBLE_TITLE    = "Preamble"


@dataclass(slots=True)
class BuildResult:
    content_units: list[Unit]
    index_units: list[Unit]
    root: Unit | None
    warnings: list[str] = field(default_factory=list)

    @property
    def units(self) -> list[Unit]:
        return self.content_units + self.index_units


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _join_blocks(blocks: list[str]) -> str:
    return "\n\n".join(b for b in blocks if b.strip())


def _render_subtree(document: Document, index: int) -> str:
    """Section body followed by every descendant under its own header."""
    blocks = [document.sections[index].body]
    for d in document.descendants_of(index):
        s = document.sections[d]
        blocks.append(_join_blocks([document.dialect.header(s.level, s.title), s.body]))
    return _join_blocks(blocks)


def _render_flat(document: Document) -> str:
    blocks = [document.preamble]
    for s in document.sections:
        blocks.append(_join_blocks([document.dialect.header(s.level, s.title), s.body]))
    return _join_blocks(blocks)


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

class _Builder:
    def __init__(self, document: Document, level: int, content_kind: EventKind) -> None:
        self.document     = document
        self.level        = level
        self.content_kind = content_kind
        self.content: list[Unit] = []
        self.index:   list[Unit] = []
        self.warnings: list[str] = []
        self._used: set[str] = {document.base_slug}

    def _key(self, index: int, suffix: str = "") -> str:
        s = self.document.sections[index]
        key = hierarchical_key(self.document.base_slug, s.ancestors, s.slug, suffix)
        return unique_key(key, self._used)

    def _content(self, d_tag: str, title: str, body: str) -> Unit:
        unit = Unit(
            kind=UnitKind.CONTENT, d_tag=d_tag, title=title,
            event_kind=self.content_kind, body=body,
        )
        self.content.append(unit)
        return unit

    def visit(self, index: int) -> Unit | None:
        s = self.document.sections[index]

        if s.level >= self.level:
            body = _render_subtree(self.document, index)
            if not body:
                return None
            return self._content(self._key(index, CONTENT_SUFFIX), s.title, body)

        children = [
            unit
            for child in self.document.children_of(index)
            if (unit := self.visit(child)) is not None
        ]
        if children:
            if s.body:
                self.warnings.append(
                    f"Text under '{s.title}' (line {s.line_no}) precedes its subsections "
                    f"and is not published at content level {self.level}"
                )
            unit = Unit(
                kind=UnitKind.INDEX, d_tag=self._key(index), title=s.title,
                event_kind=EventKind.PUBLICATION_INDEX,
                references=[c.reference(pos) for pos, c in enumerate(children)],
            )
            self.index.append(unit)
            return unit

        if not s.body:
            return None
        return self._content(self._key(index, CONTENT_SUFFIX), s.title, s.body)

    def build_split(self) -> BuildResult:
        doc = self.document
        top: list[Unit] = []

        if doc.preamble:
            key = unique_key(hierarchical_key(doc.base_slug, (), None, PREAMBLE_SUFFIX), self._used)
            top.append(self._content(key, PREAMBLE_TITLE, doc.preamble))

        top.extend(u for i in doc.top_level() if (u := self.visit(i)) is not None)
        if not top:
            raise StructuralError(f"Document '{doc.title}' has no content to publish")

        root = Unit(
            kind=UnitKind.INDEX, d_tag=doc.base_slug, title=doc.title,
            event_kind=EventKind.PUBLICATION_INDEX,
            references=[u.reference(pos) for pos, u in enumerate(top)],
            is_root=True,
        )
        self.index.append(root)
        return BuildResult(self.content, self.index, root, self.warnings)

    def build_flat(self) -> BuildResult:
        body = _render_flat(self.document)
        if not body:
            raise StructuralError(f"Document '{self.document.title}' has no content to publish")
        unit = self._content(self.document.base_slug, self.document.title, body)
        unit.is_root = True
        return BuildResult(self.content, [], None, self.warnings)


def build_units(document: Document, level: int, content_kind: EventKind) -> BuildResult:
    """
    Partitions the document into units.

    Raises:
        StructuralError: level outside 0..6, or nothing to publish.
    """
    if not 0 <= level <= MAX_CONTENT_LEVEL:
        raise StructuralError(f"content level must be between 0 and {MAX_CONTENT_LEVEL}, got {level}")

    builder = _Builder(document, level, content_kind)
    if level <= 1:
        return builder.build_flat()
    return builder.build_split()
