"""
publisher/options.py — content level and content kind for one run.

Priority: explicit arguments > document metadata > defaults (level 0;
kind 30041 for AsciiDoc). Markdown documents are always one long-form
article and reject explicit overrides.
"""

from __future__ import annotations

from dataclasses import dataclass

from data_model.documents import Dialect
from data_model.errors import StructuralError
from data_model.kinds import CONTENT_KINDS, EventKind, parse_event_kind
from data_model.units import Metadata
from hierarchy.builder import MAX_CONTENT_LEVEL

DEFAULT_CONTENT_LEVEL = 0
DEFAULT_CONTENT_KIND: dict[Dialect, EventKind] = {
    Dialect.ASCIIDOC: EventKind.PUBLICATION_CONTENT,
    Dialect.MARKDOWN: EventKind.LONGFORM,
}


@dataclass(frozen=True, slots=True)
class PublishOptions:
    content_level: int
    content_kind: EventKind


def _check_level(level: int, source: str) -> int:
    if not 0 <= level <= MAX_CONTENT_LEVEL:
        raise StructuralError(
            f"{source}: content level must be between 0 and {MAX_CONTENT_LEVEL}, got {level}"
        )
    return level


def _check_kind(kind: EventKind, source: str) -> EventKind:
    if kind not in CONTENT_KINDS:
        allowed = ", ".join(str(int(k)) for k in sorted(CONTENT_KINDS))
        raise StructuralError(f"{source}: kind {int(kind)} cannot carry content (allowed: {allowed})")
    return kind


def _check_combination(level: int, kind: EventKind) -> None:
    if kind is EventKind.LONGFORM and level == 0:
        raise StructuralError(
            "Long-form kind for AsciiDoc requires a content level greater than 0"
        )


def check_explicit_options(
    dialect: Dialect,
    content_level: int | None,
    content_kind: str | int | None,
) -> None:
    """
    Validates caller-supplied options before the document is parsed.

    Raises:
        StructuralError: overrides on a Markdown document, level outside
                         0..6, unknown kind, or long-form at level 0.
    """
    if dialect is Dialect.MARKDOWN and (content_level is not None or content_kind is not None):
        raise StructuralError(
            "Markdown documents are always published as a single long-form article; "
            "content level and content kind cannot be set"
        )
    if content_level is not None:
        _check_level(content_level, "content level")
    if content_kind is not None:
        kind = _check_kind(parse_event_kind(content_kind), "content kind")
        if content_level is not None:
            _check_combination(content_level, kind)


def resolve_options(
    dialect: Dialect,
    metadata: Metadata,
    content_level: int | None = None,
    content_kind: str | int | None = None,
) -> PublishOptions:
    """Combines explicit options, metadata and defaults."""
    if dialect is Dialect.MARKDOWN:
        check_explicit_options(dialect, content_level, content_kind)
        return PublishOptions(content_level=0, content_kind=EventKind.LONGFORM)

    if content_level is not None:
        level = _check_level(content_level, "content level")
    elif isinstance(meta_level := metadata.get("content_level"), str) and meta_level:
        if not meta_level.strip().isdigit():
            raise StructuralError(f"metadata content_level is not a number: {meta_level!r}")
        level = _check_level(int(meta_level), "metadata content_level")
    else:
        level = DEFAULT_CONTENT_LEVEL

    if content_kind is not None:
        kind = _check_kind(parse_event_kind(content_kind), "content kind")
    elif isinstance(meta_kind := metadata.get("content_kind"), str) and meta_kind:
        kind = _check_kind(parse_event_kind(meta_kind), "metadata content_kind")
    else:
        kind = DEFAULT_CONTENT_KIND[dialect]

    _check_combination(level, kind)
    return PublishOptions(content_level=level, content_kind=kind)
