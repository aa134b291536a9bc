"""
data_model/kinds.py — event kinds used for publication.

Kinds:
  30023  long-form article         (alias: longform)
  30040  publication index         (alias: index)
  30041  publication content       (alias: publication)
  30818  wiki article              (alias: wiki)
"""

from __future__ import annotations

from enum import IntEnum

from .errors import StructuralError


class EventKind(IntEnum):
    LONGFORM            = 30023
    PUBLICATION_INDEX   = 30040
    PUBLICATION_CONTENT = 30041
    WIKI                = 30818


KIND_ALIASES: dict[str, EventKind] = {
    "longform":    EventKind.LONGFORM,
    "long-form":   EventKind.LONGFORM,
    "index":       EventKind.PUBLICATION_INDEX,
    "publication": EventKind.PUBLICATION_CONTENT,
    "wiki":        EventKind.WIKI,
}

# kind -> (alias, description)
KIND_INFO: dict[EventKind, tuple[str, str]] = {
    EventKind.LONGFORM:            ("longform",    "Long-form article (Markdown or AsciiDoc)"),
    EventKind.PUBLICATION_INDEX:   ("index",       "Publication index pointing at sections"),
    EventKind.PUBLICATION_CONTENT: ("publication", "Publication content section (AsciiDoc)"),
    EventKind.WIKI:                ("wiki",        "Wiki article (AsciiDoc)"),
}

# Kinds a content unit may be published as.
CONTENT_KINDS: frozenset[EventKind] = frozenset({
    EventKind.LONGFORM,
    EventKind.PUBLICATION_CONTENT,
    EventKind.WIKI,
})


def parse_event_kind(value: str | int) -> EventKind:
    """Accepts a numeric code (int or string) or a symbolic alias."""
    if isinstance(value, int):
        code = value
    else:
        text = value.strip().lower()
        if text in KIND_ALIASES:
            return KIND_ALIASES[text]
        if not text.isdigit():
            raise StructuralError(
                f"Unknown event kind '{value}'. "
                f"Use one of: {', '.join(sorted(KIND_ALIASES))} or a numeric kind."
            )
        code = int(text)
    try:
        return EventKind(code)
    except ValueError:
        raise StructuralError(f"Unsupported event kind {code}") from None
