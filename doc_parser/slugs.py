"""
doc_parser/slugs.py — stable identifiers ("d-tags") for units.

A key always starts with the document's base slug, followed by the basic
slugs of every ancestor section and of the section itself. Keys never
exceed MAX_D_TAG_LENGTH characters, suffix included, and depend only on
their inputs, so re-publishing a document reuses the same identifiers.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable, Sequence

MAX_D_TAG_LENGTH     = 70
MAX_BASE_SLUG_LENGTH = 30
CONTENT_SUFFIX       = "-content"
PREAMBLE_SUFFIX      = "-preamble"

# Fixed caps for the last-resort trimming pass.
_DOC_CAP      = 12
_LEAF_CAP     = 10
_INTERIOR_CAP = 6


def basic_slug(text: str) -> str:
    """Lower-cased ASCII slug: runs of other characters become one hyphen."""
    text = unicodedata.normalize("NFKD", text)
    text = text.encode("ascii", "ignore").decode("ascii").lower()
    text = re.sub(r"[^a-z0-9-]+", "-", text)
    text = re.sub(r"-{2,}", "-", text)
    return text.strip("-") or "untitled"


def _trim_segment(segment: str, limit: int) -> str:
    """Cuts to `limit` chars, at the last hyphen/underscore when there is one."""
    if limit <= 0:
        return ""
    if len(segment) <= limit:
        return segment
    cut = segment[:limit]
    boundary = max(cut.rfind("-"), cut.rfind("_"))
    if boundary > 0:
        cut = cut[:boundary]
    return cut.strip("-_")


def document_slug(title: str) -> str:
    return _trim_segment(basic_slug(title), MAX_BASE_SLUG_LENGTH)


def _join(segments: Iterable[str]) -> str:
    return "-".join(s for s in segments if s)


def _proportional(parts: Sequence[str], room: int) -> str:
    first, *interior, last = parts
    available = room - (len(parts) - 1)
    rest = available - len(first)
    if rest <= 0:
        return _join(parts)

    per = rest // (len(interior) + 1)
    middle = [_trim_segment(p, per) for p in interior]
    leaf = _trim_segment(last, rest - sum(len(m) for m in middle))
    return _join([first, *middle, leaf])


def _aggressive(parts: Sequence[str]) -> str:
    first, *interior, last = parts
    return _join([
        _trim_segment(first, _DOC_CAP),
        *(_trim_segment(p, _INTERIOR_CAP) for p in interior),
        _trim_segment(last, _LEAF_CAP),
    ])


def _hard_cut(key: str, room: int) -> str:
    cut = key[:room]
    hyphen = cut.rfind("-")
    if hyphen > room // 2:
        cut = cut[:hyphen]
    return cut.rstrip("-")


def hierarchical_key(
    base_slug: str,
    ancestors: Sequence[str],
    slug: str | None,
    suffix: str = "",
    ceiling: int = MAX_D_TAG_LENGTH,
) -> str:
    """
    Builds `<base>-<ancestor>...-<slug><suffix>` within `ceiling` characters.

    Over-long keys are trimmed proportionally: the base slug is kept whole,
    interior segments share the remaining room equally and the leaf gets
    whatever they leave. If that is still too long, fixed per-position caps
    apply, and finally a hard cut that prefers to end at a hyphen.
    """
    room = ceiling - len(suffix)
    parts = [base_slug, *ancestors] + ([slug] if slug else [])
    key = _join(parts)
    if len(key) <= room:
        return key + suffix

    if len(parts) > 1:
        key = _proportional(parts, room)
        if len(key) > room:
            key = _aggressive(parts)
    if len(key) > room:
        key = _hard_cut(key, room)
    return key + suffix


def unique_key(key: str, used: set[str], ceiling: int = MAX_D_TAG_LENGTH) -> str:
    """Returns `key`, or `key-2`, `key-3`, ... when already taken. Marks it used."""
    candidate = key
    n = 1
    while candidate in used:
        n += 1
        tail = f"-{n}"
        head = key if len(key) + len(tail) <= ceiling else key[: ceiling - len(tail)].rstrip("-")
        candidate = head + tail
    used.add(candidate)
    return candidate
