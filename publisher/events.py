"""
publisher/events.py — unit → unsigned event draft.

Index (30040):
    d, title, auto-update, type, author…, version, published_on, summary,
    l, t…, then one `a` tag per reference in order:
    ["a", "<kind>:<pubkey>:<d-tag>", "<relay hint>", "<event id>"]
    Content is empty.
Content (30041 / 30818 / 30023):
    d, title, summary (document-level unit only), published_at (30023), t…
"""

from __future__ import annotations

import time

from data_model.events import EventDraft
from data_model.kinds import EventKind
from data_model.units import Metadata, Unit
from doc_parser.metadata import PUBLICATION_TYPES

MAX_TITLE_LENGTH   = 200
MAX_SUMMARY_LENGTH = 500
DEFAULT_AUTO_UPDATE = "yes"


def _text(metadata: Metadata, key: str) -> str:
    value = metadata.get(key)
    return value if isinstance(value, str) else ""


def _items(metadata: Metadata, key: str) -> list[str]:
    value = metadata.get(key)
    if isinstance(value, list):
        return value
    return [value] if value else []


def _index_tags(metadata: Metadata) -> list[list[str]]:
    tags = [["auto-update", _text(metadata, "auto_update") or DEFAULT_AUTO_UPDATE]]

    pub_type = _text(metadata, "type")
    if pub_type in PUBLICATION_TYPES:
        tags.append(["type", pub_type])

    tags += [["author", a] for a in _items(metadata, "authors")]
    for key, tag in (("version", "version"), ("date", "published_on"),
                     ("summary", "summary"), ("language", "l")):
        if value := _text(metadata, key):
            tags.append([tag, value])
    return tags


def render_unit(
    unit: Unit,
    metadata: Metadata,
    pubkey: str,
    event_ids: dict[str, str],
    relay_hint: str = "",
    now: int | None = None,
) -> EventDraft:
    """
    Builds the draft for `unit`. Every referenced d-tag must already be
    present in `event_ids`.
    """
    tags: list[list[str]] = [["d", unit.d_tag], ["title", unit.title]]
    topics = [["t", t] for t in _items(metadata, "tags")]

    if unit.is_index:
        tags += _index_tags(metadata)
        tags += topics
        for ref in sorted(unit.references, key=lambda r: r.position):
            tags.append([
                "a",
                f"{int(ref.event_kind)}:{pubkey}:{ref.d_tag}",
                relay_hint,
                event_ids[ref.d_tag],
            ])
        return EventDraft(kind=int(unit.event_kind), content="", tags=tags)

    if unit.is_root and (summary := _text(metadata, "summary")):
        tags.append(["summary", summary])
    if unit.event_kind is EventKind.LONGFORM:
        tags.append(["published_at", str(now if now is not None else int(time.time()))])
    tags += topics
    return EventDraft(kind=int(unit.event_kind), content=unit.body, tags=tags)


def check_unit(unit: Unit, metadata: Metadata) -> list[str]:
    """Field problems that would make the event invalid; empty when fine."""
    problems: list[str] = []
    if not unit.title.strip():
        problems.append("empty title")
    elif len(unit.title) > MAX_TITLE_LENGTH:
        problems.append(f"title longer than {MAX_TITLE_LENGTH} characters")
    if (unit.is_index or unit.is_root) and len(_text(metadata, "summary")) > MAX_SUMMARY_LENGTH:
        problems.append(f"summary longer than {MAX_SUMMARY_LENGTH} characters")
    return problems


def metadata_warnings(metadata: Metadata) -> list[str]:
    warnings: list[str] = []
    pub_type = _text(metadata, "type")
    if pub_type and pub_type not in PUBLICATION_TYPES:
        warnings.append(
            f"Unknown publication type '{pub_type}' (expected one of: "
            f"{', '.join(sorted(PUBLICATION_TYPES))}); no type tag will be set"
        )
    return warnings
