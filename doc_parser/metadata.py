"""
doc_parser/metadata.py — header block → normalized metadata map.

Recognized notations (one entry per line):
  :key: value         AsciiDoc attribute entry
  **Key:** value      bold key line (also **Key**: value)
  key: value          plain line, only for keys of the canonical vocabulary
AsciiDoc documents additionally accept the free-text author line and
revision line directly after the title:
  Jane Doe <jane@example.com>; John Roe
  v1.2, 2024-05-01: First public draft

Synonyms collapse to one canonical key (CANONICAL_KEYS); unknown keys keep
their original spelling. The relay target is returned separately.
Extraction is best-effort; the only error is a relay target that mixes
addresses with category names (ConfigurationError).
"""

from __future__ import annotations

import re

from data_model.documents import Dialect
from data_model.relays import DEFAULT_SENTINEL, RelayTarget, parse_relay_target
from data_model.units import Metadata

# ---------------------------------------------------------------------------
# Vocabulary
# ---------------------------------------------------------------------------

CANONICAL_KEYS: dict[str, str] = {
    "author":        "authors",
    "authors":       "authors",
    "email":         "email",
    "firstname":     "firstname",
    "lastname":      "lastname",
    "middlename":    "middlename",
    "version":       "version",
    "revnumber":     "version",
    "revision":      "version",
    "revdate":       "date",
    "date":          "date",
    "revremark":     "remark",
    "remark":        "remark",
    "summary":       "summary",
    "description":   "summary",
    "abstract":      "summary",
    "keywords":      "tags",
    "tags":          "tags",
    "t":             "tags",
    "subject":       "tags",
    "lang":          "language",
    "language":      "language",
    "relays":        "relays",
    "relay":         "relays",
    "auto_update":   "auto_update",
    "autoupdate":    "auto_update",
    "type":          "type",
    "doctype":       "type",
    "content_level": "content_level",
    "content_kind":  "content_kind",
}

LIST_KEYS: frozenset[str] = frozenset({"authors", "tags"})

PUBLICATION_TYPES: frozenset[str] = frozenset({
    "book", "illustrated", "magazine", "documentation", "academic", "blog",
})

_TRUE_VALUES  = {"true", "yes", "1", "on"}
_FALSE_VALUES = {"false", "no", "0", "off"}

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_ATTRIBUTE_RE    = re.compile(r"^:([A-Za-z0-9_][\w -]*?)!?:(?:[ \t]+(.*))?$")
_BOLD_RE         = re.compile(r"^\*\*([^*]+?)(?::\*\*|\*\*:)[ \t]*(.*)$")
_PLAIN_RE        = re.compile(r"^([A-Za-z][\w -]*?):[ \t]+(.*)$")
_AUTHOR_EMAIL_RE = re.compile(r"^(.*?)\s*<([^<>\s]+@[^<>\s]+)>$")
_REVISION_RE     = re.compile(
    r"^v?(?P<version>\d[^,:\s]*)"
    r"(?:\s*,\s*(?P<date>[^,:]*?))?"
    r"(?:\s*[,:]\s*(?P<remark>.*))?$"
)


def _normalize_key(key: str) -> str:
    return re.sub(r"[\s-]+", "_", key.strip().lower())


def _split_list(value: str) -> list[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


def _match_key_value(line: str) -> tuple[str, str, bool] | None:
    """Returns (key, value, explicit); plain lines are not explicit."""
    for regex in (_ATTRIBUTE_RE, _BOLD_RE):
        m = regex.match(line)
        if m:
            return m.group(1).strip(), (m.group(2) or "").strip(), True
    m = _PLAIN_RE.match(line)
    if m:
        return m.group(1).strip(), m.group(2).strip(), False
    return None


def is_metadata_line(line: str, dialect: Dialect) -> bool:
    """True for a key line extract_metadata would store (or an AsciiDoc comment)."""
    line = line.strip()
    if dialect is Dialect.ASCIIDOC and line.startswith("//"):
        return True
    kv = _match_key_value(line)
    if kv is None:
        return False
    key, _, explicit = kv
    return explicit or _normalize_key(key) in CANONICAL_KEYS


# ---------------------------------------------------------------------------
# Authors
# ---------------------------------------------------------------------------

def _parse_author(entry: str, meta: Metadata) -> str | None:
    """
    Normalizes one author entry; the first author with a multi-token name
    also fills firstname / middlename / lastname.
    """
    name = " ".join(entry.split())
    m = _AUTHOR_EMAIL_RE.match(name)
    if m:
        name = m.group(1).strip()
        meta.setdefault("email", m.group(2))
    if not name:
        return None

    tokens = name.split(" ")
    if len(tokens) >= 2:
        first, last = tokens[0], tokens[-1]
        middle = " ".join(tokens[1:-1])
        if "firstname" not in meta:
            meta["firstname"] = first
            meta["lastname"]  = last
            if middle:
                meta["middlename"] = middle
        name = " ".join(p for p in (first, middle, last) if p)
    return name


def _list_slot(meta: Metadata, key: str) -> list[str]:
    """Returns the list stored under key, wrapping a scalar left there earlier."""
    current = meta.get(key)
    if isinstance(current, list):
        return current
    slot = [str(current)] if current not in (None, "") else []
    meta[key] = slot
    return slot


def _add_authors(entries: list[str], meta: Metadata) -> None:
    current = _list_slot(meta, "authors")
    for entry in entries:
        name = _parse_author(entry, meta)
        if name and name not in current:
            current.append(name)


def _parse_revision(line: str, meta: Metadata) -> bool:
    m = _REVISION_RE.match(line)
    if not m:
        return False
    meta.setdefault("version", m.group("version"))
    if m.group("date"):
        meta.setdefault("date", m.group("date").strip())
    if m.group("remark"):
        meta.setdefault("remark", m.group("remark").strip())
    return True


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------

def _store(meta: Metadata, key: str, value: str) -> None:
    canonical = CANONICAL_KEYS.get(_normalize_key(key))
    if canonical is None:
        meta[key] = value
        return

    if canonical == "authors":
        _add_authors(_split_list(value), meta)
    elif canonical in LIST_KEYS:
        current = _list_slot(meta, canonical)
        current.extend(v for v in _split_list(value) if v not in current)
    elif canonical == "auto_update":
        lowered = value.lower()
        meta[canonical] = (
            "yes" if lowered in _TRUE_VALUES
            else "no" if lowered in _FALSE_VALUES
            else lowered
        )
    elif canonical == "version":
        meta[canonical] = value[1:] if value[:1] in "vV" and value[1:2].isdigit() else value
    elif canonical == "type":
        meta[canonical] = value.lower()
    else:
        meta[canonical] = value


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_metadata(
    lines: list[str] | tuple[str, ...],
    dialect: Dialect,
    fallback: str = DEFAULT_SENTINEL,
) -> tuple[Metadata, RelayTarget]:
    """
    Interprets the metadata block.

    Args:
        lines:    raw metadata lines (Document.metadata_lines).
        dialect:  document dialect; free-text author and revision lines
                  are AsciiDoc conventions.
        fallback: relay target used when the block declares none.

    Returns:
        (metadata, relay_target)

    Raises:
        ConfigurationError: the relays entry mixes URLs and category names.
    """
    meta: Metadata = {}
    author_line = False
    position = 0

    for raw in lines:
        line = raw.strip()
        if not line or (dialect is Dialect.ASCIIDOC and line.startswith("//")):
            continue

        kv = _match_key_value(line)
        if kv is not None:
            key, value, explicit = kv
            if explicit or _normalize_key(key) in CANONICAL_KEYS:
                _store(meta, key, value)
        elif dialect is Dialect.ASCIIDOC and position == 0:
            _add_authors(line.split(";"), meta)
            author_line = True
        elif dialect is Dialect.ASCIIDOC and position == 1 and author_line:
            _parse_revision(line, meta)
        position += 1

    if "authors" not in meta and "firstname" in meta:
        parts = (meta.get("firstname"), meta.get("middlename"), meta.get("lastname"))
        meta["authors"] = [" ".join(str(p) for p in parts if p)]
    if meta.get("authors") == []:
        del meta["authors"]

    relays = meta.pop("relays", None)
    target = parse_relay_target(relays if isinstance(relays, str) and relays else fallback)
    return meta, target
