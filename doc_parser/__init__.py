"""
doc_parser — AsciiDoc / Markdown structure parser, metadata and d-tags.

Public API:
  parse_document(text, dialect)             -> Document
  parse_file(path)                          -> Document
  extract_metadata(lines, dialect, fallback) -> (Metadata, RelayTarget)
  hierarchical_key(base, ancestors, slug, suffix) -> str
  basic_slug(text) / document_slug(title)   -> str
"""

from .parser   import parse_document, parse_file
from .metadata import (
    extract_metadata,
    is_metadata_line,
    CANONICAL_KEYS,
    LIST_KEYS,
    PUBLICATION_TYPES,
)
from .slugs    import (
    basic_slug,
    document_slug,
    hierarchical_key,
    unique_key,
    MAX_D_TAG_LENGTH,
    CONTENT_SUFFIX,
    PREAMBLE_SUFFIX,
)

__all__ = [
    "parse_document",
    "parse_file",
    "extract_metadata",
    "is_metadata_line",
    "CANONICAL_KEYS",
    "LIST_KEYS",
    "PUBLICATION_TYPES",
    "basic_slug",
    "document_slug",
    "hierarchical_key",
    "unique_key",
    "MAX_D_TAG_LENGTH",
    "CONTENT_SUFFIX",
    "PREAMBLE_SUFFIX",
]
