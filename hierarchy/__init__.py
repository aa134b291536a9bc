"""
hierarchy — units from the section tree and their publish order.

Public API:
  build_units(document, level, content_kind)  -> BuildResult
  resolve_publish_order(units)                -> list[Unit]
"""

from .builder  import build_units, BuildResult, MAX_CONTENT_LEVEL
from .resolver import resolve_publish_order

__all__ = [
    "build_units",
    "BuildResult",
    "MAX_CONTENT_LEVEL",
    "resolve_publish_order",
]
