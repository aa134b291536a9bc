"""
publisher — from a document path to published events.

Public API:
  publish_document(path, content_level, content_kind, dry_run, ...)
  plan_document(path, content_level, content_kind, ...)  -> PublicationPlan
  dry_run_report(plan)                                   -> DryRunReport
  Publisher                        per-unit publish loop
  render_unit / check_unit         unit → event draft, field checks
  PublishOptions, resolve_options  content level / kind resolution
"""

from .events       import render_unit, check_unit, metadata_warnings
from .options      import PublishOptions, check_explicit_options, resolve_options
from .orchestrator import Publisher
from .pipeline     import plan_document, dry_run_report, publish_document

__all__ = [
    "render_unit",
    "check_unit",
    "metadata_warnings",
    "PublishOptions",
    "check_explicit_options",
    "resolve_options",
    "Publisher",
    "plan_document",
    "dry_run_report",
    "publish_document",
]
