"""
validator/types.py — error codes and the post-publish validation report.

ValidationError — a single mismatch with a code, the field it concerns
    (e.g. "kind", "tags/d", "tags/a[2]") and a readable message.
ValidationReport — outcome of fetching an event back: is_valid, errors,
    warnings, and the relay that confirmed the event.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Stable codes for post-publish validation failures."""

    # retrieval
    EVENT_NOT_FOUND        = "E_EVENT_NOT_FOUND"
    FETCH_FAILED           = "E_FETCH_FAILED"

    # event fields
    ID_MISMATCH            = "E_ID_MISMATCH"
    KIND_MISMATCH          = "E_KIND_MISMATCH"
    CONTENT_MISMATCH       = "E_CONTENT_MISMATCH"
    AUTHOR_MISMATCH        = "E_AUTHOR_MISMATCH"

    # tags
    TAG_COUNT_MISMATCH     = "E_TAG_COUNT_MISMATCH"
    CRITICAL_TAG_MISMATCH  = "E_CRITICAL_TAG_MISMATCH"
    REFERENCE_MISMATCH     = "E_REFERENCE_MISMATCH"


@dataclass(slots=True)
class ValidationError:
    """
    A single validation failure.

    - code:    stable identifier of the failure class (ErrorCode)
    - path:    field of the event, e.g. "content", "tags/title", "tags/a[0]"
    - message: readable description
    - details: optional expected/actual values
    """

    code: ErrorCode
    path: str
    message: str
    details: dict[str, Any] | None = None


@dataclass(slots=True)
class ValidationReport:
    """
    Result of validating one published event.

    - is_valid: True when some relay returned an identical event
    - errors:   mismatches from the last attempt (ValidationError)
    - warnings: non-fatal notes (str)
    - relay:    relay that confirmed the event, None when none did
    """

    event_id: str
    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    relay: str | None = None
