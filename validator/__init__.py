"""
validator — post-publish verification of events.

Public API:
    EventValidator   — fetches an event back and compares it
    compare_events   — field-by-field comparison of two signed events
    ValidationReport, ValidationError, ErrorCode — report types

Typical use:
    from validator import EventValidator

    validator = EventValidator(transport, wait_s=10)
    report = validator.validate(signed_event, relays)
    if not report.is_valid:
        for e in report.errors:
            print(e.code, e.path, e.message)
"""

from .types import ErrorCode, ValidationError, ValidationReport
from .event_validator import EventValidator, compare_events, CRITICAL_TAGS

__all__ = [
    "ErrorCode",
    "ValidationError",
    "ValidationReport",
    "EventValidator",
    "compare_events",
    "CRITICAL_TAGS",
]
