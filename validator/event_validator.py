"""
validator/event_validator.py — fetch a published event back and compare.

After a grace period the event is requested by id from each relay in turn
until one returns an identical copy. Compared fields: id, kind, content,
author, tag count, the critical tags (d, title) and, for publication
indexes, the ordered list of `a` references. The whole round is retried
with the validation retry profile; a report is always returned and the
outcome is only ever a warning for the caller.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from itertools import zip_longest

from rich.console import Console
from rich.markup import escape

from data_model.errors import EventNotConfirmedError
from data_model.events import SignedEvent
from data_model.kinds import EventKind
from nostr_io.protocols import EventTransport
from nostr_io.retry import RetryExecutor

from .types import ErrorCode, ValidationError, ValidationReport

CRITICAL_TAGS = ("d", "title")

console = Console(stderr=True)


def compare_events(expected: SignedEvent, actual: SignedEvent) -> list[ValidationError]:
    """All differences between the event that was sent and the one fetched."""
    errors: list[ValidationError] = []

    def check(code: ErrorCode, path: str, want, got) -> None:
        if want != got:
            errors.append(ValidationError(
                code, path, f"{path} differs", details={"expected": want, "actual": got},
            ))

    check(ErrorCode.ID_MISMATCH,      "id",      expected.id,      actual.id)
    check(ErrorCode.KIND_MISMATCH,    "kind",    expected.kind,    actual.kind)
    check(ErrorCode.CONTENT_MISMATCH, "content", expected.content, actual.content)
    check(ErrorCode.AUTHOR_MISMATCH,  "pubkey",  expected.pubkey,  actual.pubkey)
    check(ErrorCode.TAG_COUNT_MISMATCH, "tags", len(expected.tags), len(actual.tags))

    for name in CRITICAL_TAGS:
        check(
            ErrorCode.CRITICAL_TAG_MISMATCH, f"tags/{name}",
            [list(t) for t in expected.tag_values(name)],
            [list(t) for t in actual.tag_values(name)],
        )

    if expected.kind == EventKind.PUBLICATION_INDEX:
        want_refs = [list(t[1:]) for t in expected.tag_values("a")]
        got_refs  = [list(t[1:]) for t in actual.tag_values("a")]
        for pos, (want, got) in enumerate(zip_longest(want_refs, got_refs)):
            check(ErrorCode.REFERENCE_MISMATCH, f"tags/a[{pos}]", want, got)

    return errors


class EventValidator:
    def __init__(
        self,
        transport: EventTransport,
        retry: RetryExecutor | None = None,
        wait_s: float = 10.0,
        sleep: Callable[[float], None] = time.sleep,
        out: Console | None = None,
    ) -> None:
        self._transport = transport
        self._out       = out or console
        self._retry     = retry or RetryExecutor.for_validation(sleep=sleep, out=self._out)
        self._wait_s    = wait_s
        self._sleep     = sleep

    def _fetch_round(self, expected: SignedEvent, relays: list[str], errors: list[ValidationError]) -> str:
        errors.clear()
        for relay in relays:
            try:
                actual = self._transport.fetch(expected.id, relay)
            except Exception as e:
                errors.append(ValidationError(ErrorCode.FETCH_FAILED, relay, str(e)))
                continue
            if actual is None:
                errors.append(ValidationError(ErrorCode.EVENT_NOT_FOUND, relay, "event not found"))
                continue
            mismatches = compare_events(expected, actual)
            if not mismatches:
                return relay
            errors.extend(mismatches)
        raise EventNotConfirmedError(
            f"event {expected.id[:12]} not confirmed by any of {len(relays)} relay(s)"
        )

    def validate(self, expected: SignedEvent, relays: list[str]) -> ValidationReport:
        """Never raises for network trouble; inspect report.is_valid."""
        if self._wait_s > 0:
            self._sleep(self._wait_s)

        errors: list[ValidationError] = []
        try:
            relay = self._retry.execute(
                lambda: self._fetch_round(expected, relays, errors),
                f"validate {expected.id[:12]}",
            )
        except EventNotConfirmedError as e:
            self._out.print(f"[yellow]warn:[/yellow] {escape(str(e))}")
            return ValidationReport(expected.id, False, list(errors), warnings=[str(e)])
        return ValidationReport(expected.id, True, relay=relay)
