"""
publisher/orchestrator.py — publishes a plan unit by unit.

For each unit in publish order:
  1. skip it when a referenced unit has no event id (SkippedDependency)
  2. render the draft, with event ids of already published children
  3. sign it (EventSigner); a render or signing error fails only this unit
  4. send it through the RetryExecutor until at least `min_relay_success`
     relays accepted it; later attempts only go to relays that have not
     accepted yet (Failed when retries run out)
  5. record the event id and, optionally, fetch the event back
     (EventValidator; a mismatch is only a warning)

Units are published strictly one after another: an index needs the event
ids of its children.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from rich.console import Console
from rich.markup import escape

from data_model.errors import PublishError
from data_model.events import SignedEvent
from data_model.results import Failed, Published, PublishReport, SkippedDependency, UnitOutcome
from data_model.units import Metadata, PublicationPlan, Unit
from nostr_io.protocols import EventSigner, EventTransport
from nostr_io.retry import RetryExecutor
from validator.event_validator import EventValidator

from .events import render_unit

console = Console()


class Publisher:
    def __init__(
        self,
        signer: EventSigner,
        transport: EventTransport,
        *,
        min_relay_success: int = 1,
        retry: RetryExecutor | None = None,
        validator: EventValidator | None = None,
        view_url: Callable[[str], str] | None = None,
        out: Console | None = None,
        verbose: bool = False,
    ) -> None:
        self._signer      = signer
        self._transport   = transport
        self._min_success = max(1, min_relay_success)
        self._out         = out or console
        self._retry       = retry or RetryExecutor.for_relays(out=self._out)
        self._validator   = validator
        self._view_url    = view_url
        self._verbose     = verbose

    # -----------------------------------------------------------------------
    # Sending
    # -----------------------------------------------------------------------

    def _send(self, unit: Unit, event: SignedEvent, relays: list[str], required: int) -> tuple[list[str], dict[str, str]]:
        accepted: dict[str, None] = {}
        rejected: dict[str, str]  = {}

        def attempt() -> None:
            pending = [r for r in relays if r not in accepted]
            results = self._transport.send(event, pending)
            for relay in pending:
                error = results.get(relay, "no response")
                if error is None:
                    accepted[relay] = None
                    rejected.pop(relay, None)
                else:
                    rejected[relay] = error
            if len(accepted) < required:
                raise PublishError(
                    f"accepted by {len(accepted)}/{len(relays)} relay(s), {required} required"
                )

        self._retry.execute(attempt, f"publish {unit.d_tag}")
        return list(accepted), rejected

    def _publish_unit(
        self,
        unit: Unit,
        metadata: Metadata,
        pubkey: str,
        relays: list[str],
        event_ids: dict[str, str],
        required: int,
    ) -> UnitOutcome:
        kind = int(unit.event_kind)
        missing = [r.d_tag for r in unit.references if r.d_tag not in event_ids]
        if missing:
            return SkippedDependency(unit.d_tag, unit.title, kind, missing)

        try:
            draft = render_unit(unit, metadata, pubkey, event_ids, relay_hint=relays[0])
            event = self._signer.sign(draft)
            accepted, rejected = self._send(unit, event, relays, required)
        except Exception as e:
            return Failed(unit.d_tag, unit.title, kind, str(e))

        unit.attach_event_id(event.id)
        event_ids[unit.d_tag] = event.id

        warnings = [f"{relay} rejected: {error}" for relay, error in rejected.items()]
        if self._validator is not None:
            report = self._validator.validate(event, accepted)
            if not report.is_valid:
                codes = ", ".join(sorted({str(e.code) for e in report.errors})) or "not confirmed"
                warnings.append(f"validation failed: {codes}")

        return Published(unit.d_tag, unit.title, kind, event.id, accepted, rejected, warnings)

    # -----------------------------------------------------------------------
    # Output
    # -----------------------------------------------------------------------

    def _print_outcome(self, n: int, total: int, outcome: UnitOutcome, relays: int) -> None:
        head = f"[{n}/{total}]"
        name = f"[bold cyan]{escape(outcome.d_tag)}[/bold cyan] ({outcome.kind})"
        match outcome:
            case Published():
                self._out.print(
                    f"{escape(head)} [green]published[/green] {name} → {outcome.event_id[:16]}…  "
                    f"[dim]{len(outcome.accepted)}/{relays} relays[/dim]"
                )
                for w in outcome.warnings:
                    self._out.print(f"    [yellow]warn:[/yellow] {escape(w)}")
                if self._verbose and self._view_url is not None:
                    self._out.print(f"    [dim]{self._view_url(outcome.event_id)}[/dim]")
            case Failed():
                self._out.print(f"{escape(head)} [red]failed[/red] {name}: {escape(outcome.reason)}")
            case SkippedDependency():
                self._out.print(f"{escape(head)} [yellow]skipped[/yellow] {name}: {escape(outcome.reason)}")

    # -----------------------------------------------------------------------
    # Run
    # -----------------------------------------------------------------------

    def publish(self, plan: PublicationPlan, relays: list[str]) -> PublishReport:
        """
        Walks plan.publish_order. Per-unit failures are recorded in the
        report, never raised.
        """
        if not relays:
            raise ValueError("At least one relay is required to publish")

        required = self._min_success
        if required > len(relays):
            self._out.print(
                f"[yellow]warn:[/yellow] min relay success {required} exceeds "
                f"{len(relays)} selected relay(s); requiring {len(relays)}"
            )
            required = len(relays)

        started   = time.perf_counter()
        pubkey    = self._signer.public_key()
        event_ids: dict[str, str] = {}
        report    = PublishReport(plan.document.title, relays=list(relays))
        total     = len(plan.publish_order)

        for n, unit in enumerate(plan.publish_order, 1):
            outcome = self._publish_unit(unit, plan.metadata, pubkey, relays, event_ids, required)
            report.outcomes.append(outcome)
            self._print_outcome(n, total, outcome, len(relays))

        top = plan.root or (plan.content_units[0] if len(plan.content_units) == 1 else None)
        if top is not None and top.event_id and self._view_url is not None:
            report.view_url = self._view_url(top.event_id)

        report.elapsed_s = time.perf_counter() - started
        return report
