"""
publisher/pipeline.py — document path → plan → dry-run report or publish.

Public API:
  plan_document(path, content_level, content_kind, ...)    -> PublicationPlan
  dry_run_report(plan)                                     -> DryRunReport
  publish_document(path, content_level, content_kind, dry_run, ...)
                                                    -> DryRunReport | PublishReport
"""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from data_model.documents import detect_dialect
from data_model.errors import ConfigurationError
from data_model.relays import parse_relay_target
from data_model.results import DryRunReport, PublishReport
from data_model.units import PublicationPlan
from doc_parser.metadata import extract_metadata
from doc_parser.parser import parse_file
from hierarchy.builder import build_units
from hierarchy.resolver import resolve_publish_order
from nostr_io.config import Settings
from nostr_io.protocols import EventSigner, EventTransport
from nostr_io.relays import RelayCatalog, RelaySelector
from nostr_io.retry import RetryExecutor
from validator.event_validator import EventValidator

from .events import check_unit, metadata_warnings
from .options import check_explicit_options, resolve_options
from .orchestrator import Publisher

console = Console(stderr=True)


def plan_document(
    path: str | Path,
    content_level: int | None = None,
    content_kind: str | int | None = None,
    *,
    settings: Settings | None = None,
    relays: str | None = None,
) -> PublicationPlan:
    """
    Parses the document and computes units and publish order.

    Args:
        relays: relay target overriding the one in the document metadata.

    Raises:
        StructuralError:    malformed document or invalid options.
        ConfigurationError: invalid unit graph or event fields.
    """
    settings = settings or Settings()
    dialect = detect_dialect(path)
    check_explicit_options(dialect, content_level, content_kind)

    document = parse_file(path)
    metadata, target = extract_metadata(document.metadata_lines, dialect, settings.relay_fallback)
    if relays:
        target = parse_relay_target(relays)

    options = resolve_options(dialect, metadata, content_level, content_kind)
    built = build_units(document, options.content_level, options.content_kind)
    order = resolve_publish_order(built.units)

    problems = [f"{u.d_tag}: {p}" for u in order for p in check_unit(u, metadata)]
    if problems:
        raise ConfigurationError("Invalid event fields:\n  " + "\n  ".join(problems))

    return PublicationPlan(
        document      = document,
        metadata      = metadata,
        relay_target  = target,
        content_level = options.content_level,
        content_kind  = options.content_kind,
        content_units = built.content_units,
        index_units   = built.index_units,
        root          = built.root,
        publish_order = order,
        warnings      = built.warnings + metadata_warnings(metadata),
    )


def dry_run_report(plan: PublicationPlan) -> DryRunReport:
    return DryRunReport(
        document_title = plan.document.title,
        content_level  = plan.content_level,
        content_kind   = int(plan.content_kind),
        relay_target   = plan.relay_target.describe(),
        metadata       = dict(plan.metadata),
        warnings       = list(plan.warnings),
        publish_order  = [
            {
                "position":   pos,
                "d_tag":      u.d_tag,
                "title":      u.title,
                "kind":       int(u.event_kind),
                "type":       str(u.kind),
                "references": [r.d_tag for r in u.references],
                "length":     len(u.body),
            }
            for pos, u in enumerate(plan.publish_order)
        ],
    )


def publish_document(
    path: str | Path,
    content_level: int | None = None,
    content_kind: str | int | None = None,
    dry_run: bool = False,
    *,
    signer: EventSigner | None = None,
    transport: EventTransport | None = None,
    settings: Settings | None = None,
    relays: str | None = None,
    catalog: RelayCatalog | None = None,
    sleep: Callable[[float], None] = time.sleep,
    out: Console | None = None,
    verbose: bool = False,
) -> DryRunReport | PublishReport:
    """
    Publishes one document. A dry run never touches signer or transport.

    Raises:
        StructuralError, ConfigurationError: before anything is sent.
        NoReachableRelaysError:              no relay answered the probe.
    """
    settings = settings or Settings()
    plan = plan_document(
        path, content_level, content_kind, settings=settings, relays=relays,
    )
    for warning in plan.warnings:
        (out or console).print(f"[yellow]warn:[/yellow] {escape(warning)}")
    if dry_run:
        return dry_run_report(plan)

    if signer is None or transport is None:
        raise ConfigurationError("A signer and a transport are required to publish")

    catalog  = catalog or RelayCatalog.from_file(settings.relays_file)
    selector = RelaySelector(transport, catalog, settings, out=out, verbose=verbose)
    selected = selector.select(plan.relay_target)

    validator = None
    if settings.validate_after_publish:
        validator = EventValidator(
            transport,
            retry  = RetryExecutor.for_validation(sleep=sleep, out=out),
            wait_s = settings.validation_wait_s,
            sleep  = sleep,
            out    = out,
        )

    publisher = Publisher(
        signer,
        transport,
        min_relay_success = settings.min_relay_success,
        retry             = RetryExecutor.for_relays(sleep=sleep, out=out),
        validator         = validator,
        view_url          = settings.view_url,
        out               = out,
        verbose           = verbose,
    )
    return publisher.publish(plan, selected)
