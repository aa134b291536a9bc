"""Command: ndoc publish — split a document into events and publish them."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich import box

from data_model.errors import ConfigurationError, NoReachableRelaysError, StructuralError
from data_model.results import DryRunReport, Failed, Published, PublishReport, SkippedDependency

console = Console()


# ---------------------------------------------------------------------------
# JSON output
# ---------------------------------------------------------------------------

def _write_json(report: DryRunReport | PublishReport, json_path: Path) -> None:
    json_path.write_text(
        json.dumps(report.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8"
    )
    console.print(f"[green]JSON:[/green] {json_path}")


# ---------------------------------------------------------------------------
# Terminal output
# ---------------------------------------------------------------------------

def _show_plan(report: DryRunReport) -> None:
    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )
    table.add_column("#",     justify="right", no_wrap=True, style="dim")
    table.add_column("TYPE",  no_wrap=True)
    table.add_column("KIND",  justify="right", no_wrap=True)
    table.add_column("D-TAG", no_wrap=True, style="bold cyan")
    table.add_column("REFS",  justify="right", no_wrap=True)
    table.add_column("LEN",   justify="right", no_wrap=True)
    table.add_column("TITLE", no_wrap=False, max_width=50)

    for u in report.publish_order:
        table.add_row(
            str(u["position"] + 1),
            u["type"],
            str(u["kind"]),
            u["d_tag"],
            str(len(u["references"])) if u["type"] == "index" else "-",
            str(u["length"]) if u["type"] == "content" else "-",
            escape(u["title"][:80]),
        )

    console.print()
    console.print(table)
    console.print(
        f"  [dim]{report.content_units} content, {report.index_units} index, "
        f"{report.total_events} events total; relays: {escape(report.relay_target)}[/dim]"
    )
    console.print("[dim](--dry-run: nothing was sent)[/dim]\n")


def _show_summary(report: PublishReport, verbose: bool) -> None:
    console.print()
    if report.success:
        status = "[green]Done[/green]"
    else:
        failed  = sum(1 for o in report.outcomes if isinstance(o, Failed))
        skipped = sum(1 for o in report.outcomes if isinstance(o, SkippedDependency))
        status = f"[red]Finished with {failed} failed and {skipped} skipped[/red]"
    console.print(
        f"{status} — published {report.total_published}/{report.total_expected} events "
        f"to {len(report.relays)} relay(s) in {report.elapsed_s:.1f}s"
    )
    if verbose:
        for o in report.outcomes:
            if isinstance(o, Published):
                console.print(f"  [dim]{o.event_id}[/dim]  {escape(o.d_tag)}")
    if report.view_url:
        console.print(f"View: {report.view_url}")


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------

def run(args: argparse.Namespace) -> None:
    from nostr_io.config import load_settings
    from publisher import publish_document

    doc_path = Path(args.document)
    if not doc_path.exists():
        console.print(f"[red]File not found:[/red] {doc_path}")
        raise SystemExit(1)

    try:
        settings = load_settings().with_overrides(
            relays_file            = Path(args.relays_file) if args.relays_file else None,
            min_relay_success      = args.min_relay_success,
            validate_after_publish = False if args.no_validate else None,
        )
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise SystemExit(1)

    signer = transport = None
    try:
        if not args.dry_run:
            from ndoc._nostr import get_signer, get_transport
            signer    = get_signer(settings)
            transport = get_transport(settings)

        console.print(f"{'Planning' if args.dry_run else 'Publishing'} [bold]{escape(str(doc_path))}[/bold] …")
        report = publish_document(
            doc_path,
            args.content_level,
            args.content_kind,
            args.dry_run,
            signer    = signer,
            transport = transport,
            settings  = settings,
            relays    = args.relays,
            verbose   = args.verbose,
        )
    except StructuralError as e:
        console.print(f"[red]Structural error:[/red] {escape(str(e))}")
        raise SystemExit(1)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise SystemExit(1)
    except NoReachableRelaysError as e:
        console.print(f"[red]No reachable relays:[/red] {escape(str(e))}")
        raise SystemExit(1)

    if isinstance(report, DryRunReport):
        _show_plan(report)
    else:
        _show_summary(report, args.verbose)

    if args.json:
        _write_json(report, Path(args.json))

    if not report.success:
        raise SystemExit(1)


# ---------------------------------------------------------------------------
# Parser registration
# ---------------------------------------------------------------------------

def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "publish",
        help="Splits a document into events and publishes them.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Parses an AsciiDoc or Markdown document, splits it into content and index
events at the given content level and publishes them in dependency order.

The signing key is read from NOSTR_BOT_KEY (environment or .env).

Examples:
  ndoc publish guide.adoc --dry-run
  ndoc publish guide.adoc --content-level 3 --content-kind publication
  ndoc publish article.md --relays wss://relay.example.com
  ndoc publish book.adoc --relays favorite-relays --min-relay-success 2
  ndoc publish book.adoc --dry-run --json plan.json
        """,
    )
    p.add_argument(
        "document",
        metavar="FILE",
        help="Document to publish (.adoc, .asciidoc, .md, .markdown).",
    )
    p.add_argument(
        "--content-level", "-l",
        type=int,
        metavar="N",
        help="Header level that becomes content (0-6; default: metadata or 0).",
    )
    p.add_argument(
        "--content-kind", "-k",
        metavar="KIND",
        help="Content event kind: publication, wiki, longform or a number.",
    )
    p.add_argument(
        "--relays", "-r",
        metavar="TARGET",
        help="Relay URLs or a relays.yml category (overrides document metadata).",
    )
    p.add_argument(
        "--relays-file",
        metavar="FILE",
        help="Relay catalog (default: relays.yml).",
    )
    p.add_argument(
        "--min-relay-success",
        type=int,
        metavar="N",
        help="Relays that must accept each event (default: 1).",
    )
    p.add_argument(
        "--no-validate",
        action="store_true",
        help="Do not fetch events back after publishing.",
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Only show the publish plan; nothing is signed or sent.",
    )
    p.add_argument(
        "--json",
        metavar="FILE",
        help="Also write the report as JSON.",
    )
    p.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show relay probes, event ids and viewing links.",
    )
    p.set_defaults(func=run)
