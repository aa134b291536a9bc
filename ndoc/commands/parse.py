"""Command: ndoc parse — metadata, section tree and units of a document."""

from __future__ import annotations

import argparse
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich import box

from data_model.errors import ConfigurationError, StructuralError
from data_model.units import PublicationPlan

console = Console()


# ---------------------------------------------------------------------------
# Terminal output
# ---------------------------------------------------------------------------

def _table() -> Table:
    return Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )


def _show_metadata(plan: PublicationPlan) -> None:
    doc = plan.document
    console.print(f"Title:    [bold]{escape(doc.title)}[/bold]  [dim]({doc.dialect}, d={doc.base_slug})[/dim]")
    console.print(f"Relays:   {escape(plan.relay_target.describe())}")
    for key, value in plan.metadata.items():
        shown = ", ".join(value) if isinstance(value, list) else value
        console.print(f"  [cyan]{escape(key)}[/cyan]: {escape(shown)}")
    if doc.preamble:
        console.print(f"Preamble: [dim]{len(doc.preamble)} characters[/dim]")


def _show_sections(plan: PublicationPlan) -> None:
    doc = plan.document
    if not doc.sections:
        console.print("[yellow]No sections.[/yellow]")
        return

    table = _table()
    table.add_column("LVL",    justify="right", no_wrap=True, style="dim")
    table.add_column("LINE",   justify="right", no_wrap=True, style="dim")
    table.add_column("SLUG",   no_wrap=True, style="cyan")
    table.add_column("PARENT", no_wrap=True, style="dim")
    table.add_column("LEN",    justify="right", no_wrap=True)
    table.add_column("TITLE",  no_wrap=False, max_width=50)

    for s in doc.sections:
        indent = "  " * (s.level - 2)
        parent = doc.sections[s.parent].slug if s.parent is not None else "-"
        table.add_row(
            str(s.level),
            str(s.line_no),
            indent + s.slug,
            parent,
            str(len(s.body)),
            escape(s.title[:80]),
        )

    console.print()
    console.print(table)
    console.print(f"  [dim]{len(doc.sections)} sections[/dim]")


def _show_units(plan: PublicationPlan) -> None:
    """Units in publish order, with the d-tags they would be published under."""
    table = _table()
    table.add_column("#",     justify="right", no_wrap=True, style="dim")
    table.add_column("TYPE",  no_wrap=True)
    table.add_column("KIND",  justify="right", no_wrap=True)
    table.add_column("D-TAG", no_wrap=True, style="bold cyan")
    table.add_column("REFS",  justify="right", no_wrap=True)
    table.add_column("TITLE", no_wrap=False, max_width=50)

    for n, u in enumerate(plan.publish_order, 1):
        table.add_row(
            str(n),
            str(u.kind),
            str(int(u.event_kind)),
            u.d_tag,
            str(len(u.references)) if u.is_index else "-",
            escape(u.title[:80]),
        )

    console.print()
    console.print(table)
    console.print(
        f"  [dim]{len(plan.content_units)} content, {len(plan.index_units)} index "
        f"at content level {plan.content_level}[/dim]\n"
    )
    for warning in plan.warnings:
        console.print(f"[yellow]warn:[/yellow] {escape(warning)}")


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------

def run(args: argparse.Namespace) -> None:
    from nostr_io.config import load_settings
    from publisher import plan_document

    doc_path = Path(args.document)
    if not doc_path.exists():
        console.print(f"[red]File not found:[/red] {doc_path}")
        raise SystemExit(1)

    try:
        plan = plan_document(
            doc_path,
            args.content_level,
            args.content_kind,
            settings = load_settings(),
        )
    except StructuralError as e:
        console.print(f"[red]Structural error:[/red] {escape(str(e))}")
        raise SystemExit(1)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise SystemExit(1)

    _show_metadata(plan)
    _show_sections(plan)
    _show_units(plan)


# ---------------------------------------------------------------------------
# Parser registration
# ---------------------------------------------------------------------------

def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "parse",
        help="Shows metadata, sections and units of a document.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Parses a document and prints its metadata, relay target, section tree and
the units it would be published as, with their d-tags. Nothing is published.

Examples:
  ndoc parse guide.adoc
  ndoc parse guide.adoc --content-level 3
  ndoc parse README.md
        """,
    )
    p.add_argument(
        "document",
        metavar="FILE",
        help="Document to parse (.adoc, .asciidoc, .md, .markdown).",
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
    p.set_defaults(func=run)
