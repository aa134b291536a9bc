"""Command: ndoc relays — relay categories from relays.yml."""

from __future__ import annotations

import argparse
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich import box

from data_model.errors import ConfigurationError

console = Console()


def run(args: argparse.Namespace) -> None:
    from nostr_io import RelayCatalog, load_settings

    try:
        settings = load_settings()
        path     = Path(args.relays_file) if args.relays_file else settings.relays_file
        catalog  = RelayCatalog.from_file(path)
        if args.category:
            categories = {args.category: catalog.resolve(args.category)}
        else:
            categories = catalog.categories()
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise SystemExit(1)

    if not categories:
        console.print(
            f"[yellow]No relay categories ({path} not found or empty).[/yellow] "
            f"Default relay: {settings.default_relay}"
        )
        return

    transport = None
    if args.test:
        from ndoc._nostr import get_transport
        transport = get_transport(settings)

    table = Table(box=box.SIMPLE_HEAD, header_style="bold white", show_header=True)
    table.add_column("CATEGORY", style="bold cyan", no_wrap=True)
    table.add_column("RELAY",    no_wrap=True)
    if transport is not None:
        table.add_column("STATUS", justify="center", no_wrap=True)

    for name, urls in categories.items():
        for i, url in enumerate(urls or ["-"]):
            row = [escape(name) if i == 0 else "", escape(url)]
            if transport is not None:
                if url == "-":
                    row.append("")
                else:
                    try:
                        ok = transport.probe(url, settings.probe_timeout_s)
                    except Exception as e:
                        ok = False
                        console.print(f"[dim]{escape(url)}: {escape(str(e))}[/dim]")
                    row.append("[green]ok[/green]" if ok else "[red]down[/red]")
            table.add_row(*row)

    console.print(table)
    console.print(f"  [dim]{len(categories)} categories from {path}; default relay: {settings.default_relay}[/dim]")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "relays",
        help="Lists relay categories from relays.yml.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Lists relay categories defined in relays.yml. The virtual category "all"
combines every category.

Examples:
  ndoc relays
  ndoc relays --category favorite-relays --test
  ndoc relays --relays-file config/relays.yml
        """,
    )
    p.add_argument(
        "--category", "-c",
        metavar="NAME",
        help="Show only this category (or 'all').",
    )
    p.add_argument(
        "--relays-file",
        metavar="FILE",
        help="Relay catalog (default: relays.yml).",
    )
    p.add_argument(
        "--test",
        action="store_true",
        help="Probe every relay and show whether it answers.",
    )
    p.set_defaults(func=run)
