"""Command: ndoc kinds — supported event kinds."""

from __future__ import annotations

import argparse

from rich.console import Console
from rich.table import Table
from rich import box

from data_model.kinds import CONTENT_KINDS, KIND_INFO

console = Console()


def run(args: argparse.Namespace) -> None:
    table = Table(box=box.SIMPLE_HEAD, header_style="bold white", show_header=True)
    table.add_column("KIND",    justify="right", style="bold cyan", no_wrap=True)
    table.add_column("ALIAS",   no_wrap=True)
    table.add_column("CONTENT", justify="center", no_wrap=True)
    table.add_column("DESCRIPTION")

    for kind, (alias, description) in KIND_INFO.items():
        table.add_row(
            str(int(kind)),
            alias,
            "[green]yes[/green]" if kind in CONTENT_KINDS else "[dim]no[/dim]",
            description,
        )
    console.print(table)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "kinds",
        help="Lists supported event kinds.",
        description="Lists the event kinds ndoc can publish and their aliases.",
    )
    p.set_defaults(func=run)
