"""
ndoc — publishes AsciiDoc / Markdown documents as Nostr events.

Usage:
  ndoc <command> [options]

Commands:
  publish   Splits a document into events and publishes them (or --dry-run).
  parse     Shows metadata and the section tree of a document.
  relays    Lists relay categories from relays.yml (optionally probes them).
  kinds     Lists supported event kinds.
"""

from __future__ import annotations

import argparse
import sys

# Windows consoles may default to cp1252; force UTF-8 for titles and help text.
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
if hasattr(sys.stderr, "reconfigure"):
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

from ndoc.commands import publish as cmd_publish
from ndoc.commands import parse as cmd_parse
from ndoc.commands import relays as cmd_relays
from ndoc.commands import kinds as cmd_kinds


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ndoc",
        description="ndoc — document to Nostr publication events.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version="ndoc 0.1.0"
    )

    subparsers = parser.add_subparsers(
        title="commands",
        metavar="<command>",
        dest="command",
    )
    subparsers.required = True

    cmd_publish.add_parser(subparsers)
    cmd_parse.add_parser(subparsers)
    cmd_relays.add_parser(subparsers)
    cmd_kinds.add_parser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
